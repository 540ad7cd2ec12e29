# -----------------------------------------------------------------------------
#  Utility functions
# -----------------------------------------------------------------------------

from __future__ import annotations

import os
import re
import sys


class MagicSquareError(Exception):
    pass


class UserInputError(MagicSquareError):
    pass


class InvalidInput(UserInputError, ValueError):
    """Argument is not a positive integer (or the grid is not square)."""


class NoSolution(UserInputError):
    """No magic square exists for the requested order (n = 2)."""


class NoApplicableOrder(MagicSquareError):
    """No construction order accepts n."""


class UnsupportedOrder(MagicSquareError):
    """Classification gap: n != 2 but no constructor was selected."""


_ORDER_RE = re.compile(r"^\d{1,3}(?:_\d{3})+$|^\d+$")


def assert_positive_int(value: object, what: str = "value") -> int:
    """Return value unchanged if it is a positive int, else raise InvalidInput."""
    # bool is an int subclass; True is not an order
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidInput(f"{what} must be a positive integer, got {value!r}")
    return value


def parse_order(text: str, what: str = "order") -> int:
    """
    Parse user text into a positive integer.

    Accepts plain digits and '_' grouped digits ("1_000"). Anything else,
    including zero, raises InvalidInput; there is no fallback value.
    """
    s = (text or "").strip()
    if not _ORDER_RE.match(s):
        raise InvalidInput(f"{what} must be a positive integer, got {text!r}")
    return assert_positive_int(int(s.replace("_", "")), what)


def magic_constant(n: int) -> int:
    return n * (n * n + 1) // 2


def clear_screen() -> None:
    """Clear the terminal before the REPL banner; no-op when not a TTY."""
    if not sys.stdout.isatty():
        return
    if os.name == "nt":
        os.system("cls")
    else:
        sys.stdout.write("\033[3J\033[H\033[2J")
        sys.stdout.flush()


# Output targets must not clobber project files, grids, templates or devices
_FORBIDDEN_NAMES = frozenset({
    ".gitignore", "license", "pyproject.toml",
    "con", "prn", "aux", "nul",
    *(f"com{i}" for i in range(1, 10)),
    *(f"lpt{i}" for i in range(1, 10)),
})
_FORBIDDEN_SUFFIXES = frozenset({".py", ".md", ".toml", ".j2", ".csv"})


def validate_output_setting(output_file: str | None) -> str | None:
    """
    Check an --output / OUTPUT.OUTPUT_FILE value and return it unchanged.

    Empty means screen only and "." or a trailing "/" means one file per
    run; both always pass. A file target raises ValueError when its name or
    extension is forbidden.
    """
    if not output_file or output_file in (".", "./") or output_file.endswith("/"):
        return output_file

    name = os.path.basename(output_file)
    stem, suffix = os.path.splitext(name)
    if name.lower() in _FORBIDDEN_NAMES or stem.lower() in _FORBIDDEN_NAMES:
        raise ValueError(f"Forbidden output filename: {name}")
    if suffix.lower() in _FORBIDDEN_SUFFIXES:
        raise ValueError(f"Forbidden output file extension: {suffix.lower()}")
    return output_file


def typename(v: object) -> str:
    return type(v).__name__


def flatten_dotted(d: dict, prefix: str = "") -> dict[str, object]:
    out: dict[str, object] = {}
    for k, v in (d or {}).items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten_dotted(v, key))
        else:
            out[key] = v
    return out
