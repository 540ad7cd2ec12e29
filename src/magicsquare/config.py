# src/magicsquare/config.py
"""
Profiles: TOML files in <workspace>/profiles.

    [_PROFILE_]            optional: name, description
    [BEHAVIOUR]            DEBUG, MAX_ORDER
    [DISPLAY_SETTINGS]     SHOW_SUMS, HIGHLIGHT_DIAGONALS
    [HEATMAP]              COLORS, STEPS
    [OUTPUT]               OUTPUT_FILE

Known keys are type-checked when a profile is read; anything missing falls
back to runtime.DEFAULTS. Unknown keys are kept and ignored.
"""
from __future__ import annotations

import re
import tomllib
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from magicsquare.utility import UserInputError, flatten_dotted
from magicsquare.workspace import ensure_workspace_seeded, profiles_dir

_META_KEY = "_PROFILE_"
_CURRENT_FILE = ".current"
_HEX_RE = re.compile(r"^#?[0-9A-Fa-f]{6}$")


def _is_bool(v: Any) -> bool:
    return isinstance(v, bool)


def _is_count(v: Any, minimum: int = 1) -> bool:
    return isinstance(v, int) and not isinstance(v, bool) and v >= minimum


def _is_colors(v: Any) -> bool:
    return (
        isinstance(v, list)
        and len(v) >= 2
        and all(isinstance(c, str) and _HEX_RE.match(c) for c in v)
    )


# dotted key -> (check, expected value in words)
_CHECKS: dict[str, tuple[Callable[[Any], bool], str]] = {
    "BEHAVIOUR.DEBUG": (_is_bool, "true or false"),
    "BEHAVIOUR.MAX_ORDER": (_is_count, "a positive integer"),
    "DISPLAY_SETTINGS.SHOW_SUMS": (_is_bool, "true or false"),
    "DISPLAY_SETTINGS.HIGHLIGHT_DIAGONALS": (_is_bool, "true or false"),
    "HEATMAP.COLORS": (_is_colors, "a list of at least two hex colours"),
    "HEATMAP.STEPS": (lambda v: _is_count(v, 2), "an integer >= 2"),
    "OUTPUT.OUTPUT_FILE": (lambda v: isinstance(v, str), "a string"),
}


@dataclass(frozen=True)
class Settings:
    """A profile as read from disk, [_PROFILE_] split off into name/description."""
    name: str
    description: str = "(no description)"
    data: dict[str, Any] = field(default_factory=dict)
    source: Path | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.data


# --- Paths -----------------------------------------------------------------

def profile_path(name: str) -> Path:
    """Map a profile name ('compact' or 'compact.toml') to its file."""
    stem = (name or "").strip().removesuffix(".toml")
    if not stem or stem.startswith(".") or Path(stem).name != stem:
        raise UserInputError(f"Invalid profile name: {name!r}")
    return profiles_dir() / f"{stem}.toml"


def has_profile(name: str) -> bool:
    try:
        return profile_path(name).is_file()
    except UserInputError:
        return False


# --- Reading ---------------------------------------------------------------

def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = getattr(e, "msg", None) or str(e)
        if getattr(e, "lineno", None) is not None:
            msg += f" (at line {e.lineno}, column {e.colno})"
        raise UserInputError(f"reading {path.name}: {msg}.") from None


def _check_values(path: Path, data: dict[str, Any]) -> None:
    flat = flatten_dotted(data)
    for key, (ok, expected) in _CHECKS.items():
        if key in flat and not ok(flat[key]):
            raise UserInputError(f"reading {path.name}: {key} must be {expected}, got {flat[key]!r}.")


def read_profile(path: Path) -> Settings:
    raw = _read_toml(path)
    meta = raw.pop(_META_KEY, None) or {}
    _check_values(path, raw)
    description = " ".join(str(meta.get("description") or "").split())
    return Settings(
        name=str(meta.get("name") or path.stem),
        description=description or "(no description)",
        data=raw,
        source=path,
    )


def load_settings(name: str | None = None) -> Settings:
    """Read profile `name` (default 'default'); FileNotFoundError if absent."""
    path = profile_path(name or "default")
    if not path.exists():
        raise FileNotFoundError(f"Profile '{name}' not found at {path}")
    return read_profile(path)


# --- Listing ---------------------------------------------------------------

def list_all_profiles() -> list[str]:
    """Profile names as typed on the command line (file stems)."""
    ensure_workspace_seeded()
    return sorted(p.stem for p in profiles_dir().glob("*.toml"))


def list_profiles_with_descriptions() -> list[tuple[str, str]]:
    """[(stem, description)]; a profile that fails to read still shows up."""
    items: list[tuple[str, str]] = []
    for p in profiles_dir().glob("*.toml"):
        try:
            items.append((p.stem, read_profile(p).description))
        except UserInputError:
            items.append((p.stem, "(unreadable)"))
    return sorted(items, key=lambda t: t[0].lower())


# --- Last used -------------------------------------------------------------

def read_current_profile() -> str | None:
    try:
        stem = (profiles_dir() / _CURRENT_FILE).read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None
    return stem.removesuffix(".toml") or None


def write_current_profile(name: str) -> None:
    path = profile_path(name)
    path.parent.mkdir(parents=True, exist_ok=True)
    (path.parent / _CURRENT_FILE).write_text(path.stem, encoding="utf-8")
