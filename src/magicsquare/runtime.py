# src/magicsquare/runtime.py
"""
Settings in force for the current run.

The active profile is layered over DEFAULTS, so every key listed there can
be read with CFG() without a fallback. The profile only has to name what it
changes.
"""
from __future__ import annotations

from contextvars import ContextVar
from copy import deepcopy
from dataclasses import dataclass, field
from importlib.util import find_spec
from typing import Any

from colorama import Fore, Style

DEFAULTS: dict[str, dict[str, Any]] = {
    "BEHAVIOUR": {"DEBUG": False, "MAX_ORDER": 500},
    "DISPLAY_SETTINGS": {"SHOW_SUMS": True, "HIGHLIGHT_DIAGONALS": True},
    "HEATMAP": {"COLORS": ["FFFFFF", "FFFF00", "FF0000"], "STEPS": 10},
    "OUTPUT": {"OUTPUT_FILE": ""},
}

# import name -> name on the package index
_RUNTIME_DEPS = {"jinja2": "Jinja2"}


def _layer(base: dict[str, Any], top: dict[str, Any]) -> dict[str, Any]:
    out = deepcopy(base)
    for key, value in top.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _layer(out[key], value)
        else:
            out[key] = deepcopy(value)
    return out


@dataclass
class Runtime:
    profile_name: str = "default"
    settings: dict[str, Any] = field(default_factory=lambda: deepcopy(DEFAULTS))
    debug: bool = False  # timings on stderr, tracebacks instead of one-line errors

    def apply(self, settings: Any) -> None:
        """Install a profile (config.Settings or a plain nested dict)."""
        data = settings.as_dict() if hasattr(settings, "as_dict") else dict(settings)
        self.profile_name = getattr(settings, "name", None) or "default"
        self.settings = _layer(DEFAULTS, data)

        # only a profile that sets DEBUG itself changes the flag
        dbg = (data.get("BEHAVIOUR") or {}).get("DEBUG")
        if isinstance(dbg, bool):
            self.debug = dbg

    def get(self, key: str, default: Any = None) -> Any:
        """Dotted lookup, e.g. 'HEATMAP.COLORS'."""
        if not key:
            return default
        cur: Any = self.settings
        for part in key.split("."):
            if not isinstance(cur, dict) or part not in cur:
                return default
            cur = cur[part]
        return cur

    def is_default(self, key: str) -> bool:
        """True when `key` still holds its DEFAULTS value."""
        marker = object()
        cur: Any = DEFAULTS
        for part in key.split("."):
            if not isinstance(cur, dict) or part not in cur:
                return False
            cur = cur[part]
        return self.get(key, marker) == cur


_current_runtime: ContextVar[Runtime | None] = ContextVar("magicsquare_runtime", default=None)


def current() -> Runtime:
    rt = _current_runtime.get()
    if rt is None:
        rt = Runtime()
        _current_runtime.set(rt)
    return rt


def reset() -> Runtime:
    """Start over from DEFAULTS (tests, fresh sessions)."""
    rt = Runtime()
    _current_runtime.set(rt)
    return rt


def APPLY(settings: Any) -> None:
    current().apply(settings)


def CFG(key: str, default: Any = None) -> Any:
    return current().get(key, default)


def ensure_runtime_deps(strict: bool = True) -> bool:
    """
    Check that the HTML stack is importable before doing any work.
    Prints an install hint and returns False (strict) when it is not.
    """
    missing = [pip_name for mod, pip_name in _RUNTIME_DEPS.items() if find_spec(mod) is None]
    if not missing:
        return True

    print(
        f"{Fore.RED}{Style.BRIGHT}Missing dependencies:{Style.RESET_ALL} {', '.join(missing)}\n"
        f"Install with: {Fore.YELLOW}pip install {' '.join(missing)}{Style.RESET_ALL}"
    )
    return not strict
