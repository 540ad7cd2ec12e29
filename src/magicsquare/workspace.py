# src/magicsquare/workspace.py
"""
Per-user workspace holding editable copies of the packaged files:

    $MAGICSQUARE_HOME  (default ~/Documents/MagicSquare)
        profiles/    *.toml settings, plus .current (last profile used)
        templates/   page.html.j2, tables.html.j2 (override the packaged ones)
"""
from __future__ import annotations

import os
import shutil
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from pathlib import Path

# subfolder -> suffixes copied from the package
SEEDED: dict[str, tuple[str, ...]] = {
    "profiles": (".toml",),
    "templates": (".j2",),
}
SUBDIRS = tuple(SEEDED)


def workspace_dir() -> Path:
    env = os.environ.get("MAGICSQUARE_HOME")
    base = Path(env).expanduser() if env else Path.home() / "Documents" / "MagicSquare"
    return base.resolve()


def profiles_dir() -> Path:
    return workspace_dir() / "profiles"


def _packaged_files(sub: str, src: Path) -> list[Path]:
    if not src.is_dir():
        return []
    return sorted(
        p for p in src.iterdir()
        if p.is_file() and not p.name.startswith(".") and p.suffix.lower() in SEEDED[sub]
    )


def seed_workspace(*, overwrite: bool = False, subsets: set[str] | None = None) -> tuple[Path, dict[str, int]]:
    """
    Copy the packaged profiles and templates into the workspace.

    Files already there are user edits and are kept unless overwrite=True
    (the CLI only allows that with MAGICSQUARE_DEV=1). `subsets` limits the
    copy to some of SUBDIRS; every subfolder is created regardless.

    Returns (workspace, {subfolder: files copied}).
    """
    root = workspace_dir()
    copied = dict.fromkeys(SUBDIRS, 0)

    for sub in SUBDIRS:
        dst = root / sub
        dst.mkdir(parents=True, exist_ok=True)
        if subsets is not None and sub not in subsets:
            continue
        with as_file(pkg_files("magicsquare") / sub) as src:
            for p in _packaged_files(sub, Path(src)):
                target = dst / p.name
                if overwrite or not target.exists():
                    shutil.copy2(p, target)
                    copied[sub] += 1

    return root, copied


def ensure_workspace_seeded() -> tuple[Path, bool, dict[str, int]]:
    """Copy-if-missing; returns (workspace, anything copied?, counts)."""
    root, copied = seed_workspace()
    return root, any(copied.values()), copied
