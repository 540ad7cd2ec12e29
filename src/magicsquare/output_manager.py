# src/magicsquare/output_manager.py
"""
Screen and file output for one CLI run (one square, one width, one check).

--output / OUTPUT.OUTPUT_FILE:
    "" or None        screen only
    "." or "dir/"     one file per run, <dir>/<stem>.txt, written on close
    "path/file.txt"   every run appended to the same file

Relative paths are taken from the workspace. Files never get ANSI codes.
"""
from __future__ import annotations

import os
from pathlib import Path

from magicsquare.fmt import strip_ansi
from magicsquare.workspace import workspace_dir


def resolve_output_path(path: str, workspace_root: str | Path) -> Path:
    """Expand '~'; anchor relative paths at workspace_root."""
    if not path:
        raise ValueError("Output path is empty")
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = Path(workspace_root) / p
    return Path(os.path.normpath(p))


def is_directory_target(target: str) -> bool:
    return target in (".", "./") or target.endswith(("/", "\\"))


class OutputManager:
    """
    Everything a run prints goes through write().

        with OutputManager(output_file="runs/", stem="5x5") as om:
            om.write(text)      # on screen now, runs/5x5.txt on exit
    """

    def __init__(self, output_file: str | None = None, quiet: bool = False, stem: str | None = None):
        self.quiet = quiet
        self._chunks: list[str] = []
        self._closed = False
        self._per_run: Path | None = None
        self._append_to: Path | None = None

        target = output_file or ""
        if not target:
            return
        if is_directory_target(target):
            if not stem:
                raise ValueError("A file name stem is needed when writing one file per run.")
            directory = resolve_output_path(target, workspace_dir())
            directory.mkdir(parents=True, exist_ok=True)
            self._per_run = directory / f"{stem}.txt"
        else:
            self._append_to = resolve_output_path(target, workspace_dir())
            self._append_to.parent.mkdir(parents=True, exist_ok=True)

    @property
    def target(self) -> Path | None:
        return self._per_run or self._append_to

    def write(self, *args, sep: str = " ", end: str = "\n") -> None:
        text = sep.join(str(a) for a in args) + end
        self._chunks.append(text)
        if not self.quiet:
            print(text, end="")
        if self._append_to is not None:
            with self._append_to.open("a", encoding="utf-8") as fh:
                fh.write(strip_ansi(text))

    def getvalue(self) -> str:
        """Everything written so far, colour codes included."""
        return "".join(self._chunks)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if not self._chunks:
            return
        if self._per_run is not None:
            self._per_run.write_text(strip_ansi(self.getvalue()), encoding="utf-8")
        elif self._append_to is not None:
            # blank line between runs
            with self._append_to.open("a", encoding="utf-8") as fh:
                fh.write("\n")

    def __enter__(self) -> OutputManager:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
