# src/magicsquare/dataio.py
from __future__ import annotations

import csv
from collections.abc import Sequence
from pathlib import Path

from magicsquare.utility import UserInputError


def load_grid(path: Path) -> list[list[int]]:
    """
    Read a grid from CSV, one row per line.
    Blank lines and lines starting with '#' are ignored. Squareness is
    left to the validator; anything unreadable is a UserInputError.
    """
    grid: list[list[int]] = []
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            for lineno, row in enumerate(csv.reader(f), start=1):
                if not row or not any(cell.strip() for cell in row):
                    continue
                if row[0].lstrip().startswith("#"):
                    continue
                try:
                    grid.append([int(cell.strip()) for cell in row])
                except ValueError:
                    raise UserInputError(f"reading {path.name}: non-integer cell on line {lineno}.") from None
    except FileNotFoundError:
        raise UserInputError(f"Grid file not found: {path}") from None
    except UnicodeDecodeError:
        raise UserInputError(f"reading {path.name}: not a UTF-8 text file.") from None
    except OSError as e:
        raise UserInputError(f"reading {path.name}: {e.strerror or e}.") from None
    return grid


def write_csv(square: Sequence[Sequence[int]], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        for row in square:
            writer.writerow(list(row))
