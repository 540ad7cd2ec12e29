# src/magicsquare/fmt.py
from __future__ import annotations

import re
from collections.abc import Sequence

from colorama import Fore, Style

from magicsquare.runtime import CFG
from magicsquare.validate import SquareSummary

# Single source of truth for ANSI stripping
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(s: str) -> str:
    return ANSI_RE.sub("", s)


def _on_diagonal(row: int, col: int, n: int) -> bool:
    return row == col or row + col == n - 1


def format_grid(grid: Sequence[Sequence[int]], *, highlight: bool | None = None) -> str:
    """
    Right-aligned text table, one grid row per line.
    Diagonal cells are shown in yellow unless DISPLAY_SETTINGS.HIGHLIGHT_DIAGONALS is off.
    """
    if highlight is None:
        highlight = bool(CFG("DISPLAY_SETTINGS.HIGHLIGHT_DIAGONALS", True))
    n = len(grid)
    if n == 0:
        return ""
    width = max(len(str(v)) for row in grid for v in row)

    lines = []
    for r, row in enumerate(grid):
        cells = []
        for c, v in enumerate(row):
            cell = f"{v:>{width}}"
            if highlight and _on_diagonal(r, c, n):
                cell = f"{Fore.YELLOW}{Style.BRIGHT}{cell}{Style.RESET_ALL}"
            cells.append(cell)
        lines.append("  " + " ".join(cells))
    return "\n".join(lines)


def _fmt_sums(values: Sequence[int], target: int) -> str:
    out = []
    for v in values:
        color = Fore.GREEN if v == target else Fore.RED
        out.append(f"{color}{v}{Style.RESET_ALL}")
    return ", ".join(out)


def format_summary(summary: SquareSummary, *, show_sums: bool | None = None) -> str:
    if show_sums is None:
        show_sums = bool(CFG("DISPLAY_SETTINGS.SHOW_SUMS", True))

    n = summary.order
    target = summary.magic_constant
    lines = [f"{Fore.CYAN}Magic constant:{Style.RESET_ALL} {n}·({n}²+1)/2 = {target}"]

    if show_sums:
        lines.append(f"{Fore.CYAN}Rows:{Style.RESET_ALL}      {_fmt_sums(summary.row_sums, target)}")
        lines.append(f"{Fore.CYAN}Columns:{Style.RESET_ALL}   {_fmt_sums(summary.column_sums, target)}")
        lines.append(f"{Fore.CYAN}Diagonals:{Style.RESET_ALL} {_fmt_sums(summary.diagonal_sums, target)}")

    if summary.is_magic:
        verdict = f"{Fore.GREEN}{Style.BRIGHT}This is a valid magic square{Style.RESET_ALL}"
    else:
        verdict = f"{Fore.RED}{Style.BRIGHT}This is not a valid magic square{Style.RESET_ALL}"
    if summary.is_magic and not summary.is_normal:
        verdict += f" {Style.DIM}(values are not 1..{n * n}){Style.RESET_ALL}"
    lines.append(verdict)
    return "\n".join(lines)
