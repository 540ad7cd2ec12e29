# src/magicsquare/display.py
"""
Display collaborators: everything here consumes a finished grid.

The HTML pieces are Jinja2 macros from ``templates/tables.html.j2``; the
full page is ``templates/page.html.j2``. Both can be overridden from the
workspace ``templates/`` folder.
"""
from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from math import floor
from pathlib import Path

from jinja2 import Environment

from magicsquare.runtime import CFG
from magicsquare.template_env import build_template_environment
from magicsquare.utility import InvalidInput, magic_constant
from magicsquare.validate import is_valid

DEFAULT_COLORS = ("FFFFFF", "FFFF00", "FF0000")
DEFAULT_STEPS = 10


# ---------- Lines & occurrences ------------------------------------------------

def line_sets(grid: Sequence[Sequence[int]]) -> list[list[int]]:
    """
    The 2n + 2 magic lines: n rows, n columns, the main diagonal
    (top-left → bottom-right) and the anti-diagonal (top-right → bottom-left).
    """
    n = len(grid)
    rows = [list(row) for row in grid]
    cols = [[grid[r][c] for r in range(n)] for c in range(n)]
    main = [grid[i][i] for i in range(n)]
    anti = [grid[i][n - 1 - i] for i in range(n)]
    return [*rows, *cols, main, anti]


def occurrence_counts(lines: Iterable[Iterable[int]]) -> dict[int, int]:
    """Value → number of lines containing it, ordered by value."""
    counts = Counter(v for line in lines for v in line)
    return dict(sorted(counts.items()))


# ---------- Colours ------------------------------------------------------------

def _hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    h = hex_color.strip().lstrip("#")
    if len(h) != 6:
        raise InvalidInput(f"Bad hex colour: {hex_color!r}")
    try:
        return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    except ValueError:
        raise InvalidInput(f"Bad hex colour: {hex_color!r}") from None


def color_gradient(from_hex: str, to_hex: str, steps: int) -> list[str]:
    """
    Return `steps` hex colours (no '#') running from from_hex to to_hex,
    both ends included.
    """
    if isinstance(steps, bool) or not isinstance(steps, int) or steps < 2:
        raise InvalidInput(f"steps must be an integer >= 2, got {steps!r}")

    start = _hex_to_rgb(from_hex)
    end = _hex_to_rgb(to_hex)
    step = [(a - b) / (steps - 1) for a, b in zip(start, end)]

    out = []
    for i in range(steps):
        rgb = [floor(a - d * i) for a, d in zip(start, step)]
        # float drift can leave the last stop one unit short
        if i == steps - 1:
            rgb = list(end)
        out.append("".join(f"{min(255, max(0, v)):02x}" for v in rgb))
    return out


def gradient_table(colors: Sequence[str] = DEFAULT_COLORS, steps: int = DEFAULT_STEPS) -> list[str]:
    """Concatenate `steps`-stop gradients between consecutive colour stops."""
    if len(colors) < 2:
        raise InvalidInput("A gradient needs at least two colours")
    table: list[str] = []
    prev = colors[0]
    for color in colors[1:]:
        table.extend(color_gradient(prev, color, steps))
        prev = color
    return table


def color_from_gradient(value: int, lo: int, hi: int,
                        colors: Sequence[str] = DEFAULT_COLORS, steps: int = DEFAULT_STEPS) -> str:
    """
    Map value in [lo, hi] onto the multi-stop gradient and return '#rrggbb'.
    Values outside the range are clamped; lo == hi maps everything to the
    first stop.
    """
    table = gradient_table(colors, steps)
    span = hi - lo
    if span <= 0:
        return "#" + table[0]
    pos = min(max(value - lo, 0), span)
    idx = floor(len(table) / span * pos + 0.5) - 1
    idx = min(max(idx, 0), len(table) - 1)
    return "#" + table[idx]


def heatmap_cells(counts: dict[int, int], colors: Sequence[str] | None = None,
                  steps: int | None = None) -> list[tuple[int, int, str]]:
    """[(value, count, '#rrggbb'), ...] in value order."""
    if colors is None:
        colors = CFG("HEATMAP.COLORS", None) or DEFAULT_COLORS
    if steps is None:
        steps = int(CFG("HEATMAP.STEPS", DEFAULT_STEPS))
    if not counts:
        return []
    lo, hi = min(counts.values()), max(counts.values())
    return [(v, c, color_from_gradient(c, lo, hi, colors, steps)) for v, c in counts.items()]


# ---------- HTML ---------------------------------------------------------------

def _env(workspace: Path | None = None) -> Environment:
    return build_template_environment(workspace=workspace)


def _macro(name: str, workspace: Path | None = None):
    return getattr(_env(workspace).get_template("tables.html.j2").module, name)


def magic_square_table(grid: Sequence[Sequence[int]], *, workspace: Path | None = None) -> str:
    return str(_macro("grid_table", workspace)(grid))


def line_table(n: int, line: Iterable[int], *, workspace: Path | None = None) -> str:
    """Numbers 1..n² laid out n per row, the members of `line` highlighted."""
    return str(_macro("line_table", workspace)(n, frozenset(line)))


def heatmap_table(counts: dict[int, int], n: int, *, workspace: Path | None = None) -> str:
    return str(_macro("heatmap_table", workspace)(heatmap_cells(counts), n))


def render_page(grid: Sequence[Sequence[int]], *, workspace: Path | None = None) -> str:
    n = len(grid)
    if n == 0:
        raise InvalidInput("Cannot render an empty grid")
    lines = line_sets(grid)
    template = _env(workspace).get_template("page.html.j2")
    return template.render(
        n=n,
        grid=[list(row) for row in grid],
        magic_sum=magic_constant(n),
        valid=is_valid(grid),
        heatmap=heatmap_cells(occurrence_counts(lines)),
        lines=[frozenset(line) for line in lines],
    )


def write_page(grid: Sequence[Sequence[int]], path: Path, *, workspace: Path | None = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_page(grid, workspace=workspace), encoding="utf-8")
    return path
