# -----------------------------------------------------------------------------
#  doubly_even.py
#  Doubly-even orders, n = 4p
# -----------------------------------------------------------------------------

from __future__ import annotations

# 1 = keep the ascending count, 0 = take the descending count
BASE_PATTERN: tuple[tuple[int, ...], ...] = (
    (1, 0, 0, 1),
    (0, 1, 1, 0),
    (0, 1, 1, 0),
    (1, 0, 0, 1),
)


def _mask(row: int, col: int) -> int:
    return BASE_PATTERN[row % 4][col % 4]


def build(n: int) -> list[list[int]]:
    """
    Dürer-style pattern fill.

    The 4x4 base pattern is tiled over the grid. Counting 1..n² from the
    top-left cell, write the count where the pattern is 1; counting 1..n²
    again from the bottom-right cell backwards, write it where the pattern
    is 0. The pattern splits the cells into two disjoint sets so each cell
    is written once.
    """
    square = [[0] * n for _ in range(n)]

    count = 0
    for row in range(n):
        for col in range(n):
            count += 1
            if _mask(row, col):
                square[row][col] = count

    count = 0
    for row in range(n - 1, -1, -1):
        for col in range(n - 1, -1, -1):
            count += 1
            if not _mask(row, col):
                square[row][col] = count

    return square
