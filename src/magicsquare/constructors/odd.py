# -----------------------------------------------------------------------------
#  odd.py
#  Odd orders, n = 2p + 1
# -----------------------------------------------------------------------------

from __future__ import annotations


def build(n: int) -> list[list[int]]:
    """
    Siamese method: start in the middle of the top row and step up-right with
    wraparound; when the target cell is taken, drop one row instead.

    https://en.wikipedia.org/wiki/Siamese_method
    """
    square = [[0] * n for _ in range(n)]
    row, col = 0, n // 2

    for value in range(1, n * n + 1):
        square[row][col] = value
        next_row = (row - 1) % n
        next_col = (col + 1) % n

        if square[next_row][next_col]:
            row = (row + 1) % n
        else:
            row, col = next_row, next_col

    return square
