# -----------------------------------------------------------------------------
#  singly_even.py
#  Singly-even orders, n = 4p + 2 (p >= 1)
# -----------------------------------------------------------------------------

from __future__ import annotations


def _on_diagonal(i: int, j: int, n: int) -> bool:
    return i == j or i + j + 1 == n


def _first_band(i: int, j: int, n: int) -> bool:
    h = n // 2
    if (i + j) % 2 == 0:
        return (
            (i + j >= n and j < h)
            or (i - j > 0 and i < h and i > 2)
            or (j - i > 0 and i >= h)
            or (i + j < n and j >= h and i > 1)
        )
    return (
        (i + j < n and i >= h)
        or (j - i > 0 and j < h and i > 1)
        or (i - j > 0 and j >= h)
        or (i + j > n and i < h and i > 2)
    )


def _second_band(i: int, j: int, n: int) -> bool:
    h = n // 2
    if (i + j) % 2 == 0:
        return (
            (j - i > 0 and j < h)
            or (i + j >= n and i < h and j < n - 2)
            or (i + j < n and i >= h)
            or (i - j > 0 and j >= h and j < n - 3)
        )
    return (
        (i - j > 0 and i < h)
        or (i + j < n and j >= h and j < n - 3)
        or (i + j >= n and j < h)
        or (j - i > 0 and i >= h and j < n - 2)
    )


def build(n: int) -> list[list[int]]:
    """
    LUX-style relabelling done in one sweep instead of four quadrant
    sub-squares.

    A counter k runs 1..n² over the rows top to bottom, each row scanned
    right to left. Diagonal cells keep k; the two transform bands and the
    remaining cells get the mirrored values below. The band predicates are
    fixed geometry (parity of i + j, halves of the square, and the i > 1,
    i > 2, j < n - 2, j < n - 3 offsets); tests check the result for a wide
    range of n.

    https://en.wikipedia.org/wiki/Conway%27s_LUX_method_for_magic_squares
    """
    square = [[0] * n for _ in range(n)]
    nn = n * n

    k = 1
    for i in range(n):
        for j in range(n - 1, -1, -1):
            if _on_diagonal(i, j, n):
                square[i][j] = k
            elif _first_band(i, j, n):
                square[i][j] = nn - k + n - 2 * j
            elif _second_band(i, j, n):
                square[i][j] = (2 * i + 1) * n - k + 1
            else:
                square[i][j] = nn - k + 1
            k += 1

    return square
