from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from magicsquare.utility import InvalidInput, magic_constant


@dataclass(frozen=True)
class SquareSummary:
    order: int
    magic_constant: int
    row_sums: tuple[int, ...]
    column_sums: tuple[int, ...]
    diagonal_sums: tuple[int, int]   # (top-left → bottom-right, bottom-left → top-right)
    values: frozenset[int] = frozenset()
    cell_count: int = 0

    @property
    def is_magic(self) -> bool:
        target = self.magic_constant
        return (
            all(total == target for total in self.row_sums)
            and all(total == target for total in self.column_sums)
            and all(total == target for total in self.diagonal_sums)
        )

    @property
    def is_normal(self) -> bool:
        """True when the grid holds each of 1..n² exactly once."""
        nn = self.order * self.order
        return self.cell_count == nn and self.values == frozenset(range(1, nn + 1))


def _is_square(grid: Sequence[Sequence[int]]) -> bool:
    n = len(grid)
    return n > 0 and all(len(row) == n for row in grid)


def _sums(grid: Sequence[Sequence[int]]) -> tuple[list[int], list[int], int, int]:
    n = len(grid)
    row_sums = [sum(row) for row in grid]
    column_sums = [sum(grid[r][c] for r in range(n)) for c in range(n)]
    main = sum(grid[c][c] for c in range(n))
    anti = sum(grid[n - 1 - c][c] for c in range(n))
    return row_sums, column_sums, main, anti


def is_valid(grid: Sequence[Sequence[int]]) -> bool:
    """
    Check that all rows, all columns and both diagonals add up to
    n(n²+1)/2. Empty or ragged grids are never valid.
    """
    if not _is_square(grid):
        return False
    target = magic_constant(len(grid))
    row_sums, column_sums, main, anti = _sums(grid)
    return (
        all(s == target for s in row_sums)
        and all(s == target for s in column_sums)
        and main == target
        and anti == target
    )


def summarise(grid: Sequence[Sequence[int]]) -> SquareSummary:
    if not _is_square(grid):
        raise InvalidInput("Square must be a non-empty n x n grid")

    n = len(grid)
    row_sums, column_sums, main, anti = _sums(grid)
    return SquareSummary(
        order=n,
        magic_constant=magic_constant(n),
        row_sums=tuple(row_sums),
        column_sums=tuple(column_sums),
        diagonal_sums=(main, anti),
        values=frozenset(v for row in grid for v in row),
        cell_count=n * n,
    )
