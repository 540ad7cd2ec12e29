from __future__ import annotations

import sys
import time
from collections.abc import Sequence

from colorama import Fore, Style

from magicsquare import validate
from magicsquare.orders import ORDERS, Order, classify, min_width
from magicsquare.runtime import current as _rt_current
from magicsquare.utility import (
    NoApplicableOrder,
    NoSolution,
    UnsupportedOrder,
    assert_positive_int,
    magic_constant,
)

Grid = list[list[int]]


def _fmt_ms(ms: float) -> str:
    return f"{ms:6.2f} ms"


def _print_debug_result(label: str, dt_ms: float, detail: str | None = None) -> None:
    """Emit a single debug line with timing (to STDERR)."""
    stat = f"{Fore.GREEN}{Style.BRIGHT}OK  {Style.RESET_ALL}"

    line = f"{Style.DIM}[{_fmt_ms(dt_ms)}]{Style.RESET_ALL} {stat}  {label}"
    if detail:
        line += f" — {Style.DIM}{detail}{Style.RESET_ALL}"
    sys.stderr.write(line + "\n")
    sys.stderr.flush()


def _select(n: int, orders: tuple[Order, ...]) -> Order:
    try:
        return classify(n, orders)
    except NoApplicableOrder as e:
        raise UnsupportedOrder(f"Unable to generate {n} x {n} magic square") from e


def generate(n: int, *, orders: tuple[Order, ...] = ORDERS) -> Grid:
    """
    Create an n x n magic square holding 1..n².

    Raises InvalidInput for anything but a positive int, NoSolution for
    n = 2 and UnsupportedOrder if no order accepts n.
    """
    assert_positive_int(n, "n")
    if n == 2:
        raise NoSolution("There is no solution for n = 2")

    order = _select(n, orders)

    debug = _rt_current().debug
    t0 = time.perf_counter()
    grid = order.build(n)
    if debug:
        dt = (time.perf_counter() - t0) * 1000.0
        _print_debug_result(f"{n} x {n}", dt, f"{order.label} ({order.method})")
    return grid


def compute_width(cell_count: int) -> int:
    return min_width(cell_count)


def compute_sum(n: int) -> int:
    assert_positive_int(n, "n")
    return magic_constant(n)


def is_valid(grid: Sequence[Sequence[int]]) -> bool:
    return validate.is_valid(grid)


def render(grid: Sequence[Sequence[int]]) -> Grid:
    """Materialize the grid as fresh row lists for display collaborators."""
    return [list(row) for row in grid]
