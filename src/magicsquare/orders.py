# src/magicsquare/orders.py
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from math import isqrt

from magicsquare.constructors import doubly_even, odd, singly_even
from magicsquare.utility import NoApplicableOrder, assert_positive_int


class OrderKind(Enum):
    ODD = "odd"
    DOUBLY_EVEN = "doubly-even"
    SINGLY_EVEN = "singly-even"


@dataclass(frozen=True)
class Order:
    kind: OrderKind
    label: str
    method: str
    test: Callable[[int], bool]             # does this order accept n?
    min_width: Callable[[int], int]         # smallest width of this order holding cell_count
    build: Callable[[int], list[list[int]]]

    def __str__(self) -> str:
        return self.label


def _ceil_sqrt(x: int) -> int:
    return isqrt(x - 1) + 1


def _ceil_div(a: int, b: int) -> int:
    return -(-a // b)


# --------------------- membership tests -------------------------------------

def _is_odd(n: int) -> bool:
    return n % 2 == 1


def _is_doubly_even(n: int) -> bool:
    return n % 4 == 0


def _is_singly_even(n: int) -> bool:
    # 2 itself is the only n ≡ 2 (mod 4) without a square
    return (n - 2) % 4 == 0 and n != 2


# --------------------- minimum widths ---------------------------------------

def _odd_width(cell_count: int) -> int:
    m = _ceil_sqrt(cell_count)
    return m + 1 if m % 2 == 0 else m


def _doubly_even_width(cell_count: int) -> int:
    m = _ceil_sqrt(cell_count)
    return _ceil_div(m, 4) * 4


def _singly_even_width(cell_count: int) -> int:
    m = _ceil_sqrt(cell_count)
    return _ceil_div(m - 2, 4) * 4 + 2


# Fixed priority order: the first matching entry wins.
ORDERS: tuple[Order, ...] = (
    Order(OrderKind.ODD, "Odd", "Siamese method",
          _is_odd, _odd_width, odd.build),
    Order(OrderKind.DOUBLY_EVEN, "Doubly even", "Dürer pattern fill",
          _is_doubly_even, _doubly_even_width, doubly_even.build),
    Order(OrderKind.SINGLY_EVEN, "Singly even", "LUX quadrant relabelling",
          _is_singly_even, _singly_even_width, singly_even.build),
)


def classify(n: int, orders: tuple[Order, ...] = ORDERS) -> Order:
    """Return the first order accepting n; raise NoApplicableOrder if none does."""
    assert_positive_int(n, "n")
    for order in orders:
        if order.test(n):
            return order
    raise NoApplicableOrder(f"No construction order applies to n = {n}")


def min_width(cell_count: int, orders: tuple[Order, ...] = ORDERS) -> int:
    """
    Smallest square width able to hold cell_count cells.

    Every order proposes the smallest width of its own class with
    width² >= cell_count; the minimum wins. Returns 0 when there are no
    orders to ask.
    """
    assert_positive_int(cell_count, "cell count")
    widths = [order.min_width(cell_count) for order in orders]
    return min(widths) if widths else 0
