from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("magicsquare")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .engine import Grid, compute_sum, compute_width, generate, is_valid, render
from .orders import Order, OrderKind, classify, min_width
from .utility import (
    InvalidInput,
    MagicSquareError,
    NoApplicableOrder,
    NoSolution,
    UnsupportedOrder,
    UserInputError,
)
from .validate import SquareSummary, summarise

__all__ = [
    "Grid",
    "InvalidInput",
    "MagicSquareError",
    "NoApplicableOrder",
    "NoSolution",
    "Order",
    "OrderKind",
    "SquareSummary",
    "UnsupportedOrder",
    "UserInputError",
    "__version__",
    "classify",
    "compute_sum",
    "compute_width",
    "generate",
    "is_valid",
    "min_width",
    "render",
    "summarise",
]
