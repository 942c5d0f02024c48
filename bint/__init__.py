"""Bounded integers that wrap around a boundary."""
from __future__ import annotations

from bint.cell import BoundedCell
from bint.drainable import DrainableBoundedCell
from bint.limits import U8_MAX
from bint.value import BoundedValue

__all__ = [
    "BoundedCell",
    "BoundedValue",
    "DrainableBoundedCell",
    "U8_MAX",
]

__version__ = "0.1.0"
