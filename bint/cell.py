"""Mutable single-slot bounded integer.

``BoundedCell`` owns one value slot and a fixed boundary.  Stepping
operations run the arithmetic on a ``BoundedValue`` view of the current
state, store the result back into the slot and return the new value.
"""
from __future__ import annotations

import threading

from bint.limits import check_u8
from bint.value import BoundedValue


class BoundedCell:
    """A wrapping counter that mutates in place."""

    def __init__(self, boundary: int, value: int = 0) -> None:
        start = BoundedValue.new(boundary, value)
        self._boundary = start.boundary
        self._value = start.value
        self._lock = threading.RLock()

    @classmethod
    def from_value(cls, bv: BoundedValue) -> BoundedCell:
        """Copy ``(value, boundary)`` into a new cell, verbatim."""
        cell = cls(bv.boundary)
        cell._value = bv.value
        return cell

    # -- read ---------------------------------------------------------------

    @property
    def value(self) -> int:
        return self._value

    @property
    def boundary(self) -> int:
        return self._boundary

    def to_value(self) -> BoundedValue:
        with self._lock:
            return BoundedValue(value=self._value, boundary=self._boundary)

    def peek_up_by(self, n: int) -> BoundedValue:
        """What :meth:`up_by` would produce, without committing it."""
        return self.to_value().up_by(n)

    def peek_down_by(self, n: int) -> BoundedValue:
        """What :meth:`down_by` would produce, without committing it."""
        return self.to_value().down_by(n)

    # -- mutation -----------------------------------------------------------

    def up(self) -> int:
        with self._lock:
            self._value = self.to_value().up().value
            return self._value

    def down(self) -> int:
        with self._lock:
            self._value = self.to_value().down().value
            return self._value

    def up_by(self, n: int) -> int:
        check_u8("n", n)
        with self._lock:
            for _ in range(n):
                self.up()
            return self._value

    def down_by(self, n: int) -> int:
        check_u8("n", n)
        with self._lock:
            for _ in range(n):
                self.down()
            return self._value

    def reset(self) -> int:
        with self._lock:
            self._value = 0
            return self._value

    def set(self, v: int) -> int:
        """Overwrite the value, clamping like the constructor does.

        Branches: SET-EXACT, SET-CLAMP
        """
        with self._lock:
            self._value = BoundedValue.new(self._boundary, v).value
            return self._value

    # -- dunder -------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundedCell):
            return NotImplemented
        return (self._value, self._boundary) == (other._value, other._boundary)

    __hash__ = None  # mutable

    def __int__(self) -> int:
        return self._value

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        return f"BoundedCell(boundary={self._boundary}, value={self._value})"
