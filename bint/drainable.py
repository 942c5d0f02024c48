"""Budget-gated bounded cell.

A ``DrainableBoundedCell`` composes a ``BoundedCell`` with a finite
operation budget.  Every stepping call consumes one unit of budget before
it touches the cell.  Once the budget reaches zero the cell is exhausted:
stepping calls return ``None`` and leave the value alone.  Nothing
replenishes the budget.

Bulk steps are not transactional.  ``up_by(5)`` with three units left
applies three steps, keeps them and returns ``None``.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from bint.cell import BoundedCell
from bint.limits import check_count, check_u8
from bint.value import BoundedValue

log = logging.getLogger(__name__)


class DrainableBoundedCell:
    """A ``BoundedCell`` that refuses to step after ``budget`` operations."""

    def __init__(self, boundary: int, budget: int, value: int = 0) -> None:
        self._inner = BoundedCell(boundary, value)
        self._budget = check_count("budget", budget)
        self._lock = threading.RLock()

    @classmethod
    def from_cell(cls, cell: BoundedCell, budget: int) -> DrainableBoundedCell:
        """Wrap a copy of ``cell``; the original stays independent."""
        return cls.from_value(cell.to_value(), budget)

    @classmethod
    def from_value(cls, bv: BoundedValue, budget: int) -> DrainableBoundedCell:
        out = cls(bv.boundary, budget)
        out._inner = BoundedCell.from_value(bv)
        return out

    # -- read ---------------------------------------------------------------

    @property
    def value(self) -> int:
        return self._inner.value

    @property
    def boundary(self) -> int:
        return self._inner.boundary

    @property
    def budget(self) -> int:
        return self._budget

    @property
    def exhausted(self) -> bool:
        return self._budget == 0

    def to_cell(self) -> BoundedCell:
        return BoundedCell.from_value(self.to_value())

    def to_value(self) -> BoundedValue:
        with self._lock:
            return self._inner.to_value()

    def peek_up_by(self, n: int) -> BoundedValue:
        return self._inner.peek_up_by(n)

    def peek_down_by(self, n: int) -> BoundedValue:
        return self._inner.peek_down_by(n)

    # -- budget -------------------------------------------------------------

    def drain(self) -> Optional[int]:
        """Consume one unit of budget.

        Returns the remaining budget, or ``None`` if there was none left.

        Branches: DRAIN-OK, DRAIN-EXHAUSTED
        """
        with self._lock:
            if self._budget == 0:                                 # DRAIN-EXHAUSTED
                return None
            self._budget -= 1                                     # DRAIN-OK
            if self._budget == 0:
                log.debug("budget exhausted, last step granted")
            return self._budget

    # -- stepping -----------------------------------------------------------

    def up(self) -> Optional[int]:
        with self._lock:
            if self.drain() is None:                              # STEP-EXHAUSTED
                log.debug("up refused, budget exhausted")
                return None
            return self._inner.up()

    def down(self) -> Optional[int]:
        with self._lock:
            if self.drain() is None:                              # STEP-EXHAUSTED
                log.debug("down refused, budget exhausted")
                return None
            return self._inner.down()

    def up_by(self, n: int) -> Optional[int]:
        check_u8("n", n)
        with self._lock:
            for _ in range(n):
                if self.up() is None:
                    return None
            return self._inner.value

    def down_by(self, n: int) -> Optional[int]:
        check_u8("n", n)
        with self._lock:
            for _ in range(n):
                if self.down() is None:
                    return None
            return self._inner.value

    # -- dunder -------------------------------------------------------------

    def __int__(self) -> int:
        return self._inner.value

    def __str__(self) -> str:
        return str(self._inner)

    def __repr__(self) -> str:
        return (
            f"DrainableBoundedCell(boundary={self.boundary}, "
            f"budget={self._budget}, value={self.value})"
        )
