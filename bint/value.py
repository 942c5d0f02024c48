"""Immutable bounded integer.

A ``BoundedValue`` is an unsigned value paired with a boundary.  Stepping
past ``boundary - 1`` wraps to 0 and stepping below 0 wraps to
``boundary - 1``.  Every operation returns a new instance.

A zero boundary is a legal state.  Stepping it never takes a modulus by
zero: ``up`` yields 0 and ``down`` returns the value unchanged.

Decision branches are annotated with the branch ids listed in
``bint.spec`` so white-box tests can trace coverage back to the contract.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from bint.limits import check_u8

if TYPE_CHECKING:
    from bint.cell import BoundedCell
    from bint.drainable import DrainableBoundedCell

log = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class BoundedValue:
    """An unsigned value that wraps around ``boundary``.

    Constructing the dataclass directly stores the pair verbatim, the same
    way a struct literal would.  Use :meth:`new` for the clamping
    constructor.
    """

    value: int
    boundary: int

    def __post_init__(self) -> None:
        check_u8("value", self.value)
        check_u8("boundary", self.boundary)

    # -- construction -------------------------------------------------------

    @classmethod
    def new(cls, boundary: int, value: int = 0) -> BoundedValue:
        """Build a value, falling back to 0 when ``value >= boundary``.

        Branches: NEW-EXACT, NEW-CLAMP
        """
        check_u8("boundary", boundary)
        check_u8("value", value)
        if value >= boundary:                                     # NEW-CLAMP
            if value:
                log.debug("value %d not below boundary %d, using 0",
                          value, boundary)
            return cls(value=0, boundary=boundary)
        return cls(value=value, boundary=boundary)                # NEW-EXACT

    # -- stepping -----------------------------------------------------------

    def up(self) -> BoundedValue:
        """Step forward by one.

        Branches: UP-ZERO-BOUNDARY, UP-STEP
        """
        if self.boundary == 0:                                    # UP-ZERO-BOUNDARY
            return BoundedValue(value=0, boundary=0)
        v = (self.value + 1) % self.boundary                      # UP-STEP
        return BoundedValue(value=v, boundary=self.boundary)

    def down(self) -> BoundedValue:
        """Step backward by one.

        Branches: DOWN-ZERO-BOUNDARY, DOWN-WRAP, DOWN-STEP
        """
        if self.boundary == 0:                                    # DOWN-ZERO-BOUNDARY
            return self
        if self.value == 0:                                       # DOWN-WRAP
            return BoundedValue(value=self.boundary - 1, boundary=self.boundary)
        v = (self.value - 1) % self.boundary                      # DOWN-STEP
        return BoundedValue(value=v, boundary=self.boundary)

    def up_by(self, n: int) -> BoundedValue:
        """Apply :meth:`up` ``n`` times."""
        check_u8("n", n)
        out = self
        for _ in range(n):
            out = out.up()
        return out

    def down_by(self, n: int) -> BoundedValue:
        """Apply :meth:`down` ``n`` times."""
        check_u8("n", n)
        out = self
        for _ in range(n):
            out = out.down()
        return out

    # -- conversions --------------------------------------------------------

    def to_cell(self) -> BoundedCell:
        from bint.cell import BoundedCell
        return BoundedCell.from_value(self)

    def to_drainable(self, budget: int) -> DrainableBoundedCell:
        from bint.drainable import DrainableBoundedCell
        return DrainableBoundedCell.from_value(self, budget)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)
