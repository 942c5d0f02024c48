"""Shared fixtures for bounded integer tests."""
from __future__ import annotations

import pytest

from bint import BoundedCell, BoundedValue, DrainableBoundedCell


@pytest.fixture
def six() -> BoundedValue:
    """Boundary 6, value 4: two ups away from the wrap."""
    return BoundedValue(value=4, boundary=6)


@pytest.fixture
def cell() -> BoundedCell:
    return BoundedCell(8)


@pytest.fixture
def drainable() -> DrainableBoundedCell:
    """Boundary 4, budget 4: exactly one lap before exhaustion."""
    return DrainableBoundedCell(4, 4)
