"""White-box tests for the budget-gated cell.

The drainable cell has two states, Active (budget > 0) and Exhausted
(budget == 0).  These tests walk the one-way transition and check that
an exhausted cell never moves.
"""
from __future__ import annotations

import logging
import threading

import pytest

from bint import BoundedCell, BoundedValue, DrainableBoundedCell


class TestConstruction:

    def test_new(self, drainable):
        assert drainable.value == 0
        assert drainable.boundary == 4
        assert drainable.budget == 4
        assert not drainable.exhausted

    def test_new_with_value(self):
        d = DrainableBoundedCell(10, 2, 7)
        assert (d.value, d.budget) == (7, 2)

    def test_new_with_value_clamps(self):
        assert DrainableBoundedCell(10, 2, 12).value == 0

    def test_zero_budget_starts_exhausted(self):
        assert DrainableBoundedCell(10, 0).exhausted

    def test_negative_budget_rejected(self):
        with pytest.raises(ValueError):
            DrainableBoundedCell(10, -1)

    def test_budget_may_exceed_u8(self):
        assert DrainableBoundedCell(10, 100_000).budget == 100_000


class TestDrain:

    def test_drain_ok(self, drainable):
        """Branch: DRAIN-OK — returns the remaining budget."""
        assert drainable.drain() == 3
        assert drainable.drain() == 2
        assert drainable.value == 0

    def test_drain_exhausted(self):
        """Branch: DRAIN-EXHAUSTED — None once nothing is left."""
        d = DrainableBoundedCell(4, 1)
        assert d.drain() == 0
        assert d.drain() is None
        assert d.budget == 0

    def test_drain_to_zero_is_not_exhaustion_signal(self):
        d = DrainableBoundedCell(4, 1)
        result = d.drain()
        assert result == 0
        assert result is not None


class TestStepping:

    def test_four_ups_then_exhausted(self, drainable):
        """Branch: STEP-EXHAUSTED on the fifth call."""
        assert [drainable.up() for _ in range(4)] == [1, 2, 3, 0]
        assert drainable.up() is None
        assert drainable.value == 0
        assert drainable.exhausted

    def test_down_exhausted_leaves_value(self):
        d = DrainableBoundedCell(6, 2, 1)
        assert d.down() == 0
        assert d.down() == 5
        assert d.down() is None
        assert d.value == 5

    def test_mixed_steps_share_budget(self):
        d = DrainableBoundedCell(6, 3)
        assert d.up() == 1
        assert d.down() == 0
        assert d.up() == 1
        assert d.down() is None
        assert d.value == 1

    def test_up_by_within_budget(self):
        d = DrainableBoundedCell(6, 5)
        assert d.up_by(3) == 3
        assert d.budget == 2

    def test_up_by_partial_progress_kept(self):
        d = DrainableBoundedCell(10, 3)
        assert d.up_by(5) is None
        assert d.value == 3
        assert d.exhausted

    def test_down_by_partial_progress_kept(self):
        d = DrainableBoundedCell(10, 3, 1)
        assert d.down_by(5) is None
        assert d.value == 8

    def test_up_by_zero_costs_nothing(self, drainable):
        assert drainable.up_by(0) == 0
        assert drainable.budget == 4

    def test_up_by_zero_when_exhausted(self):
        d = DrainableBoundedCell(10, 0, 4)
        assert d.up_by(0) == 4

    def test_zero_boundary_still_drains(self):
        d = DrainableBoundedCell(0, 2)
        assert d.up() == 0
        assert d.down() == 0
        assert d.up() is None

    def test_value_read_never_gated(self):
        d = DrainableBoundedCell(10, 0, 6)
        assert d.value == 6
        assert int(d) == 6
        assert str(d) == "6"

    def test_peek_is_not_gated(self):
        d = DrainableBoundedCell(10, 0, 6)
        assert d.peek_up_by(5).value == 1
        assert d.peek_down_by(7).value == 9
        assert d.value == 6


class TestConversions:

    def test_from_cell_copies(self):
        c = BoundedCell(6, 2)
        d = DrainableBoundedCell.from_cell(c, 3)
        d.up()
        assert c.value == 2
        assert d.value == 3

    def test_from_value(self):
        d = DrainableBoundedCell.from_value(BoundedValue(value=5, boundary=6), 1)
        assert d.up() == 0

    def test_to_cell_and_value(self):
        d = DrainableBoundedCell(6, 1, 4)
        c = d.to_cell()
        assert c == BoundedCell(6, 4)
        assert d.to_value() == BoundedValue(value=4, boundary=6)
        c.up()
        assert d.value == 4

    def test_repr(self):
        assert repr(DrainableBoundedCell(6, 2, 1)) == (
            "DrainableBoundedCell(boundary=6, budget=2, value=1)"
        )


class TestLogging:

    def test_exhaustion_logged(self, caplog):
        d = DrainableBoundedCell(4, 1)
        with caplog.at_level(logging.DEBUG, logger="bint.drainable"):
            d.up()
            d.up()
        messages = [r.getMessage() for r in caplog.records]
        assert "budget exhausted, last step granted" in messages
        assert "up refused, budget exhausted" in messages


class TestConcurrency:

    def test_budget_never_overspent(self):
        d = DrainableBoundedCell(250, 100)
        results = []
        lock = threading.Lock()

        def worker():
            for _ in range(50):
                r = d.up()
                with lock:
                    results.append(r)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sum(r is not None for r in results) == 100
        assert d.value == 100
        assert d.exhausted


BRANCH_COVERAGE = {
    "DRAIN-OK": [
        "TestDrain::test_drain_ok",
    ],
    "DRAIN-EXHAUSTED": [
        "TestDrain::test_drain_exhausted",
    ],
    "STEP-EXHAUSTED": [
        "TestStepping::test_four_ups_then_exhausted",
        "TestStepping::test_up_by_partial_progress_kept",
    ],
}
