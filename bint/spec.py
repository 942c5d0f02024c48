"""Formal specification for bounded integers.

Each operation is specified as a collection of:
- postconditions: what the output must satisfy given valid inputs
- algebraic properties: relationships that must hold across operations

The spec is machine-readable.  The conformance tests and the
counterexample search iterate over it instead of restating each law by
hand.

Layers
------
Implementation   the three classes under test, swappable for mutants
OperationSpec    per-operation contract (post/properties)
BranchSpec       every decision point that white-box tests must cover
BintSpec         the full contract for one boundary and budget
build_spec()     constructs a BintSpec for a given configuration
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from bint.cell import BoundedCell
from bint.drainable import DrainableBoundedCell
from bint.limits import U8_MAX, check_count, check_u8
from bint.value import BoundedValue


# ---------------------------------------------------------------------------
# Implementation under test
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Implementation:
    """The classes a spec is checked against."""

    value: type = BoundedValue
    cell: type = BoundedCell
    drainable: type = DrainableBoundedCell


DEFAULT_IMPL = Implementation()


# ---------------------------------------------------------------------------
# Spec building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class AlgebraicProperty:
    """A law over free inputs.

    ``inputs`` names the domain of each free argument, in order:
    ``a`` is an in-range value, ``n`` a step count, ``v`` any u8 and
    ``k`` a budget.  ``check`` receives the implementation first.
    """

    name: str
    description: str
    inputs: tuple[str, ...]
    check: Callable[..., bool]


@dataclass(frozen=True)
class OperationSpec:
    name: str
    postconditions: list[Postcondition]
    properties: list[AlgebraicProperty] = field(default_factory=list)


@dataclass(frozen=True)
class BranchSpec:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which operation / helper this belongs to


@dataclass(frozen=True)
class BintSpec:
    """Complete contract for one boundary and budget."""

    boundary: int
    budget: int
    max_steps: int
    operations: dict[str, OperationSpec]
    branches: list[BranchSpec]

    def all_values(self) -> range:
        """In-range values; just 0 for the degenerate boundary."""
        return range(max(self.boundary, 1))

    def all_steps(self) -> range:
        return range(self.max_steps + 1)

    def all_budgets(self) -> range:
        return range(self.budget + 1)

    def domain(self, name: str) -> range:
        return {
            "a": self.all_values(),
            "n": self.all_steps(),
            "v": range(U8_MAX + 1),
            "k": self.all_budgets(),
        }[name]

    @property
    def all_properties(self) -> list[tuple[str, AlgebraicProperty]]:
        out: list[tuple[str, AlgebraicProperty]] = []
        for name, op in self.operations.items():
            for prop in op.properties:
                out.append((name, prop))
        return out

    @property
    def all_postconditions(self) -> list[tuple[str, Postcondition]]:
        out: list[tuple[str, Postcondition]] = []
        for name, op in self.operations.items():
            for post in op.postconditions:
                out.append((name, post))
        return out


# ---------------------------------------------------------------------------
# Closed forms used inside the spec predicates
# ---------------------------------------------------------------------------

def expected_up(a: int, boundary: int) -> int:
    if boundary == 0:
        return 0
    return (a + 1) % boundary


def expected_down(a: int, boundary: int) -> int:
    if boundary == 0:
        return a
    if a == 0:
        return boundary - 1
    return (a - 1) % boundary


def expected_up_by(a: int, boundary: int, n: int) -> int:
    """``n`` ups in one step.  Zero ups leave even a raw value alone."""
    if n == 0:
        return a
    if boundary == 0:
        return 0
    return (a + n) % boundary


def expected_down_by(a: int, boundary: int, n: int) -> int:
    """``n`` downs in one step; Python's ``%`` is already non-negative."""
    if n == 0 or boundary == 0:
        return a
    return (a - n) % boundary


def _in_range(r: int, boundary: int) -> bool:
    if boundary == 0:
        return r == 0
    return 0 <= r < boundary


def _iterate(step: Callable[[Any], Any], x: Any, n: int) -> Any:
    for _ in range(n):
        x = step(x)
    return x


def _exhausts_after(impl: Implementation, boundary: int, k: int) -> bool:
    """Budget ``k`` allows exactly ``k`` ups; the next one changes nothing."""
    d = impl.drainable(boundary, k)
    for i in range(k):
        if d.up() != expected_up_by(0, boundary, i + 1):
            return False
    before = d.value
    return d.up() is None and d.value == before and d.budget == 0


def _partial_bulk(impl: Implementation, boundary: int, k: int) -> bool:
    """A bulk request larger than the budget keeps the steps it managed."""
    d = impl.drainable(boundary, k)
    return (
        d.up_by(k + 1) is None
        and d.value == expected_up_by(0, boundary, k)
        and d.exhausted
    )


# ---------------------------------------------------------------------------
# Spec builder
# ---------------------------------------------------------------------------

def build_spec(
    boundary: int,
    budget: int = 8,
    max_steps: Optional[int] = None,
) -> BintSpec:
    """Construct the full bounded integer specification for a configuration.

    ``max_steps`` defaults to two full laps of the boundary, capped at the
    u8 limit for step counts.
    """
    check_u8("boundary", boundary)
    check_count("budget", budget)
    if budget >= U8_MAX:
        # partial_bulk asks for budget + 1 steps, which must fit a u8 count
        raise ValueError(f"budget ({budget}) must be < {U8_MAX}")
    if max_steps is None:
        max_steps = min(2 * boundary + 1, U8_MAX)
    check_u8("max_steps", max_steps)

    b = boundary

    def bv(impl: Implementation, a: int) -> BoundedValue:
        return impl.value(value=a, boundary=b)

    # ------------------------------------------------------------------- up
    up_spec = OperationSpec(
        name="up",
        postconditions=[
            Postcondition(
                "result_in_range",
                "Result value is below the boundary (0 for boundary 0)",
                lambda a, result: _in_range(result.value, b),
            ),
            Postcondition(
                "result_correct",
                "Result equals (a + 1) mod boundary, 0 for boundary 0",
                lambda a, result: result.value == expected_up(a, b),
            ),
            Postcondition(
                "boundary_preserved",
                "Boundary is unchanged",
                lambda a, result: result.boundary == b,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "inverse", "down(up(x)) == x", ("a",),
                lambda impl, a: bv(impl, a).up().down() == bv(impl, a),
            ),
            AlgebraicProperty(
                "cyclic", "boundary ups return to x", ("a",),
                lambda impl, a: (
                    _iterate(lambda x: x.up(), bv(impl, a), b) == bv(impl, a)
                    if b else True
                ),
            ),
            AlgebraicProperty(
                "zero_boundary_noop", "up on boundary 0 yields 0", ("v",),
                lambda impl, v: impl.value(value=v, boundary=0).up().value == 0,
            ),
        ],
    )

    # ----------------------------------------------------------------- down
    down_spec = OperationSpec(
        name="down",
        postconditions=[
            Postcondition(
                "result_in_range",
                "Result value is below the boundary (0 for boundary 0)",
                lambda a, result: _in_range(result.value, b),
            ),
            Postcondition(
                "result_correct",
                "Result equals (a - 1) mod boundary, unchanged for boundary 0",
                lambda a, result: result.value == expected_down(a, b),
            ),
            Postcondition(
                "boundary_preserved",
                "Boundary is unchanged",
                lambda a, result: result.boundary == b,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "inverse", "up(down(x)) == x", ("a",),
                lambda impl, a: (
                    bv(impl, a).down().up() == bv(impl, a) if b else True
                ),
            ),
            AlgebraicProperty(
                "cyclic", "boundary downs return to x", ("a",),
                lambda impl, a: (
                    _iterate(lambda x: x.down(), bv(impl, a), b) == bv(impl, a)
                    if b else True
                ),
            ),
            AlgebraicProperty(
                "zero_boundary_noop", "down on boundary 0 is unchanged", ("v",),
                lambda impl, v: (
                    impl.value(value=v, boundary=0).down()
                    == impl.value(value=v, boundary=0)
                ),
            ),
        ],
    )

    # ---------------------------------------------------------------- up_by
    up_by_spec = OperationSpec(
        name="up_by",
        postconditions=[
            Postcondition(
                "result_correct",
                "Result equals (a + n) mod boundary",
                lambda a, n, result: result.value == expected_up_by(a, b, n),
            ),
        ],
        properties=[
            AlgebraicProperty(
                "bulk_equivalence", "up_by(n) == n sequential ups", ("a", "n"),
                lambda impl, a, n: (
                    bv(impl, a).up_by(n)
                    == _iterate(lambda x: x.up(), bv(impl, a), n)
                ),
            ),
            AlgebraicProperty(
                "cell_agrees", "cell.up_by(n) matches the value kernel",
                ("a", "n"),
                lambda impl, a, n: (
                    impl.cell(b, a).up_by(n) == bv(impl, a).up_by(n).value
                ),
            ),
            AlgebraicProperty(
                "peek_is_pure", "peek_up_by does not move the cell", ("a", "n"),
                lambda impl, a, n: _peek_is_pure(impl.cell(b, a), n, up=True),
            ),
        ],
    )

    # -------------------------------------------------------------- down_by
    down_by_spec = OperationSpec(
        name="down_by",
        postconditions=[
            Postcondition(
                "result_correct",
                "Result equals (a - n) mod boundary",
                lambda a, n, result: result.value == expected_down_by(a, b, n),
            ),
        ],
        properties=[
            AlgebraicProperty(
                "bulk_equivalence", "down_by(n) == n sequential downs",
                ("a", "n"),
                lambda impl, a, n: (
                    bv(impl, a).down_by(n)
                    == _iterate(lambda x: x.down(), bv(impl, a), n)
                ),
            ),
            AlgebraicProperty(
                "cell_agrees", "cell.down_by(n) matches the value kernel",
                ("a", "n"),
                lambda impl, a, n: (
                    impl.cell(b, a).down_by(n) == bv(impl, a).down_by(n).value
                ),
            ),
            AlgebraicProperty(
                "peek_is_pure", "peek_down_by does not move the cell",
                ("a", "n"),
                lambda impl, a, n: _peek_is_pure(impl.cell(b, a), n, up=False),
            ),
        ],
    )

    # ------------------------------------------------------------------ new
    new_spec = OperationSpec(
        name="new",
        postconditions=[
            Postcondition(
                "clamped",
                "value >= boundary falls back to 0, otherwise kept exactly",
                lambda v, result: result.value == (v if v < b else 0),
            ),
            Postcondition(
                "boundary_kept",
                "Boundary is stored as given",
                lambda v, result: result.boundary == b,
            ),
        ],
    )

    # ------------------------------------------------------------------ set
    set_spec = OperationSpec(
        name="set",
        postconditions=[
            Postcondition(
                "clamped",
                "set(v) follows the construction clamping policy",
                lambda v, result: result == (v if v < b else 0),
            ),
        ],
        properties=[
            AlgebraicProperty(
                "reset_is_zero", "reset() always yields 0", ("a",),
                lambda impl, a: impl.cell(b, a).reset() == 0,
            ),
        ],
    )

    # ---------------------------------------------------------------- drain
    drain_spec = OperationSpec(
        name="drain",
        postconditions=[
            Postcondition(
                "decrements",
                "drain() returns k - 1, or None when k == 0",
                lambda k, result: result == (k - 1 if k else None),
            ),
        ],
        properties=[
            AlgebraicProperty(
                "exhaustion", "budget k permits exactly k steps", ("k",),
                lambda impl, k: _exhausts_after(impl, b, k),
            ),
            AlgebraicProperty(
                "partial_bulk", "steps before exhaustion are kept", ("k",),
                lambda impl, k: _partial_bulk(impl, b, k),
            ),
        ],
    )

    # -------------------------------------------------------------- branches
    branches = [
        BranchSpec(
            "UP-ZERO-BOUNDARY",
            "Degenerate boundary, up yields 0",
            "boundary == 0",
            "up",
        ),
        BranchSpec(
            "UP-STEP",
            "Modular increment",
            "boundary > 0",
            "up",
        ),
        BranchSpec(
            "DOWN-ZERO-BOUNDARY",
            "Degenerate boundary, down is a no-op",
            "boundary == 0",
            "down",
        ),
        BranchSpec(
            "DOWN-WRAP",
            "Decrement below 0 wraps to boundary - 1",
            "boundary > 0 and value == 0",
            "down",
        ),
        BranchSpec(
            "DOWN-STEP",
            "Modular decrement",
            "boundary > 0 and value > 0",
            "down",
        ),
        BranchSpec(
            "NEW-EXACT",
            "Requested value kept",
            "value < boundary",
            "new",
        ),
        BranchSpec(
            "NEW-CLAMP",
            "Requested value replaced by 0",
            "value >= boundary",
            "new",
        ),
        BranchSpec(
            "SET-EXACT",
            "Stored value kept",
            "v < boundary",
            "set",
        ),
        BranchSpec(
            "SET-CLAMP",
            "Stored value replaced by 0",
            "v >= boundary",
            "set",
        ),
        BranchSpec(
            "DRAIN-OK",
            "One unit of budget consumed",
            "budget > 0",
            "drain",
        ),
        BranchSpec(
            "DRAIN-EXHAUSTED",
            "No budget left, None returned",
            "budget == 0",
            "drain",
        ),
        BranchSpec(
            "STEP-EXHAUSTED",
            "Stepping refused, cell untouched",
            "drain() is None",
            "drainable",
        ),
        BranchSpec(
            "ARG-TYPE",
            "Non-int argument rejected",
            "not isinstance(arg, int) or isinstance(arg, bool)",
            "validation",
        ),
        BranchSpec(
            "ARG-RANGE",
            "Argument outside the u8 range rejected",
            "not 0 <= arg <= 255",
            "validation",
        ),
    ]

    return BintSpec(
        boundary=boundary,
        budget=budget,
        max_steps=max_steps,
        operations={
            "up": up_spec,
            "down": down_spec,
            "up_by": up_by_spec,
            "down_by": down_by_spec,
            "new": new_spec,
            "set": set_spec,
            "drain": drain_spec,
        },
        branches=branches,
    )


def _peek_is_pure(cell: BoundedCell, n: int, up: bool) -> bool:
    before = cell.value
    peeked = cell.peek_up_by(n) if up else cell.peek_down_by(n)
    if cell.value != before:
        return False
    committed = cell.up_by(n) if up else cell.down_by(n)
    return peeked.value == committed
