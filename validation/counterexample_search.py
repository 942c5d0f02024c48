"""Counterexample search over the bounded integer contract.

This module runs independently of the test suite.  For each configured
boundary it exhaustively searches for:

1. Postcondition violations: inputs where an operation's result does not
   match the spec's expected output.
2. Property violations: laws (inverse, cyclic, bulk equivalence,
   exhaustion) that fail for some input combination.

Run directly::

    python -m validation.counterexample_search
"""
from __future__ import annotations

import itertools
import sys
from dataclasses import dataclass, field
from typing import Any

from bint.spec import DEFAULT_IMPL, BintSpec, Implementation, build_spec


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    operation: str
    inputs: tuple
    expected: str
    actual: str
    description: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Counterexample Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category} / {cx.operation}")
                lines.append(f"      Inputs:   {cx.inputs}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found — all checks passed.")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Operation drivers: spec inputs -> implementation result
# ---------------------------------------------------------------------------

def _inputs_for(op_name: str, spec: BintSpec) -> list[tuple[int, ...]]:
    if op_name in ("up", "down"):
        return [(a,) for a in spec.all_values()]
    if op_name in ("up_by", "down_by"):
        return list(itertools.product(spec.all_values(), spec.all_steps()))
    if op_name in ("new", "set"):
        return [(v,) for v in spec.domain("v")]
    if op_name == "drain":
        return [(k,) for k in spec.all_budgets()]
    raise KeyError(op_name)


def _run(impl: Implementation, spec: BintSpec, op_name: str, args: tuple) -> Any:
    b = spec.boundary
    if op_name == "up":
        return impl.value(value=args[0], boundary=b).up()
    if op_name == "down":
        return impl.value(value=args[0], boundary=b).down()
    if op_name == "up_by":
        return impl.value(value=args[0], boundary=b).up_by(args[1])
    if op_name == "down_by":
        return impl.value(value=args[0], boundary=b).down_by(args[1])
    if op_name == "new":
        return impl.value.new(b, args[0])
    if op_name == "set":
        return impl.cell(b).set(args[0])
    if op_name == "drain":
        return impl.drainable(b, args[0]).drain()
    raise KeyError(op_name)


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_postcondition_violations(
    impl: Implementation,
    spec: BintSpec,
) -> tuple[list[Counterexample], int]:
    """Exhaustively verify postconditions for every input."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op_spec in spec.operations.items():
        for args in _inputs_for(op_name, spec):
            checks += 1
            try:
                result = _run(impl, spec, op_name, args)
            except Exception as e:
                cxs.append(Counterexample(
                    category="unexpected_error",
                    operation=op_name,
                    inputs=args,
                    expected="no error",
                    actual=f"{type(e).__name__}: {e}",
                    description="Operation raised an unexpected exception",
                ))
                continue

            for post in op_spec.postconditions:
                if not post.check(*args, result):
                    cxs.append(Counterexample(
                        category="postcondition_violation",
                        operation=op_name,
                        inputs=args,
                        expected=post.description,
                        actual=f"result={result!r}",
                        description=f"Postcondition '{post.name}' violated",
                    ))

    return cxs, checks


def search_property_violations(
    impl: Implementation,
    spec: BintSpec,
) -> tuple[list[Counterexample], int]:
    """Exhaustively check every algebraic property."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, prop in spec.all_properties:
        domains = [spec.domain(name) for name in prop.inputs]
        for args in itertools.product(*domains):
            checks += 1
            try:
                ok = prop.check(impl, *args)
            except Exception as e:
                cxs.append(Counterexample(
                    category="unexpected_error",
                    operation=op_name,
                    inputs=args,
                    expected=prop.description,
                    actual=f"{type(e).__name__}: {e}",
                    description=f"Property '{prop.name}' raised",
                ))
                continue
            if not ok:
                cxs.append(Counterexample(
                    category="property_violation",
                    operation=op_name,
                    inputs=args,
                    expected=prop.description,
                    actual="property does not hold",
                    description=f"Property '{prop.name}' violated",
                ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(
    boundary: int,
    budget: int = 8,
    impl: Implementation = DEFAULT_IMPL,
) -> SearchReport:
    """Run complete counterexample search for one configuration."""
    spec = build_spec(boundary, budget)
    report = SearchReport()

    for search_fn in (
        search_postcondition_violations,
        search_property_violations,
    ):
        cxs, checks = search_fn(impl, spec)
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


def main() -> None:
    """Run counterexample search across several boundaries."""
    configs = [
        ("boundary 0  (degenerate)", 0),
        ("boundary 1", 1),
        ("boundary 6", 6),
        ("boundary 10", 10),
        ("boundary 30", 30),
    ]

    all_passed = True
    for name, boundary in configs:
        print(f"\n--- Configuration: {name} ---")
        report = run_search(boundary)
        print(report.summary())
        if not report.passed:
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL CONFIGURATIONS PASSED")
    else:
        print("SOME CONFIGURATIONS HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
