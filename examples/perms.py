"""Print permutation pairs from a wrapping counter.

Steps a counter with boundary 30 sixty times.  Before each step the
current value is projected onto two smaller cycles, ``value % 6`` and
``value % 10``, and the pair is printed.  Because lcm(6, 10) == 30, one
lap of the counter visits every reachable pair exactly once.

Run with::

    python examples/perms.py
"""
from __future__ import annotations

from bint import BoundedValue


def perms(i: int) -> tuple[int, int]:
    return i % 6, i % 10


def pairs(boundary: int = 30, steps: int = 60) -> list[tuple[int, int]]:
    b = BoundedValue.new(boundary)
    out = []
    for _ in range(steps):
        out.append(perms(b.value))
        b = b.up()
    return out


def main() -> None:
    for x, y in pairs():
        print(f"{x} {y}")


if __name__ == "__main__":
    main()
