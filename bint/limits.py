"""Machine ranges for bounded integers.

Boundaries, values and step counts are unsigned 8-bit quantities; budgets
are unsigned platform-sized counts.  Arguments outside those ranges are
programming errors and are rejected before any arithmetic happens.
"""
from __future__ import annotations

U8_MIN = 0
U8_MAX = 255


def check_u8(name: str, v: int) -> int:
    """Reject anything that is not an int in [0, 255].

    Branches: ARG-TYPE, ARG-RANGE
    """
    if isinstance(v, bool) or not isinstance(v, int):          # ARG-TYPE
        raise TypeError(f"{name} must be an int, got {type(v).__name__}")
    if not U8_MIN <= v <= U8_MAX:                              # ARG-RANGE
        raise ValueError(f"{name} ({v}) is outside [{U8_MIN}, {U8_MAX}]")
    return v


def check_count(name: str, v: int) -> int:
    """Reject anything that is not a non-negative int."""
    if isinstance(v, bool) or not isinstance(v, int):
        raise TypeError(f"{name} must be an int, got {type(v).__name__}")
    if v < 0:
        raise ValueError(f"{name} ({v}) must be >= 0")
    return v
