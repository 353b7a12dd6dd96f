# src/prickle/numeric.py
"""Integer helpers shared by ranges and shrinkers."""

from __future__ import annotations

from typing import Literal

IntBits = Literal[8, 16, 32, 64]


def quot(x: int, y: int) -> int:
    """Integer division truncating toward zero.

    Python's ``//`` floors, which would make shrink sequences of negative
    numbers overshoot the destination.
    """
    q = abs(x) // abs(y)
    return q if (x >= 0) == (y > 0) else -q


def int_bounds(bits: IntBits = 64, *, signed: bool = True) -> tuple[int, int]:
    """Return the (min, max) of a fixed-width integer type."""
    if signed:
        return -(2 ** (bits - 1)), 2 ** (bits - 1) - 1
    return 0, 2**bits - 1


def clamp(x: int, y: int, n: int) -> int:
    """Truncate ``n`` so it lies between ``x`` and ``y`` in either order."""
    if x > y:
        return min(x, max(y, n))
    return min(y, max(x, n))
