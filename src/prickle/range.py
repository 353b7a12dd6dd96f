# src/prickle/range.py
"""Ranges: size-dependent numeric bounds with an origin.

A range pairs an origin with a function from ``Size`` to bounds. As the
size goes towards 0 the bounds close in on the origin, and numeric
generators built from a range shrink towards its origin.

Usage:
    Range.constant(0, 100).bounds(50)        # (0, 100)
    Range.linear(0, 100).bounds(50)          # (0, 50)
    Range.linear_from(0, -10, 10).origin     # 0
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

from prickle.numeric import IntBits, clamp, int_bounds, quot

type Number = int | float

_MAX_SCALE = 99


def _clamp_size(size: int) -> int:
    return max(0, min(_MAX_SCALE, size))


def scale_linear(size: int, origin: Number, n: Number) -> Number:
    """Scale ``n`` towards ``origin`` linearly with the size parameter."""
    sz = _clamp_size(size)
    if isinstance(origin, int) and isinstance(n, int):
        return origin + quot((n - origin) * sz, _MAX_SCALE)
    return origin + (n - origin) * sz / _MAX_SCALE


def scale_exponential(lo: Number, hi: Number, size: int, origin: Number, n: Number) -> Number:
    """Scale ``n`` towards ``origin`` exponentially with the size parameter."""
    sz = _clamp_size(size)
    delta = n - origin
    sign = (delta > 0) - (delta < 0)
    diff = ((abs(delta) + 1) ** (sz / _MAX_SCALE) - 1.0) * sign
    if isinstance(origin, int) and isinstance(n, int):
        return clamp(lo, hi, round(origin + diff))  # type: ignore[arg-type]
    scaled = origin + diff
    return min(max(lo, hi), max(min(lo, hi), scaled))


@dataclass(frozen=True, slots=True)
class Range[T: (int, float)]:
    """Bounds of a number to generate, which may depend on the size.

    Attributes:
        origin: The value shrinking heads towards; bounds scale around it.
        scaler: Function from size to a (bound, bound) pair.
    """

    origin: T
    scaler: Callable[[int], tuple[T, T]]

    def bounds(self, size: int) -> tuple[T, T]:
        """Get the extents of the range for a given size."""
        return self.scaler(size)

    def lower_bound(self, size: int) -> T:
        x, y = self.bounds(size)
        return min(x, y)

    def upper_bound(self, size: int) -> T:
        x, y = self.bounds(size)
        return max(x, y)

    def map[U: (int, float)](self, f: Callable[[T], U]) -> Range[U]:
        scaler = self.scaler

        def mapped(size: int) -> tuple[U, U]:
            x, y = scaler(size)
            return f(x), f(y)

        return Range(f(self.origin), mapped)

    # -------------------------------------------------------------------------
    # Constant
    # -------------------------------------------------------------------------

    @staticmethod
    def singleton(x: T) -> Range[T]:
        """A range which represents a constant single value."""
        return Range(x, lambda _: (x, x))

    @staticmethod
    def constant_from(origin: T, x: T, y: T) -> Range[T]:
        """A range unaffected by size, with an origin that may differ from the bounds."""
        return Range(origin, lambda _: (x, y))

    @staticmethod
    def constant(x: T, y: T) -> Range[T]:
        """A range unaffected by size, with its lower bound as origin."""
        return Range.constant_from(x, x, y)

    @staticmethod
    def constant_bounded(bits: IntBits = 64, *, signed: bool = True) -> Range[int]:
        """A constant range spanning the full domain of a fixed-width integer."""
        lo, hi = int_bounds(bits, signed=signed)
        return Range.constant_from(0, lo, hi)

    # -------------------------------------------------------------------------
    # Linear
    # -------------------------------------------------------------------------

    @staticmethod
    def linear_from(origin: T, x: T, y: T) -> Range[T]:
        """A range whose bounds grow linearly from the origin with the size."""

        def scaler(size: int) -> tuple[T, T]:
            x_sized = _clamp_between(x, y, scale_linear(size, origin, x))
            y_sized = _clamp_between(x, y, scale_linear(size, origin, y))
            return x_sized, y_sized  # type: ignore[return-value]

        return Range(origin, scaler)

    @staticmethod
    def linear(x: T, y: T) -> Range[T]:
        return Range.linear_from(x, x, y)

    @staticmethod
    def linear_bounded(bits: IntBits = 64, *, signed: bool = True) -> Range[int]:
        """A linear range spanning the full domain of a fixed-width integer."""
        lo, hi = int_bounds(bits, signed=signed)
        return Range.linear_from(0, lo, hi)

    # -------------------------------------------------------------------------
    # Exponential
    # -------------------------------------------------------------------------

    @staticmethod
    def exponential_from(origin: T, x: T, y: T) -> Range[T]:
        """A range whose bounds grow exponentially from the origin with the size."""

        def scaler(size: int) -> tuple[T, T]:
            x_sized = _clamp_between(x, y, scale_exponential(x, y, size, origin, x))
            y_sized = _clamp_between(x, y, scale_exponential(x, y, size, origin, y))
            return x_sized, y_sized  # type: ignore[return-value]

        return Range(origin, scaler)

    @staticmethod
    def exponential(x: T, y: T) -> Range[T]:
        return Range.exponential_from(x, x, y)


def _clamp_between(x: Number, y: Number, n: Number) -> Number:
    if isinstance(x, int) and isinstance(y, int) and isinstance(n, int):
        return clamp(x, y, n)
    lo, hi = min(x, y), max(x, y)
    if math.isnan(n):
        return lo
    return min(hi, max(lo, n))
