# tests/unit/test_seed.py
"""Tests for the SplitMix64 seed."""

from __future__ import annotations

import pytest

from prickle.errors import InvalidGeneratorError, InvalidRangeError
from prickle.seed import GOLDEN_GAMMA, MASK_64, Seed, bit_count, mix64, mix_gamma

# =============================================================================
# Mixing Functions
# =============================================================================


class TestMixing:
    """Tests for the finalizers and gamma derivation."""

    def test_mix64_of_zero_is_zero(self) -> None:
        """Every step of the finalizer maps 0 to 0."""
        assert mix64(0) == 0

    def test_mix64_stays_within_64_bits(self) -> None:
        """Outputs never exceed the 64-bit mask."""
        for x in (1, GOLDEN_GAMMA, MASK_64, 2**63):
            assert 0 <= mix64(x) <= MASK_64

    def test_mix_gamma_is_odd(self) -> None:
        """Gammas must be odd so the counter visits every 64-bit value."""
        for x in range(50):
            assert mix_gamma(x) % 2 == 1

    def test_bit_count_masks_to_64_bits(self) -> None:
        """Bits above the 64th are ignored."""
        assert bit_count(MASK_64) == 64
        assert bit_count(1 << 64) == 0


# =============================================================================
# Construction
# =============================================================================


class TestSeedConstruction:
    """Tests for creating seeds."""

    def test_from_int_is_deterministic(self) -> None:
        """The same integer always yields the same seed."""
        assert Seed.from_int(42) == Seed.from_int(42)

    def test_from_int_distinguishes_inputs(self) -> None:
        """Different integers yield different seeds."""
        assert Seed.from_int(1) != Seed.from_int(2)

    def test_from_int_gamma_is_odd(self) -> None:
        """Root seeds get a mixed, odd gamma."""
        assert Seed.from_int(7).gamma % 2 == 1

    def test_from_int32_truncates_to_32_bits(self) -> None:
        """Only the low 32 bits of the input matter."""
        assert Seed.from_int32(5) == Seed.from_int32(5 + 2**32)

    def test_random_produces_valid_seed(self) -> None:
        """Wall-clock seeds are within 64 bits with an odd gamma."""
        seed = Seed.random()
        assert 0 <= seed.value <= MASK_64
        assert seed.gamma % 2 == 1


# =============================================================================
# Streams
# =============================================================================


class TestSeedStreams:
    """Tests for drawing values and splitting."""

    def test_next_uint64_advances_seed(self) -> None:
        """Drawing returns a new seed; the original is unchanged."""
        seed = Seed.from_int(3)
        x1, seed1 = seed.next_uint64()
        x2, _ = seed.next_uint64()
        assert x1 == x2
        assert seed1 != seed

    def test_successive_draws_differ(self) -> None:
        """Consecutive outputs from one stream are not repeated."""
        seed = Seed.from_int(3)
        xs = []
        for _ in range(20):
            x, seed = seed.next_uint64()
            xs.append(x)
        assert len(set(xs)) == 20

    def test_split_is_deterministic(self) -> None:
        """Splitting the same seed always yields the same pair."""
        assert Seed.from_int(9).split() == Seed.from_int(9).split()

    def test_split_halves_produce_different_streams(self) -> None:
        """The two halves of a split draw different values."""
        left, right = Seed.from_int(9).split()
        assert left.next_uint64()[0] != right.next_uint64()[0]

    def test_split_right_half_gets_fresh_gamma(self) -> None:
        """The right half has a newly mixed gamma."""
        seed = Seed.from_int(9)
        left, right = seed.split()
        assert left.gamma == seed.gamma
        assert right.gamma % 2 == 1


# =============================================================================
# Bounded Draws
# =============================================================================


class TestNextBounded:
    """Tests for uniform draws from an inclusive range."""

    def test_values_stay_in_range(self) -> None:
        """Every draw lies within [lo, hi]."""
        seed = Seed.from_int(11)
        for _ in range(500):
            x, seed = seed.next_bounded(-5, 5)
            assert -5 <= x <= 5

    def test_all_values_are_reachable(self) -> None:
        """A small range is fully covered by enough draws."""
        seed = Seed.from_int(11)
        seen = set()
        for _ in range(500):
            x, seed = seed.next_bounded(0, 9)
            seen.add(x)
        assert seen == set(range(10))

    def test_singleton_range(self) -> None:
        """A range of one value always yields that value."""
        x, _ = Seed.from_int(1).next_bounded(17, 17)
        assert x == 17

    def test_range_wider_than_64_bits(self) -> None:
        """Ranges beyond 64 bits are drawn by accumulating digits."""
        lo, hi = -(2**100), 2**100
        seed = Seed.from_int(5)
        for _ in range(50):
            x, seed = seed.next_bounded(lo, hi)
            assert lo <= x <= hi

    def test_reversed_bounds_raise(self) -> None:
        """lo > hi fails fast with the offending bounds attached."""
        with pytest.raises(InvalidRangeError) as exc_info:
            Seed.from_int(1).next_bounded(10, 1)
        assert exc_info.value.lo == 10
        assert exc_info.value.hi == 1
        assert isinstance(exc_info.value, InvalidGeneratorError)


class TestNextDouble:
    """Tests for float draws."""

    def test_values_stay_in_range(self) -> None:
        """Every draw lies within [lo, hi]."""
        seed = Seed.from_int(13)
        for _ in range(500):
            x, seed = seed.next_double(-1.5, 2.5)
            assert -1.5 <= x <= 2.5

    def test_reversed_bounds_are_swapped(self) -> None:
        """Reversed float bounds draw from the same interval."""
        seed = Seed.from_int(13)
        assert seed.next_double(2.0, 1.0) == seed.next_double(1.0, 2.0)
