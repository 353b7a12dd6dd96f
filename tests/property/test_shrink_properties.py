# tests/property/test_shrink_properties.py
"""Property-based tests for shrink candidate functions.

These verify the invariants the greedy shrink search relies on:
- Candidates run from the destination towards the value, never reaching it
- List shrinks are strictly shorter and the empty list comes first
- removes covers every aligned run exactly once
"""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from prickle import shrink
from tests.property.settings import STANDARD_SETTINGS

# =============================================================================
# Strategies
# =============================================================================

int64s = st.integers(min_value=-(2**63), max_value=2**63 - 1)
small_lists = st.lists(st.integers(), max_size=30)


# =============================================================================
# Halves
# =============================================================================


@given(n=int64s)
@STANDARD_SETTINGS
def test_halves_never_contains_zero(n: int) -> None:
    assert 0 not in shrink.halves(n).to_list()


@given(n=int64s.filter(lambda x: x != 0))
@STANDARD_SETTINGS
def test_halves_starts_with_input_and_shrinks_in_magnitude(n: int) -> None:
    values = shrink.halves(n).to_list()
    assert values[0] == n
    assert all(abs(b) < abs(a) for a, b in zip(values, values[1:], strict=False))
    assert all((v > 0) == (n > 0) for v in values)


# =============================================================================
# Towards
# =============================================================================


@given(destination=int64s, x=int64s)
@STANDARD_SETTINGS
def test_towards_starts_at_destination(destination: int, x: int) -> None:
    candidates = shrink.towards(destination, x).to_list()
    if destination == x:
        assert candidates == []
    else:
        assert candidates[0] == destination


@given(destination=int64s, x=int64s)
@STANDARD_SETTINGS
def test_towards_stays_between_destination_and_value(destination: int, x: int) -> None:
    """Every candidate lies in [destination, x) or (x, destination]."""
    lo, hi = min(destination, x), max(destination, x)
    for c in shrink.towards(destination, x):
        assert lo <= c <= hi
        assert c != x


@given(destination=int64s, x=int64s)
@STANDARD_SETTINGS
def test_towards_candidates_progress_monotonically(destination: int, x: int) -> None:
    """Candidates march from the destination towards x.

    They start at the destination and approach x, so the distance to
    x strictly decreases while the distance to the destination strictly grows.
    """
    candidates = shrink.towards(destination, x).to_list()
    to_value = [abs(x - c) for c in candidates]
    to_dest = [abs(c - destination) for c in candidates]
    assert all(a > b for a, b in zip(to_value, to_value[1:], strict=False))
    assert all(a < b for a, b in zip(to_dest, to_dest[1:], strict=False))


@given(destination=st.integers(0, 1000), x=st.integers(0, 1000))
@STANDARD_SETTINGS
def test_towards_ends_adjacent_to_value(destination: int, x: int) -> None:
    """The last candidate is one step from x, so greedy search finds boundaries."""
    candidates = shrink.towards(destination, x).to_list()
    if destination != x:
        assert abs(candidates[-1] - x) == 1


@given(
    destination=st.integers(-(10**6), 10**6).map(float),
    x=st.integers(-(10**6), 10**6).map(float),
)
@STANDARD_SETTINGS
def test_towards_double_approaches_value(destination: float, x: float) -> None:
    lo, hi = min(destination, x), max(destination, x)
    for c in shrink.towards_double(destination, x):
        assert lo <= c <= hi
        assert c != x


# =============================================================================
# Lists
# =============================================================================


@given(k=st.integers(1, 10), xs=small_lists)
@STANDARD_SETTINGS
def test_removes_lengths_and_count(k: int, xs: list[int]) -> None:
    results = shrink.removes(k, xs).to_list()
    assert len(results) == len(xs) // k
    assert all(len(r) == len(xs) - k for r in results)


@given(k=st.integers(1, 10), xs=small_lists)
@STANDARD_SETTINGS
def test_removes_drops_each_aligned_run(k: int, xs: list[int]) -> None:
    for i, r in enumerate(shrink.removes(k, xs)):
        start = i * k
        assert r == xs[:start] + xs[start + k :]


@given(xs=small_lists)
@STANDARD_SETTINGS
def test_list_shrinks_are_strictly_shorter(xs: list[int]) -> None:
    assert all(len(s) < len(xs) for s in shrink.list_(xs))


@given(xs=small_lists.filter(bool))
@STANDARD_SETTINGS
def test_list_tries_empty_first(xs: list[int]) -> None:
    assert shrink.list_(xs).take(1) == [[]]
