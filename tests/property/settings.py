# tests/property/settings.py
"""Standardized Hypothesis settings profiles for property tests.

Import these instead of using inline @settings(max_examples=...).

Usage:
    from tests.property.settings import STANDARD_SETTINGS

    @given(n=st.integers())
    @STANDARD_SETTINGS
    def test_something(n):
        ...

Tiers:
- DETERMINISM_SETTINGS: 500 examples - seed and generator replay
- STANDARD_SETTINGS: 100 examples - regular property tests
- SLOW_SETTINGS: 50 examples - tests that force large shrink trees
- QUICK_SETTINGS: 20 examples - simple rejection tests
"""

from hypothesis import settings

# Replay depends on this: same seed and size must give the same tree
DETERMINISM_SETTINGS = settings(max_examples=500)

STANDARD_SETTINGS = settings(max_examples=100)

# Each example runs a nested check loop or walks many tree nodes
SLOW_SETTINGS = settings(max_examples=50)

QUICK_SETTINGS = settings(max_examples=20)
