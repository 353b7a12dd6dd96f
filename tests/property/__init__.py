# tests/property/__init__.py
"""Property-based tests for prickle.

These use Hypothesis to check the shrinking and generation machinery
against invariants that must hold for ALL inputs: shrink candidates stay
in range and get strictly smaller, generators are deterministic for a
fixed seed, and filtered generators never leak rejected values through
their shrink trees.
"""
