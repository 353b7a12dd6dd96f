# src/prickle/errors.py
"""Exception taxonomy for prickle.

Failures and discards are ordinary data (see ``prickle.property``) and are
never raised. Exceptions here cover the three remaining cases:

- Malformed generators: programming errors in generator construction,
  raised immediately and never retried.
- Check verdicts: raised by ``check``/``recheck`` so test frameworks see a
  failing property as a failing test.
- Recheck data that cannot be parsed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prickle.report import Report


# =============================================================================
# Malformed Generators
# =============================================================================


class InvalidGeneratorError(ValueError):
    """Raised when a generator is constructed from invalid arguments.

    Examples: selecting from an empty sequence, or a frequency table whose
    weights sum to zero.
    """


class InvalidRangeError(InvalidGeneratorError):
    """Raised when bounded sampling is given a lower bound above the upper.

    Attributes:
        lo: The lower bound supplied.
        hi: The upper bound supplied.
    """

    def __init__(self, lo: int, hi: int) -> None:
        self.lo = lo
        self.hi = hi
        super().__init__(f"Invalid range: lower bound {lo} is greater than upper bound {hi}")


# =============================================================================
# Check Verdicts
# =============================================================================


class PropertyCheckError(AssertionError):
    """Base class for a property check that did not pass.

    Subclasses AssertionError so pytest and unittest report it as a test
    failure rather than an error.

    Attributes:
        report: The full report produced by the check loop.
    """

    def __init__(self, report: Report) -> None:
        from prickle.report import render

        self.report = report
        super().__init__(render(report))


class PropertyFailedError(PropertyCheckError):
    """Raised when a property is falsified."""


class PropertyGaveUpError(PropertyCheckError):
    """Raised when the discard limit is reached before enough tests ran."""


# =============================================================================
# Replay
# =============================================================================


class RecheckDataError(ValueError):
    """Raised when serialized recheck data cannot be parsed.

    Attributes:
        token: The token that failed to parse.
    """

    def __init__(self, token: str, reason: str) -> None:
        self.token = token
        super().__init__(f"Failed to deserialize recheck data {token!r}: {reason}")
