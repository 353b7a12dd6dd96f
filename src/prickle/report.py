# src/prickle/report.py
"""Check results, their text rendering, and replayable recheck data."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from prickle.errors import PropertyFailedError, PropertyGaveUpError, RecheckDataError
from prickle.seed import Seed

# =============================================================================
# Recheck Data
# =============================================================================


@dataclass(frozen=True, slots=True)
class RecheckData:
    """Everything needed to rebuild a failing test case.

    Attributes:
        size: Size parameter the failing test case ran at.
        seed: Seed the failing test case was generated from.
        shrink_path: Child index taken at each step of the shrink search.
    """

    size: int
    seed: Seed
    shrink_path: tuple[int, ...] = ()

    def serialize(self) -> str:
        """Encode as ``<size>_<value>_<gamma>`` plus ``_<i:j:k>`` for a shrink path."""
        token = f"{self.size}_{self.seed.value}_{self.seed.gamma}"
        if self.shrink_path:
            token += "_" + ":".join(str(i) for i in self.shrink_path)
        return token

    @classmethod
    def deserialize(cls, token: str) -> RecheckData:
        parts = token.strip().split("_")
        if len(parts) not in (3, 4):
            raise RecheckDataError(token, "expected <size>_<value>_<gamma>[_<path>]")
        try:
            size, value, gamma = (int(p) for p in parts[:3])
            path = tuple(int(i) for i in parts[3].split(":")) if len(parts) == 4 else ()
        except ValueError as e:
            raise RecheckDataError(token, str(e)) from e
        if size < 1:
            raise RecheckDataError(token, f"size must be positive, got {size}")
        if any(i < 0 for i in path):
            raise RecheckDataError(token, "shrink path indices must be non-negative")
        return cls(size=size, seed=Seed(value, gamma), shrink_path=path)


# =============================================================================
# Report
# =============================================================================


class ReportStatus(StrEnum):
    OK = "ok"
    GAVE_UP = "gave_up"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class FailureData:
    """The minimal counterexample found by the shrink search.

    Attributes:
        shrinks: Number of successful shrink steps taken.
        journal: Rendered counterexample messages, outermost first.
        recheck_data: Where to find this test case again.
        show_recheck: Whether rendering includes the recheck hint.
    """

    shrinks: int
    journal: list[str]
    recheck_data: RecheckData
    show_recheck: bool = True


@dataclass(frozen=True, slots=True)
class Report:
    tests: int
    discards: int
    status: ReportStatus
    failure: FailureData | None = field(default=None)

    def __post_init__(self) -> None:
        if (self.status is ReportStatus.FAILED) != (self.failure is not None):
            raise ValueError(f"failure data must be present exactly when status is failed, got status={self.status}")

    @property
    def passed(self) -> bool:
        return self.status is ReportStatus.OK


# =============================================================================
# Rendering
# =============================================================================


def _count(n: int, noun: str) -> str:
    return f"{n} {noun}" if n == 1 else f"{n} {noun}s"


def render(report: Report) -> str:
    """Render a report as the human-readable check summary."""
    tests = _count(report.tests, "test")

    if report.status is ReportStatus.OK:
        return f"+++ OK, passed {tests}."

    if report.status is ReportStatus.GAVE_UP:
        return f"*** Gave up after {_count(report.discards, 'discard')}, passed {tests}."

    failure = report.failure
    if failure is None:
        raise ValueError("a failed report must carry failure data")
    header = f"*** Failed! Falsifiable (after {tests}"
    if failure.shrinks > 0:
        header += f" and {_count(failure.shrinks, 'shrink')}"
    if report.discards > 0:
        header += f" and {_count(report.discards, 'discard')}"
    lines = [header + "):", *failure.journal]
    if failure.show_recheck:
        lines.append("This failure can be reproduced by running:")
        lines.append(f'> prickle.recheck(prop, "{failure.recheck_data.serialize()}")')
    return "\n".join(lines)


def try_raise(report: Report) -> None:
    """Raise the matching check error unless the report passed."""
    match report.status:
        case ReportStatus.OK:
            return
        case ReportStatus.GAVE_UP:
            raise PropertyGaveUpError(report)
        case ReportStatus.FAILED:
            raise PropertyFailedError(report)
