"""
Prickle: property-based testing with integrated shrinking.

Generators carry their own shrink trees, so every counterexample is
shrunk with the same invariants the generator was built with, and every
failure can be replayed exactly from its recheck data.
"""

from prickle.config import PropertyConfig, load_config
from prickle.errors import (
    InvalidGeneratorError,
    InvalidRangeError,
    PropertyCheckError,
    PropertyFailedError,
    PropertyGaveUpError,
    RecheckDataError,
)
from prickle.gen import Gen
from prickle.property import (
    Property,
    check,
    counterexample,
    for_all,
    recheck,
    render,
    report,
    report_recheck,
)
from prickle.range import Range
from prickle.report import RecheckData, Report, ReportStatus
from prickle.seed import Seed
from prickle.tree import Tree

__version__ = "0.1.0"

__all__ = [
    "Gen",
    "InvalidGeneratorError",
    "InvalidRangeError",
    "Property",
    "PropertyCheckError",
    "PropertyConfig",
    "PropertyFailedError",
    "PropertyGaveUpError",
    "Range",
    "RecheckData",
    "RecheckDataError",
    "Report",
    "ReportStatus",
    "Seed",
    "Tree",
    "__version__",
    "check",
    "counterexample",
    "for_all",
    "load_config",
    "recheck",
    "render",
    "report",
    "report_recheck",
]
