"""ClaimScrub: pre-submission claim validation and auto-fix rule engine."""

from claimscrub.autofix import AutoFixExecutor, AutoFixOutcome, FixResult, auto_fix
from claimscrub.rules import (
    RuleCatalog,
    ScrubEngine,
    ScrubOptions,
    ScrubReport,
    Severity,
    Violation,
    default_catalog,
    scrub,
)

__version__ = "0.1.0"

__all__ = [
    "scrub",
    "auto_fix",
    "ScrubEngine",
    "ScrubOptions",
    "ScrubReport",
    "Severity",
    "Violation",
    "RuleCatalog",
    "default_catalog",
    "AutoFixExecutor",
    "AutoFixOutcome",
    "FixResult",
]
