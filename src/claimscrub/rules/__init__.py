"""
Rules module for ClaimScrub.

Provides the rule base class, the built-in catalog and the scrub engine.
"""

from claimscrub.rules.models import (
    BatchScrubResult,
    CategoryCounts,
    ReportComparison,
    RuleCategory,
    RuleContext,
    RuleError,
    RuleResult,
    ScrubReport,
    ScrubStatus,
    Severity,
    ValidationOutcome,
    Violation,
)
from claimscrub.rules.base import Rule
from claimscrub.rules.catalog import (
    CatalogBuilder,
    RuleCatalog,
    default_catalog,
)
from claimscrub.rules.engine import (
    DEFAULT_OPTIONS,
    ScrubEngine,
    ScrubOptions,
    scrub,
)

__all__ = [
    # Engine
    "ScrubEngine",
    "ScrubOptions",
    "DEFAULT_OPTIONS",
    "scrub",
    # Catalog
    "Rule",
    "RuleCatalog",
    "CatalogBuilder",
    "default_catalog",
    # Models
    "BatchScrubResult",
    "CategoryCounts",
    "ReportComparison",
    "RuleCategory",
    "RuleContext",
    "RuleError",
    "RuleResult",
    "ScrubReport",
    "ScrubStatus",
    "Severity",
    "ValidationOutcome",
    "Violation",
]
