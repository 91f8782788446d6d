"""Scrub Engine for ClaimScrub validation orchestration."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Any

from claimscrub.claims.access import claim_identifier
from claimscrub.core.config import Settings, get_settings
from claimscrub.rules.base import Rule
from claimscrub.rules.catalog import RuleCatalog, default_catalog
from claimscrub.rules.models import (
    BatchScrubResult,
    RuleCategory,
    RuleContext,
    RuleError,
    ScrubReport,
    Severity,
    Violation,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ScrubOptions:
    """Which rules to run and how to evaluate them. Defaults run the full catalog as of today."""

    categories: tuple[RuleCategory, ...] | None = None
    min_severity: Severity | None = None
    skip_warnings: bool = False
    as_of: date | None = None

    @classmethod
    def for_categories(cls, *categories: RuleCategory | str, **kwargs) -> "ScrubOptions":
        return cls(categories=tuple(RuleCategory(c) for c in categories), **kwargs)


DEFAULT_OPTIONS = ScrubOptions()


class ScrubEngine:
    def __init__(
        self,
        catalog: RuleCatalog | None = None,
        *,
        settings: Settings | None = None,
    ):
        self.catalog = catalog if catalog is not None else default_catalog()
        self.settings = settings or get_settings()

    def context_for(self, options: ScrubOptions) -> RuleContext:
        return RuleContext.from_settings(self.settings, as_of=options.as_of)

    def select_rules(self, options: ScrubOptions) -> RuleCatalog:
        if options.categories is None and options.min_severity is None:
            return self.catalog
        return self.catalog.select(categories=options.categories, min_severity=options.min_severity)

    def scrub(self, claim: Any, options: ScrubOptions | None = None) -> ScrubReport:
        """Run the selected rules in catalog order; the claim is only read."""
        options = options or DEFAULT_OPTIONS
        rules = self.select_rules(options)
        context = self.context_for(options)

        violations: list[Violation] = []
        rule_errors: list[RuleError] = []

        for rule in rules:
            result = rule.execute(claim, context)

            if result.error is not None:
                rule_errors.append(RuleError(rule_id=rule.rule_id, error=result.error))
                if self.settings.surface_rule_errors:
                    violations.append(self._unevaluated(rule, result.error))
                continue

            if result.violation is None:
                continue
            if options.skip_warnings and result.violation.severity == Severity.WARNING:
                continue
            violations.append(result.violation)

        report = ScrubReport(
            claim_id=claim_identifier(claim),
            total_checks=len(rules),
            violations=violations,
            rule_errors=rule_errors,
        )

        logger.info(
            "Claim %s scrubbed: status=%s errors=%d warnings=%d rule_errors=%d",
            report.claim_id,
            report.status.value,
            report.error_count,
            report.warning_count,
            len(rule_errors),
        )
        return report

    def _unevaluated(self, rule: Rule, error: str) -> Violation:
        return Violation(
            rule_id=rule.rule_id,
            rule_name=rule.name,
            category=rule.category,
            severity=Severity.INFO,
            message=f"Rule {rule.rule_id} could not be evaluated: {error}",
            auto_fixable=False,
            field=rule.field,
            details={"error": error},
        )

    def scrub_batch(self, claims: Iterable[Any], options: ScrubOptions | None = None) -> BatchScrubResult:
        result = BatchScrubResult(reports=[self.scrub(c, options) for c in claims])
        logger.info(
            "Batch scrub complete: %d claims, %d submittable",
            len(result.reports),
            result.submittable_count,
        )
        return result

    def validate_category(self, claim: Any, category: RuleCategory | str) -> ScrubReport:
        return self.scrub(claim, ScrubOptions.for_categories(category))

    def get_rule(self, rule_id: str) -> Rule | None:
        return self.catalog.get(rule_id)


def scrub(claim: Any, options: ScrubOptions | None = None, catalog: RuleCatalog | None = None) -> ScrubReport:
    return ScrubEngine(catalog).scrub(claim, options)
