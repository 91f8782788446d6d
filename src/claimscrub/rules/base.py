"""Rule base class for ClaimScrub."""

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from claimscrub.autofix.applier import ApplyMode, PatchApplier, changes_of
from claimscrub.autofix.models import FixAttempt, Patch
from claimscrub.rules.models import (
    RuleCategory,
    RuleContext,
    RuleResult,
    Severity,
    ValidationOutcome,
    Violation,
)

logger = logging.getLogger(__name__)


class Rule(ABC):
    """
    One named, categorized, severity-tagged claim check.

    Subclasses set the class attributes and implement ``validate``. A rule
    that can repair its own finding sets ``auto_fixable`` and overrides
    ``fix`` to describe the change; applying it is the applier's job.
    """

    rule_id: ClassVar[str]
    name: ClassVar[str]
    description: ClassVar[str]
    category: ClassVar[RuleCategory]
    severity: ClassVar[Severity]
    field: ClassVar[str]
    auto_fixable: ClassVar[bool] = False

    @abstractmethod
    def validate(self, claim: Any, context: RuleContext) -> ValidationOutcome:
        """Inspect the claim without modifying it."""

    def message(self, claim: Any, outcome: ValidationOutcome) -> str:
        return self.description

    def fix(self, claim: Any, context: RuleContext) -> Patch | None:
        return None

    @property
    def has_fix(self) -> bool:
        return type(self).fix is not Rule.fix

    def execute(self, claim: Any, context: RuleContext) -> RuleResult:
        try:
            outcome = self.validate(claim, context)
            if outcome.valid:
                return RuleResult(rule_id=self.rule_id, valid=True)

            violation = Violation(
                rule_id=self.rule_id,
                rule_name=self.name,
                category=self.category,
                severity=self.severity,
                message=self.message(claim, outcome),
                auto_fixable=self.auto_fixable,
                field=outcome.field,
                value=outcome.value,
                expected_value=outcome.expected_value,
                details=outcome.details,
            )
            return RuleResult(rule_id=self.rule_id, valid=False, violation=violation)

        except Exception as e:
            logger.error("Rule %s failed to execute: %s", self.rule_id, e)
            return RuleResult(rule_id=self.rule_id, valid=True, error=str(e))

    def auto_fix(
        self,
        claim: Any,
        context: RuleContext,
        applier: PatchApplier | None = None,
    ) -> FixAttempt:
        """Build this rule's patch and commit it to the claim in place."""
        if not self.auto_fixable or not self.has_fix:
            return FixAttempt(fixed=False, message="Auto-fix not available")

        try:
            patch = self.fix(claim, context)
            if patch is None or not patch.changes:
                return FixAttempt(fixed=False, message="Nothing to fix")

            (applier or PatchApplier()).apply(patch, claim, ApplyMode.COMMIT)
            return FixAttempt(fixed=True, changes=changes_of(patch), message=patch.rationale)

        except Exception as e:
            logger.error("Auto-fix for rule %s failed: %s", self.rule_id, e)
            return FixAttempt(fixed=False, message=f"Auto-fix failed: {e}")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.rule_id} {self.severity.value}>"
