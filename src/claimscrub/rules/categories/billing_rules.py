"""Billing rules: place of service and charge reconciliation."""

from __future__ import annotations

import re

from claimscrub.autofix.models import Patch, PatchOperation
from claimscrub.claims.access import as_number, get_list, get_path
from claimscrub.core.constants import PLACE_OF_SERVICE_PATTERN
from claimscrub.rules.base import Rule
from claimscrub.rules.models import RuleCategory, Severity, ValidationOutcome

_POS = re.compile(PLACE_OF_SERVICE_PATTERN)


def procedure_charge_total(claim) -> float:
    """Sum of line charges; non-numeric charges count as zero."""
    return sum(as_number(get_path(line, "charge")) or 0.0 for line in get_list(claim, "procedures"))


class PlaceOfServiceRequired(Rule):
    rule_id = "BL001"
    name = "Place of Service Required"
    description = "Place of service code is required"
    category = RuleCategory.BILLING
    severity = Severity.ERROR
    field = "place_of_service"

    def validate(self, claim, context):
        pos = get_path(claim, self.field)
        if pos is None or isinstance(pos, bool) or not _POS.fullmatch(str(pos)):
            return ValidationOutcome.invalid(self.field, value=pos)
        return ValidationOutcome.ok()

    def message(self, claim, outcome):
        return "Place of service code is required (2-digit code)"


class TotalChargesMatch(Rule):
    rule_id = "BL002"
    name = "Total Charges Match"
    description = "Total charges should match sum of procedure charges"
    category = RuleCategory.BILLING
    severity = Severity.WARNING
    field = "total_charges"
    auto_fixable = True

    def validate(self, claim, context):
        calculated = procedure_charge_total(claim)
        claim_total = as_number(get_path(claim, self.field)) or 0.0
        difference = abs(calculated - claim_total)

        if difference > context.charge_tolerance:
            return ValidationOutcome.invalid(
                self.field,
                value=claim_total,
                expected_value=round(calculated, 2),
                details={
                    "calculated_total": round(calculated, 2),
                    "claim_total": claim_total,
                    "difference": round(difference, 2),
                },
            )
        return ValidationOutcome.ok()

    def message(self, claim, outcome):
        return (
            f"Total charges (${outcome.value:.2f}) doesn't match "
            f"sum of procedures (${outcome.expected_value:.2f})"
        )

    def fix(self, claim, context):
        old_total = get_path(claim, self.field)
        new_total = round(procedure_charge_total(claim), 2)
        if old_total == new_total:
            return None
        return Patch(
            rule_id=self.rule_id,
            changes=[PatchOperation(field=self.field, value=new_total, old_value=old_total)],
            rationale=f"Updated total charges to match procedure sum: ${new_total:.2f}",
        )


BILLING_RULES: tuple[Rule, ...] = (
    PlaceOfServiceRequired(),
    TotalChargesMatch(),
)
