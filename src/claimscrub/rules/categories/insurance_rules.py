"""Insurance and coverage rules."""

from __future__ import annotations

from claimscrub.claims.access import get_path, get_text, parse_date
from claimscrub.rules.base import Rule
from claimscrub.rules.models import RuleCategory, Severity, ValidationOutcome


class PolicyNumberRequired(Rule):
    rule_id = "IN001"
    name = "Insurance Policy Number Required"
    description = "Insurance policy/member ID is required"
    category = RuleCategory.INSURANCE_INFO
    severity = Severity.ERROR
    field = "insurance.policy_number"

    def validate(self, claim, context):
        if get_text(claim, self.field) is None:
            return ValidationOutcome.invalid(self.field, value=get_path(claim, self.field))
        return ValidationOutcome.ok()


class GroupNumberForPayer(Rule):
    rule_id = "IN002"
    name = "Insurance Group Number"
    description = "Group number may be required by some payers"
    category = RuleCategory.INSURANCE_INFO
    severity = Severity.WARNING
    field = "insurance.group_number"

    def validate(self, claim, context):
        payer_id = get_text(claim, "insurance.payer_id")
        if (
            payer_id
            and payer_id.upper() in context.group_required_payers
            and get_text(claim, self.field) is None
        ):
            return ValidationOutcome.invalid(
                self.field,
                value=get_path(claim, self.field),
                details={"payer_id": payer_id},
            )
        return ValidationOutcome.ok()

    def message(self, claim, outcome):
        return f"Group number may be required for {outcome.details['payer_id']}"


class CoverageActive(Rule):
    rule_id = "IN003"
    name = "Insurance Coverage Active"
    description = "Service date must be within coverage period"
    category = RuleCategory.INSURANCE_INFO
    severity = Severity.ERROR
    field = "insurance.coverage_start"

    def validate(self, claim, context):
        service_date = parse_date(get_path(claim, "service_date"))
        if service_date is None:
            return ValidationOutcome.ok()

        coverage_start = parse_date(get_path(claim, "insurance.coverage_start"))
        coverage_end = parse_date(get_path(claim, "insurance.coverage_end"))

        if coverage_start and service_date < coverage_start:
            return ValidationOutcome.invalid(
                "insurance.coverage_start",
                value=coverage_start.isoformat(),
                details="Service date is before coverage start date",
            )
        if coverage_end and service_date > coverage_end:
            return ValidationOutcome.invalid(
                "insurance.coverage_end",
                value=coverage_end.isoformat(),
                details="Service date is after coverage end date",
            )
        return ValidationOutcome.ok()

    def message(self, claim, outcome):
        return outcome.details


class PayerIdRequired(Rule):
    rule_id = "IN004"
    name = "Payer ID Required"
    description = "Insurance payer ID is required"
    category = RuleCategory.INSURANCE_INFO
    severity = Severity.ERROR
    field = "insurance.payer_id"

    def validate(self, claim, context):
        if get_text(claim, self.field) is None:
            return ValidationOutcome.invalid(self.field, value=get_path(claim, self.field))
        return ValidationOutcome.ok()


INSURANCE_INFO_RULES: tuple[Rule, ...] = (
    PolicyNumberRequired(),
    GroupNumberForPayer(),
    CoverageActive(),
    PayerIdRequired(),
)
