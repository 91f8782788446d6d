"""Service date and timely filing rules."""

from __future__ import annotations

from claimscrub.claims.access import as_number, get_path, parse_date
from claimscrub.rules.base import Rule
from claimscrub.rules.models import RuleCategory, Severity, ValidationOutcome


class ServiceDateRequired(Rule):
    rule_id = "DT001"
    name = "Service Date Required"
    description = "Service date is required"
    category = RuleCategory.DATES
    severity = Severity.ERROR
    field = "service_date"

    def validate(self, claim, context):
        raw = get_path(claim, self.field)
        if raw is None or raw == "" or parse_date(raw) is None:
            return ValidationOutcome.invalid(self.field, value=raw)
        return ValidationOutcome.ok()

    def message(self, claim, outcome):
        return "Service date is required and must be valid"


class ServiceDateNotFuture(Rule):
    rule_id = "DT002"
    name = "Service Date Not Future"
    description = "Service date cannot be in the future"
    category = RuleCategory.DATES
    severity = Severity.ERROR
    field = "service_date"

    def validate(self, claim, context):
        service_date = parse_date(get_path(claim, self.field))
        if service_date and service_date > context.as_of:
            return ValidationOutcome.invalid(
                self.field,
                value=service_date.isoformat(),
                details="Service date cannot be in the future",
            )
        return ValidationOutcome.ok()


class TimelyFilingLimit(Rule):
    rule_id = "DT003"
    name = "Timely Filing Limit"
    description = "Claim must be filed within payer timely filing limit"
    category = RuleCategory.DATES
    severity = Severity.WARNING
    field = "service_date"

    def validate(self, claim, context):
        service_date = parse_date(get_path(claim, self.field))
        if service_date is None:
            return ValidationOutcome.ok()

        payer_limit = as_number(get_path(claim, "insurance.timely_filing_limit"))
        limit_days = int(payer_limit) if payer_limit and payer_limit > 0 else context.default_timely_filing_days
        days_since_service = (context.as_of - service_date).days

        if days_since_service > limit_days:
            return ValidationOutcome.invalid(
                self.field,
                value=service_date.isoformat(),
                expected_value=limit_days,
                details={"days_since_service": days_since_service, "timely_filing_days": limit_days},
            )
        return ValidationOutcome.ok()

    def message(self, claim, outcome):
        return (
            f"Service date was {outcome.details['days_since_service']} days ago "
            f"(limit: {outcome.details['timely_filing_days']} days)"
        )


DATE_RULES: tuple[Rule, ...] = (
    ServiceDateRequired(),
    ServiceDateNotFuture(),
    TimelyFilingLimit(),
)
