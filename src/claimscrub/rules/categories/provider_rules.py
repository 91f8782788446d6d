"""Rendering provider rules."""

from __future__ import annotations

import re

from claimscrub.autofix.models import Patch, PatchOperation
from claimscrub.claims.access import get_path, get_text
from claimscrub.core.constants import NPI_PATTERN, TAX_ID_DIGITS
from claimscrub.rules.base import Rule
from claimscrub.rules.models import RuleCategory, Severity, ValidationOutcome

_NPI = re.compile(NPI_PATTERN)


def _digits(value) -> str:
    return re.sub(r"[^0-9]", "", str(value))


def format_tax_id(value) -> str | None:
    """XX-XXXXXXX for a nine digit EIN, otherwise None."""
    digits = _digits(value)
    if len(digits) != TAX_ID_DIGITS:
        return None
    return f"{digits[:2]}-{digits[2:]}"


class ProviderNpiRequired(Rule):
    rule_id = "PR001"
    name = "Provider NPI Required"
    description = "Rendering provider NPI is required"
    category = RuleCategory.PROVIDER_INFO
    severity = Severity.ERROR
    field = "provider.npi"

    def validate(self, claim, context):
        npi = get_text(claim, self.field)
        if npi is None:
            return ValidationOutcome.invalid(self.field, value=get_path(claim, self.field))
        if not _NPI.fullmatch(npi):
            return ValidationOutcome.invalid(self.field, value=npi, details="NPI must be 10 digits")
        return ValidationOutcome.ok()

    def message(self, claim, outcome):
        return outcome.details or "Provider NPI is required"


class ProviderTaxIdRequired(Rule):
    rule_id = "PR002"
    name = "Provider Tax ID Required"
    description = "Provider tax ID (EIN) is required"
    category = RuleCategory.PROVIDER_INFO
    severity = Severity.ERROR
    field = "provider.tax_id"

    def validate(self, claim, context):
        if get_text(claim, self.field) is None:
            return ValidationOutcome.invalid(self.field, value=get_path(claim, self.field))
        return ValidationOutcome.ok()

    def message(self, claim, outcome):
        return "Provider tax ID is required"


class TaxIdFormat(Rule):
    rule_id = "PR003"
    name = "Valid Tax ID Format"
    description = "Tax ID must be in format XX-XXXXXXX"
    category = RuleCategory.PROVIDER_INFO
    severity = Severity.WARNING
    field = "provider.tax_id"
    auto_fixable = True

    def validate(self, claim, context):
        tax_id = get_text(claim, self.field)
        if tax_id is None:
            return ValidationOutcome.ok()
        digit_count = len(_digits(tax_id))
        if digit_count != TAX_ID_DIGITS:
            return ValidationOutcome.invalid(self.field, value=tax_id, details={"digits": digit_count})
        return ValidationOutcome.ok()

    def message(self, claim, outcome):
        return "Tax ID should be formatted as XX-XXXXXXX"

    def fix(self, claim, context):
        raw = get_path(claim, self.field)
        if raw is None:
            return None
        formatted = format_tax_id(raw)
        if formatted is None or formatted == raw:
            return None
        return Patch(
            rule_id=self.rule_id,
            changes=[PatchOperation(field=self.field, value=formatted, old_value=raw)],
            rationale=f"Formatted tax ID: {formatted}",
        )


PROVIDER_INFO_RULES: tuple[Rule, ...] = (
    ProviderNpiRequired(),
    ProviderTaxIdRequired(),
    TaxIdFormat(),
)
