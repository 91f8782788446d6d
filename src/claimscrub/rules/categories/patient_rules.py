"""Patient demographic rules."""

from __future__ import annotations

import re
from typing import Any

from claimscrub.autofix.models import Patch, PatchOperation
from claimscrub.claims.access import get_path, get_text, parse_date
from claimscrub.core.constants import VALID_GENDERS, ZIP_DIGIT_COUNTS
from claimscrub.rules.base import Rule
from claimscrub.rules.models import RuleCategory, RuleContext, Severity, ValidationOutcome

_ADDRESS_PARTS = (("street", "street"), ("city", "city"), ("state", "state"), ("zip_code", "ZIP code"))


def _digits(value: Any) -> str:
    return re.sub(r"[^0-9]", "", str(value))


def format_zip(value: Any) -> str | None:
    """Canonical ZIP (##### or #####-####), or None when the digit count is wrong."""
    digits = _digits(value)
    if len(digits) == 5:
        return digits
    if len(digits) == 9:
        return f"{digits[:5]}-{digits[5:]}"
    return None


class PatientNameRequired(Rule):
    rule_id = "PI001"
    name = "Patient Name Required"
    description = "Patient first and last name are required"
    category = RuleCategory.PATIENT_INFO
    severity = Severity.ERROR
    field = "patient.name"

    def validate(self, claim, context):
        first_name = get_text(claim, "patient.first_name")
        last_name = get_text(claim, "patient.last_name")
        if not first_name or not last_name:
            return ValidationOutcome.invalid(
                self.field,
                value=f"{first_name or ''} {last_name or ''}".strip(),
                details={"first_name": first_name, "last_name": last_name},
            )
        return ValidationOutcome.ok()


class PatientDobRequired(Rule):
    rule_id = "PI002"
    name = "Patient DOB Required"
    description = "Patient date of birth is required and must be valid"
    category = RuleCategory.PATIENT_INFO
    severity = Severity.ERROR
    field = "patient.date_of_birth"

    def validate(self, claim, context):
        raw = get_path(claim, self.field)
        if raw is None or raw == "":
            return ValidationOutcome.invalid(self.field, value=None)

        dob = parse_date(raw)
        if dob is None:
            return ValidationOutcome.invalid(self.field, value=raw)

        if dob > context.as_of:
            return ValidationOutcome.invalid(self.field, value=raw, details="Date of birth cannot be in the future")
        return ValidationOutcome.ok()

    def message(self, claim, outcome):
        if outcome.value is None:
            return "Patient date of birth is required"
        if outcome.details:
            return outcome.details
        return "Patient date of birth is invalid"


class PatientGenderRequired(Rule):
    rule_id = "PI003"
    name = "Patient Gender Required"
    description = "Patient gender is required"
    category = RuleCategory.PATIENT_INFO
    severity = Severity.ERROR
    field = "patient.gender"

    def validate(self, claim, context):
        gender = get_path(claim, self.field)
        if not isinstance(gender, str) or gender not in VALID_GENDERS:
            return ValidationOutcome.invalid(self.field, value=gender)
        return ValidationOutcome.ok()

    def message(self, claim, outcome):
        return "Patient gender is required (M, F, or U)"


class PatientAddressRequired(Rule):
    rule_id = "PI004"
    name = "Patient Address Required"
    description = "Patient address, city, state, and ZIP are required"
    category = RuleCategory.PATIENT_INFO
    severity = Severity.ERROR
    field = "patient.address"

    def validate(self, claim, context):
        missing = {key: get_text(claim, f"{self.field}.{key}") is None for key, _ in _ADDRESS_PARTS}
        if any(missing.values()):
            return ValidationOutcome.invalid(self.field, value=get_path(claim, self.field), details=missing)
        return ValidationOutcome.ok()

    def message(self, claim, outcome):
        missing = [label for key, label in _ADDRESS_PARTS if outcome.details.get(key)]
        return f"Patient address missing: {', '.join(missing)}"


class ZipCodeFormat(Rule):
    rule_id = "PI005"
    name = "Valid ZIP Code Format"
    description = "ZIP code must be 5 or 9 digits"
    category = RuleCategory.PATIENT_INFO
    severity = Severity.WARNING
    field = "patient.address.zip_code"
    auto_fixable = True

    def validate(self, claim, context):
        zip_code = get_text(claim, self.field)
        if zip_code is None:
            return ValidationOutcome.ok()

        digit_count = len(_digits(zip_code))
        if digit_count not in ZIP_DIGIT_COUNTS:
            return ValidationOutcome.invalid(self.field, value=zip_code, details={"digits": digit_count})
        return ValidationOutcome.ok()

    def fix(self, claim, context):
        raw = get_path(claim, self.field)
        if raw is None:
            return None
        formatted = format_zip(raw)
        if formatted is None or formatted == raw:
            return None
        return Patch(
            rule_id=self.rule_id,
            changes=[PatchOperation(field=self.field, value=formatted, old_value=raw)],
            rationale=f"Formatted ZIP code: {formatted}",
        )


PATIENT_INFO_RULES: tuple[Rule, ...] = (
    PatientNameRequired(),
    PatientDobRequired(),
    PatientGenderRequired(),
    PatientAddressRequired(),
    ZipCodeFormat(),
)
