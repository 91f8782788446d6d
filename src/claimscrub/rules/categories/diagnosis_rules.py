"""ICD-10 diagnosis code rules."""

from __future__ import annotations

import re

from claimscrub.claims.access import get_list, get_path
from claimscrub.core.constants import ICD10_PATTERN
from claimscrub.rules.base import Rule
from claimscrub.rules.models import RuleCategory, Severity, ValidationOutcome

_ICD10 = re.compile(ICD10_PATTERN)


class DiagnosisRequired(Rule):
    rule_id = "DX001"
    name = "Primary Diagnosis Required"
    description = "At least one diagnosis code is required"
    category = RuleCategory.DIAGNOSIS
    severity = Severity.ERROR
    field = "diagnosis_codes"

    def validate(self, claim, context):
        if not get_list(claim, self.field):
            return ValidationOutcome.invalid(self.field, value=get_path(claim, self.field))
        return ValidationOutcome.ok()


class Icd10Format(Rule):
    rule_id = "DX002"
    name = "Valid ICD-10 Format"
    description = "Diagnosis codes must be valid ICD-10 format"
    category = RuleCategory.DIAGNOSIS
    severity = Severity.ERROR
    field = "diagnosis_codes"

    def validate(self, claim, context):
        invalid_codes = [
            code for code in get_list(claim, self.field)
            if not isinstance(code, str) or not _ICD10.fullmatch(code)
        ]
        if invalid_codes:
            return ValidationOutcome.invalid(self.field, value=invalid_codes, details={"invalid_codes": invalid_codes})
        return ValidationOutcome.ok()

    def message(self, claim, outcome):
        return f"Invalid ICD-10 codes: {', '.join(str(c) for c in outcome.value)}"


class MaxDiagnosisCodes(Rule):
    rule_id = "DX003"
    name = "Maximum Diagnosis Codes"
    description = "Most payers accept up to 12 diagnosis codes"
    category = RuleCategory.DIAGNOSIS
    severity = Severity.WARNING
    field = "diagnosis_codes"

    def validate(self, claim, context):
        count = len(get_list(claim, self.field))
        if count > context.max_diagnosis_codes:
            return ValidationOutcome.invalid(
                self.field,
                value=count,
                expected_value=context.max_diagnosis_codes,
                details={"count": count},
            )
        return ValidationOutcome.ok()

    def message(self, claim, outcome):
        return f"Too many diagnosis codes: {outcome.value} (maximum {outcome.expected_value})"


DIAGNOSIS_RULES: tuple[Rule, ...] = (
    DiagnosisRequired(),
    Icd10Format(),
    MaxDiagnosisCodes(),
)
