"""CPT/HCPCS procedure line rules."""

from __future__ import annotations

import re

from claimscrub.claims.access import as_number, get_list, get_path
from claimscrub.core.constants import CPT_HCPCS_PATTERN
from claimscrub.rules.base import Rule
from claimscrub.rules.models import RuleCategory, Severity, ValidationOutcome

_CPT_HCPCS = re.compile(CPT_HCPCS_PATTERN)


def _is_pointer(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ProcedureRequired(Rule):
    rule_id = "PC001"
    name = "Procedure Code Required"
    description = "At least one procedure code is required"
    category = RuleCategory.PROCEDURE
    severity = Severity.ERROR
    field = "procedures"

    def validate(self, claim, context):
        if not get_list(claim, self.field):
            return ValidationOutcome.invalid(self.field, value=get_path(claim, self.field))
        return ValidationOutcome.ok()


class CptHcpcsFormat(Rule):
    rule_id = "PC002"
    name = "Valid CPT/HCPCS Format"
    description = "Procedure codes must be valid CPT or HCPCS format"
    category = RuleCategory.PROCEDURE
    severity = Severity.ERROR
    field = "procedures.code"

    def validate(self, claim, context):
        invalid_codes = []
        for line in get_list(claim, "procedures"):
            code = get_path(line, "code")
            if not isinstance(code, str) or not _CPT_HCPCS.fullmatch(code):
                invalid_codes.append(code)

        if invalid_codes:
            return ValidationOutcome.invalid(self.field, value=invalid_codes, details={"invalid_codes": invalid_codes})
        return ValidationOutcome.ok()

    def message(self, claim, outcome):
        return f"Invalid CPT/HCPCS codes: {', '.join(str(c) for c in outcome.value)}"


class ProcedureChargeRequired(Rule):
    rule_id = "PC003"
    name = "Procedure Charge Required"
    description = "Each procedure must have a charge amount"
    category = RuleCategory.PROCEDURE
    severity = Severity.ERROR
    field = "procedures.charge"

    def validate(self, claim, context):
        missing = []
        for index, line in enumerate(get_list(claim, "procedures")):
            charge = as_number(get_path(line, "charge"))
            if charge is None or charge <= 0:
                missing.append(index)

        if missing:
            return ValidationOutcome.invalid(self.field, value=missing, details={"indices": missing})
        return ValidationOutcome.ok()

    def message(self, claim, outcome):
        positions = ", ".join(str(i + 1) for i in outcome.value)
        return f"Procedures missing charges at positions: {positions}"


class DiagnosisPointerValid(Rule):
    rule_id = "PC004"
    name = "Diagnosis Pointer Required"
    description = "Each procedure must link to at least one diagnosis"
    category = RuleCategory.PROCEDURE
    severity = Severity.ERROR
    field = "procedures.diagnosis_pointers"

    def validate(self, claim, context):
        diagnosis_count = len(get_list(claim, "diagnosis_codes"))
        problems = []

        for index, line in enumerate(get_list(claim, "procedures")):
            pointers = get_list(line, "diagnosis_pointers")
            if not pointers:
                problems.append({"index": index, "issue": "missing"})
                continue
            for pointer in pointers:
                # 1-based into diagnosis_codes
                if not _is_pointer(pointer) or not 1 <= pointer <= diagnosis_count:
                    problems.append({"index": index, "issue": "invalid", "pointer": pointer})

        if problems:
            return ValidationOutcome.invalid(self.field, value=problems, details={"invalid_pointers": problems})
        return ValidationOutcome.ok()

    def message(self, claim, outcome):
        issues = []
        for p in outcome.value:
            if p["issue"] == "missing":
                issues.append(f"Procedure {p['index'] + 1}: missing diagnosis pointer")
            else:
                issues.append(f"Procedure {p['index'] + 1}: invalid pointer {p['pointer']}")
        return "; ".join(issues)


PROCEDURE_RULES: tuple[Rule, ...] = (
    ProcedureRequired(),
    CptHcpcsFormat(),
    ProcedureChargeRequired(),
    DiagnosisPointerValid(),
)
