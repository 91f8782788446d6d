"""Rule Models for ClaimScrub."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

from claimscrub.core.constants import (
    DEFAULT_CHARGE_TOLERANCE,
    DEFAULT_MAX_DIAGNOSIS_CODES,
    DEFAULT_TIMELY_FILING_DAYS,
    GROUP_NUMBER_REQUIRED_PAYERS,
)

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def blocks_submission(self) -> bool:
        return self is Severity.ERROR


_SEVERITY_RANK = {Severity.INFO: 0, Severity.WARNING: 1, Severity.ERROR: 2}


class RuleCategory(str, Enum):
    PATIENT_INFO = "patient_info"
    PROVIDER_INFO = "provider_info"
    INSURANCE_INFO = "insurance_info"
    DIAGNOSIS = "diagnosis"
    PROCEDURE = "procedure"
    BILLING = "billing"
    DATES = "dates"
    MODIFIERS = "modifiers"
    AUTHORIZATION = "authorization"
    COMPLIANCE = "compliance"


class ScrubStatus(str, Enum):
    PASS = "pass"
    PASS_WITH_WARNINGS = "pass_with_warnings"
    FAIL = "fail"
    FIXED = "fixed"


@dataclass(slots=True, frozen=True)
class RuleContext:
    """Immutable evaluation parameters shared by every rule in one scrub."""

    as_of: date = field(default_factory=date.today)
    default_timely_filing_days: int = DEFAULT_TIMELY_FILING_DAYS
    max_diagnosis_codes: int = DEFAULT_MAX_DIAGNOSIS_CODES
    charge_tolerance: float = DEFAULT_CHARGE_TOLERANCE
    group_required_payers: frozenset[str] = frozenset(GROUP_NUMBER_REQUIRED_PAYERS)

    @classmethod
    def from_settings(cls, settings, as_of: date | None = None) -> "RuleContext":
        return cls(
            as_of=as_of or date.today(),
            default_timely_filing_days=settings.timely_filing_days,
            max_diagnosis_codes=settings.max_diagnosis_codes,
            charge_tolerance=settings.charge_tolerance,
            group_required_payers=frozenset(p.upper() for p in settings.group_required_payers),
        )


@dataclass(slots=True, frozen=True)
class ValidationOutcome:
    """Raw result of Rule.validate; only the engine turns it into a Violation."""

    valid: bool
    field: str | None = None
    value: Any = None
    expected_value: Any = None
    details: Any = None

    @classmethod
    def ok(cls) -> "ValidationOutcome":
        return _OK

    @classmethod
    def invalid(cls, field: str, value: Any = None, expected_value: Any = None, details: Any = None) -> "ValidationOutcome":
        return cls(valid=False, field=field, value=value, expected_value=expected_value, details=details)


_OK = ValidationOutcome(valid=True)


class Violation(BaseModel):
    rule_id: str
    rule_name: str
    category: RuleCategory
    severity: Severity
    message: str
    auto_fixable: bool = False
    field: str | None = None
    value: Any = None
    expected_value: Any = None
    details: Any = None
    model_config = ConfigDict(frozen=True)

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR


class RuleResult(BaseModel):
    rule_id: str
    valid: bool
    violation: Violation | None = None
    error: str | None = None
    model_config = ConfigDict(frozen=True)


class RuleError(BaseModel):
    """Diagnostic for a rule whose own logic raised."""

    rule_id: str
    error: str
    model_config = ConfigDict(frozen=True)


class CategoryCounts(BaseModel):
    errors: int = 0
    warnings: int = 0
    info: int = 0

    @property
    def total(self) -> int:
        return self.errors + self.warnings + self.info


class ReportComparison(BaseModel):
    """Rule ids that appeared, disappeared, or stayed between two scrubs of one claim."""

    new_issues: list[str] = Field(default_factory=list)
    resolved_issues: list[str] = Field(default_factory=list)
    persisting_issues: list[str] = Field(default_factory=list)

    @property
    def improved(self) -> bool:
        return bool(self.resolved_issues) and not self.new_issues


class ScrubReport(BaseModel):
    """Outcome of one engine run over one claim; violations keep catalog order."""

    claim_id: str = "unknown"
    total_checks: int = 0
    violations: list[Violation] = Field(default_factory=list)
    rule_errors: list[RuleError] = Field(default_factory=list)
    fixed_count: int = 0

    @property
    def errors(self) -> list[Violation]:
        return [v for v in self.violations if v.is_error]

    @property
    def warnings(self) -> list[Violation]:
        return [v for v in self.violations if v.severity == Severity.WARNING]

    @property
    def info(self) -> list[Violation]:
        return [v for v in self.violations if v.severity == Severity.INFO]

    @computed_field
    @property
    def error_count(self) -> int:
        return len(self.errors)

    @computed_field
    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @computed_field
    @property
    def info_count(self) -> int:
        return len(self.info)

    @computed_field
    @property
    def auto_fixable_count(self) -> int:
        return sum(1 for v in self.violations if v.auto_fixable)

    @computed_field
    @property
    def submittable(self) -> bool:
        return not any(v.severity.blocks_submission for v in self.violations)

    @computed_field
    @property
    def status(self) -> ScrubStatus:
        if not self.submittable:
            return ScrubStatus.FAIL
        if self.fixed_count:
            return ScrubStatus.FIXED
        if self.warning_count:
            return ScrubStatus.PASS_WITH_WARNINGS
        return ScrubStatus.PASS

    @property
    def categories(self) -> dict[str, CategoryCounts]:
        counts: dict[str, CategoryCounts] = {}
        for v in self.violations:
            c = counts.setdefault(v.category.value, CategoryCounts())
            if v.severity == Severity.ERROR:
                c.errors += 1
            elif v.severity == Severity.WARNING:
                c.warnings += 1
            else:
                c.info += 1
        return counts

    def violation_for(self, rule_id: str) -> Violation | None:
        return next((v for v in self.violations if v.rule_id == rule_id), None)

    def has_violation(self, rule_id: str) -> bool:
        return self.violation_for(rule_id) is not None

    def compare_with(self, previous: "ScrubReport") -> ReportComparison:
        before = [v.rule_id for v in previous.violations]
        after = [v.rule_id for v in self.violations]
        return ReportComparison(
            new_issues=[r for r in after if r not in before],
            resolved_issues=[r for r in before if r not in after],
            persisting_issues=[r for r in after if r in before],
        )

    def summary(self) -> dict:
        return {
            "claim_id": self.claim_id,
            "status": self.status.value,
            "checks": self.total_checks,
            "errors": self.error_count,
            "warnings": self.warning_count,
            "info": self.info_count,
            "auto_fixable": self.auto_fixable_count,
            "submittable": self.submittable,
        }


class BatchScrubResult(BaseModel):
    reports: list[ScrubReport] = Field(default_factory=list)

    @property
    def status_counts(self) -> dict[str, int]:
        return dict(Counter(r.status.value for r in self.reports))

    @property
    def total_errors(self) -> int:
        return sum(r.error_count for r in self.reports)

    @property
    def total_warnings(self) -> int:
        return sum(r.warning_count for r in self.reports)

    @property
    def submittable_count(self) -> int:
        return sum(1 for r in self.reports if r.submittable)

    def summary(self) -> dict:
        return {
            "total_claims": len(self.reports),
            "submittable": self.submittable_count,
            "by_status": self.status_counts,
            "total_errors": self.total_errors,
            "total_warnings": self.total_warnings,
        }
