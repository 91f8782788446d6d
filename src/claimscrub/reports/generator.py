"""Report Generator for ClaimScrub."""

import json
import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

from claimscrub.autofix.models import FixResult
from claimscrub.core.config import Settings
from claimscrub.core.constants import WARNING_REVIEW_THRESHOLD
from claimscrub.rules.models import RuleCategory, ScrubReport, ScrubStatus, Severity

logger = logging.getLogger(__name__)

@dataclass(slots=True, frozen=True)
class ReportConfig:
    title: str = "Claim Scrub Report"
    include_violations_detail: bool = True
    include_recommendations: bool = True
    max_violations_shown: int = 50
    top_issues_limit: int = 5

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReportConfig":
        return cls(max_violations_shown=settings.report_max_violations_shown, top_issues_limit=settings.report_top_issues_limit)

DEFAULT_CONFIG = ReportConfig()

class Recommendation(BaseModel):
    priority: Literal["critical", "high", "medium"]
    action: str
    message: str
    details: str

class CategoryIssue(BaseModel):
    category: str
    total: int
    errors: int
    warnings: int

# Category errors that warrant a targeted follow-up
_CATEGORY_ACTIONS: tuple[tuple[RuleCategory, str, str, str], ...] = (
    (RuleCategory.INSURANCE_INFO, "verify_insurance", "Insurance information has errors", "Verify insurance eligibility and coverage details"),
    (RuleCategory.DIAGNOSIS, "review_diagnosis", "Diagnosis codes have errors", "Verify all diagnosis codes are correct and properly formatted"),
    (RuleCategory.PROCEDURE, "review_procedures", "Procedure codes have errors", "Verify CPT/HCPCS codes and diagnosis pointers"),
)

class ReportGenerator:
    """Turns scrub reports into summaries, Markdown and JSON."""

    def __init__(self, config: ReportConfig | None = None):
        self.config = config or DEFAULT_CONFIG

    def top_issues(self, report: ScrubReport, limit: int | None = None) -> list[CategoryIssue]:
        issues = [
            CategoryIssue(category=cat, total=c.errors + c.warnings, errors=c.errors, warnings=c.warnings)
            for cat, c in report.categories.items()
        ]
        issues.sort(key=lambda i: i.total, reverse=True)
        return issues[: limit or self.config.top_issues_limit]

    def recommendations(self, report: ScrubReport) -> list[Recommendation]:
        recs = []
        if report.auto_fixable_count:
            recs.append(Recommendation(priority="high", action="auto_fix", message=f"{report.auto_fixable_count} issues can be automatically fixed", details="Run auto-fix to correct these issues"))
        if report.error_count:
            recs.append(Recommendation(priority="critical", action="review_errors", message=f"{report.error_count} errors must be corrected before submission", details="Review and correct all error-level issues"))
        if report.warning_count > WARNING_REVIEW_THRESHOLD:
            recs.append(Recommendation(priority="medium", action="review_warnings", message=f"{report.warning_count} warnings found", details="Review warnings to improve claim quality"))

        categories = report.categories
        for category, action, message, details in _CATEGORY_ACTIONS:
            if (c := categories.get(category.value)) and c.errors:
                recs.append(Recommendation(priority="high", action=action, message=message, details=details))
        return recs

    def summarize(self, report: ScrubReport) -> dict[str, Any]:
        return {
            "status": report.status.value,
            "can_submit": report.submittable,
            "review_required": report.status in (ScrubStatus.FIXED, ScrubStatus.PASS_WITH_WARNINGS),
            "error_count": report.error_count,
            "warning_count": report.warning_count,
            "info_count": report.info_count,
            "fixed_count": report.fixed_count,
            "auto_fixable_count": report.auto_fixable_count,
            "top_issues": [i.model_dump() for i in self.top_issues(report)],
            "recommendations": [r.model_dump() for r in self.recommendations(report)],
        }

    def generate_markdown(self, report: ScrubReport, fix_log: list[FixResult] | None = None) -> str:
        lines = [
            f"# {self.config.title}",
            f"\n**Claim:** `{report.claim_id}` | **Status:** {report.status.value} | **Submittable:** {'yes' if report.submittable else 'no'}\n",
            "## Summary",
            f"**Checks:** {report.total_checks} | **Errors:** {report.error_count} | **Warnings:** {report.warning_count} | **Info:** {report.info_count} | **Auto-fixable:** {report.auto_fixable_count}\n",
        ]

        if top := self.top_issues(report):
            lines.extend(["## Issues by Category", "| Category | Errors | Warnings |", "|---|---|---|"])
            lines.extend(f"| `{i.category}` | {i.errors} | {i.warnings} |" for i in top)
            lines.append("")

        if self.config.include_violations_detail and report.violations:
            lines.append("## Detail")
            shown = report.violations[: self.config.max_violations_shown]
            for v in shown:
                fix = " (auto-fixable)" if v.auto_fixable else ""
                lines.append(f"- **{v.severity.value.upper()}** `{v.rule_id}` {v.rule_name}: {v.message}{fix}")
            if len(report.violations) > len(shown):
                lines.append(f"\n*(...and {len(report.violations) - len(shown)} more)*")
            lines.append("")

        if fix_log:
            lines.append("## Applied Fixes")
            for f in fix_log:
                for path, change in f.changes.items():
                    lines.append(f"- `{f.rule_id}` `{path}`: `{change.from_value}` -> `{change.to_value}`")
            lines.append("")

        if self.config.include_recommendations and (recs := self.recommendations(report)):
            lines.extend(["## Recommendations"] + [f"- [{r.priority}] {r.message}. {r.details}." for r in recs])

        return "\n".join(lines)

    def generate_json(self, report: ScrubReport, fix_log: list[FixResult] | None = None) -> dict[str, Any]:
        return {
            "claim_id": report.claim_id,
            "summary": self.summarize(report),
            "issues": {
                "errors": [v.model_dump(mode="json") for v in report.errors],
                "warnings": [v.model_dump(mode="json") for v in report.warnings],
                "info": [v.model_dump(mode="json") for v in report.info],
            },
            "fixes": [f.to_yaml_dict() for f in fix_log or []],
            "categories": {k: c.model_dump() for k, c in report.categories.items()},
            "rule_errors": [e.model_dump() for e in report.rule_errors],
        }

class RuleCount(BaseModel):
    rule_id: str
    rule_name: str
    count: int

class ScrubStatistics(BaseModel):
    """Aggregate view over many scrub reports."""

    total_claims: int = 0
    by_status: dict[str, int] = Field(default_factory=dict)
    common_errors: list[RuleCount] = Field(default_factory=list)
    common_warnings: list[RuleCount] = Field(default_factory=list)
    category_stats: dict[str, dict[str, int]] = Field(default_factory=dict)
    pass_rate: float = 0.0
    auto_fix_rate: float = 0.0

    @classmethod
    def from_reports(cls, reports: list[ScrubReport], limit: int = 10) -> "ScrubStatistics":
        names: dict[str, str] = {}
        errors, warnings = Counter(), Counter()
        category_stats: dict[str, dict[str, int]] = {}

        for r in reports:
            for v in r.violations:
                names[v.rule_id] = v.rule_name
                if v.severity == Severity.ERROR: errors[v.rule_id] += 1
                elif v.severity == Severity.WARNING: warnings[v.rule_id] += 1
            for cat, c in r.categories.items():
                s = category_stats.setdefault(cat, {"errors": 0, "warnings": 0, "info": 0})
                s["errors"] += c.errors; s["warnings"] += c.warnings; s["info"] += c.info

        total_fixed = sum(r.fixed_count for r in reports)
        total_issues = sum(r.error_count for r in reports) + total_fixed
        passed = sum(1 for r in reports if r.submittable)
        return cls(
            total_claims=len(reports),
            by_status=dict(Counter(r.status.value for r in reports)),
            pass_rate=round(passed / len(reports) * 100, 2) if reports else 0.0,
            common_errors=[RuleCount(rule_id=k, rule_name=names[k], count=n) for k, n in errors.most_common(limit)],
            common_warnings=[RuleCount(rule_id=k, rule_name=names[k], count=n) for k, n in warnings.most_common(limit)],
            category_stats=category_stats,
            auto_fix_rate=round(total_fixed / total_issues * 100, 2) if total_issues else 0.0,
        )

def write_scrub_report(report: ScrubReport, output_dir: Path | str, fix_log: list[FixResult] | None = None, formats: list[str] | None = None, config: ReportConfig | None = None) -> dict[str, Path]:
    out, gen = Path(output_dir), ReportGenerator(config)
    out.mkdir(parents=True, exist_ok=True)
    formats, results = formats or ["markdown", "json"], {}
    stem = f"scrub_{report.claim_id}"

    if "markdown" in formats:
        (p := out / f"{stem}.md").write_text(gen.generate_markdown(report, fix_log), "utf-8"); results["markdown"] = p
    if "json" in formats:
        (p := out / f"{stem}.json").write_text(json.dumps(gen.generate_json(report, fix_log), indent=2, default=str), "utf-8"); results["json"] = p

    logger.info("Wrote %s report(s) for claim %s to %s", ", ".join(results), report.claim_id, out)
    return results
