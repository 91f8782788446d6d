"""
ClaimScrub Reports Module.

Summaries, recommendations and Markdown/JSON renderings of scrub reports.
"""

from .generator import (
    CategoryIssue,
    Recommendation,
    ReportConfig,
    ReportGenerator,
    RuleCount,
    ScrubStatistics,
    write_scrub_report,
)

__all__ = [
    "ReportGenerator",
    "ReportConfig",
    "Recommendation",
    "CategoryIssue",
    "RuleCount",
    "ScrubStatistics",
    "write_scrub_report",
]
