#!/usr/bin/env python3
"""
ClaimScrub Demo - Scrub, Auto-Fix, Report

Scrubs a batch of claims, applies available fixes, re-scrubs and writes
per-claim Markdown/JSON reports plus the fix log.

Usage:
    python scripts/demo.py
    python scripts/demo.py --input data/claims.json --output data/reports --dry-run
"""

import argparse
import copy
import json
from datetime import date
from pathlib import Path
from typing import Any

from claimscrub.autofix import AutoFixExecutor, ApplyMode, export_fix_log_yaml
from claimscrub.core import configure_logging, get_settings
from claimscrub.reports import ReportGenerator, ReportConfig, ScrubStatistics, write_scrub_report
from claimscrub.rules import ScrubEngine, ScrubOptions

# =============================================================================
# Sample Data
# =============================================================================

BASE_CLAIM: dict[str, Any] = {
    "claim_id": "DEMO-001",
    "patient": {
        "first_name": "Jane",
        "last_name": "Doe",
        "date_of_birth": "1980-05-15",
        "gender": "F",
        "address": {"street": "1 Main St", "city": "Springfield", "state": "IL", "zip_code": "62701"},
    },
    "insurance": {
        "payer_id": "AETNA",
        "policy_number": "POL123456",
        "group_number": "GRP001",
        "coverage_start": "2024-01-01",
        "coverage_end": "2024-12-31",
    },
    "provider": {"npi": "1234567890", "tax_id": "12-3456789"},
    "diagnosis_codes": ["J18.9", "E11.9"],
    "procedures": [
        {"code": "99213", "charge": 100.0, "diagnosis_pointers": [1]},
        {"code": "J1100", "charge": 50.25, "diagnosis_pointers": [1, 2]},
    ],
    "service_date": "2024-02-15",
    "place_of_service": "11",
    "total_charges": 150.25,
}


def sample_claims() -> list[dict[str, Any]]:
    """One clean claim and three with typical front-desk mistakes."""
    mismatch = copy.deepcopy(BASE_CLAIM)
    mismatch["claim_id"] = "DEMO-002"
    mismatch["total_charges"] = 100.0

    formatting = copy.deepcopy(BASE_CLAIM)
    formatting["claim_id"] = "DEMO-003"
    formatting["patient"]["address"]["zip_code"] = "1234"
    formatting["provider"]["tax_id"] = "12345678"
    formatting["provider"]["npi"] = "12345"

    no_diagnosis = copy.deepcopy(BASE_CLAIM)
    no_diagnosis["claim_id"] = "DEMO-004"
    no_diagnosis["diagnosis_codes"] = []

    return [copy.deepcopy(BASE_CLAIM), mismatch, formatting, no_diagnosis]


def load_claims(path: Path) -> list[dict[str, Any]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    return data if isinstance(data, list) else [data]


# =============================================================================
# Main
# =============================================================================


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Scrub claims and apply automatic fixes"
    )
    parser.add_argument(
        "--input", "-i",
        type=Path,
        default=None,
        help="JSON file with one claim or a list of claims (default: built-in samples)"
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Directory for reports and fix log (default: settings.reports_path)"
    )
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=date(2024, 3, 1),
        help="Evaluation date, YYYY-MM-DD"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute fixes on copies without changing the claims"
    )

    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings)
    output_dir = args.output or settings.reports_path
    claims = load_claims(args.input) if args.input else sample_claims()

    engine = ScrubEngine(settings=settings)
    executor = AutoFixExecutor(engine.catalog, settings=settings)
    generator = ReportGenerator(ReportConfig.from_settings(settings))
    options = ScrubOptions(as_of=args.as_of)
    mode = ApplyMode.DRY_RUN if args.dry_run else ApplyMode.COMMIT

    print("🏥 ClaimScrub Demo")
    print("=" * 40)
    print(f"   Claims: {len(claims)}")
    print(f"   Rules: {len(engine.catalog)}")
    print(f"   As of: {args.as_of.isoformat()}")
    print(f"   Mode: {mode.value}")

    final_reports = []
    fix_log = []
    for claim in claims:
        report = engine.scrub(claim, options)
        outcome = executor.auto_fix(claim, report, mode, as_of=args.as_of)
        final = engine.scrub(outcome.claim, options)
        if outcome.fix_log:
            final = final.model_copy(update={"fixed_count": outcome.fixed_count})

        fix_log.extend(outcome.fix_log)
        final_reports.append(final)
        write_scrub_report(final, output_dir, outcome.fix_log, config=generator.config)

        print(f"\n📋 {final.claim_id}: {report.status.value} -> {final.status.value}")
        for v in final.violations:
            print(f"   {v.severity.value.upper():8} {v.rule_id} {v.message}")
        for f in outcome.fix_log:
            print(f"   🔧 {f.rule_id} {f.message}")

    if fix_log:
        export_fix_log_yaml(fix_log, output_dir / "fix_log.yaml")

    stats = ScrubStatistics.from_reports(final_reports)
    print("\n📊 Batch Statistics:")
    print(f"   By status: {stats.by_status}")
    print(f"   Pass rate: {stats.pass_rate:.2f}%")
    print(f"   Auto-fix rate: {stats.auto_fix_rate:.2f}%")
    for c in stats.common_errors:
        print(f"   {c.rule_id} ({c.rule_name}): {c.count}")

    print(f"\n✅ Reports written to {output_dir}")


if __name__ == "__main__":
    main()
