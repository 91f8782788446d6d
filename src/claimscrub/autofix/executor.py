"""
Auto-Fix Executor for ClaimScrub.

Walks a scrub report once, applying the owning rule's patch for every
auto-fixable violation. Re-validation is the caller's step
(see fix_and_rescrub).
"""

from __future__ import annotations

import copy
import logging
from datetime import date
from typing import TYPE_CHECKING, Any

from claimscrub.autofix.applier import ApplyMode, PatchApplier
from claimscrub.autofix.models import AutoFixOutcome, FixResult
from claimscrub.core.config import Settings, get_settings
from claimscrub.rules.models import RuleContext, ScrubReport

if TYPE_CHECKING:
    from claimscrub.rules.catalog import RuleCatalog
    from claimscrub.rules.engine import ScrubEngine, ScrubOptions

logger = logging.getLogger(__name__)


class AutoFixExecutor:
    """Applies available fixes for a report's auto-fixable violations."""

    def __init__(
        self,
        catalog: RuleCatalog | None = None,
        *,
        applier: PatchApplier | None = None,
        settings: Settings | None = None,
    ):
        if catalog is None:
            from claimscrub.rules.catalog import default_catalog

            catalog = default_catalog()
        self.catalog = catalog
        self.settings = settings or get_settings()
        self.applier = applier or PatchApplier(audit_dir=self.settings.audit_dir)

    def auto_fix(
        self,
        claim: Any,
        report: ScrubReport,
        mode: ApplyMode | str = ApplyMode.COMMIT,
        as_of: date | None = None,
    ) -> AutoFixOutcome:
        """
        Single pass over the report's fixable violations, in report order.

        COMMIT mutates ``claim`` in place; DRY_RUN fixes a deep copy and leaves
        ``claim`` untouched. Violations introduced by a fix are not revisited.
        """
        mode = ApplyMode(mode)
        target = copy.deepcopy(claim) if mode == ApplyMode.DRY_RUN else claim
        applier = PatchApplier() if mode == ApplyMode.DRY_RUN else self.applier
        context = RuleContext.from_settings(self.settings, as_of=as_of)

        fix_log: list[FixResult] = []
        fixable = [v for v in report.violations if v.auto_fixable]

        for violation in fixable:
            rule = self.catalog.get(violation.rule_id)
            if rule is None:
                logger.warning("No rule %s in catalog, skipping fix", violation.rule_id)
                continue

            attempt = rule.auto_fix(target, context, applier=applier)
            if attempt.fixed:
                fix_log.append(
                    FixResult(
                        rule_id=rule.rule_id,
                        rule_name=rule.name,
                        changes=attempt.changes,
                        message=attempt.message,
                    )
                )
            else:
                logger.debug("Rule %s not fixed: %s", rule.rule_id, attempt.message)

        logger.info(
            "Auto-fixed %d of %d issues on claim %s (%s)",
            len(fix_log),
            len(fixable),
            report.claim_id,
            mode.value,
        )
        return AutoFixOutcome(claim=target, fix_log=fix_log, dry_run=mode == ApplyMode.DRY_RUN)

    def fix_and_rescrub(
        self,
        claim: Any,
        engine: ScrubEngine,
        options: ScrubOptions | None = None,
    ) -> tuple[AutoFixOutcome, ScrubReport]:
        """Scrub, fix in place, scrub again. The final report counts the applied fixes."""
        as_of = options.as_of if options else None
        first = engine.scrub(claim, options)
        outcome = self.auto_fix(claim, first, ApplyMode.COMMIT, as_of=as_of)
        final = engine.scrub(claim, options)
        if outcome.fix_log:
            final = final.model_copy(update={"fixed_count": outcome.fixed_count})
        return outcome, final


def auto_fix(claim: Any, report: ScrubReport, mode: ApplyMode | str = ApplyMode.COMMIT) -> AutoFixOutcome:
    return AutoFixExecutor().auto_fix(claim, report, mode)
