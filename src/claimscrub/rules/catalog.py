"""Rule catalog: the ordered, immutable set of rules a scrub runs."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from functools import lru_cache

from claimscrub.core.exceptions import DuplicateRuleError, RuleDefinitionError
from claimscrub.rules.base import Rule
from claimscrub.rules.categories import CATEGORY_RULE_SETS
from claimscrub.rules.models import RuleCategory, Severity

logger = logging.getLogger(__name__)


class RuleCatalog:
    """
    Read-only ordered view over rules.

    Every query returns a new catalog in the same relative order, so
    report ordering stays deterministic whatever subset is run. Safe to
    share between concurrent scrubs.
    """

    __slots__ = ("_rules", "_index")

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: tuple[Rule, ...] = tuple(rules)
        self._index = {rule.rule_id: rule for rule in self._rules}

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._index

    def __repr__(self) -> str:
        return f"RuleCatalog({len(self)} rules)"

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def rule_ids(self) -> list[str]:
        return [r.rule_id for r in self._rules]

    @property
    def categories(self) -> list[RuleCategory]:
        return list(dict.fromkeys(r.category for r in self._rules))

    def get(self, rule_id: str) -> Rule | None:
        return self._index.get(rule_id)

    def by_category(self, category: RuleCategory | str) -> RuleCatalog:
        category = RuleCategory(category)
        return RuleCatalog(r for r in self._rules if r.category == category)

    def by_severity(self, severity: Severity | str) -> RuleCatalog:
        severity = Severity(severity)
        return RuleCatalog(r for r in self._rules if r.severity == severity)

    def auto_fixable(self, flag: bool = True) -> RuleCatalog:
        return RuleCatalog(r for r in self._rules if r.auto_fixable == flag)

    def select(
        self,
        categories: Iterable[RuleCategory | str] | None = None,
        min_severity: Severity | str | None = None,
    ) -> RuleCatalog:
        """Subset by category membership and minimum severity (info < warning < error)."""
        wanted = {RuleCategory(c) for c in categories} if categories is not None else None
        floor = Severity(min_severity).rank if min_severity is not None else None
        return RuleCatalog(
            r for r in self._rules
            if (wanted is None or r.category in wanted)
            and (floor is None or r.severity.rank >= floor)
        )


class CatalogBuilder:
    """Accumulates rules in registration order and checks them once at build()."""

    def __init__(self) -> None:
        self._rules: list[Rule] = []

    def add(self, rule: Rule) -> CatalogBuilder:
        self._rules.append(rule)
        return self

    def extend(self, rules: Iterable[Rule]) -> CatalogBuilder:
        for rule in rules:
            self.add(rule)
        return self

    def build(self) -> RuleCatalog:
        seen: set[str] = set()
        for rule in self._rules:
            if rule.rule_id in seen:
                raise DuplicateRuleError(f"Duplicate rule id {rule.rule_id}")
            seen.add(rule.rule_id)
            if rule.auto_fixable and not rule.has_fix:
                raise RuleDefinitionError(f"Rule {rule.rule_id} is auto-fixable but defines no fix")

        catalog = RuleCatalog(self._rules)
        logger.debug("Built catalog with %d rules", len(catalog))
        return catalog


@lru_cache
def default_catalog() -> RuleCatalog:
    """The built-in catalog, built once per process."""
    builder = CatalogBuilder()
    for rule_set in CATEGORY_RULE_SETS:
        builder.extend(rule_set)
    catalog = builder.build()
    logger.info("Loaded %d built-in rules", len(catalog))
    return catalog
