"""Holder for the live registry and rule-set snapshot.

There is no process-wide "current rules" global: the application owns one
context and hands it to request handlers through a dependency, and tests
build their own. Publishing a new rule set swaps one reference; classify
calls already running keep the engine they started with.
"""

from __future__ import annotations

import asyncio
import logging
import threading

from ledger_classifier.classification.chart import build_standard_registry
from ledger_classifier.classification.engine import ClassificationEngine
from ledger_classifier.classification.matcher import ClassificationResult
from ledger_classifier.classification.registry import AccountRegistry
from ledger_classifier.classification.rules import RuleOrigin, RuleSet
from ledger_classifier.classification.standard_rules import STANDARD_RULES
from ledger_classifier.classification.sync import reconcile

logger = logging.getLogger(__name__)


class ClassificationContext:
    def __init__(
        self,
        registry: AccountRegistry,
        rules: RuleSet | None = None,
        fallback_account_code: str | None = None,
    ):
        self._swap_lock = threading.Lock()
        # Serializes administrative operations (register, sync, rule edits).
        self.admin_lock = asyncio.Lock()
        # Conflict resolutions from the last sync, reapplied when rules are edited.
        self.resolutions: dict[str, RuleOrigin] = {}
        self._registry = registry
        self._fallback = fallback_account_code
        self._engine = ClassificationEngine(rules or RuleSet(), registry, fallback_account_code)

    @classmethod
    def from_standard(cls, fallback_account_code: str | None = None) -> ClassificationContext:
        """Context over the standard chart and standard rules, before any store sync."""
        registry = build_standard_registry()
        result = reconcile(STANDARD_RULES, (), registry)
        return cls(registry, result.rule_set, fallback_account_code)

    @property
    def fallback_account_code(self) -> str | None:
        return self._fallback

    @property
    def registry(self) -> AccountRegistry:
        return self._registry

    @property
    def rules(self) -> RuleSet:
        return self._engine.rules

    @property
    def engine(self) -> ClassificationEngine:
        return self._engine

    def classify(self, description: str | None) -> ClassificationResult:
        return self._engine.classify(description)

    def publish(self, rules: RuleSet, registry: AccountRegistry | None = None) -> RuleSet:
        """Validate and atomically swap in a new rule-set snapshot."""
        registry = registry or self._registry
        engine = ClassificationEngine(rules, registry, self._fallback)
        with self._swap_lock:
            self._registry = registry
            self._engine = engine
        logger.info(
            "Published rule set",
            extra={"rules": len(rules), "active_rules": len(rules.evaluation_order)},
        )
        return rules
