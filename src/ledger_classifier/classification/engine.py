"""Classification engine.

Wraps the matcher with a rule-set snapshot, the registry the snapshot was
validated against and the unmatched-transaction policy. It holds no pattern
logic of its own.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field, replace

from ledger_classifier.classification.matcher import ClassificationResult, match
from ledger_classifier.classification.registry import AccountRegistry
from ledger_classifier.classification.rules import RuleSet

logger = logging.getLogger(__name__)


@dataclass
class ClassificationStats:
    """Counters for a batch run."""

    total: int = 0
    matched: int = 0
    fallback: int = 0
    by_account: Counter = field(default_factory=Counter)
    by_rule: Counter = field(default_factory=Counter)

    @property
    def unclassified(self) -> int:
        return self.total - self.matched - self.fallback

    @property
    def match_rate(self) -> float:
        return self.matched / self.total if self.total else 0.0

    def record(self, result: ClassificationResult) -> None:
        self.total += 1
        if result.matched_rule_name is not None:
            self.matched += 1
            self.by_rule[result.matched_rule_name] += 1
        elif result.matched_account_code is not None:
            self.fallback += 1
        if result.matched_account_code is not None:
            self.by_account[result.matched_account_code] += 1


@dataclass(frozen=True)
class BatchResult:
    results: tuple[tuple[Hashable, ClassificationResult], ...]
    stats: ClassificationStats


class ClassificationEngine:
    """Classify descriptions against one immutable rule-set snapshot.

    Args:
        rules: Rule set to evaluate.
        registry: Registry used to validate the rules and the fallback code.
        fallback_account_code: Code assigned to unmatched descriptions. ``None``
            (the default) leaves them unclassified and flagged for review.
        validate: Validate every active rule against ``registry`` up front.

    Raises:
        AccountNotFoundError: The fallback code, or a rule target, isn't
            registered.
        RangeConflictError: A rule target's category differs from the one it
            was written for.
    """

    def __init__(
        self,
        rules: RuleSet,
        registry: AccountRegistry,
        fallback_account_code: str | None = None,
        validate: bool = True,
    ):
        if validate:
            rules.validate(registry)
        if fallback_account_code is not None:
            fallback_account_code = registry.resolve(fallback_account_code).code
        self._rules = rules
        self._registry = registry
        self._fallback = fallback_account_code

    @property
    def rules(self) -> RuleSet:
        return self._rules

    @property
    def registry(self) -> AccountRegistry:
        return self._registry

    @property
    def fallback_account_code(self) -> str | None:
        return self._fallback

    def classify(self, description: str | None) -> ClassificationResult:
        result = match(description, self._rules)
        if result.matched_rule_name is None and self._fallback is not None:
            return replace(result, matched_account_code=self._fallback)
        return result

    def classify_batch(
        self, transactions: Iterable[tuple[Hashable, str | None]]
    ) -> BatchResult:
        """Classify ``(transaction_id, description)`` pairs in input order."""
        stats = ClassificationStats()
        results = []
        for transaction_id, description in transactions:
            result = self.classify(description)
            stats.record(result)
            results.append((transaction_id, result))

        logger.info(
            "Classified batch",
            extra={
                "total": stats.total,
                "matched": stats.matched,
                "fallback": stats.fallback,
                "unclassified": stats.unclassified,
            },
        )
        return BatchResult(results=tuple(results), stats=stats)
