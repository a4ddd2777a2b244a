"""Rule matcher: ``(description, rules) -> ClassificationResult``.

Pure function. Active rules are tried by priority (highest first) and, within
a priority, in the order they were defined; the first match wins. This
ordering is what keeps a specific rule such as "INSURANCE CHAUKE" (a salary
payee) ahead of a generic "INSURANCE" keyword.

An unmatched description is a normal outcome (``is_fallback=True``), not an
error.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ledger_classifier.classification.rules import (
    ClassificationRule,
    MatchStrategy,
    RuleSet,
    normalize_description,
    strip_reference_tokens,
)


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying one description. Immutable."""

    transaction_description: str
    matched_account_code: str | None = None
    matched_rule_name: str | None = None
    is_fallback: bool = True
    detail: str | None = None

    @property
    def needs_review(self) -> bool:
        return self.is_fallback


def _evaluation_order(
    rules: RuleSet | Iterable[ClassificationRule],
) -> tuple[ClassificationRule, ...]:
    if isinstance(rules, RuleSet):
        return rules.evaluation_order
    return RuleSet(rules).evaluation_order


def extract_detail(subject: str, span: tuple[int, int]) -> str | None:
    """Free-text detail left over once the matched part and reference tokens are removed.

    For "IMMEDIATE PAYMENT 224812909 JEFFREY S MAPHOSA" matched on
    "IMMEDIATE PAYMENT" this is "JEFFREY S MAPHOSA".
    """
    start, end = span
    remainder = f"{subject[:start]} {subject[end:]}"
    tokens = strip_reference_tokens(normalize_description(remainder))
    return " ".join(tokens) or None


def match(
    description: str | None, rules: RuleSet | Iterable[ClassificationRule]
) -> ClassificationResult:
    """Classify ``description`` against ``rules``.

    Args:
        description: Raw transaction description.
        rules: A RuleSet snapshot (preferred; its ordering is precomputed) or
            any iterable of rules in definition order.

    Returns:
        The result for the first matching rule, or an unmatched fallback
        result with ``matched_account_code=None``.
    """
    text = description or ""
    normalized = normalize_description(text)
    trimmed = text.strip()
    if normalized:
        for rule in _evaluation_order(rules):
            subject = trimmed if rule.match_strategy is MatchStrategy.REGEX else normalized
            span = rule.find(subject)
            if span is not None:
                return ClassificationResult(
                    transaction_description=text,
                    matched_account_code=rule.target_account_code,
                    matched_rule_name=rule.name,
                    is_fallback=False,
                    detail=extract_detail(subject, span),
                )
    return ClassificationResult(transaction_description=text)
