"""Classification rules as data.

A rule binds a pattern and a match strategy to a canonical account code.
Every pattern lives here, in data, and is evaluated by one dispatch on the
strategy enum; there is no per-vendor procedural matching anywhere else.

Rules are immutable values. A ``RuleSet`` is an immutable, ordered snapshot:
edits produce a new snapshot, so classification calls already in flight keep
using the rules they started with.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from enum import Enum

from ledger_classifier.classification.accounts import AccountCategory, normalize_code
from ledger_classifier.classification.registry import AccountRegistry
from ledger_classifier.core.exceptions import (
    DuplicateNameError,
    InvalidPatternError,
    InvalidRuleError,
    RangeConflictError,
    RuleNotFoundError,
)


class MatchStrategy(str, Enum):
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    EQUALS = "equals"
    REGEX = "regex"


class RuleOrigin(str, Enum):
    """Where a rule was authored."""

    STANDARD = "standard"
    PERSISTED = "persisted"


def normalize_description(text: str | None) -> str:
    """Trim, collapse internal whitespace and upper-case."""
    return re.sub(r"\s+", " ", (text or "").strip().upper())


# Amounts, dates, reference and (masked) account numbers: any token with a digit.
_REFERENCE_TOKEN = re.compile(r"\d|^\*")


def strip_reference_tokens(normalized: str) -> list[str]:
    """Tokens of a normalized description without transaction-specific ones."""
    tokens = []
    for token in normalized.split(" "):
        if not token or _REFERENCE_TOKEN.search(token):
            continue
        token = token.strip("-:;,./#()*")
        if token:
            tokens.append(token)
    return tokens


@dataclass(frozen=True)
class ClassificationRule:
    """Pattern + strategy + priority bound to a target account code."""

    name: str
    match_strategy: MatchStrategy
    pattern: str
    target_account_code: str
    priority: int = 0
    active: bool = True
    description: str | None = None
    origin: RuleOrigin = RuleOrigin.PERSISTED
    expected_category: AccountCategory | None = None

    _needle: str = field(init=False, repr=False, compare=False)
    _regex: re.Pattern[str] | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        name = (self.name or "").strip()
        if not name:
            raise InvalidRuleError(details={"field": "name"})
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "match_strategy", MatchStrategy(self.match_strategy))
        object.__setattr__(self, "origin", RuleOrigin(self.origin))
        object.__setattr__(
            self, "target_account_code", normalize_code(self.target_account_code)
        )
        object.__setattr__(self, "priority", int(self.priority))
        if self.expected_category is not None:
            object.__setattr__(
                self, "expected_category", AccountCategory(self.expected_category)
            )

        pattern = self.pattern or ""
        if not pattern.strip():
            raise InvalidPatternError(details={"rule": name, "reason": "empty pattern"})

        if self.match_strategy is MatchStrategy.REGEX:
            try:
                regex = re.compile(pattern, re.IGNORECASE)
            except re.error as e:
                raise InvalidPatternError(
                    details={"rule": name, "pattern": pattern, "reason": str(e)}
                ) from e
            object.__setattr__(self, "_regex", regex)
            object.__setattr__(self, "_needle", "")
        else:
            object.__setattr__(self, "_regex", None)
            object.__setattr__(self, "_needle", normalize_description(pattern))

    def subject(self, description: str | None) -> str:
        """Text this rule is evaluated against.

        Regex rules search the trimmed description as written (case-insensitive)
        so literal whitespace in a pattern is honoured; the other strategies
        compare against the normalized form.
        """
        if self.match_strategy is MatchStrategy.REGEX:
            return (description or "").strip()
        return normalize_description(description)

    def find(self, subject: str) -> tuple[int, int] | None:
        """Span of the match in ``subject`` (see ``subject()``), or None."""
        strategy = self.match_strategy
        needle = self._needle
        if strategy is MatchStrategy.CONTAINS:
            idx = subject.find(needle)
            return (idx, idx + len(needle)) if idx >= 0 else None
        if strategy is MatchStrategy.STARTS_WITH:
            return (0, len(needle)) if subject.startswith(needle) else None
        if strategy is MatchStrategy.ENDS_WITH:
            if subject.endswith(needle):
                return len(subject) - len(needle), len(subject)
            return None
        if strategy is MatchStrategy.EQUALS:
            return (0, len(needle)) if subject == needle else None
        m = self._regex.search(subject)
        return m.span() if m else None

    def matches(self, description: str | None) -> bool:
        return self.find(self.subject(description)) is not None

    def evolve(self, **changes) -> ClassificationRule:
        """Copy of this rule with ``changes`` applied (re-validated)."""
        return replace(self, **changes)

    def __str__(self) -> str:
        return f"{self.name}: {self.match_strategy.value} {self.pattern!r} -> {self.target_account_code}"


def validate_rule(rule: ClassificationRule, registry: AccountRegistry) -> ClassificationRule:
    """Check a rule's target against the registry.

    Raises:
        AccountNotFoundError: The target code isn't registered.
        RangeConflictError: The target resolves to a different category than
            the one the rule was written for.
    """
    account = registry.resolve(rule.target_account_code)
    if rule.expected_category is not None and account.category != rule.expected_category:
        raise RangeConflictError(
            details={
                "rule": rule.name,
                "code": account.code,
                "expected_category": rule.expected_category.value,
                "registry_category": account.category.value,
            }
        )
    return rule


class RuleSet:
    """Immutable, ordered collection of rules.

    Insertion order is kept and used as the tie-break between rules of equal
    priority. The evaluation order is computed once per snapshot.
    """

    __slots__ = ("_rules", "_by_name", "_evaluation_order")

    def __init__(self, rules: Iterable[ClassificationRule] = ()):
        ordered = tuple(rules)
        by_name: dict[str, ClassificationRule] = {}
        for rule in ordered:
            current = by_name.get(rule.name)
            if current is not None and current.active and rule.active:
                raise DuplicateNameError(details={"rule": rule.name})
            if current is None or rule.active or not current.active:
                by_name[rule.name] = rule
        self._rules = ordered
        self._by_name = by_name
        # sorted() is stable: equal priorities keep insertion order.
        self._evaluation_order = tuple(
            sorted((r for r in ordered if r.active), key=lambda r: -r.priority)
        )

    def __iter__(self) -> Iterator[ClassificationRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RuleSet):
            return NotImplemented
        return self._rules == other._rules

    def __hash__(self) -> int:
        return hash(self._rules)

    def __repr__(self) -> str:
        return f"<RuleSet(rules={len(self._rules)}, active={len(self._evaluation_order)})>"

    @property
    def rules(self) -> tuple[ClassificationRule, ...]:
        return self._rules

    @property
    def evaluation_order(self) -> tuple[ClassificationRule, ...]:
        """Active rules, priority descending, insertion order within a priority."""
        return self._evaluation_order

    def active_rules(self) -> tuple[ClassificationRule, ...]:
        return tuple(r for r in self._rules if r.active)

    def names(self) -> tuple[str, ...]:
        return tuple(self._by_name)

    def get(self, name: str) -> ClassificationRule:
        """Rule by name (the active one when an inactive namesake exists).

        Raises:
            RuleNotFoundError: No rule has this name.
        """
        rule = self._by_name.get((name or "").strip())
        if rule is None:
            raise RuleNotFoundError(details={"rule": name})
        return rule

    def with_rule(self, rule: ClassificationRule) -> RuleSet:
        """New snapshot with ``rule`` added, or replacing its namesake in place."""
        if rule.name in self._by_name:
            return RuleSet(r if r.name != rule.name else rule for r in self._rules)
        return RuleSet((*self._rules, rule))

    def deactivated(self, name: str) -> RuleSet:
        """New snapshot with the named rule kept but inactive."""
        return self.with_rule(self.get(name).evolve(active=False))

    def validate(self, registry: AccountRegistry) -> RuleSet:
        """Validate every active rule against the registry; returns self."""
        for rule in self._evaluation_order:
            validate_rule(rule, registry)
        return self
