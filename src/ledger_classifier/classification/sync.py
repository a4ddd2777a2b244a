"""Reconciliation of code-defined standard rules with persisted rules.

This is the single merge point between the two rule authorities. Policy:

- Rules authored or edited by a human (``origin=persisted``) are
  authoritative. Standard rules are additive defaults, used only where no
  persisted rule of the same name exists.
- Same name, same target: the persisted rule wins silently.
- Same name, different target: ``target_mismatch``. Both are excluded unless
  the caller resolves the name to one origin.
- Two rules of one origin with the same name: ``duplicate_name``; all of
  them are excluded.
- A target missing from the registry (``unknown_account``) or resolving to a
  category other than the one the rule was written for
  (``range_reassigned``) excludes the rule.

Conflicts are returned as data. Nothing here raises for a conflict or picks a
winner on its own.

The store also holds mirrors of the standard rules (persisted rows with
``origin=standard``). They are not authoritative: the code definition
replaces them, and ``SyncResult`` says which mirrors to write or deactivate.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

from ledger_classifier.classification.registry import AccountRegistry
from ledger_classifier.classification.rules import (
    ClassificationRule,
    RuleOrigin,
    RuleSet,
)
from ledger_classifier.core.exceptions import ClassificationError


class ConflictKind(str, Enum):
    TARGET_MISMATCH = "target_mismatch"
    DUPLICATE_NAME = "duplicate_name"
    UNKNOWN_ACCOUNT = "unknown_account"
    RANGE_REASSIGNED = "range_reassigned"


@dataclass(frozen=True)
class Conflict:
    rule_name: str
    kind: ConflictKind
    message: str
    origin: RuleOrigin | None = None
    standard_target: str | None = None
    persisted_target: str | None = None
    expected_category: str | None = None
    registry_category: str | None = None
    resolution: RuleOrigin | None = None

    @property
    def resolved(self) -> bool:
        return self.resolution is not None


@dataclass(frozen=True)
class ConflictReport:
    """Conflicts found by one reconciliation. Empty means clean."""

    conflicts: tuple[Conflict, ...] = ()

    def __iter__(self):
        return iter(self.conflicts)

    def __len__(self) -> int:
        return len(self.conflicts)

    @property
    def is_clean(self) -> bool:
        return not self.conflicts

    def for_rule(self, name: str) -> tuple[Conflict, ...]:
        return tuple(c for c in self.conflicts if c.rule_name == name)

    def unresolved(self) -> tuple[Conflict, ...]:
        return tuple(c for c in self.conflicts if not c.resolved)


@dataclass(frozen=True)
class SyncResult:
    rule_set: RuleSet
    conflicts: ConflictReport
    # Standard rules whose store mirror is missing or stale.
    to_persist: tuple[ClassificationRule, ...] = ()
    # Names of active mirrors whose standard definition no longer exists.
    to_deactivate: tuple[str, ...] = ()
    excluded: tuple[str, ...] = ()


def _group_by_name(
    rules: Iterable[ClassificationRule],
) -> dict[str, list[ClassificationRule]]:
    groups: dict[str, list[ClassificationRule]] = {}
    for rule in rules:
        groups.setdefault(rule.name, []).append(rule)
    return groups


def _registry_conflict(
    rule: ClassificationRule, registry: AccountRegistry
) -> Conflict | None:
    """Conflict for a rule whose target the registry rejects, else None."""
    if not rule.active:
        return None
    try:
        account = registry.resolve(rule.target_account_code)
    except ClassificationError:
        return Conflict(
            rule_name=rule.name,
            kind=ConflictKind.UNKNOWN_ACCOUNT,
            message=f"Target account {rule.target_account_code} is not registered",
            origin=rule.origin,
            standard_target=rule.target_account_code if rule.origin is RuleOrigin.STANDARD else None,
            persisted_target=rule.target_account_code if rule.origin is RuleOrigin.PERSISTED else None,
        )
    if rule.expected_category is not None and account.category != rule.expected_category:
        return Conflict(
            rule_name=rule.name,
            kind=ConflictKind.RANGE_REASSIGNED,
            message=(
                f"Target account {account.code} is {account.category.value}, "
                f"rule was written for {rule.expected_category.value}"
            ),
            origin=rule.origin,
            standard_target=rule.target_account_code if rule.origin is RuleOrigin.STANDARD else None,
            persisted_target=rule.target_account_code if rule.origin is RuleOrigin.PERSISTED else None,
            expected_category=rule.expected_category.value,
            registry_category=account.category.value,
        )
    return None


def _single(
    name: str, group: list[ClassificationRule], origin: RuleOrigin, conflicts: list[Conflict]
) -> ClassificationRule | None:
    """The one rule of ``origin`` named ``name``, or None on a duplicate-name conflict.

    An inactive namesake next to a single active rule is not a duplicate.
    """
    active = [r for r in group if r.active]
    if len(active) > 1:
        conflicts.append(
            Conflict(
                rule_name=name,
                kind=ConflictKind.DUPLICATE_NAME,
                message=f"{len(active)} {origin.value} rules are named {name!r}",
                origin=origin,
            )
        )
        return None
    return active[0] if active else group[-1]


def reconcile(
    standard_rules: Iterable[ClassificationRule],
    persisted_rules: Iterable[ClassificationRule],
    registry: AccountRegistry,
    resolutions: Mapping[str, RuleOrigin | str] | None = None,
) -> SyncResult:
    """Merge standard and persisted rules into one validated RuleSet.

    Args:
        standard_rules: Code-defined rules in definition order.
        persisted_rules: Rules loaded from the store in stored sequence
            order. Rows with ``origin=standard`` are treated as mirrors.
        registry: Registry every included rule is validated against.
        resolutions: Rule name -> origin to keep for a ``target_mismatch``.

    Returns:
        The merged RuleSet, the conflict report and the mirror maintenance
        the store needs. Pure: nothing is written here.
    """
    resolutions = {name: RuleOrigin(origin) for name, origin in (resolutions or {}).items()}
    conflicts: list[Conflict] = []
    excluded: list[str] = []

    standard_groups = _group_by_name(standard_rules)
    stored = list(persisted_rules)
    authored_groups = _group_by_name(r for r in stored if r.origin is RuleOrigin.PERSISTED)
    mirrors = {r.name: r for r in stored if r.origin is RuleOrigin.STANDARD}

    standard: dict[str, ClassificationRule] = {}
    for name, group in standard_groups.items():
        rule = _single(name, group, RuleOrigin.STANDARD, conflicts)
        if rule is not None:
            standard[name] = rule
        else:
            excluded.append(name)

    authored: dict[str, ClassificationRule] = {}
    for name, group in authored_groups.items():
        rule = _single(name, group, RuleOrigin.PERSISTED, conflicts)
        if rule is not None:
            authored[name] = rule
        else:
            excluded.append(name)

    merged: list[ClassificationRule] = []
    to_persist: list[ClassificationRule] = []

    def include(rule: ClassificationRule) -> None:
        problem = _registry_conflict(rule, registry)
        if problem is not None:
            conflicts.append(problem)
            excluded.append(rule.name)
        else:
            merged.append(rule)

    for name, std in standard.items():
        override = authored.get(name)
        if override is None:
            problem = _registry_conflict(std, registry)
            if problem is not None:
                conflicts.append(problem)
                excluded.append(name)
                continue
            merged.append(std)
            if mirrors.get(name) != std:
                to_persist.append(std)
            continue

        if override.target_account_code == std.target_account_code or not override.active:
            include(override)
            continue

        resolution = resolutions.get(name)
        conflicts.append(
            Conflict(
                rule_name=name,
                kind=ConflictKind.TARGET_MISMATCH,
                message=(
                    f"Standard rule targets {std.target_account_code}, "
                    f"persisted rule targets {override.target_account_code}"
                ),
                standard_target=std.target_account_code,
                persisted_target=override.target_account_code,
                resolution=resolution,
            )
        )
        if resolution is RuleOrigin.PERSISTED:
            include(override)
        elif resolution is RuleOrigin.STANDARD:
            problem = _registry_conflict(std, registry)
            if problem is not None:
                conflicts.append(problem)
                excluded.append(name)
            else:
                merged.append(std)
                to_persist.append(std)
        else:
            excluded.append(name)

    # Persisted-only rules, plus overrides whose standard namesakes were dropped as duplicates.
    for name, rule in authored.items():
        if name not in standard:
            include(rule)

    to_deactivate = tuple(
        name
        for name, mirror in mirrors.items()
        if mirror.active and name not in standard_groups and name not in authored
    )

    return SyncResult(
        rule_set=RuleSet(merged),
        conflicts=ConflictReport(tuple(conflicts)),
        to_persist=tuple(to_persist),
        to_deactivate=to_deactivate,
        excluded=tuple(dict.fromkeys(excluded)),
    )
