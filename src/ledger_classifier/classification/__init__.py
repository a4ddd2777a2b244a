"""Transaction classification core: registry, rules, matcher, sync and bulk helpers."""

from ledger_classifier.classification.accounts import (
    AccountCategory,
    AccountCode,
    CategoryRange,
)
from ledger_classifier.classification.bulk import (
    BulkProposal,
    ProposalState,
    extract_key_pattern,
    find_similar,
    similar_indexes,
)
from ledger_classifier.classification.chart import (
    CHART_VERSION,
    STANDARD_ACCOUNTS,
    STANDARD_RANGES,
    build_standard_registry,
)
from ledger_classifier.classification.context import ClassificationContext
from ledger_classifier.classification.engine import (
    ClassificationEngine,
    ClassificationStats,
)
from ledger_classifier.classification.matcher import ClassificationResult, match
from ledger_classifier.classification.registry import AccountRegistry
from ledger_classifier.classification.rules import (
    ClassificationRule,
    MatchStrategy,
    RuleOrigin,
    RuleSet,
    normalize_description,
    validate_rule,
)
from ledger_classifier.classification.standard_rules import STANDARD_RULES
from ledger_classifier.classification.suggestions import AccountSuggestion, suggest_accounts
from ledger_classifier.classification.sync import (
    Conflict,
    ConflictKind,
    ConflictReport,
    SyncResult,
    reconcile,
)

__all__ = [
    "AccountCategory",
    "AccountCode",
    "AccountRegistry",
    "AccountSuggestion",
    "BulkProposal",
    "CHART_VERSION",
    "CategoryRange",
    "ClassificationContext",
    "ClassificationEngine",
    "ClassificationResult",
    "ClassificationRule",
    "ClassificationStats",
    "Conflict",
    "ConflictKind",
    "ConflictReport",
    "MatchStrategy",
    "ProposalState",
    "RuleOrigin",
    "RuleSet",
    "STANDARD_ACCOUNTS",
    "STANDARD_RANGES",
    "STANDARD_RULES",
    "SyncResult",
    "build_standard_registry",
    "extract_key_pattern",
    "find_similar",
    "match",
    "normalize_description",
    "reconcile",
    "similar_indexes",
    "suggest_accounts",
    "validate_rule",
]
