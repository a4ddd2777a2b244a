"""Account suggestions for transactions flagged for review.

When no rule matched, the reviewer is offered accounts whose display names
share a word with the description. Accounts sharing more words rank first;
ties keep registry order. With no shared word a few general accounts are
offered instead.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ledger_classifier.classification.accounts import AccountCategory
from ledger_classifier.classification.bulk import MIN_KEYWORD_LENGTH, STOP_WORDS
from ledger_classifier.classification.registry import AccountRegistry
from ledger_classifier.classification.rules import (
    normalize_description,
    strip_reference_tokens,
)

MAX_SUGGESTIONS = 5

# (code, reason) offered when nothing in the description matches an account name.
DEFAULT_SUGGESTIONS: tuple[tuple[str, str], ...] = (
    ("8100", "General expense account"),
    ("6000", "General revenue account"),
    ("8710", "General operating costs"),
)

_WORD = re.compile(r"[A-Z]+")


@dataclass(frozen=True)
class AccountSuggestion:
    code: str
    display_name: str
    category: AccountCategory
    reason: str


def _name_words(display_name: str) -> list[str]:
    words = _WORD.findall(display_name.upper())
    return [w for w in words if len(w) >= MIN_KEYWORD_LENGTH and w not in STOP_WORDS]


def _defaults(registry: AccountRegistry, limit: int) -> list[AccountSuggestion]:
    suggestions = []
    for code, reason in DEFAULT_SUGGESTIONS:
        account = registry.get(code)
        if account is not None:
            suggestions.append(
                AccountSuggestion(account.code, account.display_name, account.category, reason)
            )
    return suggestions[:limit]


def suggest_accounts(
    description: str | None,
    registry: AccountRegistry,
    limit: int = MAX_SUGGESTIONS,
) -> list[AccountSuggestion]:
    """Accounts a reviewer may want for ``description``.

    Args:
        description: Raw transaction description.
        registry: Accounts to choose from.
        limit: Maximum number of suggestions.

    Returns:
        Keyword matches ranked by shared words, or the general defaults that
        exist in ``registry`` when nothing matches.
    """
    if limit <= 0:
        return []
    tokens = set(strip_reference_tokens(normalize_description(description)))
    if not tokens:
        return _defaults(registry, limit)

    scored: list[tuple[int, int, AccountSuggestion]] = []
    for position, account in enumerate(registry.all_codes()):
        shared = [w for w in dict.fromkeys(_name_words(account.display_name)) if w in tokens]
        if shared:
            suggestion = AccountSuggestion(
                account.code,
                account.display_name,
                account.category,
                f"Keyword match: {', '.join(shared)}",
            )
            scored.append((-len(shared), position, suggestion))
    if not scored:
        return _defaults(registry, limit)
    scored.sort(key=lambda item: item[:2])
    return [suggestion for _, _, suggestion in scored[:limit]]
