"""Bulk reclassification helper.

After a human corrects one transaction, similar unclassified or
misclassified transactions are proposed for the same account. Nothing is
applied until the proposal is explicitly confirmed.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import Enum

from ledger_classifier.classification.accounts import normalize_code
from ledger_classifier.classification.rules import (
    normalize_description,
    strip_reference_tokens,
)
from ledger_classifier.core.exceptions import InvalidTransitionError

STOP_WORDS = frozenset(
    {"THE", "A", "AN", "AND", "OR", "BUT", "IN", "ON", "AT", "TO", "FOR", "OF", "WITH", "BY"}
)

MIN_KEYWORD_LENGTH = 3
MAX_KEYWORDS = 5
MAX_SIMILAR_TRANSACTIONS = 10


def extract_key_pattern(
    description: str | None,
    min_length: int = MIN_KEYWORD_LENGTH,
    max_keywords: int = MAX_KEYWORDS,
) -> list[str]:
    """Keywords identifying the counterparty of a description.

    Amounts, dates, reference numbers and masked account numbers are dropped
    along with stop words and short tokens.

    >>> extract_key_pattern("IB PAYMENT TO ACME SUPPLIES 12345 REF 998")
    ['PAYMENT', 'ACME', 'SUPPLIES', 'REF']
    """
    keywords: list[str] = []
    for token in strip_reference_tokens(normalize_description(description)):
        if token in STOP_WORDS or len(token) < min_length:
            continue
        keywords.append(token)
        if len(keywords) >= max_keywords:
            break
    return keywords


def similar_indexes(
    corrected_description: str | None,
    candidate_descriptions: Sequence[str | None],
    max_results: int = MAX_SIMILAR_TRANSACTIONS,
    min_length: int = MIN_KEYWORD_LENGTH,
    max_keywords: int = MAX_KEYWORDS,
) -> list[int]:
    """Indexes of candidates containing every keyword of the corrected description.

    Input order is kept and at most ``max_results`` indexes are returned. A
    description without keywords proposes nothing.
    """
    key = extract_key_pattern(corrected_description, min_length, max_keywords)
    if not key or max_results <= 0:
        return []
    found: list[int] = []
    for index, candidate in enumerate(candidate_descriptions):
        normalized = normalize_description(candidate)
        if all(keyword in normalized for keyword in key):
            found.append(index)
            if len(found) >= max_results:
                break
    return found


def find_similar(
    corrected_description: str | None,
    candidate_descriptions: Sequence[str | None],
    max_results: int = MAX_SIMILAR_TRANSACTIONS,
    min_length: int = MIN_KEYWORD_LENGTH,
    max_keywords: int = MAX_KEYWORDS,
) -> list[str | None]:
    """Candidate descriptions similar to the corrected one, in input order."""
    indexes = similar_indexes(
        corrected_description, candidate_descriptions, max_results, min_length, max_keywords
    )
    return [candidate_descriptions[i] for i in indexes]


class ProposalState(str, Enum):
    PROPOSED = "proposed"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    APPLIED = "applied"


_TRANSITIONS: dict[ProposalState, frozenset[ProposalState]] = {
    ProposalState.PROPOSED: frozenset({ProposalState.CONFIRMED, ProposalState.REJECTED}),
    ProposalState.CONFIRMED: frozenset({ProposalState.APPLIED}),
    ProposalState.REJECTED: frozenset(),
    ProposalState.APPLIED: frozenset(),
}


@dataclass(frozen=True)
class BulkProposal:
    """A proposed reclassification of similar transactions to one account.

    Transitions return a new proposal: ``proposed -> confirmed -> applied``
    or ``proposed -> rejected``.
    """

    account_code: str
    corrected_description: str
    key_pattern: tuple[str, ...]
    candidate_ids: tuple[str, ...]
    batch_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: ProposalState = ProposalState.PROPOSED
    applied_count: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "account_code", normalize_code(self.account_code))
        object.__setattr__(self, "state", ProposalState(self.state))
        object.__setattr__(self, "key_pattern", tuple(self.key_pattern))
        object.__setattr__(self, "candidate_ids", tuple(self.candidate_ids))

    def _move(self, target: ProposalState, **changes) -> BulkProposal:
        if target not in _TRANSITIONS[self.state]:
            raise InvalidTransitionError(
                details={
                    "batch_id": self.batch_id,
                    "from": self.state.value,
                    "to": target.value,
                }
            )
        return replace(self, state=target, **changes)

    def confirm(self) -> BulkProposal:
        return self._move(ProposalState.CONFIRMED)

    def reject(self) -> BulkProposal:
        return self._move(ProposalState.REJECTED)

    def mark_applied(self, count: int) -> BulkProposal:
        return self._move(ProposalState.APPLIED, applied_count=count)

    @property
    def is_final(self) -> bool:
        return not _TRANSITIONS[self.state]
