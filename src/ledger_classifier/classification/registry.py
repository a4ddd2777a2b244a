"""Canonical account-code registry.

The registry is the single source of truth for valid account codes. Each
category owns disjoint numeric ranges; a code may only be registered under
the category that owns its range, and a registered code never changes
category. This is checked before any rule referencing the code is accepted.

Reads go against an immutable snapshot. Writers are serialized by a lock and
publish a new snapshot, so concurrent classification never blocks.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from ledger_classifier.classification.accounts import (
    AccountCategory,
    AccountCode,
    CategoryRange,
    base_number,
    code_sort_key,
    normalize_code,
)
from ledger_classifier.core.exceptions import (
    AccountNotFoundError,
    DuplicateCodeError,
    RangeConflictError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    ranges: tuple[CategoryRange, ...]
    accounts: Mapping[str, AccountCode]
    ordered: tuple[AccountCode, ...]


def _snapshot(ranges: Iterable[CategoryRange], accounts: dict[str, AccountCode]) -> _Snapshot:
    ordered = tuple(sorted(accounts.values(), key=lambda a: code_sort_key(a.code)))
    return _Snapshot(
        ranges=tuple(sorted(ranges, key=lambda r: r.start)),
        accounts=MappingProxyType(dict(accounts)),
        ordered=ordered,
    )


class AccountRegistry:
    """Append-only table of canonical account codes grouped into categories."""

    def __init__(self, ranges: Iterable[CategoryRange] = ()):
        self._lock = threading.Lock()
        self._state = _snapshot((), {})
        for rng in ranges:
            self.claim_range(rng.category, rng.start, rng.end)

    @classmethod
    def from_accounts(
        cls, ranges: Iterable[CategoryRange], accounts: Iterable[AccountCode]
    ) -> AccountRegistry:
        """Build a registry from range definitions and previously stored codes.

        Raises:
            RangeConflictError: If any stored code contradicts the ranges.
        """
        registry = cls(ranges)
        for account in accounts:
            registry.register(account)
        return registry

    # Reads

    def resolve(self, code: str) -> AccountCode:
        """Return the account for ``code``.

        Raises:
            AccountNotFoundError: If the code isn't registered.
            InvalidAccountCodeError: If the code is malformed.
        """
        key = normalize_code(code)
        account = self._state.accounts.get(key)
        if account is None:
            raise AccountNotFoundError(details={"code": key})
        return account

    def get(self, code: str) -> AccountCode | None:
        return self._state.accounts.get(str(code).strip())

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.strip() in self._state.accounts

    def __len__(self) -> int:
        return len(self._state.accounts)

    def all_codes(self) -> tuple[AccountCode, ...]:
        """All accounts ordered by numeric code (sub-accounts after their parent)."""
        return self._state.ordered

    def ranges(self) -> tuple[CategoryRange, ...]:
        return self._state.ranges

    def range_owner(self, code: str) -> AccountCategory | None:
        """Category whose range contains the code's base number, if any."""
        number = base_number(normalize_code(code))
        for rng in self._state.ranges:
            if rng.contains(number):
                return rng.category
        return None

    def category_of(self, code: str) -> AccountCategory | None:
        """Category a code resolves to: its registered category, else its range owner."""
        account = self.get(code)
        if account is not None:
            return account.category
        return self.range_owner(code)

    def by_category(self, category: AccountCategory) -> tuple[AccountCode, ...]:
        return tuple(a for a in self._state.ordered if a.category == category)

    # Writes

    def register(self, account: AccountCode) -> AccountCode:
        """Add a code to the registry.

        Raises:
            DuplicateCodeError: The code already exists in the same category.
            RangeConflictError: The code exists under another category, or its
                range is owned by another category.
        """
        with self._lock:
            state = self._state
            existing = state.accounts.get(account.code)
            if existing is not None:
                if existing.category != account.category:
                    logger.warning(
                        "Rejected account registration: code already owned by another category",
                        extra={
                            "code": account.code,
                            "existing_category": existing.category.value,
                            "requested_category": account.category.value,
                        },
                    )
                    raise RangeConflictError(
                        details={
                            "code": account.code,
                            "existing_category": existing.category.value,
                            "requested_category": account.category.value,
                        }
                    )
                raise DuplicateCodeError(details={"code": account.code})

            number = account.base
            for rng in state.ranges:
                if rng.contains(number) and rng.category != account.category:
                    logger.warning(
                        "Rejected account registration: range owned by another category",
                        extra={
                            "code": account.code,
                            "range": f"{rng.start}-{rng.end}",
                            "range_category": rng.category.value,
                            "requested_category": account.category.value,
                        },
                    )
                    raise RangeConflictError(
                        details={
                            "code": account.code,
                            "range": f"{rng.start}-{rng.end}",
                            "range_category": rng.category.value,
                            "requested_category": account.category.value,
                        }
                    )

            accounts = dict(state.accounts)
            accounts[account.code] = account
            self._state = _snapshot(state.ranges, accounts)

        logger.debug("Registered account", extra={"code": account.code})
        return account

    def claim_range(self, category: AccountCategory, start: int, end: int) -> CategoryRange:
        """Reserve ``start..end`` for a category.

        Claiming a range that a category already owns is a no-op.

        Raises:
            RangeConflictError: The range overlaps another category's range or
                contains a code registered under another category.
        """
        requested = CategoryRange(AccountCategory(category), start, end)
        with self._lock:
            state = self._state
            for rng in state.ranges:
                if rng.overlaps(requested) and rng.category != requested.category:
                    raise RangeConflictError(
                        details={
                            "range": f"{start}-{end}",
                            "conflicts_with": f"{rng.start}-{rng.end}",
                            "range_category": rng.category.value,
                            "requested_category": requested.category.value,
                        }
                    )
            for account in state.ordered:
                if requested.contains(account.base) and account.category != requested.category:
                    raise RangeConflictError(
                        details={
                            "range": f"{start}-{end}",
                            "code": account.code,
                            "existing_category": account.category.value,
                            "requested_category": requested.category.value,
                        }
                    )
            if requested in state.ranges:
                return requested
            self._state = _snapshot((*state.ranges, requested), dict(state.accounts))
        return requested
