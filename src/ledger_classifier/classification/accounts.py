"""Account codes, categories and the numeric ranges categories own."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from ledger_classifier.core.exceptions import InvalidAccountCodeError

_CODE_RE = re.compile(r"^(\d{4})(?:-(\d{3}))?$")


class AccountCategory(str, Enum):
    """Fixed category taxonomy. Expenses are split into subtypes."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    OPERATING_EXPENSE = "operating_expense"
    ADMINISTRATIVE_EXPENSE = "administrative_expense"
    FINANCE_COST = "finance_cost"

    @property
    def is_expense(self) -> bool:
        return self in _EXPENSE_CATEGORIES


_EXPENSE_CATEGORIES = frozenset(
    {
        AccountCategory.OPERATING_EXPENSE,
        AccountCategory.ADMINISTRATIVE_EXPENSE,
        AccountCategory.FINANCE_COST,
    }
)


def normalize_code(code: str | int | None) -> str:
    """Return a canonical code string ("8100", "8100-001").

    Raises:
        InvalidAccountCodeError: If the code is not NNNN or NNNN-NNN.
    """
    text = str(code).strip() if code is not None else ""
    if not _CODE_RE.match(text):
        raise InvalidAccountCodeError(details={"code": text})
    return text


def base_number(code: str) -> int:
    """Numeric four-digit base of a code; sub-accounts share their parent's base."""
    m = _CODE_RE.match(code)
    if not m:
        raise InvalidAccountCodeError(details={"code": code})
    return int(m.group(1))


def code_sort_key(code: str) -> tuple[int, int]:
    m = _CODE_RE.match(code)
    if not m:
        raise InvalidAccountCodeError(details={"code": code})
    return int(m.group(1)), int(m.group(2) or -1)


@dataclass(frozen=True)
class AccountCode:
    """A canonical ledger account."""

    code: str
    display_name: str
    category: AccountCategory
    is_standard: bool = False
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", normalize_code(self.code))
        object.__setattr__(self, "category", AccountCategory(self.category))

    @property
    def base(self) -> int:
        return base_number(self.code)

    @property
    def is_sub_account(self) -> bool:
        return "-" in self.code

    def __str__(self) -> str:
        return f"{self.code} - {self.display_name}"


@dataclass(frozen=True)
class CategoryRange:
    """Inclusive range of four-digit base numbers owned by one category."""

    category: AccountCategory
    start: int
    end: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", AccountCategory(self.category))
        if not (1000 <= self.start <= self.end <= 9999):
            raise InvalidAccountCodeError(
                details={"range": f"{self.start}-{self.end}"}
            )

    def contains(self, number: int) -> bool:
        return self.start <= number <= self.end

    def overlaps(self, other: CategoryRange) -> bool:
        return self.start <= other.end and other.start <= self.end
