"""Registered chart-of-accounts codes.

Rows are append-only: a code is never deleted or moved to another category.
"""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger_classifier.classification.accounts import AccountCode
from ledger_classifier.models.base import BaseModel


class Account(BaseModel):
    __tablename__ = "accounts"

    code: Mapped[str] = mapped_column(String(8), unique=True, nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    is_standard: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    chart_version: Mapped[str | None] = mapped_column(String(20), nullable=True)

    def to_domain(self) -> AccountCode:
        return AccountCode(
            code=self.code,
            display_name=self.display_name,
            category=self.category,
            is_standard=self.is_standard,
            description=self.description,
        )

    @classmethod
    def from_domain(cls, account: AccountCode, chart_version: str | None = None) -> "Account":
        return cls(
            code=account.code,
            display_name=account.display_name,
            category=account.category.value,
            is_standard=account.is_standard,
            description=account.description,
            chart_version=chart_version,
        )

    def __repr__(self) -> str:
        return f"<Account(code={self.code}, category={self.category})>"
