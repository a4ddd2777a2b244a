"""Bank transactions awaiting or carrying a classification."""
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ledger_classifier.models.base import BaseModel


class BankTransaction(BaseModel):
    __tablename__ = "bank_transactions"

    external_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    account_code: Mapped[str | None] = mapped_column(String(8), nullable=True, index=True)
    matched_rule_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_fallback: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    detail: Mapped[str | None] = mapped_column(Text, nullable=True)
    classified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    bulk_batch_id: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)

    @property
    def needs_review(self) -> bool:
        return self.is_fallback

    def __repr__(self) -> str:
        return (
            f"<BankTransaction(external_id={self.external_id}, "
            f"account_code={self.account_code}, is_fallback={self.is_fallback})>"
        )
