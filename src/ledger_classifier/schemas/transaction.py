"""Bank transaction import, listing and correction schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ledger_classifier.classification.accounts import AccountCategory
from ledger_classifier.schemas.classification import ClassificationStatsResponse


class TransactionImportItem(BaseModel):
    transaction_id: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1)


class TransactionImportRequest(BaseModel):
    """Descriptions extracted upstream (PDF/CSV parsing happens elsewhere)."""

    transactions: list[TransactionImportItem] = Field(max_length=10000)
    classify: bool = Field(True, description="Classify imported rows immediately")


class TransactionImportResponse(BaseModel):
    imported: int
    skipped: int
    stats: ClassificationStatsResponse | None = None


class TransactionResponse(BaseModel):
    external_id: str
    description: str
    account_code: str | None = None
    matched_rule_name: str | None = None
    is_fallback: bool
    needs_review: bool
    detail: str | None = None
    classified_at: datetime | None = None
    bulk_batch_id: str | None = None

    model_config = ConfigDict(from_attributes=True)


class TransactionListResult(BaseModel):
    transactions: list[TransactionResponse]
    skip: int
    limit: int


class ClassifyPendingRequest(BaseModel):
    include_classified: bool = Field(
        False, description="Also re-run rule-matched rows (manual assignments are kept)"
    )


class CorrectionRequest(BaseModel):
    account_code: str


class RuleFromCorrectionRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    priority: int = 9


class TransactionStatsResponse(BaseModel):
    total: int
    classified: int
    needs_review: int
    by_account: dict[str, int]


class AccountSuggestionResponse(BaseModel):
    code: str
    display_name: str
    category: AccountCategory
    reason: str

    model_config = ConfigDict(from_attributes=True)


class SuggestionListResult(BaseModel):
    transaction_id: str
    needs_review: bool
    suggestions: list[AccountSuggestionResponse]
