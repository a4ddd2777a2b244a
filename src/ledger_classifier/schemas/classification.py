"""Classification request/response schemas."""

from pydantic import BaseModel, ConfigDict, Field


class ClassifyRequest(BaseModel):
    description: str = Field(max_length=1000)


class ClassificationResultResponse(BaseModel):
    transaction_description: str
    matched_account_code: str | None = None
    matched_rule_name: str | None = None
    is_fallback: bool
    needs_review: bool
    detail: str | None = None

    model_config = ConfigDict(from_attributes=True)


class BatchItem(BaseModel):
    transaction_id: str = Field(min_length=1, max_length=100)
    description: str = Field(max_length=1000)


class ClassifyBatchRequest(BaseModel):
    transactions: list[BatchItem] = Field(max_length=10000)


class BatchResultItem(BaseModel):
    transaction_id: str
    result: ClassificationResultResponse


class ClassificationStatsResponse(BaseModel):
    total: int
    matched: int
    fallback: int
    unclassified: int
    match_rate: float
    by_account: dict[str, int]
    by_rule: dict[str, int]


class ClassifyBatchResponse(BaseModel):
    results: list[BatchResultItem]
    stats: ClassificationStatsResponse
