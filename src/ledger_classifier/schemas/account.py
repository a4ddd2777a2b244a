"""Account registry request/response schemas."""

from pydantic import BaseModel, ConfigDict, Field

from ledger_classifier.classification.accounts import AccountCategory


class AccountCreateRequest(BaseModel):
    """Register a new account code."""

    code: str = Field(description="Four digits with optional sub-account suffix, e.g. 8100-002")
    display_name: str = Field(min_length=1, max_length=255)
    category: AccountCategory
    description: str | None = Field(None, max_length=500)


class AccountResponse(BaseModel):
    code: str
    display_name: str
    category: AccountCategory
    is_standard: bool
    description: str | None = None

    model_config = ConfigDict(from_attributes=True)


class CategoryRangeResponse(BaseModel):
    category: AccountCategory
    start: int
    end: int

    model_config = ConfigDict(from_attributes=True)


class AccountListResult(BaseModel):
    accounts: list[AccountResponse]
    ranges: list[CategoryRangeResponse]
