"""Bulk reclassification schemas."""

from pydantic import BaseModel, ConfigDict, Field

from ledger_classifier.classification.bulk import ProposalState


class ProposalCreateRequest(BaseModel):
    transaction_id: str = Field(description="Corrected transaction to base the proposal on")
    account_code: str | None = Field(
        None, description="Defaults to the corrected transaction's account"
    )
    max_results: int | None = Field(None, ge=1, le=1000)


class ProposalResponse(BaseModel):
    batch_id: str
    account_code: str
    corrected_description: str
    key_pattern: list[str]
    candidate_ids: list[str]
    state: ProposalState
    applied_count: int

    model_config = ConfigDict(from_attributes=True)
