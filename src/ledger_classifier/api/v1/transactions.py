"""Stored bank transaction endpoints: import, classification, correction."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from ledger_classifier.api.deps import (
    get_classification_service,
    get_reclassification_service,
)
from ledger_classifier.api.v1.classification import stats_response
from ledger_classifier.classification.suggestions import MAX_SUGGESTIONS
from ledger_classifier.schemas.classification import ClassificationStatsResponse
from ledger_classifier.schemas.rule import RuleResponse
from ledger_classifier.schemas.transaction import (
    AccountSuggestionResponse,
    ClassifyPendingRequest,
    CorrectionRequest,
    RuleFromCorrectionRequest,
    SuggestionListResult,
    TransactionImportRequest,
    TransactionImportResponse,
    TransactionListResult,
    TransactionResponse,
    TransactionStatsResponse,
)
from ledger_classifier.services.classification import ClassificationService
from ledger_classifier.services.reclassification import BulkReclassificationService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post(
    "/import",
    response_model=TransactionImportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Import extracted transaction descriptions",
    description="""
    Store `(transaction_id, description)` pairs produced by upstream text
    extraction. Ids already stored are skipped. Imported rows are classified
    immediately unless `classify` is false.
    """,
)
async def import_transactions(
    payload: TransactionImportRequest,
    service: ClassificationService = Depends(get_classification_service),
) -> TransactionImportResponse:
    imported, skipped, stats = await service.import_transactions(
        ((item.transaction_id, item.description) for item in payload.transactions),
        classify=payload.classify,
    )
    return TransactionImportResponse(
        imported=imported,
        skipped=skipped,
        stats=stats_response(stats) if stats is not None else None,
    )


@router.post(
    "/classify",
    response_model=ClassificationStatsResponse,
    summary="Classify pending transactions",
)
async def classify_pending(
    payload: ClassifyPendingRequest | None = None,
    service: ClassificationService = Depends(get_classification_service),
) -> ClassificationStatsResponse:
    include_classified = payload.include_classified if payload is not None else False
    stats = await service.classify_pending(include_classified=include_classified)
    return stats_response(stats)


@router.get("", response_model=TransactionListResult, summary="List stored transactions")
async def list_transactions(
    needs_review: Annotated[
        bool | None, Query(description="Only rows flagged (true) or not flagged (false) for review")
    ] = None,
    account_code: Annotated[str | None, Query(description="Filter by account code")] = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
    service: ClassificationService = Depends(get_classification_service),
) -> TransactionListResult:
    rows = await service.list_transactions(needs_review, account_code, skip, limit)
    return TransactionListResult(
        transactions=[TransactionResponse.model_validate(r) for r in rows],
        skip=skip,
        limit=limit,
    )


@router.get("/stats", response_model=TransactionStatsResponse, summary="Classification coverage")
async def transaction_stats(
    service: ClassificationService = Depends(get_classification_service),
) -> TransactionStatsResponse:
    return TransactionStatsResponse(**await service.get_stats())


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: str,
    service: ClassificationService = Depends(get_classification_service),
) -> TransactionResponse:
    return TransactionResponse.model_validate(await service.get_transaction(transaction_id))


@router.get(
    "/{transaction_id}/suggestions",
    response_model=SuggestionListResult,
    summary="Suggest accounts for a transaction",
    description="""
    Accounts whose names share a word with the transaction description,
    best match first. General accounts are offered when nothing matches.
    """,
)
async def suggest_accounts(
    transaction_id: str,
    limit: Annotated[int, Query(ge=1, le=20)] = MAX_SUGGESTIONS,
    service: ClassificationService = Depends(get_classification_service),
) -> SuggestionListResult:
    row, suggestions = await service.suggest_accounts(transaction_id, limit)
    return SuggestionListResult(
        transaction_id=row.external_id,
        needs_review=row.needs_review,
        suggestions=[AccountSuggestionResponse.model_validate(s) for s in suggestions],
    )


@router.put(
    "/{transaction_id}/classification",
    response_model=TransactionResponse,
    summary="Correct a transaction's account by hand",
)
async def correct_transaction(
    transaction_id: str,
    payload: CorrectionRequest,
    service: BulkReclassificationService = Depends(get_reclassification_service),
) -> TransactionResponse:
    row = await service.correct_transaction(transaction_id, payload.account_code)
    return TransactionResponse.model_validate(row)


@router.post(
    "/{transaction_id}/rule",
    response_model=RuleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a rule from a corrected transaction",
)
async def create_rule_from_correction(
    transaction_id: str,
    payload: RuleFromCorrectionRequest | None = None,
    service: BulkReclassificationService = Depends(get_reclassification_service),
) -> RuleResponse:
    payload = payload or RuleFromCorrectionRequest()
    rule = await service.create_rule_from_correction(
        transaction_id, name=payload.name, priority=payload.priority
    )
    return RuleResponse.model_validate(rule)
