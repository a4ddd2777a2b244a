"""Stateless classification endpoints (nothing is stored)."""

from fastapi import APIRouter, Depends

from ledger_classifier.api.deps import get_classification_service
from ledger_classifier.classification.engine import ClassificationStats
from ledger_classifier.schemas.classification import (
    BatchResultItem,
    ClassificationResultResponse,
    ClassificationStatsResponse,
    ClassifyBatchRequest,
    ClassifyBatchResponse,
    ClassifyRequest,
)
from ledger_classifier.services.classification import ClassificationService

router = APIRouter(prefix="/classify", tags=["classification"])


def stats_response(stats: ClassificationStats) -> ClassificationStatsResponse:
    return ClassificationStatsResponse(
        total=stats.total,
        matched=stats.matched,
        fallback=stats.fallback,
        unclassified=stats.unclassified,
        match_rate=stats.match_rate,
        by_account=dict(stats.by_account),
        by_rule=dict(stats.by_rule),
    )


@router.post("", response_model=ClassificationResultResponse, summary="Classify one description")
async def classify(
    payload: ClassifyRequest,
    service: ClassificationService = Depends(get_classification_service),
) -> ClassificationResultResponse:
    return ClassificationResultResponse.model_validate(service.classify(payload.description))


@router.post("/batch", response_model=ClassifyBatchResponse, summary="Classify many descriptions")
async def classify_batch(
    payload: ClassifyBatchRequest,
    service: ClassificationService = Depends(get_classification_service),
) -> ClassifyBatchResponse:
    batch = service.classify_batch(
        (item.transaction_id, item.description) for item in payload.transactions
    )
    return ClassifyBatchResponse(
        results=[
            BatchResultItem(
                transaction_id=transaction_id,
                result=ClassificationResultResponse.model_validate(result),
            )
            for transaction_id, result in batch.results
        ],
        stats=stats_response(batch.stats),
    )
