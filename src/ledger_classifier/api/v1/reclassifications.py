"""Bulk reclassification endpoints.

Proposals move ``proposed -> confirmed -> applied`` or ``proposed ->
rejected``; nothing is written to transactions before ``apply``.
"""

from fastapi import APIRouter, Depends, status

from ledger_classifier.api.deps import get_reclassification_service
from ledger_classifier.schemas.bulk import ProposalCreateRequest, ProposalResponse
from ledger_classifier.services.reclassification import BulkReclassificationService

router = APIRouter(prefix="/reclassifications", tags=["reclassification"])


@router.post(
    "",
    response_model=ProposalResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Propose reclassifying transactions similar to a corrected one",
)
async def propose(
    payload: ProposalCreateRequest,
    service: BulkReclassificationService = Depends(get_reclassification_service),
) -> ProposalResponse:
    proposal = await service.propose(
        payload.transaction_id,
        account_code=payload.account_code,
        max_results=payload.max_results,
    )
    return ProposalResponse.model_validate(proposal)


@router.get("/{batch_id}", response_model=ProposalResponse)
async def get_proposal(
    batch_id: str,
    service: BulkReclassificationService = Depends(get_reclassification_service),
) -> ProposalResponse:
    return ProposalResponse.model_validate(await service.get_proposal(batch_id))


@router.post("/{batch_id}/confirm", response_model=ProposalResponse)
async def confirm(
    batch_id: str,
    service: BulkReclassificationService = Depends(get_reclassification_service),
) -> ProposalResponse:
    return ProposalResponse.model_validate(await service.confirm(batch_id))


@router.post("/{batch_id}/reject", response_model=ProposalResponse)
async def reject(
    batch_id: str,
    service: BulkReclassificationService = Depends(get_reclassification_service),
) -> ProposalResponse:
    return ProposalResponse.model_validate(await service.reject(batch_id))


@router.post(
    "/{batch_id}/apply",
    response_model=ProposalResponse,
    summary="Apply a confirmed proposal (idempotent)",
)
async def apply(
    batch_id: str,
    service: BulkReclassificationService = Depends(get_reclassification_service),
) -> ProposalResponse:
    return ProposalResponse.model_validate(await service.apply(batch_id))
