"""Rule administration and sync endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from ledger_classifier.api.deps import get_rule_service
from ledger_classifier.classification.rules import ClassificationRule, RuleOrigin
from ledger_classifier.schemas.rule import (
    ConflictResponse,
    RuleCreateRequest,
    RuleListResult,
    RuleResponse,
    RuleUpdateRequest,
    SyncRequest,
    SyncResponse,
)
from ledger_classifier.services.rules import RuleSyncService

router = APIRouter(prefix="/rules", tags=["rules"])


@router.get("", response_model=RuleListResult, summary="List stored rules")
async def list_rules(
    include_inactive: Annotated[bool, Query(description="Include deactivated rules")] = True,
    service: RuleSyncService = Depends(get_rule_service),
) -> RuleListResult:
    rules = await service.list_rules(include_inactive=include_inactive)
    return RuleListResult(
        rules=[RuleResponse.model_validate(r) for r in rules],
        total=len(rules),
    )


@router.get("/active", response_model=RuleListResult, summary="Live rule set in evaluation order")
async def list_active_rules(
    service: RuleSyncService = Depends(get_rule_service),
) -> RuleListResult:
    rules = service.context.rules.evaluation_order
    return RuleListResult(
        rules=[RuleResponse.model_validate(r) for r in rules],
        total=len(rules),
    )


@router.post(
    "/sync",
    response_model=SyncResponse,
    summary="Reconcile standard and persisted rules",
    description="""
    Merge the code-defined standard rules with the stored rules and publish
    the result. Conflicts are reported, never auto-resolved: a rule whose
    standard and persisted versions target different accounts is excluded
    until `resolutions` names the origin to keep.
    """,
)
async def sync_rules(
    payload: SyncRequest | None = None,
    service: RuleSyncService = Depends(get_rule_service),
) -> SyncResponse:
    resolutions = payload.resolutions if payload is not None else None
    result = await service.sync(resolutions)
    return SyncResponse(
        active_rules=len(result.rule_set.evaluation_order),
        conflicts=[ConflictResponse.model_validate(c) for c in result.conflicts],
        persisted=len(result.to_persist),
        deactivated=len(result.to_deactivate),
        excluded=list(result.excluded),
    )


@router.get("/{name}", response_model=RuleResponse, summary="Get a stored rule")
async def get_rule(
    name: str,
    service: RuleSyncService = Depends(get_rule_service),
) -> RuleResponse:
    return RuleResponse.model_validate(await service.get_rule(name))


@router.post(
    "",
    response_model=RuleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a rule",
)
async def create_rule(
    payload: RuleCreateRequest,
    service: RuleSyncService = Depends(get_rule_service),
) -> RuleResponse:
    rule = ClassificationRule(
        name=payload.name,
        description=payload.description,
        match_strategy=payload.match_strategy,
        pattern=payload.pattern,
        target_account_code=payload.target_account_code,
        priority=payload.priority,
        origin=RuleOrigin.PERSISTED,
        expected_category=payload.expected_category,
    )
    return RuleResponse.model_validate(await service.create_rule(rule))


@router.patch("/{name}", response_model=RuleResponse, summary="Edit a rule")
async def update_rule(
    name: str,
    payload: RuleUpdateRequest,
    service: RuleSyncService = Depends(get_rule_service),
) -> RuleResponse:
    changes = payload.model_dump(exclude_unset=True)
    return RuleResponse.model_validate(await service.update_rule(name, **changes))


@router.post("/{name}/deactivate", response_model=RuleResponse, summary="Deactivate a rule")
async def deactivate_rule(
    name: str,
    service: RuleSyncService = Depends(get_rule_service),
) -> RuleResponse:
    return RuleResponse.model_validate(await service.deactivate_rule(name))
