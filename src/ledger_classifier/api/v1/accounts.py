"""Account registry endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from ledger_classifier.api.deps import get_registry_service
from ledger_classifier.classification.accounts import AccountCategory
from ledger_classifier.schemas.account import (
    AccountCreateRequest,
    AccountListResult,
    AccountResponse,
    CategoryRangeResponse,
)
from ledger_classifier.services.registry import RegistryService

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("", response_model=AccountListResult, summary="List registered account codes")
async def list_accounts(
    category: Annotated[AccountCategory | None, Query(description="Filter by category")] = None,
    service: RegistryService = Depends(get_registry_service),
) -> AccountListResult:
    accounts = service.list_accounts(category)
    return AccountListResult(
        accounts=[AccountResponse.model_validate(a) for a in accounts],
        ranges=[CategoryRangeResponse.model_validate(r) for r in service.context.registry.ranges()],
    )


@router.get("/{code}", response_model=AccountResponse, summary="Resolve an account code")
async def get_account(
    code: str,
    service: RegistryService = Depends(get_registry_service),
) -> AccountResponse:
    return AccountResponse.model_validate(service.get_account(code))


@router.post(
    "",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an account code",
    description="""
    Register a new account code under a category.

    The code must fall inside a range owned by the category. Registering a
    code that already exists under another category, or inside another
    category's range, fails with `ACC_003` and leaves the registry unchanged.
    """,
)
async def register_account(
    payload: AccountCreateRequest,
    service: RegistryService = Depends(get_registry_service),
) -> AccountResponse:
    account = await service.register_account(
        code=payload.code,
        display_name=payload.display_name,
        category=payload.category,
        description=payload.description,
    )
    return AccountResponse.model_validate(account)
