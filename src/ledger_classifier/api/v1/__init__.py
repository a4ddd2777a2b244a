"""API version 1 routes."""

from fastapi import APIRouter

from ledger_classifier.api.v1 import (
    accounts,
    classification,
    reclassifications,
    rules,
    transactions,
)

router = APIRouter(prefix="/api/v1")

router.include_router(accounts.router)
router.include_router(rules.router)
router.include_router(classification.router)
router.include_router(transactions.router)
router.include_router(reclassifications.router)
