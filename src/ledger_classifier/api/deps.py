"""FastAPI dependency injection for the database, classification context and services."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_classifier.classification.context import ClassificationContext
from ledger_classifier.db.session import get_db
from ledger_classifier.services.classification import ClassificationService
from ledger_classifier.services.reclassification import BulkReclassificationService
from ledger_classifier.services.registry import RegistryService
from ledger_classifier.services.rules import RuleSyncService


def get_context(request: Request) -> ClassificationContext:
    """The application's live registry and rule-set holder."""
    return request.app.state.context


async def get_registry_service(
    db: AsyncSession = Depends(get_db),
    context: ClassificationContext = Depends(get_context),
) -> RegistryService:
    return RegistryService(db, context)


async def get_rule_service(
    db: AsyncSession = Depends(get_db),
    context: ClassificationContext = Depends(get_context),
) -> RuleSyncService:
    return RuleSyncService(db, context)


async def get_classification_service(
    db: AsyncSession = Depends(get_db),
    context: ClassificationContext = Depends(get_context),
) -> ClassificationService:
    return ClassificationService(db, context)


async def get_reclassification_service(
    db: AsyncSession = Depends(get_db),
    context: ClassificationContext = Depends(get_context),
) -> BulkReclassificationService:
    return BulkReclassificationService(db, context)
