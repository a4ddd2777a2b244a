import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from ledger_classifier.api.middleware.error_handler import (
    handle_classification_error,
    handle_generic_error,
    handle_integrity_error,
    handle_validation_error,
)
from ledger_classifier.api.middleware.logging import JSONLogFormatter, RequestLoggingMiddleware
from ledger_classifier.api.v1 import router as v1_router
from ledger_classifier.api.v1.health import router as health_router
from ledger_classifier.classification.context import ClassificationContext
from ledger_classifier.config import settings
from ledger_classifier.core.exceptions import ClassificationError
from ledger_classifier.core.logging import setup_logging
from ledger_classifier.db.session import AsyncSessionLocal
from ledger_classifier.services.registry import RegistryService
from ledger_classifier.services.rules import RuleSyncService

logger = logging.getLogger(__name__)


async def bootstrap(context: ClassificationContext) -> None:
    """Seed the chart, load stored accounts and sync rules into ``context``."""
    async with AsyncSessionLocal() as session:
        registry_service = RegistryService(session, context)
        await registry_service.seed_standard_chart()
        await registry_service.load_registry()
        result = await RuleSyncService(session, context).sync()
    logger.info(
        "Classification context ready",
        extra={
            "accounts": len(context.registry),
            "active_rules": len(result.rule_set.evaluation_order),
            "conflicts": len(result.conflicts),
        },
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await bootstrap(app.state.context)
    yield
    # Shutdown


def create_app(context: ClassificationContext | None = None) -> FastAPI:
    setup_logging(
        settings.log_level,
        settings.log_file,
        formatter=JSONLogFormatter() if settings.log_format == "json" else None,
    )

    app = FastAPI(
        title="Ledger Classifier API",
        description="Bank transaction classification against a canonical chart of accounts",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )
    # Usable before startup: standard chart and rules, replaced by the store's on bootstrap.
    app.state.context = context or ClassificationContext.from_standard(
        settings.fallback_account_code
    )

    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers (order matters - most specific first)
    app.add_exception_handler(ClassificationError, handle_classification_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_generic_error)

    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()
