from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_classifier.api.deps import get_context
from ledger_classifier.classification.chart import CHART_VERSION
from ledger_classifier.classification.context import ClassificationContext
from ledger_classifier.db.session import get_db

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(context: ClassificationContext = Depends(get_context)):
    """Basic health check with the size of the live rule set."""
    return {
        "status": "ok",
        "chart_version": CHART_VERSION,
        "accounts": len(context.registry),
        "active_rules": len(context.rules.evaluation_order),
    }


@router.get("/health/ready")
async def health_ready(db: AsyncSession = Depends(get_db)):
    """Readiness check with database connection."""
    try:
        await db.execute(text("SELECT 1"))
        return {"status": "ready", "database": "connected"}
    except Exception as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not ready", "database": "disconnected", "error": type(e).__name__},
        )
