import pytest
from httpx import AsyncClient

from ledger_classifier.classification.chart import CHART_VERSION, STANDARD_ACCOUNTS
from ledger_classifier.classification.standard_rules import STANDARD_RULES


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    """Test basic health check."""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["chart_version"] == CHART_VERSION
    assert data["accounts"] == len(STANDARD_ACCOUNTS)
    assert data["active_rules"] == len(STANDARD_RULES)


@pytest.mark.asyncio
async def test_health_ready(client: AsyncClient):
    """Test readiness check with database connection."""
    response = await client.get("/health/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready", "database": "connected"}


@pytest.mark.asyncio
async def test_request_id_header(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"
