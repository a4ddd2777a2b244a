import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_classify_description(client: AsyncClient):
    response = await client.post(
        "/api/v1/classify",
        json={"description": "IMMEDIATE PAYMENT 224812909 JEFFREY S MAPHOSA"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["matched_account_code"] == "8100"
    assert data["matched_rule_name"] == "Immediate Payment - Employee"
    assert data["is_fallback"] is False
    assert data["needs_review"] is False
    assert data["detail"] == "MAPHOSA"


@pytest.mark.asyncio
async def test_specific_rule_beats_generic_keyword(client: AsyncClient):
    data = (
        await client.post(
            "/api/v1/classify", json={"description": "PAYMENT TO INSURANCE CHAUKE XG SALARIES"}
        )
    ).json()

    assert data["matched_account_code"] == "8100"
    assert data["matched_rule_name"] == "Insurance Chauke Salaries"


@pytest.mark.asyncio
async def test_unmatched_description(client: AsyncClient):
    data = (await client.post("/api/v1/classify", json={"description": "   "})).json()

    assert data["matched_account_code"] is None
    assert data["needs_review"] is True


@pytest.mark.asyncio
async def test_classify_batch(client: AsyncClient):
    payload = {
        "transactions": [
            {"transaction_id": "a", "description": "IB TRANSFER TO *****2689327"},
            {"transaction_id": "b", "description": "UNKNOWN SHOP"},
            {"transaction_id": "c", "description": "CREDIT INTEREST"},
        ]
    }

    response = await client.post("/api/v1/classify/batch", json=payload)

    assert response.status_code == 200
    data = response.json()
    assert [r["transaction_id"] for r in data["results"]] == ["a", "b", "c"]
    assert data["results"][0]["result"]["matched_account_code"] == "1100-001"
    assert data["stats"]["total"] == 3
    assert data["stats"]["matched"] == 2
    assert data["stats"]["unclassified"] == 1
    assert data["stats"]["by_account"] == {"1100-001": 1, "7000": 1}


@pytest.mark.asyncio
async def test_classify_requires_description(client: AsyncClient):
    response = await client.post("/api/v1/classify", json={})

    assert response.status_code == 400
    assert response.json()["error_code"] == "VAL_001"
