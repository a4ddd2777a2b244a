import pytest
from httpx import AsyncClient


@pytest.fixture
async def corrected(client: AsyncClient) -> AsyncClient:
    await client.post(
        "/api/v1/transactions/import",
        json={
            "transactions": [
                {"transaction_id": f"t{n}", "description": f"NETFLORIST ORDER {n}00"}
                for n in range(1, 5)
            ]
        },
    )
    await client.put("/api/v1/transactions/t1/classification", json={"account_code": "9200"})
    return client


@pytest.mark.asyncio
async def test_proposal_lifecycle(corrected: AsyncClient):
    response = await corrected.post("/api/v1/reclassifications", json={"transaction_id": "t1"})

    assert response.status_code == 201
    proposal = response.json()
    assert proposal["state"] == "proposed"
    assert proposal["key_pattern"] == ["NETFLORIST", "ORDER"]
    assert proposal["candidate_ids"] == ["t2", "t3", "t4"]
    batch = proposal["batch_id"]

    assert (await corrected.get(f"/api/v1/reclassifications/{batch}")).json()["state"] == "proposed"
    assert (await corrected.post(f"/api/v1/reclassifications/{batch}/confirm")).json()[
        "state"
    ] == "confirmed"

    applied = (await corrected.post(f"/api/v1/reclassifications/{batch}/apply")).json()
    again = (await corrected.post(f"/api/v1/reclassifications/{batch}/apply")).json()

    assert applied["state"] == "applied"
    assert applied["applied_count"] == 3
    assert again == applied
    rows = (await corrected.get("/api/v1/transactions", params={"account_code": "9200"})).json()
    assert len(rows["transactions"]) == 4


@pytest.mark.asyncio
async def test_apply_unconfirmed_proposal(corrected: AsyncClient):
    batch = (
        await corrected.post("/api/v1/reclassifications", json={"transaction_id": "t1"})
    ).json()["batch_id"]

    response = await corrected.post(f"/api/v1/reclassifications/{batch}/apply")

    assert response.status_code == 409
    assert response.json()["error_code"] == "BULK_002"
    review = (await corrected.get("/api/v1/transactions", params={"needs_review": True})).json()
    assert len(review["transactions"]) == 3


@pytest.mark.asyncio
async def test_reject(corrected: AsyncClient):
    batch = (
        await corrected.post(
            "/api/v1/reclassifications", json={"transaction_id": "t1", "max_results": 2}
        )
    ).json()["batch_id"]

    rejected = (await corrected.post(f"/api/v1/reclassifications/{batch}/reject")).json()

    assert rejected["state"] == "rejected"
    assert rejected["candidate_ids"] == ["t2", "t3"]


@pytest.mark.asyncio
async def test_unknown_batch(client: AsyncClient):
    response = await client.get("/api/v1/reclassifications/nope")

    assert response.status_code == 404
    assert response.json()["error_code"] == "BULK_001"
