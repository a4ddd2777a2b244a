import pytest
from httpx import AsyncClient

IMPORT = {
    "transactions": [
        {"transaction_id": "t1", "description": "ACME SUPPLIES INV 001"},
        {"transaction_id": "t2", "description": "ACME SUPPLIES INV 002"},
        {"transaction_id": "t3", "description": "MONTHLY SERVICE FEE"},
    ]
}


@pytest.fixture
async def imported(client: AsyncClient) -> AsyncClient:
    response = await client.post("/api/v1/transactions/import", json=IMPORT)
    assert response.status_code == 201
    return client


@pytest.mark.asyncio
async def test_import(client: AsyncClient):
    data = (await client.post("/api/v1/transactions/import", json=IMPORT)).json()
    again = (await client.post("/api/v1/transactions/import", json=IMPORT)).json()

    assert data["imported"] == 3
    assert data["stats"]["matched"] == 1
    assert again["imported"] == 0
    assert again["skipped"] == 3


@pytest.mark.asyncio
async def test_import_without_classification(client: AsyncClient):
    data = (
        await client.post("/api/v1/transactions/import", json={**IMPORT, "classify": False})
    ).json()

    assert data["stats"] is None
    pending = (await client.post("/api/v1/transactions/classify")).json()
    assert pending["total"] == 3
    assert pending["matched"] == 1


@pytest.mark.asyncio
async def test_list_and_filter(imported: AsyncClient):
    review = (await imported.get("/api/v1/transactions", params={"needs_review": True})).json()
    fees = (await imported.get("/api/v1/transactions", params={"account_code": "9600"})).json()

    assert {t["external_id"] for t in review["transactions"]} == {"t1", "t2"}
    assert [t["external_id"] for t in fees["transactions"]] == ["t3"]


@pytest.mark.asyncio
async def test_get_transaction(imported: AsyncClient):
    data = (await imported.get("/api/v1/transactions/t3")).json()

    assert data["matched_rule_name"] == "Bank Fees"
    assert data["needs_review"] is False
    missing = await imported.get("/api/v1/transactions/missing")
    assert missing.status_code == 404
    assert missing.json()["error_code"] == "TXN_001"


@pytest.mark.asyncio
async def test_correct_and_stats(imported: AsyncClient):
    response = await imported.put(
        "/api/v1/transactions/t1/classification", json={"account_code": "8710"}
    )

    assert response.status_code == 200
    assert response.json()["account_code"] == "8710"
    stats = (await imported.get("/api/v1/transactions/stats")).json()
    assert stats == {
        "total": 3,
        "classified": 2,
        "needs_review": 1,
        "by_account": {"8710": 1, "9600": 1},
    }


@pytest.mark.asyncio
async def test_correct_to_unknown_account(imported: AsyncClient):
    response = await imported.put(
        "/api/v1/transactions/t1/classification", json={"account_code": "8999"}
    )

    assert response.status_code == 404
    assert response.json()["error_code"] == "ACC_001"


@pytest.mark.asyncio
async def test_rule_from_correction(imported: AsyncClient):
    await imported.put("/api/v1/transactions/t1/classification", json={"account_code": "8710"})

    response = await imported.post("/api/v1/transactions/t1/rule", json={"name": "Acme Supplies"})

    assert response.status_code == 201
    assert response.json()["pattern"] == "ACME SUPPLIES INV"
    pending = (await imported.post("/api/v1/transactions/classify")).json()
    assert pending["by_rule"] == {"Acme Supplies": 1}
    assert (await imported.get("/api/v1/transactions/t2")).json()["account_code"] == "8710"


@pytest.mark.asyncio
async def test_suggestions_for_flagged_transaction(client: AsyncClient):
    payload = {"transactions": [{"transaction_id": "r1", "description": "XG ELECTRICAL REPAIRS 445"}]}
    await client.post("/api/v1/transactions/import", json=payload)

    data = (await client.get("/api/v1/transactions/r1/suggestions")).json()

    assert data["transaction_id"] == "r1"
    assert data["needs_review"] is True
    assert [s["code"] for s in data["suggestions"]] == ["8900"]
    assert data["suggestions"][0]["reason"] == "Keyword match: REPAIRS"


@pytest.mark.asyncio
async def test_suggestions_fall_back_to_general_accounts(imported: AsyncClient):
    payload = {"transactions": [{"transaction_id": "q1", "description": "QWERTY 7781 ZX"}]}
    await imported.post("/api/v1/transactions/import", json=payload)

    data = (await imported.get("/api/v1/transactions/q1/suggestions", params={"limit": 2})).json()

    assert [s["code"] for s in data["suggestions"]] == ["8100", "6000"]
    missing = await imported.get("/api/v1/transactions/missing/suggestions")
    assert missing.status_code == 404
    assert missing.json()["error_code"] == "TXN_001"
