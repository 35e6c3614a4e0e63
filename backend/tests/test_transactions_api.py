from fastapi.testclient import TestClient

from spendwise.main import app

client = TestClient(app)


def _record(record_id: str, **overrides) -> dict:
    payload = {
        "id": record_id,
        "title": "Lunch",
        "amount": 50,
        "date": "2024-01-01",
        "category": "Food & Dining",
        "type": "expense",
    }
    payload.update(overrides)
    return payload


def test_health() -> None:
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_upsert_then_list() -> None:
    res = client.post("/api/transactions", json=_record("a1", description="with friends"))
    assert res.status_code == 200
    assert res.json() == {"success": True}

    listed = client.get("/api/transactions")
    assert listed.status_code == 200
    body = listed.json()
    assert len(body) == 1
    assert body[0]["id"] == "a1"
    assert body[0]["amount"] == 50
    assert body[0]["date"] == "2024-01-01"
    assert body[0]["category"] == "Food & Dining"
    assert body[0]["description"] == "with friends"


def test_upsert_existing_id_replaces_every_field() -> None:
    client.post("/api/transactions", json=_record("a1", description="old"))
    client.post(
        "/api/transactions",
        json=_record("a1", title="Salary", amount=1200.5, category="Income", type="income"),
    )
    body = client.get("/api/transactions").json()
    assert len(body) == 1
    assert body[0]["title"] == "Salary"
    assert body[0]["amount"] == 1200.5
    assert body[0]["type"] == "income"
    assert body[0]["description"] is None


def test_list_orders_by_date_then_id_descending() -> None:
    client.post("/api/transactions", json=_record("a", date="2024-01-02"))
    client.post("/api/transactions", json=_record("b", date="2024-01-01"))
    client.post("/api/transactions", json=_record("c", date="2024-01-02"))
    ids = [row["id"] for row in client.get("/api/transactions").json()]
    assert ids == ["c", "a", "b"]


def test_delete_removes_record() -> None:
    client.post("/api/transactions", json=_record("a1"))
    res = client.delete("/api/transactions/a1")
    assert res.status_code == 200
    assert res.json() == {"success": True}
    assert client.get("/api/transactions").json() == []


def test_delete_unknown_id_succeeds() -> None:
    res = client.delete("/api/transactions/missing")
    assert res.status_code == 200
    assert res.json() == {"success": True}


def test_negative_amount_returns_422() -> None:
    res = client.post("/api/transactions", json=_record("a1", amount=-5))
    assert res.status_code == 422
    body = res.json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["error"]["details"][0]["field"] == "amount"


def test_unknown_category_returns_422() -> None:
    res = client.post("/api/transactions", json=_record("a1", category="Travel"))
    assert res.status_code == 422
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


def test_unknown_api_route_returns_404() -> None:
    res = client.get("/api/unknown")
    assert res.status_code == 404
