from __future__ import annotations


def test_create_cash_record(client) -> None:
    response = client.post(
        "/api/cash",
        json={
            "amount": 4200.75,
            "date": "2026-03-14",
            "reference_person": "Anita",
            "purpose": "Advance",
            "invoice_reference": "INV-12",
        },
    )
    assert response.status_code == 201
    record = response.json()["data"]
    assert record["amount"] == 4200.75
    assert record["date"] == "2026-03-14"
    assert record["purpose"] == "Advance"


def test_create_requires_positive_amount_and_date(client) -> None:
    response = client.post("/api/cash", json={"amount": -5})
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert "date" in error["message"]


def test_list_with_date_range_and_total_amount(client, create_cash) -> None:
    create_cash(amount=100, date="2026-01-01")
    create_cash(amount=200, date="2026-01-15")
    create_cash(amount=400, date="2026-01-31")
    create_cash(amount=800, date="2026-02-01")

    body = client.get("/api/cash", params={"startDate": "2026-01-01", "endDate": "2026-01-31"}).json()
    assert body["total"] == 3
    assert body["totalAmount"] == 700
    assert [r["date"] for r in body["records"]] == ["2026-01-31", "2026-01-15", "2026-01-01"]


def test_single_date_bound_is_ignored(client, create_cash) -> None:
    create_cash(amount=100, date="2026-01-01")
    create_cash(amount=800, date="2026-02-01")

    body = client.get("/api/cash", params={"startDate": "2026-01-15"}).json()
    assert body["total"] == 2
    assert body["totalAmount"] == 900


def test_reference_person_filter_is_case_insensitive(client, create_cash) -> None:
    create_cash(reference_person="Ravi Kumar", amount=10)
    create_cash(reference_person="Priya", amount=20)

    body = client.get("/api/cash", params={"reference_person": "ravi"}).json()
    assert body["total"] == 1
    assert body["records"][0]["reference_person"] == "Ravi Kumar"
    # Filters the page, not the overall total
    assert body["totalAmount"] == 30


def test_list_pagination(client, create_cash) -> None:
    for day in range(1, 6):
        create_cash(date=f"2026-04-0{day}")

    body = client.get("/api/cash", params={"page": 2, "limit": 2}).json()
    assert body["totalPages"] == 3
    assert [r["date"] for r in body["records"]] == ["2026-04-03", "2026-04-02"]

    assert client.get("/api/cash", params={"page": 0}).status_code == 400


def test_total_endpoint(client, create_cash) -> None:
    create_cash(amount=100, date="2026-05-01")
    create_cash(amount=250.5, date="2026-05-20")
    create_cash(amount=1000, date="2026-06-01")

    everything = client.get("/api/cash/total").json()
    assert everything == {"data": {"total": 1350.5}, "error": None}

    may = client.get("/api/cash/total", params={"start_date": "2026-05-01", "end_date": "2026-05-31"}).json()
    assert may["data"]["total"] == 350.5


def test_update_and_delete(client, create_cash) -> None:
    record = create_cash(amount=100, notes="first")

    updated = client.put(f"/api/cash/{record['id']}", json={"amount": 150}).json()["data"]
    assert updated["amount"] == 150
    assert updated["notes"] == "first"

    no_changes = client.put(f"/api/cash/{record['id']}", json={})
    assert no_changes.status_code == 400
    assert no_changes.json()["error"]["code"] == "NO_CHANGES"

    deleted = client.delete(f"/api/cash/{record['id']}")
    assert deleted.json()["data"] == {"message": "Cash record deleted successfully"}

    missing = client.get(f"/api/cash/{record['id']}")
    assert missing.status_code == 404
    assert missing.json()["error"]["message"] == "Cash record not found"
