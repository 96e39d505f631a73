from __future__ import annotations

import csv
from io import StringIO

from cheque_manager.shared.dates import local_today


def _rows(response) -> list[list[str]]:
    return list(csv.reader(StringIO(response.text)))


def test_export_requires_csv_format(client) -> None:
    for params in ({}, {"format": "pdf"}):
        response = client.get("/api/export/all-cheques", params=params)
        assert response.status_code == 400
        assert response.json()["error"] == {
            "message": "Only CSV format is supported",
            "code": "UNSUPPORTED_FORMAT",
        }


def test_export_all_cheques(client, create_cheque) -> None:
    create_cheque(cheque_number="E1", payer_name="Kapoor, Ltd", notes='Said "urgent"')

    response = client.get("/api/export/all-cheques", params={"format": "csv"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert (
        response.headers["content-disposition"]
        == f'attachment; filename="cheques_{local_today().isoformat()}.csv"'
    )

    rows = _rows(response)
    assert rows[0][0] == "Cheque Number"
    assert rows[1][0] == "E1"
    assert rows[1][2] == "Kapoor, Ltd"
    assert rows[1][8] == 'Said "urgent"'


def test_export_cash_records_for_month(client, create_cash) -> None:
    create_cash(amount=10, date="2026-01-05")
    create_cash(amount=20, date="2026-01-25")
    create_cash(amount=30, date="2026-02-01")

    response = client.get("/api/export/cash-records", params={"format": "csv", "month": "2026-01"})
    assert response.status_code == 200
    assert f"cash_records_2026-01_{local_today().isoformat()}.csv" in response.headers["content-disposition"]

    rows = _rows(response)
    assert rows[0] == ["Date", "Amount", "Reference Person", "Purpose", "Invoice Reference", "Notes"]
    assert [row[0] for row in rows[1:]] == ["2026-01-25", "2026-01-05"]


def test_export_all_cash_records(client, create_cash) -> None:
    create_cash(date="2026-01-05")
    create_cash(date="2026-02-05")

    response = client.get("/api/export/cash-records", params={"format": "csv"})
    assert "cash_records_all_" in response.headers["content-disposition"]
    assert len(_rows(response)) == 3


def test_export_rejects_bad_month(client) -> None:
    response = client.get("/api/export/cash-records", params={"format": "csv", "month": "2026-1"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_MONTH_FORMAT"


def test_export_pending_cheques_only(client, create_cheque) -> None:
    create_cheque(cheque_number="P1")
    cleared = create_cheque(cheque_number="C1")
    client.patch(f"/api/cheques/{cleared['id']}/status", json={"status": "cleared"})

    rows = _rows(client.get("/api/export/pending-cheques", params={"format": "csv"}))
    assert rows[0][5] == "Days Until Clear"
    assert [row[0] for row in rows[1:]] == ["P1"]
    assert rows[1][5] == ""


def test_summary_report(client, create_cheque, create_cash) -> None:
    create_cheque(cheque_number="S1", amount=1000)
    bounced = create_cheque(cheque_number="S2", amount=500)
    client.patch(f"/api/cheques/{bounced['id']}/status", json={"status": "bounced"})
    create_cash(amount=250)

    response = client.get("/api/export/summary-report", params={"format": "csv"})
    assert response.status_code == 200
    rows = _rows(response)

    assert rows[0][:2] == ["Report Generated", local_today().isoformat()]
    assert rows[1][:2] == ["Month Filter", "All Time"]
    assert rows[3] == ["Metric", "Value", "Additional Info"]

    metrics = {row[0]: row[1] for row in rows[4:]}
    assert metrics["Total Cheques"] == "2"
    assert float(metrics["Total Cheques Amount"]) == 1500
    assert metrics["Pending Cheques"] == "1"
    assert metrics["Bounced Cheques"] == "1"
    assert metrics["Total Cash Records"] == "1"
    assert float(metrics["Total Cash Amount"]) == 250
