from __future__ import annotations


def test_defaults_are_created_on_first_read(client) -> None:
    data = client.get("/api/user/settings").json()["data"]
    assert data["email"] == ""
    assert data["defaultCurrency"] == "INR"
    assert data["emailNotifications"] is True
    assert data["smsNotifications"] is False


def test_update_persists_camel_case_fields(client) -> None:
    response = client.put(
        "/api/user/settings",
        json={
            "email": "  owner@acme.in ",
            "companyName": "Acme Traders",
            "emailNotifications": False,
        },
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == "owner@acme.in"
    assert data["companyName"] == "Acme Traders"
    assert data["emailNotifications"] is False

    again = client.get("/api/user/settings").json()["data"]
    assert again["companyName"] == "Acme Traders"
    assert again["email"] == "owner@acme.in"


def test_update_rejects_bad_email(client) -> None:
    for email, message in (("", "Email is required"), ("not-an-email", "Invalid email format")):
        response = client.put("/api/user/settings", json={"email": email})
        assert response.status_code == 400
        assert response.json()["error"] == {"message": message, "code": "VALIDATION_ERROR"}


def test_reset_restores_defaults(client) -> None:
    client.put("/api/user/settings", json={"name": "Someone", "defaultCurrency": "USD"})

    response = client.post("/api/user/settings/reset")
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Settings reset to defaults"
    assert body["data"]["name"] == ""
    assert body["data"]["defaultCurrency"] == "INR"
