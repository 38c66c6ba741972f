"""Registration and login endpoint tests."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient


def _register(client: TestClient, email: str = "alice@example.com", password: str = "secret1"):
    return client.post("/auth/register", json={"email": email, "password": password})


def test_register_returns_user_and_token(client: TestClient) -> None:
    """Registration should create the account and open a session."""
    response = _register(client)
    assert response.status_code == 201

    payload = response.json()
    assert payload["message"] == "User registered successfully"
    assert payload["user"]["email"] == "alice@example.com"
    assert payload["user"]["id"]
    assert datetime.fromisoformat(payload["user"]["created_at"]).utcoffset() == timedelta(0)
    assert payload["token"]
    assert "password_hash" not in payload["user"]


def test_register_normalizes_email(client: TestClient) -> None:
    """Emails are trimmed and lower-cased before storage."""
    response = _register(client, email="  Alice@Example.COM ")
    assert response.status_code == 201
    assert response.json()["user"]["email"] == "alice@example.com"

    login = client.post("/auth/login", json={"email": "ALICE@example.com", "password": "secret1"})
    assert login.status_code == 200


def test_register_duplicate_email(client: TestClient) -> None:
    """A taken email should be rejected with 400."""
    assert _register(client).status_code == 201
    response = _register(client, password="another1")

    assert response.status_code == 400
    assert response.json()["code"] == "EMAIL_TAKEN"


@pytest.mark.parametrize(
    ("body", "field"),
    [
        ({"email": "not-an-email", "password": "secret1"}, "email"),
        ({"email": "a" * 64 + "@" + "b" * 32 + ".com", "password": "secret1"}, "email"),
        ({"email": "bob@example.com", "password": "abc1"}, "password"),
        ({"email": "bob@example.com", "password": "nodigits"}, "password"),
        ({"email": "bob@example.com"}, "password"),
    ],
)
def test_register_validation(client: TestClient, body: dict, field: str) -> None:
    """Invalid registration input yields 400 with field-level details."""
    response = client.post("/auth/register", json=body)
    assert response.status_code == 400

    payload = response.json()
    assert payload["code"] == "VALIDATION_FAILED"
    assert field in {detail["field"] for detail in payload["details"]}


def test_login_returns_new_token(client: TestClient) -> None:
    """Login should succeed with the right password and issue a fresh token."""
    first = _register(client).json()["token"]
    response = client.post("/auth/login", json={"email": "alice@example.com", "password": "secret1"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["message"] == "Login successful"
    assert payload["user"]["email"] == "alice@example.com"
    assert payload["token"] != first


@pytest.mark.parametrize(
    "body",
    [
        {"email": "alice@example.com", "password": "wrong-pass1"},
        {"email": "nobody@example.com", "password": "secret1"},
    ],
)
def test_login_rejects_bad_credentials_uniformly(client: TestClient, body: dict) -> None:
    """Unknown emails and wrong passwords look the same to the caller."""
    _register(client)
    response = client.post("/auth/login", json=body)

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid email or password", "code": "INVALID_CREDENTIALS"}


def test_login_requires_password(client: TestClient) -> None:
    """An empty password fails validation before any lookup."""
    response = client.post("/auth/login", json={"email": "alice@example.com", "password": ""})
    assert response.status_code == 400


def test_register_accepts_email_filling_the_column(client: TestClient) -> None:
    """The longest storable email (100 characters) registers and logs in."""
    email = "a" * 64 + "@" + "b" * 31 + ".com"
    assert len(email) == 100

    assert _register(client, email=email).status_code == 201
    login = client.post("/auth/login", json={"email": email, "password": "secret1"})
    assert login.status_code == 200


def test_login_rejects_overlong_email(client: TestClient) -> None:
    """Login applies the same length cap before any lookup."""
    email = "a" * 64 + "@" + "b" * 32 + ".com"
    response = client.post("/auth/login", json={"email": email, "password": "secret1"})

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "email"


def test_malformed_json_body_is_reported_on_body(client: TestClient) -> None:
    """A body that is not valid JSON is a 400 against the body as a whole."""
    response = client.post(
        "/auth/register",
        content='{"email": "alice@example.com", "password": ',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    payload = response.json()
    assert payload["code"] == "VALIDATION_FAILED"
    assert [detail["field"] for detail in payload["details"]] == ["body"]
