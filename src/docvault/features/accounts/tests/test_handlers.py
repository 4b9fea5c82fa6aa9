"""Tests for sign-in / sign-up API handlers."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from src.docvault.config import settings
from src.docvault.features.accounts.models import AccountCreatedResponse
from src.docvault.features.accounts.provisioning import AccountCreationError
from src.docvault.services.identity import NoSessionError, OtpIssuanceError


@pytest.fixture
def mock_create_account():
    with patch(
        "src.docvault.features.accounts.handlers.create_account", new_callable=AsyncMock
    ) as mock:
        mock.return_value = AccountCreatedResponse(account_id="otp_1")
        yield mock


def test_sign_up_returns_account_id(client: TestClient, mock_create_account) -> None:
    """Test POST /auth/sign-up returns only the account id."""
    response = client.post(
        "/api/v1/auth/sign-up", json={"email": "new@x.com", "full_name": "Jane Doe"}
    )

    assert response.status_code == 200
    assert response.json() == {"account_id": "otp_1"}
    mock_create_account.assert_awaited_once_with(email="new@x.com", full_name="Jane Doe")


def test_sign_in_returns_same_shape(client: TestClient, mock_create_account) -> None:
    """Test POST /auth/sign-in responds exactly like sign-up."""
    mock_create_account.return_value = AccountCreatedResponse(account_id="otp_2")

    response = client.post("/api/v1/auth/sign-in", json={"email": "existing@x.com"})

    assert response.status_code == 200
    assert response.json() == {"account_id": "otp_2"}
    mock_create_account.assert_awaited_once_with(email="existing@x.com", full_name=None)


@pytest.mark.parametrize(
    "payload",
    [
        {"email": "not-an-email", "full_name": "Jane Doe"},
        {"email": "new@x.com", "full_name": "J"},
        {"email": "new@x.com", "full_name": "x" * 51},
        {"email": "new@x.com"},
        {"email": "new@x.com", "full_name": " J"},
        {"email": "new@x.com", "full_name": "   "},
    ],
)
def test_sign_up_rejects_invalid_form(client: TestClient, mock_create_account, payload) -> None:
    """Test sign-up validates email format and the 2-50 character name."""
    response = client.post("/api/v1/auth/sign-up", json=payload)

    assert response.status_code == 422
    mock_create_account.assert_not_awaited()


def test_sign_up_strips_full_name(client: TestClient, mock_create_account) -> None:
    """Test the name is stripped before it reaches provisioning."""
    response = client.post(
        "/api/v1/auth/sign-up", json={"email": "new@x.com", "full_name": "  Jane Doe  "}
    )

    assert response.status_code == 200
    mock_create_account.assert_awaited_once_with(email="new@x.com", full_name="Jane Doe")


def test_provisioning_failure_is_opaque(client: TestClient, mock_create_account) -> None:
    """Test internal error detail never reaches the client."""
    try:
        raise AccountCreationError() from OtpIssuanceError("SMTP relay refused: quota")
    except AccountCreationError as e:
        mock_create_account.side_effect = e

    response = client.post("/api/v1/auth/sign-in", json={"email": "fail@x.com"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to create account. Please try again."}
    assert "quota" not in response.text


def test_session_account_requires_cookie(client: TestClient) -> None:
    """Test GET /auth/me without a session cookie returns 401."""
    response = client.get("/api/v1/auth/me")

    assert response.status_code == 401
    assert response.json()["detail"] == "No session found"


def test_session_account_returns_provider_user(client: TestClient) -> None:
    """Test GET /auth/me resolves the account through a session gateway."""
    gateway = MagicMock()
    gateway.account_ops.return_value.get_account.return_value = {
        "id": "acct-1",
        "email": "jane@x.com",
    }

    with patch(
        "src.docvault.features.accounts.handlers.create_session_gateway", return_value=gateway
    ) as mock_factory:
        client.cookies.set(settings.session_cookie_name, "session-token")
        response = client.get("/api/v1/auth/me")

    assert response.status_code == 200
    assert response.json() == {"id": "acct-1", "email": "jane@x.com"}
    assert mock_factory.call_args[0][1] == "session-token"


def test_session_account_rejected_token(client: TestClient) -> None:
    """Test an expired session token maps to 401."""
    gateway = MagicMock()
    gateway.account_ops.return_value.get_account.side_effect = NoSessionError("expired")

    with patch(
        "src.docvault.features.accounts.handlers.create_session_gateway", return_value=gateway
    ):
        client.cookies.set(settings.session_cookie_name, "stale-token")
        response = client.get("/api/v1/auth/me")

    assert response.status_code == 401
