"""Pytest configuration and shared fixtures."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from src.docvault.main import app
from src.docvault.services.identity import DocumentList, GatewayConfig, IdentityGateway
from src.docvault.services.rate_limiter import limiter


@pytest.fixture
def client() -> TestClient:
    """
    Provide FastAPI test client for API testing.

    Rate limit counters are cleared so each test starts with a full budget.

    Example:
        >>> def test_health(client):
        >>>     response = client.get("/health")
        >>>     assert response.status_code == 200
    """
    limiter.reset()
    return TestClient(app)


@pytest.fixture
def gateway_config() -> GatewayConfig:
    """Gateway settings pointing at a fake Supabase project."""
    return GatewayConfig(
        url="https://test.supabase.co",
        anon_key="test-anon-key",
        service_role_key="test-service-role-key",
        users_table="users",
        default_avatar_url="https://cdn.example.com/avatar.png",
    )


@pytest.fixture
def mock_gateway(gateway_config: GatewayConfig) -> MagicMock:
    """
    Admin gateway double with an empty users table.

    Capability accessors return the same mock on every call so tests can
    assert on document_ops()/account_ops() calls directly.
    """
    gateway = MagicMock(spec=IdentityGateway)
    gateway.config = gateway_config
    gateway.admin = True
    gateway.document_ops.return_value.list_documents.return_value = DocumentList(
        total=0, documents=[]
    )
    gateway.avatar_ops.return_value.default_avatar_url.return_value = (
        gateway_config.default_avatar_url
    )
    return gateway
