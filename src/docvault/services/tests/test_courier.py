"""Tests for Courier email delivery."""

from unittest.mock import patch

import pytest

from src.docvault.services.courier import CourierDeliveryError, CourierService


@pytest.fixture
def mock_courier_client():
    with patch("src.docvault.services.courier.Courier") as mock:
        yield mock.return_value


def test_send_otp_email_routes_to_email_channel(mock_courier_client) -> None:
    """Test the code is sent as a single email message."""
    CourierService().send_otp_email("jane@x.com", "482913")

    message = mock_courier_client.send_message.call_args.kwargs["message"]
    assert message["to"] == {"email": "jane@x.com"}
    assert message["routing"]["channels"] == ["email"]
    assert "482913" in message["content"]["body"]


def test_send_email_failure_raises(mock_courier_client) -> None:
    """Test Courier failures are wrapped in CourierDeliveryError."""
    mock_courier_client.send_message.side_effect = RuntimeError("401 unauthorized")

    with pytest.raises(CourierDeliveryError):
        CourierService().send_email("jane@x.com", "Subject", "Body")
