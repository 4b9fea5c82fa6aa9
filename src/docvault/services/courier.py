"""Courier notification service."""

from courier.client import Courier

from src.docvault.config import settings


class CourierDeliveryError(Exception):
    """Raised when Courier rejects or fails to send a message."""

    pass


class CourierService:
    """Service for sending verification emails via Courier API."""

    def __init__(self) -> None:
        """Initialize Courier service."""
        self.client = Courier(authorization_token=settings.courier_api_key)

    def send_email(
        self, email: str, subject: str, body: str, template_id: str | None = None
    ) -> None:
        """
        Send an email notification.

        Args:
            email: Recipient email address
            subject: Email subject
            body: Email body (plain text or HTML)
            template_id: Optional Courier template ID

        Raises:
            CourierDeliveryError: If Courier rejects the message

        Example:
            >>> service = CourierService()
            >>> service.send_email(
            ...     "user@example.com",
            ...     "Welcome",
            ...     "Thanks for signing up!"
            ... )
        """
        try:
            message = {
                "to": {"email": email},
                "content": {"title": subject, "body": body},
                "routing": {"method": "single", "channels": ["email"]},
            }

            if template_id:
                message["template"] = template_id

            self.client.send_message(message=message)
        except Exception as e:
            raise CourierDeliveryError(f"Failed to send email: {str(e)}") from e

    def send_otp_email(self, email: str, code: str) -> None:
        """
        Deliver a one-time verification code.

        Every call sends a new email, so callers must not retry blindly.

        Args:
            email: Mailbox that requested the code
            code: One-time code generated by Supabase Auth

        Raises:
            CourierDeliveryError: If delivery fails
        """
        self.send_email(
            email,
            settings.otp_email_subject,
            f"Your verification code is {code}. It can only be used once.",
            template_id=settings.otp_email_template_id,
        )
