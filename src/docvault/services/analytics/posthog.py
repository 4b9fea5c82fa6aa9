"""PostHog analytics service for event tracking."""

import posthog

from src.docvault.config import settings


class PostHogService:
    """Service for tracking analytics events via PostHog."""

    def __init__(self) -> None:
        """Initialize PostHog service."""
        if settings.posthog_api_key:
            posthog.api_key = settings.posthog_api_key
            posthog.host = settings.posthog_host

    def capture(self, distinct_id: str, event: str, properties: dict | None = None) -> None:
        """
        Track an event.

        Args:
            distinct_id: Unique identifier for the user (the provider account id)
            event: Event name (e.g., "email_otp_sent", "account_created")
            properties: Optional event properties

        Example:
            >>> service = PostHogService()
            >>> service.capture("account-123", "account_created", {"has_full_name": True})
        """
        if not settings.posthog_api_key:
            return

        posthog.capture(distinct_id=distinct_id, event=event, properties=properties or {})
