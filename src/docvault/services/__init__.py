"""Shared services module for external integrations."""

from src.docvault.services.analytics.posthog import PostHogService
from src.docvault.services.courier import CourierService

__all__ = [
    "PostHogService",
    "CourierService",
]
