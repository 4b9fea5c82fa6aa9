"""Passwordless email-code accounts feature."""

from src.docvault.features.accounts.handlers import router

__all__ = ["router"]
