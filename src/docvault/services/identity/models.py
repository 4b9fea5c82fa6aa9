"""Data models for the identity gateway."""

from typing import Any

from pydantic import BaseModel

from src.docvault.config import Settings


class GatewayConfig(BaseModel):
    """
    Connection settings for Supabase Auth, PostgREST and Storage.

    Passed explicitly to the gateway constructors so that every call builds
    its own client instead of sharing a process-wide one.

    Attributes:
        url: Supabase project URL
        anon_key: Public key used by session-scoped gateways
        service_role_key: Secret key used by admin gateways (bypasses RLS)
        database_schema: PostgREST schema holding the user table
        users_table: Table that stores user records
        avatar_bucket: Storage bucket with the default avatar (optional)
        default_avatar_path: Object path of the default avatar in the bucket
        default_avatar_url: Fallback avatar URL when no bucket is configured
    """

    url: str
    anon_key: str
    service_role_key: str
    database_schema: str = "public"
    users_table: str = "users"
    avatar_bucket: str | None = None
    default_avatar_path: str = "defaults/avatar.png"
    default_avatar_url: str = ""

    @classmethod
    def from_settings(cls, settings: Settings) -> "GatewayConfig":
        """Build a gateway config from application settings."""
        return cls(
            url=settings.supabase_url,
            anon_key=settings.supabase_anon_key,
            service_role_key=settings.supabase_service_role_key,
            database_schema=settings.supabase_db_schema,
            users_table=settings.users_table,
            avatar_bucket=settings.avatar_bucket,
            default_avatar_path=settings.default_avatar_path,
            default_avatar_url=settings.default_avatar_url,
        )


class DocumentList(BaseModel):
    """Result of an equality query against a table."""

    total: int
    documents: list[dict[str, Any]] = []


class EmailToken(BaseModel):
    """
    Pending email verification issued by the identity provider.

    Attributes:
        user_id: Provider user id the code is bound to (the client's accountId)
        email: Mailbox the code was delivered to
    """

    user_id: str
    email: str
