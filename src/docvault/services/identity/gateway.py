"""Supabase-backed identity gateway with session-scoped and admin handles."""

import logging
from typing import Any

from supabase import AuthApiError, Client, ClientOptions, create_client

from src.docvault.services.courier import CourierService
from src.docvault.services.identity.exceptions import (
    GatewayCapabilityError,
    NoSessionError,
    OtpIssuanceError,
)
from src.docvault.services.identity.models import DocumentList, EmailToken, GatewayConfig

logger = logging.getLogger(__name__)


class AccountOps:
    """Identity provider operations (Supabase Auth)."""

    def __init__(
        self,
        client: Client,
        *,
        admin: bool,
        access_token: str | None = None,
        courier: CourierService | None = None,
    ) -> None:
        self.client = client
        self._admin = admin
        self._access_token = access_token
        self._courier = courier

    def create_email_token(self, email: str) -> EmailToken:
        """
        Generate a one-time code for an email and deliver it.

        Supabase creates the auth user on first use, so the returned user id
        is stable across repeat sign-ins for the same mailbox.

        Args:
            email: Address to send the code to

        Returns:
            EmailToken carrying the provider user id

        Raises:
            GatewayCapabilityError: If called on a session-scoped gateway
            OtpIssuanceError: If the provider returned no user or code
            CourierDeliveryError: If email delivery fails
        """
        if not self._admin:
            raise GatewayCapabilityError("Email codes can only be issued by an admin gateway")

        response = self.client.auth.admin.generate_link({"type": "magiclink", "email": email})

        user = response.user
        code = response.properties.email_otp if response.properties else None
        if not user or not user.id or not code:
            raise OtpIssuanceError(f"Supabase returned no verification code for {email}")

        courier = self._courier or CourierService()
        courier.send_otp_email(email, code)

        logger.debug(f"Email code delivered for auth user {user.id}")
        return EmailToken(user_id=str(user.id), email=email)

    def get_account(self) -> dict[str, Any]:
        """
        Fetch the provider account the session token belongs to.

        Raises:
            NoSessionError: If the gateway has no session token or it is rejected
        """
        if not self._access_token:
            raise NoSessionError("No session found")

        try:
            response = self.client.auth.get_user(self._access_token)
        except AuthApiError as e:
            raise NoSessionError(f"Session token rejected: {e}") from e

        if not response or not response.user:
            raise NoSessionError("Session token is no longer valid")

        return {"id": str(response.user.id), "email": response.user.email}


class DocumentOps:
    """Document store operations (Supabase PostgREST tables)."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def list_documents(self, table: str, filters: dict[str, Any] | None = None) -> DocumentList:
        """
        List rows matching equality filters together with the exact count.

        Args:
            table: Table name
            filters: Dictionary of field:value pairs for filtering

        Returns:
            DocumentList with the total count and matching rows

        Example:
            >>> docs = gateway.document_ops().list_documents("users", {"email": "a@b.com"})
            >>> docs.total
            1
        """
        query = self.client.table(table).select("*", count="exact")

        if filters:
            for field, value in filters.items():
                query = query.eq(field, value)

        response = query.execute()
        documents = response.data or []
        total = response.count if response.count is not None else len(documents)
        return DocumentList(total=total, documents=documents)

    def create_document(
        self, table: str, document_id: str, data: dict[str, Any]
    ) -> dict[str, Any] | None:
        """
        Insert a single row with an explicit id.

        Args:
            table: Table name
            document_id: Fresh unique id for the row
            data: Column values

        Returns:
            Inserted row or None if PostgREST returned no representation
        """
        response = self.client.table(table).insert({"id": document_id, **data}).execute()
        return response.data[0] if response.data else None


class StorageOps:
    """Storage operations (Supabase Storage buckets)."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def get_public_url(self, bucket: str, path: str) -> str:
        """Return the public URL of an object in a bucket."""
        return self.client.storage.from_(bucket).get_public_url(path)


class AvatarOps:
    """Resolves avatar images for new users."""

    def __init__(self, storage: StorageOps, config: GatewayConfig) -> None:
        self.storage = storage
        self.config = config

    def default_avatar_url(self) -> str:
        """
        Default avatar for accounts that have not uploaded one.

        Uses the configured storage object when a bucket is set, otherwise
        the static fallback URL.
        """
        if self.config.avatar_bucket:
            return self.storage.get_public_url(
                self.config.avatar_bucket, self.config.default_avatar_path
            )
        return self.config.default_avatar_url


class IdentityGateway:
    """
    Authenticated handle to Supabase Auth, PostgREST and Storage.

    The underlying Supabase client is created on the first capability access.
    Each accessor returns a new, stateless wrapper around that client.

    Use create_admin_gateway() or create_session_gateway() instead of
    instantiating this class directly.
    """

    def __init__(
        self,
        config: GatewayConfig,
        *,
        admin: bool,
        session_token: str | None = None,
        courier: CourierService | None = None,
    ) -> None:
        self.config = config
        self.admin = admin
        self.session_token = session_token
        self._courier = courier
        self._client: Client | None = None

    def _get_client(self) -> Client:
        if self._client is None:
            key = self.config.service_role_key if self.admin else self.config.anon_key
            self._client = create_client(
                self.config.url, key, options=ClientOptions(schema=self.config.database_schema)
            )
            if self.session_token:
                # Row-level security evaluates queries as the session's user
                self._client.postgrest.auth(self.session_token)
        return self._client

    def _require_admin(self, capability: str) -> None:
        if not self.admin:
            raise GatewayCapabilityError(f"{capability} requires an admin gateway")

    def account_ops(self) -> AccountOps:
        """Identity provider operations."""
        return AccountOps(
            self._get_client(),
            admin=self.admin,
            access_token=self.session_token,
            courier=self._courier,
        )

    def document_ops(self) -> DocumentOps:
        """Document store operations."""
        return DocumentOps(self._get_client())

    def storage_ops(self) -> StorageOps:
        """Storage operations (admin only)."""
        self._require_admin("Storage access")
        return StorageOps(self._get_client())

    def avatar_ops(self) -> AvatarOps:
        """Avatar resolution (admin only)."""
        self._require_admin("Avatar access")
        return AvatarOps(self.storage_ops(), self.config)


def create_admin_gateway(
    config: GatewayConfig, courier: CourierService | None = None
) -> IdentityGateway:
    """
    Build a gateway that acts with the service role key.

    ⚠️ WARNING: This gateway bypasses Row-Level Security. Only use it for
    provisioning steps that run before any user session exists.

    Args:
        config: Supabase connection settings
        courier: Email delivery service (a default one is built when omitted)

    Returns:
        Admin IdentityGateway
    """
    return IdentityGateway(config, admin=True, courier=courier)


def create_session_gateway(config: GatewayConfig, session_token: str | None) -> IdentityGateway:
    """
    Build a gateway that acts as the signed-in caller.

    Args:
        config: Supabase connection settings
        session_token: Access token from the session cookie

    Returns:
        Session-scoped IdentityGateway

    Raises:
        NoSessionError: If no session token is present
    """
    if not session_token or not session_token.strip():
        raise NoSessionError("No session found")

    return IdentityGateway(config, admin=False, session_token=session_token.strip())
