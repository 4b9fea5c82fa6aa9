"""Identity gateway over Supabase Auth, PostgREST and Storage."""

from src.docvault.services.identity.exceptions import (
    ExternalServiceError,
    GatewayCapabilityError,
    IdentityError,
    NoSessionError,
    OtpIssuanceError,
    RecordCreationError,
    UserLookupError,
)
from src.docvault.services.identity.gateway import (
    IdentityGateway,
    create_admin_gateway,
    create_session_gateway,
)
from src.docvault.services.identity.models import DocumentList, EmailToken, GatewayConfig

__all__ = [
    "IdentityGateway",
    "create_admin_gateway",
    "create_session_gateway",
    "GatewayConfig",
    "DocumentList",
    "EmailToken",
    "IdentityError",
    "ExternalServiceError",
    "UserLookupError",
    "OtpIssuanceError",
    "RecordCreationError",
    "NoSessionError",
    "GatewayCapabilityError",
]
