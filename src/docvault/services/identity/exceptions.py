"""Exceptions raised by the identity gateway and provisioning steps."""


class IdentityError(Exception):
    """Base class for identity provider and document store failures."""

    pass


class ExternalServiceError(IdentityError):
    """Raised when a call to Supabase Auth, PostgREST or Courier fails."""

    pass


class UserLookupError(ExternalServiceError):
    """Raised when the user table cannot be queried."""

    pass


class OtpIssuanceError(ExternalServiceError):
    """Raised when a verification code could not be generated or delivered."""

    pass


class RecordCreationError(ExternalServiceError):
    """Raised when the user record write fails after a code was issued."""

    pass


class NoSessionError(IdentityError):
    """Raised when a session-scoped gateway is requested without a session token."""

    pass


class GatewayCapabilityError(IdentityError):
    """Raised when an admin-only capability is requested from a session gateway."""

    pass
