"""Account provisioning for passwordless email-code sign-in and sign-up."""

import logging
from enum import Enum
from typing import Any
from uuid import uuid4

from postgrest.exceptions import APIError

from src.docvault.config import settings
from src.docvault.features.accounts.models import AccountCreatedResponse, UserRecord
from src.docvault.services import PostHogService
from src.docvault.services.identity import (
    GatewayConfig,
    IdentityGateway,
    OtpIssuanceError,
    RecordCreationError,
    UserLookupError,
    create_admin_gateway,
)

logger = logging.getLogger(__name__)

ACCOUNT_CREATION_FAILED = "Failed to create account. Please try again."

# Postgres unique_violation, raised when a concurrent attempt already inserted the email
UNIQUE_VIOLATION = "23505"


class ProvisioningState(str, Enum):
    """Steps of a provisioning attempt, used as log context."""

    START = "start"
    LOOKUP = "lookup"
    ISSUE_OTP = "issue_otp"
    CREATE_RECORD = "create_record"
    SKIP_CREATE = "skip_create"
    DONE = "done"
    FAILED = "failed"


class AccountCreationError(Exception):
    """
    User-safe error for any failed provisioning attempt.

    The internal cause (UserLookupError, OtpIssuanceError, RecordCreationError)
    is kept as __cause__ and never sent to the client.
    """

    def __init__(self, message: str = ACCOUNT_CREATION_FAILED) -> None:
        super().__init__(message)


def _admin_gateway() -> IdentityGateway:
    return create_admin_gateway(GatewayConfig.from_settings(settings))


def _track(account_id: str, event: str, properties: dict[str, Any]) -> None:
    # Analytics never decides the outcome of a provisioning attempt
    try:
        PostHogService().capture(distinct_id=account_id, event=event, properties=properties)
    except Exception as e:
        logger.warning(f"Failed to capture {event} for account {account_id}: {e}")


def normalize_email(email: str) -> str:
    """
    Lowercase and strip an email so lookups and inserts agree.

    Lookups use exact equality, so every email already in the users table
    must be stored lowercase. Rows written before normalization need a one-off
    `update users set email = lower(email)` or they will not be matched.
    """
    return email.strip().lower()


def get_user_by_email(email: str, gateway: IdentityGateway | None = None) -> dict[str, Any] | None:
    """
    Find the user record for an email.

    Args:
        email: Normalized email address
        gateway: Admin gateway (a fresh one is built when omitted)

    Returns:
        First matching record or None if the email is not registered

    Raises:
        UserLookupError: If the users table cannot be queried
    """
    gateway = gateway or _admin_gateway()

    try:
        result = gateway.document_ops().list_documents(
            gateway.config.users_table, filters={"email": email}
        )
    except Exception as e:
        logger.error(f"Failed to look up user by email {email}: {e}")
        raise UserLookupError(f"User lookup failed for {email}") from e

    return result.documents[0] if result.total > 0 and result.documents else None


def send_email_otp(email: str, gateway: IdentityGateway | None = None) -> str:
    """
    Issue and deliver a one-time verification code.

    Not idempotent: every call sends another email.

    Args:
        email: Normalized email address
        gateway: Admin gateway (a fresh one is built when omitted)

    Returns:
        Provider account id the code is bound to

    Raises:
        OtpIssuanceError: If the code could not be generated or delivered
    """
    gateway = gateway or _admin_gateway()

    try:
        token = gateway.account_ops().create_email_token(email)
    except OtpIssuanceError:
        logger.error(f"Failed to send email OTP to {email}: no code returned")
        raise
    except Exception as e:
        logger.error(f"Failed to send email OTP to {email}: {e}")
        raise OtpIssuanceError(f"Email OTP issuance failed for {email}") from e

    if not token.user_id:
        raise OtpIssuanceError(f"Email OTP issuance returned no account id for {email}")

    return token.user_id


def create_user_record(
    email: str, full_name: str, account_id: str, gateway: IdentityGateway | None = None
) -> dict[str, Any] | None:
    """
    Insert the user record for a newly seen email.

    Args:
        email: Normalized email address
        full_name: Name from the sign-up form ("" for sign-in)
        account_id: Provider account id from send_email_otp()
        gateway: Admin gateway (a fresh one is built when omitted)

    Returns:
        Inserted record, or None if a concurrent attempt already created it

    Raises:
        RecordCreationError: If the insert fails
    """
    gateway = gateway or _admin_gateway()

    try:
        record = UserRecord(
            id=str(uuid4()),
            email=email,
            full_name=full_name,
            avatar=gateway.avatar_ops().default_avatar_url(),
            account_id=account_id,
        )
        created = gateway.document_ops().create_document(
            gateway.config.users_table,
            record.id,
            record.model_dump(exclude={"id"}),
        )
    except APIError as e:
        if e.code == UNIQUE_VIOLATION:
            logger.warning(f"User record for {email} was created concurrently, skipping insert")
            return None
        logger.error(f"Failed to create user record for {email}: {e}")
        raise RecordCreationError(f"User record creation failed for {email}") from e
    except Exception as e:
        logger.error(f"Failed to create user record for {email}: {e}")
        raise RecordCreationError(f"User record creation failed for {email}") from e

    if not created:
        raise RecordCreationError(f"Insert returned no record for {email}")

    return created


async def create_account(
    email: str,
    full_name: str | None = None,
    gateway: IdentityGateway | None = None,
) -> AccountCreatedResponse:
    """
    Provision an account and send a sign-in code (used by sign-in and sign-up).

    Steps:
    1. Look up an existing user record by email
    2. Always issue a fresh email code, whether or not the user exists
    3. Create the user record only if none was found

    A record is never written unless a code was issued first. The response is
    the same for new and existing users.

    Args:
        email: Email address from the form
        full_name: Full name from the sign-up form (empty for sign-in)
        gateway: Admin gateway shared by all steps (built per step when omitted)

    Returns:
        AccountCreatedResponse with the provider account id

    Raises:
        AccountCreationError: If any step fails
    """
    email = normalize_email(email)
    full_name = (full_name or "").strip()
    state = ProvisioningState.START

    try:
        state = ProvisioningState.LOOKUP
        existing_user = get_user_by_email(email, gateway)

        state = ProvisioningState.ISSUE_OTP
        account_id = send_email_otp(email, gateway)
        if not account_id:
            raise OtpIssuanceError(f"Email OTP issuance returned no account id for {email}")

        _track(account_id, "email_otp_sent", {"existing_user": existing_user is not None})

        if existing_user:
            state = ProvisioningState.SKIP_CREATE
            logger.info(f"User record exists for {email}, skipping create")
        else:
            state = ProvisioningState.CREATE_RECORD
            if create_user_record(email, full_name, account_id, gateway):
                logger.info(f"Created user record for {email} (account {account_id})")
                _track(account_id, "account_created", {"has_full_name": bool(full_name)})

        state = ProvisioningState.DONE
        return AccountCreatedResponse(account_id=account_id)

    except Exception as e:
        logger.error(
            f"Account provisioning failed for {email} during {state.value}: {e}",
            exc_info=True,
            extra={
                "email": email,
                "state": ProvisioningState.FAILED.value,
                "failed_step": state.value,
                "error_type": type(e).__name__,
            },
        )
        raise AccountCreationError() from e
