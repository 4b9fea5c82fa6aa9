"""API handlers for passwordless sign-in and sign-up."""

import logging

from fastapi import APIRouter, HTTPException, Request, status

from src.docvault.config import settings
from src.docvault.features.accounts.models import (
    AccountCreatedResponse,
    AccountResponse,
    SignInRequest,
    SignUpRequest,
)
from src.docvault.features.accounts.provisioning import (
    ACCOUNT_CREATION_FAILED,
    AccountCreationError,
    create_account,
)
from src.docvault.services.identity import (
    GatewayConfig,
    NoSessionError,
    create_session_gateway,
)
from src.docvault.services.rate_limiter import default_rate_limit, otp_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


async def _provision(email: str, full_name: str | None) -> AccountCreatedResponse:
    try:
        return await create_account(email=email, full_name=full_name)
    except AccountCreationError as e:
        # Cause was logged by the provisioner; only the generic message leaves the API
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=ACCOUNT_CREATION_FAILED,
        ) from e


@router.post("/sign-up", response_model=AccountCreatedResponse)
@otp_rate_limit
async def sign_up(request: Request, req: SignUpRequest) -> AccountCreatedResponse:
    """
    Send a sign-up code and create the user record if the email is new.

    Args:
        req: Email and full name from the sign-up form

    Returns:
        Account id to submit together with the emailed code

    Raises:
        HTTPException: 500 if provisioning fails
    """
    return await _provision(req.email, req.full_name)


@router.post("/sign-in", response_model=AccountCreatedResponse)
@otp_rate_limit
async def sign_in(request: Request, req: SignInRequest) -> AccountCreatedResponse:
    """
    Send a sign-in code.

    An unregistered email still gets a bare user record (empty full name),
    so sign-in and sign-up responses are indistinguishable.

    Args:
        req: Email from the sign-in form

    Returns:
        Account id to submit together with the emailed code

    Raises:
        HTTPException: 500 if provisioning fails
    """
    return await _provision(req.email, req.full_name)


@router.get("/me", response_model=AccountResponse)
@default_rate_limit
async def get_session_account(request: Request) -> AccountResponse:
    """
    Return the identity provider account for the session cookie.

    Raises:
        HTTPException: 401 if there is no valid session
        HTTPException: 502 if Supabase Auth cannot be reached
    """
    try:
        gateway = create_session_gateway(
            GatewayConfig.from_settings(settings),
            request.cookies.get(settings.session_cookie_name),
        )
        account = gateway.account_ops().get_account()
        return AccountResponse(**account)

    except NoSessionError as e:
        logger.info(f"Rejected session lookup: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No session found",
        ) from e
    except Exception as e:
        logger.error(f"Failed to fetch session account: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch account. Please try again.",
        ) from e
