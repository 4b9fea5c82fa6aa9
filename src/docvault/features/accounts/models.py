"""Pydantic models for the accounts feature."""

from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints

# Whitespace is stripped before the length rules are checked
FullName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]
SignInName = Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)]


class SignUpRequest(BaseModel):
    """Request model for sign-up (email code + new user record)."""

    email: EmailStr = Field(description="Address the verification code is sent to")
    full_name: FullName = Field(description="User's full name")

    class Config:
        """Pydantic config."""

        json_schema_extra = {
            "example": {
                "email": "jane@example.com",
                "full_name": "Jane Doe",
            }
        }


class SignInRequest(BaseModel):
    """Request model for sign-in."""

    email: EmailStr = Field(description="Address the verification code is sent to")
    full_name: SignInName | None = None


class AccountCreatedResponse(BaseModel):
    """
    Response for both sign-in and sign-up.

    The shape is the same for new and existing users so that responses do not
    reveal whether an email is registered.
    """

    account_id: str


class AccountResponse(BaseModel):
    """Provider account behind the current session."""

    id: str
    email: str | None = None


class UserRecord(BaseModel):
    """Row stored in the users table."""

    id: str
    email: str
    full_name: str = ""
    avatar: str
    account_id: str
