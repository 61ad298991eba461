"""Authentication schemas for request/response models."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

Username = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CustomerLoginRequest(BaseModel):
    """Request schema for customer login."""

    email: EmailStr
    password: str = Field(..., min_length=1)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "customer@example.com",
                "password": "securepassword123",
            },
        },
    )


class AdminLoginRequest(BaseModel):
    """Request schema for administrator login."""

    username: Username
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    """Request schema for customer signup."""

    email: EmailStr = Field(..., description="Customer's email address")
    password: str = Field(..., description="Password (at least 8 characters)")
    confirm_password: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "customer@example.com",
                "password": "securepassword123",
                "confirm_password": "securepassword123",
            },
        },
    )


class ChangePasswordRequest(BaseModel):
    """Request schema for changing the signed-in customer's password."""

    current_password: str = Field(..., min_length=1)
    new_password: str


class ForgotPasswordRequest(BaseModel):
    """Request schema for requesting a password reset email."""

    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Request schema for choosing a new password from a reset link."""

    password: str
    confirm_password: str


class SuccessResponse(BaseModel):
    """Outcome of a form-style auth action."""

    success: bool = True
    message: str | None = None


class PrincipalResponse(BaseModel):
    """The principal behind the current session."""

    id: str
    realm: str
    identifier: str
