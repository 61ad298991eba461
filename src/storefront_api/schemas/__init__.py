"""Request and response schemas."""

from storefront_api.schemas.auth import (
    AdminLoginRequest,
    ChangePasswordRequest,
    CustomerLoginRequest,
    ForgotPasswordRequest,
    PrincipalResponse,
    RegisterRequest,
    ResetPasswordRequest,
    SuccessResponse,
)

__all__ = [
    "AdminLoginRequest",
    "ChangePasswordRequest",
    "CustomerLoginRequest",
    "ForgotPasswordRequest",
    "PrincipalResponse",
    "RegisterRequest",
    "ResetPasswordRequest",
    "SuccessResponse",
]
