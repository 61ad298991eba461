"""Customer authentication router: signup, login, logout, password flows."""

from fastapi import APIRouter, Response, status

from storefront_api.cookies import ResponseCookieTransport
from storefront_api.dependencies import (
    CurrentCustomer,
    CustomerAuthService,
    DBSession,
    ResetService,
    SessionManagerDep,
    SettingsDep,
)
from storefront_api.exception_handlers import FormError
from storefront_api.schemas.auth import (
    ChangePasswordRequest,
    CustomerLoginRequest,
    ForgotPasswordRequest,
    PrincipalResponse,
    RegisterRequest,
    ResetPasswordRequest,
    SuccessResponse,
)
from storefront_auth import (
    CredentialMismatchError,
    IdentifierAlreadyExistsError,
    InvalidCredentialsError,
    InvalidResetTokenError,
    Realm,
    WeakPasswordError,
)

router = APIRouter()

INVALID_LOGIN = "Invalid email or password"
EMAIL_TAKEN = "Email already exists, please use a different email or login."
PASSWORDS_DIFFER = "Passwords do not match"
INVALID_LINK = "This link is invalid or has expired"
RESET_REQUESTED = (
    "If an account with that email exists, we've sent a password reset link."
)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new customer",
    response_model_exclude_none=True,
    responses={
        201: {"description": "Customer registered and signed in"},
        400: {"description": "Weak password or confirmation mismatch"},
        409: {"description": "Email already registered"},
    },
)
async def register(
    request: RegisterRequest,
    response: Response,
    auth_service: CustomerAuthService,
    session: DBSession,
    settings: SettingsDep,
) -> SuccessResponse:
    if request.password != request.confirm_password:
        raise FormError({"confirm_password": [PASSWORDS_DIFFER]})

    try:
        await auth_service.register(
            str(request.email),
            request.password,
            ResponseCookieTransport(response, settings),
        )
    except IdentifierAlreadyExistsError as e:
        await session.rollback()
        raise FormError({"email": [EMAIL_TAKEN]}, status.HTTP_409_CONFLICT) from e
    except WeakPasswordError as e:
        raise FormError({"password": [e.message]}) from e

    await session.commit()
    return SuccessResponse()


@router.post(
    "/login",
    summary="Sign in a customer",
    response_model_exclude_none=True,
    responses={
        200: {"description": "Signed in, session cookie set"},
        401: {"description": "Invalid email or password"},
    },
)
async def login(
    request: CustomerLoginRequest,
    response: Response,
    auth_service: CustomerAuthService,
    session: DBSession,
    settings: SettingsDep,
) -> SuccessResponse:
    """
    Authenticate with email and password.

    On success the session is set as an HttpOnly cookie. Unknown email and
    wrong password produce the same answer.
    """
    try:
        await auth_service.login(
            str(request.email),
            request.password,
            ResponseCookieTransport(response, settings),
        )
    except InvalidCredentialsError as e:
        raise FormError({"email": [INVALID_LOGIN]}, status.HTTP_401_UNAUTHORIZED) from e

    # Persists a transparently upgraded password hash, if any
    await session.commit()
    return SuccessResponse()


@router.post(
    "/logout",
    summary="Sign out the customer",
    response_model_exclude_none=True,
)
async def logout(
    response: Response,
    session_manager: SessionManagerDep,
    settings: SettingsDep,
) -> SuccessResponse:
    session_manager.destroy_session(
        Realm.CUSTOMER,
        ResponseCookieTransport(response, settings),
    )
    return SuccessResponse()


@router.get(
    "/me",
    summary="Get the signed-in customer",
    responses={401: {"description": "No valid session"}},
)
async def me(customer: CurrentCustomer) -> PrincipalResponse:
    return PrincipalResponse(
        id=customer.subject_id,
        realm=Realm.CUSTOMER.value,
        identifier=customer.identifier,
    )


@router.post(
    "/change-password",
    summary="Change the signed-in customer's password",
    response_model_exclude_none=True,
    responses={
        400: {"description": "Current password incorrect or new password weak"},
        401: {"description": "No valid session"},
    },
)
async def change_password(
    request: ChangePasswordRequest,
    customer: CurrentCustomer,
    auth_service: CustomerAuthService,
    session: DBSession,
) -> SuccessResponse:
    try:
        await auth_service.change_password(
            customer.subject_id,
            request.current_password,
            request.new_password,
        )
    except CredentialMismatchError as e:
        raise FormError({"current_password": [e.message]}) from e
    except WeakPasswordError as e:
        raise FormError({"new_password": [e.message]}) from e

    await session.commit()
    return SuccessResponse(message="Password updated successfully")


@router.post(
    "/password-reset",
    summary="Request a password reset email",
    response_model_exclude_none=True,
)
async def request_password_reset(
    request: ForgotPasswordRequest,
    reset_service: ResetService,
) -> SuccessResponse:
    """Always succeeds, whether or not the email belongs to an account."""
    await reset_service.request_reset(str(request.email))
    return SuccessResponse(message=RESET_REQUESTED)


@router.get(
    "/password-reset/{token}",
    summary="Check a password reset link",
    response_model_exclude_none=True,
    responses={400: {"description": "Link invalid or expired"}},
)
async def check_password_reset_link(
    token: str,
    reset_service: ResetService,
) -> SuccessResponse:
    if not await reset_service.check_link(token):
        raise FormError({"token": [INVALID_LINK]})
    return SuccessResponse()


@router.post(
    "/password-reset/{token}",
    summary="Choose a new password from a reset link",
    response_model_exclude_none=True,
    responses={400: {"description": "Link invalid/expired or password weak"}},
)
async def reset_password(
    token: str,
    request: ResetPasswordRequest,
    reset_service: ResetService,
    session: DBSession,
) -> SuccessResponse:
    if request.password != request.confirm_password:
        raise FormError({"confirm_password": [PASSWORDS_DIFFER]})

    try:
        await reset_service.reset_password(token, request.password)
    except InvalidResetTokenError as e:
        raise FormError({"token": [INVALID_LINK]}) from e
    except WeakPasswordError as e:
        raise FormError({"password": [e.message]}) from e

    await session.commit()
    return SuccessResponse(message="Password updated successfully")
