"""Administrator authentication router.

Admin sessions live in their own realm: a separate cookie signed with a
separate secret, so a customer session never opens admin endpoints.
"""

from fastapi import APIRouter, Response, status

from storefront_api.cookies import ResponseCookieTransport
from storefront_api.dependencies import (
    AdminAuthService,
    CurrentAdmin,
    DBSession,
    SessionManagerDep,
    SettingsDep,
)
from storefront_api.exception_handlers import FormError
from storefront_api.schemas.auth import (
    AdminLoginRequest,
    PrincipalResponse,
    SuccessResponse,
)
from storefront_auth import InvalidCredentialsError, Realm

router = APIRouter()

INVALID_LOGIN = "Invalid username or password"


@router.post(
    "/login",
    summary="Sign in an administrator",
    response_model_exclude_none=True,
    responses={
        200: {"description": "Signed in, admin session cookie set"},
        401: {"description": "Invalid username or password"},
    },
)
async def login(
    request: AdminLoginRequest,
    response: Response,
    auth_service: AdminAuthService,
    session: DBSession,
    settings: SettingsDep,
) -> SuccessResponse:
    try:
        await auth_service.login(
            request.username,
            request.password,
            ResponseCookieTransport(response, settings),
        )
    except InvalidCredentialsError as e:
        raise FormError(
            {"username": [INVALID_LOGIN]},
            status.HTTP_401_UNAUTHORIZED,
        ) from e

    await session.commit()
    return SuccessResponse()


@router.post(
    "/logout",
    summary="Sign out the administrator",
    response_model_exclude_none=True,
)
async def logout(
    response: Response,
    session_manager: SessionManagerDep,
    settings: SettingsDep,
) -> SuccessResponse:
    session_manager.destroy_session(
        Realm.ADMIN,
        ResponseCookieTransport(response, settings),
    )
    return SuccessResponse()


@router.get(
    "/me",
    summary="Get the signed-in administrator",
    responses={401: {"description": "No valid admin session"}},
)
async def me(admin: CurrentAdmin) -> PrincipalResponse:
    return PrincipalResponse(
        id=admin.subject_id,
        realm=Realm.ADMIN.value,
        identifier=admin.identifier,
    )
