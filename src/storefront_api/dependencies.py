"""FastAPI dependency injection for the storefront auth API.

Provides dependencies for:
- Database sessions
- Token, session and password services
- Realm credential repositories
- The signed-in customer / administrator from the session cookie
"""

from functools import lru_cache
from typing import Annotated, AsyncGenerator

from fastapi import Cookie, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from storefront_api.config import get_api_settings
from storefront_auth import (
    CredentialData,
    CredentialRepository,
    PasswordHashingService,
    Realm,
    ResetTokenManager,
    SessionManager,
    TokenCodec,
)
from storefront_auth.persistence.sqlalchemy import (
    AdminCredentialRepositorySQLAlchemy,
    CustomerCredentialRepositorySQLAlchemy,
)
from storefront_config.settings import Settings
from storefront_identity import AuthenticationService, EmailService, PasswordResetService

SettingsDep = Annotated[Settings, Depends(get_api_settings)]

SIGN_IN_AGAIN = "Please sign in again"


# -----------------------------------------------------------------------------
# Database Engine & Session
# -----------------------------------------------------------------------------


@lru_cache(maxsize=4)
def get_engine(database_url: str) -> AsyncEngine:
    """
    Get the shared async database engine for a database URL.

    The engine manages the connection pool and is reused across all requests.
    """
    return create_async_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,
    )


@lru_cache(maxsize=4)
def get_session_maker(database_url: str) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        get_engine(database_url),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db_session(settings: SettingsDep) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Yields
    ------
    AsyncSession for database operations
    """
    async with get_session_maker(settings.database_url)() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db_session)]


# -----------------------------------------------------------------------------
# Token & Password Services
# -----------------------------------------------------------------------------


def get_token_codec() -> TokenCodec:
    return TokenCodec()


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    return PasswordHashingService(rounds=settings.password_hash_rounds)


def get_session_manager(
    settings: SettingsDep,
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> SessionManager:
    return SessionManager.from_settings(settings, codec=codec)


def get_reset_token_manager(
    settings: SettingsDep,
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> ResetTokenManager:
    return ResetTokenManager.from_settings(settings, codec=codec)


def get_email_service(settings: SettingsDep) -> EmailService:
    return EmailService(settings)


PasswordServiceDep = Annotated[PasswordHashingService, Depends(get_password_service)]
SessionManagerDep = Annotated[SessionManager, Depends(get_session_manager)]


# -----------------------------------------------------------------------------
# Credential Repositories
# -----------------------------------------------------------------------------


def get_customer_credential_repository(session: DBSession) -> CredentialRepository:
    return CustomerCredentialRepositorySQLAlchemy(session)


def get_admin_credential_repository(session: DBSession) -> CredentialRepository:
    return AdminCredentialRepositorySQLAlchemy(session)


# -----------------------------------------------------------------------------
# Application Services
# -----------------------------------------------------------------------------


def get_customer_auth_service(
    repository: Annotated[
        CredentialRepository, Depends(get_customer_credential_repository)
    ],
    password_service: PasswordServiceDep,
    session_manager: SessionManagerDep,
) -> AuthenticationService:
    return AuthenticationService(
        credential_repository=repository,
        password_service=password_service,
        session_manager=session_manager,
        realm=Realm.CUSTOMER,
    )


def get_admin_auth_service(
    repository: Annotated[
        CredentialRepository, Depends(get_admin_credential_repository)
    ],
    password_service: PasswordServiceDep,
    session_manager: SessionManagerDep,
) -> AuthenticationService:
    return AuthenticationService(
        credential_repository=repository,
        password_service=password_service,
        session_manager=session_manager,
        realm=Realm.ADMIN,
    )


def get_password_reset_service(
    settings: SettingsDep,
    repository: Annotated[
        CredentialRepository, Depends(get_customer_credential_repository)
    ],
    reset_token_manager: Annotated[
        ResetTokenManager, Depends(get_reset_token_manager)
    ],
    password_service: PasswordServiceDep,
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> PasswordResetService:
    return PasswordResetService(
        credential_repository=repository,
        reset_token_manager=reset_token_manager,
        password_service=password_service,
        email_service=email_service,
        app_base_url=settings.app_base_url,
    )


CustomerAuthService = Annotated[AuthenticationService, Depends(get_customer_auth_service)]
AdminAuthService = Annotated[AuthenticationService, Depends(get_admin_auth_service)]
ResetService = Annotated[PasswordResetService, Depends(get_password_reset_service)]


# -----------------------------------------------------------------------------
# Current Principal
# -----------------------------------------------------------------------------


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=SIGN_IN_AGAIN,
    )


async def get_current_customer(
    auth_service: CustomerAuthService,
    session_cookie: Annotated[
        str | None,
        Cookie(alias=SessionManager.COOKIE_NAMES[Realm.CUSTOMER]),
    ] = None,
) -> CredentialData:
    """Resolve the customer session cookie to the signed-in customer."""
    principal = await auth_service.resolve_principal(session_cookie)
    if principal is None:
        raise _unauthorized()
    return principal


async def get_current_admin(
    auth_service: AdminAuthService,
    session_cookie: Annotated[
        str | None,
        Cookie(alias=SessionManager.COOKIE_NAMES[Realm.ADMIN]),
    ] = None,
) -> CredentialData:
    """Resolve the admin session cookie to the signed-in administrator."""
    principal = await auth_service.resolve_principal(session_cookie)
    if principal is None:
        raise _unauthorized()
    return principal


CurrentCustomer = Annotated[CredentialData, Depends(get_current_customer)]
CurrentAdmin = Annotated[CredentialData, Depends(get_current_admin)]
