"""FastAPI application factory.

Creates and configures the FastAPI application with the auth routers,
middleware, and exception handlers.

API Versioning:
    All API endpoints are versioned under /api/v1/ prefix.
    The health check endpoint remains unversioned at /health.

Run with:
    uvicorn storefront_api.app:create_app --factory
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from storefront_api.config import get_api_settings
from storefront_api.dependencies import get_engine
from storefront_api.exception_handlers import setup_exception_handlers
from storefront_api.routers import admin_auth_router, auth_router
from storefront_auth import PasswordHashingService, ResetTokenManager, SessionManager
from storefront_auth.persistence.sqlalchemy import AuthBase
from storefront_config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# API version info
API_VERSION = "1.0.0"
API_V1_PREFIX = "/api/v1"

OPENAPI_TAGS = [
    {
        "name": "Authentication",
        "description": """Customer signup, login and password management.

**Sessions:**
- Stateless signed session tokens in an HttpOnly `session` cookie
- Valid for 7 days, no server-side session storage

**Password recovery:**
- Reset links valid for 24 hours
- A link stops working once the password has been changed
""",
    },
    {
        "name": "Admin Authentication",
        "description": """Administrator login.

Admin sessions use a separate `admin_session` cookie signed with their
own secret; customer sessions are never accepted here.
""",
    },
]


def _configure_logging(settings: Settings) -> None:
    """Configure application logging.

    Sets up logging for the storefront packages with:
    - Console output with timestamps and module names
    - Configurable log level (from settings)
    - WARNING level for noisy third-party libraries
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,  # Override any existing config
    )

    for package in (
        "storefront_api",
        "storefront_auth",
        "storefront_config",
        "storefront_identity",
    ):
        logging.getLogger(package).setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


async def _init_database_schema(engine: AsyncEngine) -> None:
    """Create the credential tables if they do not exist yet."""
    logger.info("Initializing database schema...")
    try:
        async with engine.begin() as conn:
            await conn.run_sync(AuthBase.metadata.create_all)
    except ConnectionRefusedError:
        logger.critical("Could not connect to the database.")
        raise SystemExit(1) from None

    logger.info("Database schema initialized successfully")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings

    logger.info("Starting %s auth API v%s...", settings.app_name, API_VERSION)
    engine = get_engine(settings.database_url)
    if settings.database_auto_create:
        await _init_database_schema(engine)
    # Pay for the login dummy hash before the first request does
    PasswordHashingService(rounds=settings.password_hash_rounds).dummy_hash()
    yield

    logger.info("Shutting down %s auth API...", settings.app_name)
    await engine.dispose()
    logger.info("Database connections closed")


def create_v1_router() -> APIRouter:
    """Create the v1 API router with all endpoints."""
    v1_router = APIRouter()
    v1_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
    v1_router.include_router(
        admin_auth_router,
        prefix="/admin/auth",
        tags=["Admin Authentication"],
    )
    return v1_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings
        Optional settings override for testing.

    Returns
    -------
    Configured FastAPI application instance.

    Raises
    ------
    ConfigurationMissingError
        If a signing secret is not configured
    ConfigurationError
        If the configuration is present but unusable
    """
    if settings is None:
        settings = get_settings()

    _configure_logging(settings)

    # Fail at startup, not on the first request, if the secrets are unusable
    SessionManager.from_settings(settings)
    ResetTokenManager.from_settings(settings)

    app = FastAPI(
        title=f"{settings.app_name} Auth API",
        description="Customer and administrator sessions, signup and password recovery.",
        version=API_VERSION,
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        openapi_url="/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )
    app.state.settings = settings
    app.dependency_overrides[get_api_settings] = lambda: settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(create_v1_router(), prefix=API_V1_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """Health check endpoint, unversioned for load balancers."""
        return {
            "status": "healthy",
            "version": API_VERSION,
            "api_versions": ["v1"],
        }

    return app
