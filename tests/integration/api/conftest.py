"""Pytest fixtures for API integration tests.

The HTTP stack runs for real (routing, validation, cookies, dependencies);
credential stores are in-memory and email delivery is mocked.
"""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_api.app import API_V1_PREFIX, create_app
from storefront_api.dependencies import (
    get_admin_credential_repository,
    get_customer_credential_repository,
    get_db_session,
    get_email_service,
)
from storefront_auth import PasswordHashingService
from storefront_config.settings import Settings
from storefront_identity import EmailService
from tests.shared.fakes import SECRETS, InMemoryCredentialRepository

TEST_EMAIL = "test@example.com"
TEST_PASSWORD = "SecurePassword123!"


@pytest.fixture
def api_v1_prefix() -> str:
    """Get the API v1 prefix for building URLs."""
    return API_V1_PREFIX


@pytest.fixture
def api_settings() -> Settings:
    """Test API settings."""
    return Settings(
        # Required signing secrets
        customer_session_secret=SecretStr(SECRETS["customer"]),
        admin_session_secret=SecretStr(SECRETS["admin"]),
        password_reset_secret=SecretStr(SECRETS["reset"]),
        # API settings
        app_base_url="https://shop.example.com",
        database_url="sqlite+aiosqlite:///:memory:",
        database_auto_create=False,
        api_debug=True,
        api_cors_origins="http://localhost:3000",
        api_cookie_secure=False,  # Allow HTTP in tests
        password_hash_rounds=4,
    )


@pytest.fixture
def customer_repo() -> InMemoryCredentialRepository:
    return InMemoryCredentialRepository()


@pytest.fixture
def admin_repo() -> InMemoryCredentialRepository:
    return InMemoryCredentialRepository()


@pytest.fixture
def db_session() -> AsyncMock:
    """Stand-in for the request's database session (commit/rollback only)."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def email_service() -> Mock:
    return Mock(spec=EmailService)


@pytest.fixture
def password_service() -> PasswordHashingService:
    return PasswordHashingService(rounds=4)


@pytest.fixture
def test_client(
    api_settings,
    customer_repo,
    admin_repo,
    db_session,
    email_service,
) -> TestClient:
    """Create a test client with in-memory credential stores."""
    app = create_app(settings=api_settings)

    async def override_get_db_session():
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_customer_credential_repository] = lambda: customer_repo
    app.dependency_overrides[get_admin_credential_repository] = lambda: admin_repo
    app.dependency_overrides[get_email_service] = lambda: email_service

    return TestClient(app)


@pytest.fixture
def registered_customer(customer_repo, password_service):
    """A customer with known credentials."""
    return customer_repo.add(TEST_EMAIL, password_service.hash(TEST_PASSWORD))


@pytest.fixture
def registered_admin(admin_repo, password_service):
    """An administrator with known credentials."""
    return admin_repo.add("root", password_service.hash(TEST_PASSWORD))
