"""Storefront Auth - credential and session infrastructure.

This package handles:
- Signed token encoding and verification (PyJWT, HS256)
- Realm-scoped sessions (customer / admin) with one secret per realm
- Purpose-scoped password reset tokens
- Password hashing (bcrypt)
- Credential storage (with pluggable persistence)

Architecture:
    storefront_auth/
    ├── services/           # Pure logic (codec, sessions, reset tokens, hashing)
    ├── repositories/       # Abstract interfaces
    ├── persistence/        # Implementations by technology
    │   └── sqlalchemy/
    ├── schemas.py          # Data classes
    └── exceptions.py       # Auth exceptions
"""

from storefront_auth.exceptions import (
    AuthError,
    CredentialChangedError,
    CredentialMismatchError,
    CredentialNotFoundError,
    IdentifierAlreadyExistsError,
    InvalidCredentialsError,
    InvalidPurposeError,
    InvalidResetTokenError,
    InvalidSignatureError,
    InvalidTokenError,
    MalformedTokenError,
    TokenEncodingError,
    TokenExpiredError,
    WeakPasswordError,
)
from storefront_auth.repositories import CredentialData, CredentialRepository
from storefront_auth.schemas import IssuedSession, Realm, TokenClaims
from storefront_auth.services import (
    PasswordHashingService,
    ResetTokenManager,
    SessionManager,
    SessionTransport,
    TokenCodec,
)

__all__ = [
    # Services
    "PasswordHashingService",
    "ResetTokenManager",
    "SessionManager",
    "SessionTransport",
    "TokenCodec",
    # Repositories (interfaces)
    "CredentialData",
    "CredentialRepository",
    # Schemas
    "IssuedSession",
    "Realm",
    "TokenClaims",
    # Exceptions
    "AuthError",
    "CredentialChangedError",
    "CredentialMismatchError",
    "CredentialNotFoundError",
    "IdentifierAlreadyExistsError",
    "InvalidCredentialsError",
    "InvalidPurposeError",
    "InvalidResetTokenError",
    "InvalidSignatureError",
    "InvalidTokenError",
    "MalformedTokenError",
    "TokenEncodingError",
    "TokenExpiredError",
    "WeakPasswordError",
]
