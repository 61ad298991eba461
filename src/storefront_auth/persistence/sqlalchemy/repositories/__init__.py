"""SQLAlchemy repository implementations for storefront_auth."""

from storefront_auth.persistence.sqlalchemy.repositories.credential_repository import (
    AdminCredentialRepositorySQLAlchemy,
    CustomerCredentialRepositorySQLAlchemy,
)

__all__ = [
    "AdminCredentialRepositorySQLAlchemy",
    "CustomerCredentialRepositorySQLAlchemy",
]
