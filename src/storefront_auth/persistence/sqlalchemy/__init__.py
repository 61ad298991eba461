"""SQLAlchemy implementation for storefront_auth persistence.

Provides:
- AuthBase: Declarative base for auth models
- CustomerCredentialModel, AdminCredentialModel: credential tables
- Repository implementations for both realms

Examples
--------
# In your Alembic env.py or migration setup:
from storefront_auth.persistence.sqlalchemy import AuthBase
target_metadata = [YourBase.metadata, AuthBase.metadata]
"""

from storefront_auth.persistence.sqlalchemy.base import AuthBase
from storefront_auth.persistence.sqlalchemy.models import (
    AdminCredentialModel,
    CustomerCredentialModel,
)
from storefront_auth.persistence.sqlalchemy.repositories import (
    AdminCredentialRepositorySQLAlchemy,
    CustomerCredentialRepositorySQLAlchemy,
)

__all__ = [
    "AdminCredentialModel",
    "AdminCredentialRepositorySQLAlchemy",
    "AuthBase",
    "CustomerCredentialModel",
    "CustomerCredentialRepositorySQLAlchemy",
]
