"""SQLAlchemy models for storefront_auth."""

from storefront_auth.persistence.sqlalchemy.models.admin_credential_model import (
    AdminCredentialModel,
)
from storefront_auth.persistence.sqlalchemy.models.customer_credential_model import (
    CustomerCredentialModel,
)

__all__ = [
    "AdminCredentialModel",
    "CustomerCredentialModel",
]
