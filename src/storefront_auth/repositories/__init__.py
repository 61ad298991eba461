"""Repository interfaces for storefront_auth."""

from storefront_auth.repositories.credential_repository import (
    CredentialData,
    CredentialRepository,
)

__all__ = [
    "CredentialData",
    "CredentialRepository",
]
