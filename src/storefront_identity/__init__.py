"""Storefront Identity - login, signup and password recovery flows.

This module composes the storefront_auth primitives into the flows the
storefront exposes:
- Login and signup per realm (customer, admin)
- Password change for signed-in principals
- Password reset by email link

The rest of the storefront (catalog, cart, orders) only references the
principal id resolved from a session.
"""

from storefront_identity.application.services import (
    AuthenticationService,
    PasswordResetService,
)
from storefront_identity.infrastructure.email import EmailService

__all__ = [
    "AuthenticationService",
    "EmailService",
    "PasswordResetService",
]
