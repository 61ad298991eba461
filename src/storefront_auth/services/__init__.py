"""Authentication services.

Provides token encoding, session and reset-token management, and
password hashing.
"""

from storefront_auth.services.password_service import PasswordHashingService
from storefront_auth.services.reset_token_manager import ResetTokenManager
from storefront_auth.services.session_manager import SessionManager, SessionTransport
from storefront_auth.services.token_codec import TokenCodec

__all__ = [
    "PasswordHashingService",
    "ResetTokenManager",
    "SessionManager",
    "SessionTransport",
    "TokenCodec",
]
