"""Password reset tokens.

Reset tokens are signed with their own secret and carry a purpose claim,
so neither a session token nor any other token class can be replayed into
the reset flow. They also carry a fingerprint of the subject's current
password hash: once the password changes, every reset token issued before
the change stops validating, which makes each token single-use without
storing issued tokens.
"""

from __future__ import annotations

import hashlib
import hmac
from datetime import timedelta
from typing import TYPE_CHECKING

from storefront_auth.exceptions import InvalidPurposeError
from storefront_auth.schemas import TokenClaims
from storefront_auth.services.token_codec import TokenCodec
from storefront_config.exceptions import ConfigurationMissingError

if TYPE_CHECKING:
    from storefront_config.settings import Settings


class ResetTokenManager:
    """Issue and validate purpose-scoped password reset tokens.

    Examples
    --------
    >>> manager = ResetTokenManager(secret="...")
    >>> token = manager.issue_reset_token("cust_42")
    >>> manager.validate_reset_token(token)
    'cust_42'
    """

    PURPOSE = "password-reset"
    DEFAULT_LIFETIME = timedelta(hours=24)

    def __init__(
        self,
        secret: str,
        codec: TokenCodec | None = None,
        lifetime: timedelta = DEFAULT_LIFETIME,
    ):
        if not secret:
            msg = "Password reset secret is not configured"
            raise ConfigurationMissingError(msg)

        self._secret = secret
        self._codec = codec or TokenCodec()
        self._lifetime = lifetime

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        codec: TokenCodec | None = None,
    ) -> ResetTokenManager:
        return cls(
            secret=settings.password_reset_secret.get_secret_value(),
            codec=codec,
            lifetime=timedelta(hours=settings.password_reset_expire_hours),
        )

    def issue_reset_token(
        self,
        subject_id: str,
        fingerprint: str | None = None,
    ) -> str:
        """Issue a reset token valid for the configured lifetime.

        Parameters
        ----------
        subject_id
            The principal whose password may be reset
        fingerprint
            Value from fingerprint_for() of the current password hash

        Returns
        -------
        The token, to be embedded in a recovery link
        """
        expires_at = self._codec.now() + self._lifetime
        return self._codec.encode(
            subject_id,
            self._secret,
            expires_at,
            purpose=self.PURPOSE,
            fingerprint=fingerprint,
        )

    def decode_reset_token(self, token: str) -> TokenClaims:
        """Verify a reset token and return its claims.

        Raises
        ------
        MalformedTokenError, InvalidSignatureError, TokenExpiredError
            Per TokenCodec.decode
        InvalidPurposeError
            If the token is not a password reset token
        """
        claims = self._codec.decode(token, self._secret)
        if claims.purpose != self.PURPOSE:
            raise InvalidPurposeError
        return claims

    def validate_reset_token(self, token: str) -> str:
        """Verify a reset token and return the subject id it was issued to."""
        return self.decode_reset_token(token).subject_id

    def fingerprint_for(self, password_hash: str) -> str:
        """Keyed fingerprint of a stored password hash."""
        return hmac.new(
            self._secret.encode("utf-8"),
            password_hash.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

    def is_current(self, claims: TokenClaims, password_hash: str) -> bool:
        """Check that a token was issued against the current password hash."""
        if claims.fingerprint is None:
            return False
        return hmac.compare_digest(
            claims.fingerprint,
            self.fingerprint_for(password_hash),
        )
