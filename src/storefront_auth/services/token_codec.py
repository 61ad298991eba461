"""Signed token codec.

Encodes claim sets into compact HS256 JWS tokens and verifies presented
tokens. Tokens are base64url segments joined by dots, so they are safe
inside cookie values and URL path segments.
"""

from __future__ import annotations

import hmac
from datetime import datetime
from typing import Callable
from uuid import uuid4

import jwt
from jwt.algorithms import HMACAlgorithm
from jwt.utils import base64url_encode

from storefront_auth.exceptions import (
    InvalidSignatureError,
    MalformedTokenError,
    TokenEncodingError,
    TokenExpiredError,
)
from storefront_auth.schemas import TokenClaims
from storefront_auth.time import utc_now


class TokenCodec:
    """Encode and verify signed, time-bounded tokens.

    The codec is stateless: every call is a pure function of the token,
    the secret and the clock. The secret is chosen by the caller per token
    class (customer session, admin session, password reset).

    Examples
    --------
    >>> codec = TokenCodec()
    >>> token = codec.encode("cust_42", secret, codec.now() + timedelta(days=7))
    >>> codec.decode(token, secret).subject_id
    'cust_42'
    """

    ALGORITHM = "HS256"
    REQUIRED_CLAIMS = ("sub", "iat", "exp", "jti")

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        """Initialize the codec.

        Parameters
        ----------
        clock
            Returns the current timezone-aware time. Injectable for tests.
        """
        self._clock = clock
        self._algorithm = HMACAlgorithm(HMACAlgorithm.SHA256)

    def now(self) -> datetime:
        """Current time truncated to the token timestamp resolution (seconds)."""
        return self._clock().replace(microsecond=0)

    def encode(
        self,
        subject_id: str,
        secret: str,
        expires_at: datetime,
        *,
        purpose: str | None = None,
        fingerprint: str | None = None,
    ) -> str:
        """Encode claims into a signed token.

        Parameters
        ----------
        subject_id
            Identifier of the principal the token is issued to
        secret
            Signing secret of the token class
        expires_at
            Absolute, timezone-aware expiry. Truncated to whole seconds.
        purpose
            Optional workflow restriction (e.g. "password-reset")
        fingerprint
            Optional value binding the token to server-side state

        Returns
        -------
        The compact token string

        Raises
        ------
        TokenEncodingError
            If the claims are malformed or the expiry is not in the future
        """
        if not isinstance(subject_id, str) or not subject_id:
            msg = "Token claims require a non-empty subject id"
            raise TokenEncodingError(msg)
        if not secret:
            msg = "Signing secret cannot be empty"
            raise TokenEncodingError(msg)
        if expires_at.tzinfo is None:
            msg = "Token expiry must be timezone-aware"
            raise TokenEncodingError(msg)

        issued_at = self.now()
        expires_at = expires_at.replace(microsecond=0)
        if expires_at <= issued_at:
            msg = "Token expiry must be after the issue time"
            raise TokenEncodingError(msg)

        payload: dict[str, str | int] = {
            "sub": subject_id,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": uuid4().hex,
        }
        if purpose is not None:
            payload["purpose"] = purpose
        if fingerprint is not None:
            payload["fingerprint"] = fingerprint

        return jwt.encode(payload, secret, algorithm=self.ALGORITHM)

    def decode(self, token: str, secret: str) -> TokenClaims:
        """Verify a presented token and return its claims.

        The token is untrusted input. The signature is recomputed over the
        raw header and claims segments and compared before anything in the
        token is decoded; expiry is only read afterwards.

        Parameters
        ----------
        token
            The token string to verify
        secret
            Signing secret of the expected token class

        Returns
        -------
        TokenClaims of the verified token

        Raises
        ------
        MalformedTokenError
            If the token is not a three-segment token or its claims are unusable
        InvalidSignatureError
            If the signature does not match
        TokenExpiredError
            If the token is correctly signed but past its expiry
        """
        if not secret:
            msg = "Signing secret cannot be empty"
            raise ValueError(msg)
        if not isinstance(token, str) or not token:
            raise MalformedTokenError("Token is empty")

        segments = token.split(".")
        if len(segments) != 3:
            raise MalformedTokenError("Token must consist of three segments")

        self._verify_signature(segments, secret)

        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.ALGORITHM],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": list(self.REQUIRED_CLAIMS),
                },
            )
        except jwt.PyJWTError as e:
            raise MalformedTokenError(f"Malformed token payload: {e}") from e

        claims = TokenClaims.from_payload(payload)

        if claims.is_expired(self._clock()):
            raise TokenExpiredError
        return claims

    def _verify_signature(self, segments: list[str], secret: str) -> None:
        header_segment, payload_segment, signature_segment = segments
        try:
            signing_input = f"{header_segment}.{payload_segment}".encode()
            presented = signature_segment.encode()
        except UnicodeEncodeError as e:
            raise MalformedTokenError("Token contains invalid characters") from e

        key = self._algorithm.prepare_key(secret)
        # Compare the canonical base64url form so non-canonical encodings of
        # the same signature bytes are rejected too.
        expected = base64url_encode(self._algorithm.sign(signing_input, key))
        if not hmac.compare_digest(expected, presented):
            raise InvalidSignatureError
