"""Auth schemas and data structures.

These are simple data classes used for transferring token and session
data between components.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

from storefront_auth.exceptions import MalformedTokenError


class Realm(str, Enum):
    """Principal namespaces. Each realm signs sessions with its own secret."""

    CUSTOMER = "customer"
    ADMIN = "admin"


def _timestamp(payload: Mapping[str, Any], claim: str) -> datetime:
    value = payload.get(claim)
    # bool is an int subclass; "iat": true must not parse as 1970-01-01
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"Claim '{claim}' must be an integer timestamp"
        raise MalformedTokenError(msg)
    return datetime.fromtimestamp(value, tz=timezone.utc)


def _optional_str(payload: Mapping[str, Any], claim: str) -> str | None:
    value = payload.get(claim)
    if value is not None and not isinstance(value, str):
        msg = f"Claim '{claim}' must be a string"
        raise MalformedTokenError(msg)
    return value


@dataclass(frozen=True)
class TokenClaims:
    """Verified token claims.

    Only ever built from a payload whose signature has already been
    checked.

    Attributes
    ----------
    subject_id
        Identifier of the principal the token was issued to
    issued_at
        Issue time (UTC, whole seconds)
    expires_at
        Absolute expiry (UTC, whole seconds)
    token_id
        Random per-token identifier
    purpose
        Workflow the token is restricted to, None for session tokens
    fingerprint
        Opaque value binding the token to server-side state
    """

    subject_id: str
    issued_at: datetime
    expires_at: datetime
    token_id: str
    purpose: str | None = None
    fingerprint: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> TokenClaims:
        """Validate a decoded payload into claims.

        Raises
        ------
        MalformedTokenError
            If a required claim is missing or has the wrong type
        """
        subject_id = payload.get("sub")
        if not isinstance(subject_id, str) or not subject_id:
            msg = "Claim 'sub' must be a non-empty string"
            raise MalformedTokenError(msg)

        token_id = payload.get("jti")
        if not isinstance(token_id, str) or not token_id:
            msg = "Claim 'jti' must be a non-empty string"
            raise MalformedTokenError(msg)

        return cls(
            subject_id=subject_id,
            issued_at=_timestamp(payload, "iat"),
            expires_at=_timestamp(payload, "exp"),
            token_id=token_id,
            purpose=_optional_str(payload, "purpose"),
            fingerprint=_optional_str(payload, "fingerprint"),
        )

    def is_expired(self, now: datetime) -> bool:
        """Check whether the token is expired at the given instant."""
        return now >= self.expires_at


@dataclass(frozen=True)
class IssuedSession:
    """A freshly issued session token and its metadata."""

    token: str
    subject_id: str
    realm: Realm
    expires_at: datetime
