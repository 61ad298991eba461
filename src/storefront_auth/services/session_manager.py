"""Realm-scoped session issuance and resolution.

Sessions are not stored server-side: the signed token in the client's
cookie is the session. Each realm signs with its own secret, so a customer
token never resolves in the admin realm and vice versa.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Mapping, Protocol

from storefront_auth.exceptions import InvalidTokenError
from storefront_auth.schemas import IssuedSession, Realm
from storefront_auth.services.token_codec import TokenCodec
from storefront_config.exceptions import ConfigurationError, ConfigurationMissingError

if TYPE_CHECKING:
    from storefront_config.settings import Settings

logger = logging.getLogger(__name__)


class SessionTransport(Protocol):
    """Cookie operations of the surrounding transport layer."""

    def set_cookie(self, name: str, value: str, expires: datetime) -> None: ...

    def delete_cookie(self, name: str) -> None: ...


class SessionManager:
    """Issue, resolve and destroy realm-scoped session tokens."""

    DEFAULT_LIFETIME = timedelta(days=7)
    COOKIE_NAMES = {
        Realm.CUSTOMER: "session",
        Realm.ADMIN: "admin_session",
    }

    def __init__(
        self,
        secrets: Mapping[Realm, str],
        codec: TokenCodec | None = None,
        lifetime: timedelta = DEFAULT_LIFETIME,
    ):
        """Initialize the session manager.

        Parameters
        ----------
        secrets
            Signing secret for every realm
        codec
            Token codec (a default one is created if omitted)
        lifetime
            How long an issued session stays valid

        Raises
        ------
        ConfigurationMissingError
            If a realm has no secret
        ConfigurationError
            If two realms share a secret
        """
        missing = [realm.value for realm in Realm if not secrets.get(realm)]
        if missing:
            msg = f"Session secret missing for realm(s): {', '.join(missing)}"
            raise ConfigurationMissingError(msg)
        if len({secrets[realm] for realm in Realm}) != len(Realm):
            msg = "Each realm must use a distinct session secret"
            raise ConfigurationError(msg)

        self._secrets = {realm: secrets[realm] for realm in Realm}
        self._codec = codec or TokenCodec()
        self._lifetime = lifetime

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        codec: TokenCodec | None = None,
    ) -> SessionManager:
        return cls(
            secrets={
                Realm.CUSTOMER: settings.customer_session_secret.get_secret_value(),
                Realm.ADMIN: settings.admin_session_secret.get_secret_value(),
            },
            codec=codec,
            lifetime=timedelta(days=settings.session_expire_days),
        )

    def cookie_name(self, realm: Realm) -> str:
        return self.COOKIE_NAMES[realm]

    def issue_session(
        self,
        subject_id: str,
        realm: Realm,
        transport: SessionTransport | None = None,
    ) -> IssuedSession:
        """Issue a session token for a principal.

        Parameters
        ----------
        subject_id
            The principal's identifier
        realm
            Realm the session is valid in
        transport
            When given, receives the token as the realm's cookie with an
            expiry mirroring the token's

        Returns
        -------
        The issued session
        """
        expires_at = self._codec.now() + self._lifetime
        token = self._codec.encode(subject_id, self._secrets[realm], expires_at)
        session = IssuedSession(
            token=token,
            subject_id=subject_id,
            realm=realm,
            expires_at=expires_at,
        )

        if transport is not None:
            transport.set_cookie(self.cookie_name(realm), token, expires_at)

        logger.debug("Issued %s session for %s", realm.value, subject_id)
        return session

    def resolve_session(self, token: str | None, realm: Realm) -> str | None:
        """Resolve a presented session token to a subject id.

        Failure is the normal outcome for anonymous visitors, so this never
        raises for bad tokens.

        Parameters
        ----------
        token
            The raw cookie value, possibly missing or empty
        realm
            Realm of the endpoint consuming the session

        Returns
        -------
        The subject id, or None if there is no valid session
        """
        if not token:
            return None

        try:
            claims = self._codec.decode(token, self._secrets[realm])
        except InvalidTokenError as e:
            logger.debug(
                "Rejected %s session token: %s", realm.value, type(e).__name__
            )
            return None

        if claims.purpose is not None:
            logger.debug(
                "Rejected %s session token carrying purpose %r",
                realm.value,
                claims.purpose,
            )
            return None

        return claims.subject_id

    def destroy_session(self, realm: Realm, transport: SessionTransport) -> None:
        """Instruct the transport to clear the realm's session cookie."""
        transport.delete_cookie(self.cookie_name(realm))
