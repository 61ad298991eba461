"""Authentication service for login, signup and password changes."""

from __future__ import annotations

import logging

from storefront_auth import (
    CredentialChangedError,
    CredentialData,
    CredentialMismatchError,
    CredentialNotFoundError,
    CredentialRepository,
    IssuedSession,
    PasswordHashingService,
    Realm,
    SessionManager,
    SessionTransport,
)

logger = logging.getLogger(__name__)


class AuthenticationService:
    """
    Application service for authenticating the principals of one realm.

    Orchestrates storefront_auth infrastructure (password hashing, session
    tokens) with the realm's credential store to provide:
    - Login with identifier and password
    - Signup
    - Password change
    - Resolving a session cookie to the principal's credentials
    """

    def __init__(
        self,
        credential_repository: CredentialRepository,
        password_service: PasswordHashingService,
        session_manager: SessionManager,
        realm: Realm = Realm.CUSTOMER,
    ):
        self._credential_repo = credential_repository
        self._password_service = password_service
        self._session_manager = session_manager
        self._realm = realm

    async def login(
        self,
        identifier: str,
        password: str,
        transport: SessionTransport | None = None,
    ) -> IssuedSession:
        credential = await self._credential_repo.find_by_identifier(identifier)
        if credential is None:
            # One bcrypt verification, same as the wrong-password path
            self._password_service.verify(password, self._password_service.dummy_hash())
            logger.info("Login failed (%s): unknown identifier", self._realm.value)
            raise CredentialNotFoundError

        if not self._password_service.verify(password, credential.password_hash):
            logger.info(
                "Login failed (%s): password mismatch for %s",
                self._realm.value,
                credential.subject_id,
            )
            raise CredentialMismatchError

        if self._password_service.needs_rehash(credential.password_hash):
            try:
                await self._credential_repo.update_password_hash(
                    credential.subject_id,
                    self._password_service.hash(password),
                    expected_hash=credential.password_hash,
                )
                logger.info("Upgraded password hash for %s", credential.subject_id)
            except CredentialChangedError:
                # Never overwrite a password set since this login read it
                logger.info("Skipped hash upgrade for %s", credential.subject_id)

        session = self._session_manager.issue_session(
            credential.subject_id,
            self._realm,
            transport,
        )
        logger.info("Logged in (%s): %s", self._realm.value, credential.subject_id)
        return session

    async def register(
        self,
        identifier: str,
        password: str,
        transport: SessionTransport | None = None,
    ) -> IssuedSession:
        self._password_service.validate_strength(password)
        password_hash = self._password_service.hash(password)
        credential = await self._credential_repo.create(identifier, password_hash)

        logger.info("Registered (%s): %s", self._realm.value, credential.subject_id)
        return self._session_manager.issue_session(
            credential.subject_id,
            self._realm,
            transport,
        )

    async def change_password(
        self,
        subject_id: str,
        current_password: str,
        new_password: str,
    ) -> None:
        credential = await self._credential_repo.find_by_subject_id(subject_id)
        if credential is None:
            raise CredentialNotFoundError

        if not self._password_service.verify(current_password, credential.password_hash):
            raise CredentialMismatchError("Current password is incorrect")

        self._password_service.validate_strength(new_password)
        try:
            await self._credential_repo.update_password_hash(
                subject_id,
                self._password_service.hash(new_password),
                expected_hash=credential.password_hash,
            )
        except CredentialChangedError as e:
            raise CredentialMismatchError("Current password is incorrect") from e
        logger.info("Password changed (%s): %s", self._realm.value, subject_id)

    async def resolve_principal(self, token: str | None) -> CredentialData | None:
        subject_id = self._session_manager.resolve_session(token, self._realm)
        if subject_id is None:
            return None

        credential = await self._credential_repo.find_by_subject_id(subject_id)
        if credential is None:
            logger.info(
                "Session for %s references a missing principal: %s",
                self._realm.value,
                subject_id,
            )
        return credential
