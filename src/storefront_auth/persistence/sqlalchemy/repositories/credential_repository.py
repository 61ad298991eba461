"""SQLAlchemy implementations of CredentialRepository.

One repository class per realm; both share the lookup and update logic
and differ only in the mapped model.
"""

import logging
from typing import ClassVar

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_auth.exceptions import (
    CredentialChangedError,
    CredentialNotFoundError,
    IdentifierAlreadyExistsError,
)
from storefront_auth.persistence.sqlalchemy.models import (
    AdminCredentialModel,
    CustomerCredentialModel,
)
from storefront_auth.repositories import CredentialData, CredentialRepository

logger = logging.getLogger(__name__)

CredentialModel = CustomerCredentialModel | AdminCredentialModel


class _CredentialRepositorySQLAlchemy(CredentialRepository):
    """Shared SQLAlchemy logic for realm credential tables."""

    _model: ClassVar[type[CredentialModel]]

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session.

        Parameters
        ----------
        session
            SQLAlchemy async session
        """
        self._session = session

    def _to_data(self, model: CredentialModel) -> CredentialData:
        """Map SQLAlchemy model to data transfer object."""
        return CredentialData(
            subject_id=model.id,
            identifier=model.identifier,
            password_hash=model.password_hash,
        )

    async def _find_model(self, **criteria: str) -> CredentialModel | None:
        stmt = select(self._model).filter_by(**criteria)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_identifier(self, identifier: str) -> CredentialData | None:
        model = await self._find_model(identifier=identifier)
        return self._to_data(model) if model else None

    async def find_by_subject_id(self, subject_id: str) -> CredentialData | None:
        model = await self._find_model(id=subject_id)
        return self._to_data(model) if model else None

    async def create(self, identifier: str, password_hash: str) -> CredentialData:
        if await self._find_model(identifier=identifier) is not None:
            raise IdentifierAlreadyExistsError(identifier)

        model = self._model(identifier=identifier, password_hash=password_hash)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            # Concurrent registration of the same identifier
            raise IdentifierAlreadyExistsError(identifier) from e

        logger.info("Created %s credentials: %s", self._model.__tablename__, model.id)
        return self._to_data(model)

    async def update_password_hash(
        self,
        subject_id: str,
        password_hash: str,
        expected_hash: str | None = None,
    ) -> None:
        # One statement: the database re-checks expected_hash under the row lock
        stmt = update(self._model).where(self._model.id == subject_id)
        if expected_hash is not None:
            stmt = stmt.where(self._model.password_hash == expected_hash)
        result = await self._session.execute(stmt.values(password_hash=password_hash))

        if result.rowcount == 0:
            if expected_hash is None or await self._find_model(id=subject_id) is None:
                raise CredentialNotFoundError
            raise CredentialChangedError(subject_id)
        logger.debug("Updated password hash for subject: %s", subject_id)


class CustomerCredentialRepositorySQLAlchemy(_CredentialRepositorySQLAlchemy):
    """Customer credentials, looked up by email."""

    _model = CustomerCredentialModel


class AdminCredentialRepositorySQLAlchemy(_CredentialRepositorySQLAlchemy):
    """Administrator credentials, looked up by username."""

    _model = AdminCredentialModel
