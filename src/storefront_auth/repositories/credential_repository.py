"""Abstract repository interface for principal credentials.

Implementations can use any storage backend (SQLAlchemy, MongoDB, etc.).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CredentialData:
    """Immutable credential data.

    Attributes
    ----------
    subject_id
        The principal's unique identifier
    identifier
        Login identifier (email for customers, username for admins)
    password_hash
        The bcrypt password hash
    """

    subject_id: str
    identifier: str
    password_hash: str


class CredentialRepository(ABC):
    """Abstract repository for the credentials of one realm."""

    @abstractmethod
    async def find_by_identifier(self, identifier: str) -> CredentialData | None:
        """Find credentials by login identifier.

        Parameters
        ----------
        identifier
            Email or username

        Returns
        -------
        Credential data if found, None otherwise
        """

    @abstractmethod
    async def find_by_subject_id(self, subject_id: str) -> CredentialData | None:
        """Find credentials by principal id.

        Parameters
        ----------
        subject_id
            The principal's unique identifier

        Returns
        -------
        Credential data if found, None otherwise (e.g. deleted principal)
        """

    @abstractmethod
    async def create(self, identifier: str, password_hash: str) -> CredentialData:
        """Create credentials for a new principal.

        Parameters
        ----------
        identifier
            Email or username, unique within the realm
        password_hash
            The bcrypt password hash

        Returns
        -------
        The stored credential data, including the generated subject id

        Raises
        ------
        IdentifierAlreadyExistsError
            If the identifier is already registered
        """

    @abstractmethod
    async def update_password_hash(
        self,
        subject_id: str,
        password_hash: str,
        expected_hash: str | None = None,
    ) -> None:
        """Replace a principal's password hash.

        With ``expected_hash`` the write is a compare-and-swap: it only
        applies while the stored hash still equals the one the caller read.

        Parameters
        ----------
        subject_id
            The principal's unique identifier
        password_hash
            The new bcrypt password hash
        expected_hash
            The hash the caller verified against, if the update must not
            overwrite a concurrent change

        Raises
        ------
        CredentialNotFoundError
            If no credentials exist for the subject
        CredentialChangedError
            If the stored hash no longer equals ``expected_hash``
        """
