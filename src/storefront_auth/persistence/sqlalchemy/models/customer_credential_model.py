"""SQLAlchemy model for customer credentials."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from storefront_auth.persistence.sqlalchemy.base import AuthBase
from storefront_auth.time import utc_now


class CustomerCredentialModel(AuthBase):
    """
    Login credentials of a customer, identified by email.

    Profile data (names, addresses) lives in the storefront's own tables
    and references the customer by id.

    Table: customer_credentials
    """

    __tablename__ = "customer_credentials"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    identifier: Mapped[str] = mapped_column(
        "email",
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )

    # bcrypt format, ~60 chars
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )

    def __repr__(self) -> str:
        return f"<CustomerCredentialModel(id={self.id}, email={self.identifier})>"
