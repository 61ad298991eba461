"""SQLAlchemy model for administrator credentials."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from storefront_auth.persistence.sqlalchemy.base import AuthBase
from storefront_auth.time import utc_now


class AdminCredentialModel(AuthBase):
    """
    Login credentials of an administrator, identified by username.

    Table: admin_credentials
    """

    __tablename__ = "admin_credentials"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    identifier: Mapped[str] = mapped_column(
        "username",
        String(150),
        unique=True,
        nullable=False,
        index=True,
    )

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
        return f"<AdminCredentialModel(id={self.id}, username={self.identifier})>"
