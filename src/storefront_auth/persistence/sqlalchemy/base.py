"""SQLAlchemy declarative base for storefront_auth models.

The consuming application should include AuthBase.metadata in its
migration configuration.
"""

from sqlalchemy.orm import DeclarativeBase


class AuthBase(DeclarativeBase):
    """Declarative base for storefront_auth models."""
