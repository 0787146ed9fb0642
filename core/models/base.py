"""Base model and mixins for all SQLAlchemy models.

Provides:
- Base: Declarative base class for all models
- IntegerIdMixin: Autoincrement integer primary key assigned by the database
"""

from sqlalchemy import Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all task API models."""
    pass


class IntegerIdMixin:
    """Mixin providing a store-generated integer primary key.

    The id is assigned on INSERT and never written by application code
    afterwards.
    """

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
