"""
SQLAlchemy declarative base and common model mixins.

This module provides the SQLAlchemy DeclarativeBase with async attribute
loading and the timestamp mixins shared by GarmentSync tables. Record ids
are strings so that caller-supplied order ids and generated uuid4 ids share
one column type across PostgreSQL and SQLite.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import DateTime, String
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column

from garmentsync.domain.models import new_id, utcnow


class Base(AsyncAttrs, DeclarativeBase):
    """
    Base class for all SQLAlchemy models with async support.
    """

    def to_dict(self, exclude: Optional[set[str]] = None) -> Dict[str, Any]:
        """
        Convert model instance to a column-name keyed dictionary.

        Args:
            exclude: Set of attribute names to exclude from output

        Returns:
            Dictionary representation of the model
        """
        exclude = exclude or set()
        return {
            column.key: getattr(self, column.key)
            for column in self.__table__.columns
            if column.key not in exclude
        }

    def __repr__(self) -> str:
        pk_values = []
        for column in self.__table__.primary_key.columns:
            value = getattr(self, column.key, None)
            if value is not None:
                pk_values.append(f"{column.key}={value!r}")

        pk_str = ", ".join(pk_values) if pk_values else "no primary key"
        return f"<{self.__class__.__name__}({pk_str})>"


class GeneratedIdMixin:
    """
    Mixin for a generated string primary key.
    """

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(
            String(36),
            primary_key=True,
            default=new_id,
            comment="Unique identifier for the record",
        )


class CreatedAtMixin:
    """
    Mixin for the creation timestamp.

    The value is assigned in Python rather than by the server so that rows
    created inside one transaction still sort in insertion order.
    """

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            nullable=False,
            default=utcnow,
            index=True,
            comment="Timestamp when record was created",
        )


class TimestampMixin(CreatedAtMixin):
    """
    Mixin for creation and last-modified timestamps.
    """

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            nullable=False,
            default=utcnow,
            comment="Timestamp when record was last updated",
        )
