"""Declarative bases for the two physically separate databases.

The write database and the read database never share tables, metadata or
connections:

    WriteBase: aggregates + event outbox (source of truth)
    ReadBase:  projected views + dead letters (disposable, rebuildable)

Usage:
    class AggregateRecord(TimestampMixin, WriteBase):
        __tablename__ = "aggregates"
        ...

Following hexagonal architecture:
- This is an infrastructure concern (database implementation detail)
- Domain types never inherit from these classes
- Stores map between models and domain dataclasses
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class WriteBase(DeclarativeBase):
    """Base class for write-database models."""

    type_annotation_map = {dict[str, Any]: JSON}


class ReadBase(DeclarativeBase):
    """Base class for read-database models.

    Python None maps to SQL NULL (not JSON null) so tombstones can be
    filtered with IS NULL.
    """

    type_annotation_map = {dict[str, Any]: JSON(none_as_null=True)}


class TimestampMixin:
    """Adds created_at/updated_at columns maintained by the database.

    Usage:
        class ReadView(TimestampMixin, ReadBase):
            __tablename__ = "read_views"
            # Has: created_at, updated_at
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from SQLite."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
