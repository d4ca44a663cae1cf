"""Aggregate state table (write database)."""

from typing import Any

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from splitstate.infrastructure.persistence.base import TimestampMixin, WriteBase


class AggregateRecord(TimestampMixin, WriteBase):
    """Current authoritative state of one aggregate.

    Fields:
        aggregate_id: Primary key (opaque string id)
        aggregate_type: Aggregate kind (e.g., "order")
        state: JSON state produced by the aggregate's to_state()
        version: Optimistic-concurrency version (UPDATE ... WHERE version = :expected)
        last_sequence: Highest event sequence written to the outbox
        created_at / updated_at: From TimestampMixin
    """

    __tablename__ = "aggregates"

    aggregate_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    aggregate_type: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    state: Mapped[dict[str, Any]] = mapped_column(nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    last_sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return (
            f"<AggregateRecord(aggregate_id={self.aggregate_id}, "
            f"version={self.version})>"
        )
