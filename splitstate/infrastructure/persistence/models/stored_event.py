"""Event outbox table (write database).

Events are inserted in the same transaction as the aggregate row they
describe. The delivered flag is flipped once every view has the event
applied; until then the outbox relay keeps offering it.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Index, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from splitstate.infrastructure.persistence.base import WriteBase


class StoredEvent(WriteBase):
    """One committed domain event.

    Fields:
        event_id: Primary key (uuid7 from the event envelope)
        aggregate_id / aggregate_type: Owning aggregate
        sequence: Position in the aggregate's history, unique per aggregate
        event_type / payload: Event content
        occurred_at: Commit timestamp (UTC)
        delivered / delivered_at: Outbox settlement
    """

    __tablename__ = "event_outbox"
    __table_args__ = (
        UniqueConstraint("aggregate_id", "sequence", name="uq_event_outbox_aggregate_sequence"),
        Index("ix_event_outbox_undelivered", "delivered", "aggregate_id", "sequence"),
    )

    event_id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    aggregate_id: Mapped[str] = mapped_column(String(64), nullable=False)
    aggregate_type: Mapped[str] = mapped_column(String(64), nullable=False)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    event_type: Mapped[str] = mapped_column(String(128), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(nullable=False)
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    delivered: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    delivered_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        return (
            f"<StoredEvent(aggregate_id={self.aggregate_id}, "
            f"sequence={self.sequence}, event_type={self.event_type})>"
        )
