"""Projected view table (read database)."""

from typing import Any

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from splitstate.infrastructure.persistence.base import ReadBase, TimestampMixin


class ReadView(TimestampMixin, ReadBase):
    """One denormalized view.

    A row with content NULL is a tombstone: the view was removed by a
    terminal event but its marker is kept.

    Fields:
        projection / view_id: Composite primary key
        content: JSON view content (NULL for tombstones)
        last_applied_seq: Sequence of the last event applied
    """

    __tablename__ = "read_views"

    projection: Mapped[str] = mapped_column(String(64), primary_key=True)
    view_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    content: Mapped[dict[str, Any] | None] = mapped_column(nullable=True)
    last_applied_seq: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<ReadView(projection={self.projection}, view_id={self.view_id}, "
            f"last_applied_seq={self.last_applied_seq})>"
        )
