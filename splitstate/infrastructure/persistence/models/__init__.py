"""Database models.

Write database: AggregateRecord, StoredEvent
Read database: ReadView, DeadLetterRecord
"""

from splitstate.infrastructure.persistence.models.aggregate_record import AggregateRecord
from splitstate.infrastructure.persistence.models.dead_letter import DeadLetterRecord
from splitstate.infrastructure.persistence.models.read_view import ReadView
from splitstate.infrastructure.persistence.models.stored_event import StoredEvent

__all__ = [
    "AggregateRecord",
    "DeadLetterRecord",
    "ReadView",
    "StoredEvent",
]
