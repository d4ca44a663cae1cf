"""SQLAlchemy persistence for the write and read databases.

Write database (WriteBase): aggregates, event_outbox
Read database (ReadBase): read_views, dead_letters
"""

from splitstate.infrastructure.persistence.base import ReadBase, WriteBase
from splitstate.infrastructure.persistence.database import Database
from splitstate.infrastructure.persistence.dead_letter_store import SQLDeadLetterStore
from splitstate.infrastructure.persistence.read_store import SQLReadStore
from splitstate.infrastructure.persistence.write_store import SQLWriteStore

__all__ = [
    "Database",
    "ReadBase",
    "SQLDeadLetterStore",
    "SQLReadStore",
    "SQLWriteStore",
    "WriteBase",
]
