"""Storage and projection delivery options.

StorageBackend selects which adapter set the container wires for the write
store, read store and dead-letter store. ProjectionDelivery selects how the
dispatcher hands committed events to the projection engine.
"""

from enum import Enum


class StorageBackend(str, Enum):
    """Adapter set used for both stores."""

    MEMORY = "memory"
    SQL = "sql"


class ProjectionDelivery(str, Enum):
    """How committed events reach the projection engine.

    SYNC: applied inline before dispatch() returns.
    BACKGROUND: applied in an asyncio task after dispatch() returns.
    DEFERRED: left in the outbox for the relay to pick up.
    """

    SYNC = "sync"
    BACKGROUND = "background"
    DEFERRED = "deferred"
