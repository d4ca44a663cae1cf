"""In-process store adapters (default backend and tests)."""

from splitstate.infrastructure.memory.dead_letter_store import InMemoryDeadLetterStore
from splitstate.infrastructure.memory.read_store import InMemoryReadStore
from splitstate.infrastructure.memory.write_store import InMemoryWriteStore

__all__ = [
    "InMemoryDeadLetterStore",
    "InMemoryReadStore",
    "InMemoryWriteStore",
]
