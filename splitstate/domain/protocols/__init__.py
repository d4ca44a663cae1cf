"""Domain protocols (ports) package.

Infrastructure adapters implement these protocols without inheritance.

Usage:
    from splitstate.domain.protocols import WriteStore, ReadStore, ReadStoreReader
"""

from splitstate.domain.protocols.dead_letter_protocol import DeadLetter, DeadLetterStore
from splitstate.domain.protocols.event_channel_protocol import EventChannel
from splitstate.domain.protocols.logger_protocol import LoggerProtocol
from splitstate.domain.protocols.read_store_protocol import (
    ReadModel,
    ReadStore,
    ReadStoreReader,
    ViewCheckpoint,
)
from splitstate.domain.protocols.write_store_protocol import (
    StoredAggregate,
    VersionConflict,
    WriteStore,
)

__all__ = [
    "DeadLetter",
    "DeadLetterStore",
    "EventChannel",
    "LoggerProtocol",
    "ReadModel",
    "ReadStore",
    "ReadStoreReader",
    "StoredAggregate",
    "VersionConflict",
    "ViewCheckpoint",
    "WriteStore",
]
