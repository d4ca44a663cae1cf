"""Infrastructure dependency factories.

Application-scoped singletons and adapter selection:
- Logging (structlog console/JSON)
- Stores (in-memory or SQL, chosen by SPLITSTATE_STORAGE_BACKEND)
"""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING

from splitstate.core.config import Settings, get_settings
from splitstate.core.enums import StorageBackend

if TYPE_CHECKING:
    from splitstate.domain.protocols import (
        DeadLetterStore,
        LoggerProtocol,
        ReadStore,
        WriteStore,
    )
    from splitstate.infrastructure.persistence.database import Database


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Rendering follows the environment:
    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON)
    SPLITSTATE_LOG_JSON overrides the choice.

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from splitstate.infrastructure.logging.console_adapter import (
        ConsoleAdapter,
        configure_logging,
    )

    settings = get_settings()
    configure_logging(level=settings.log_level, use_json=settings.use_json_logs)
    return ConsoleAdapter(component="splitstate")


@dataclass(kw_only=True)
class StoreBundle:
    """Stores for one application instance.

    Attributes:
        write_store: Aggregates + outbox.
        read_store: Views.
        dead_letter_store: Failed projections.
        databases: SQL databases owned by the bundle (empty for memory).
    """

    write_store: "WriteStore"
    read_store: "ReadStore"
    dead_letter_store: "DeadLetterStore"
    databases: list["Database"] = field(default_factory=list)


def build_stores(settings: Settings) -> StoreBundle:
    """Create the store adapters selected by settings.storage_backend.

    Args:
        settings: Application settings.

    Returns:
        StoreBundle with all three stores.

    Raises:
        ValueError: If the storage backend is unsupported.
    """
    if settings.storage_backend is StorageBackend.MEMORY:
        from splitstate.infrastructure.memory import (
            InMemoryDeadLetterStore,
            InMemoryReadStore,
            InMemoryWriteStore,
        )

        return StoreBundle(
            write_store=InMemoryWriteStore(),
            read_store=InMemoryReadStore(),
            dead_letter_store=InMemoryDeadLetterStore(),
        )

    if settings.storage_backend is StorageBackend.SQL:
        from splitstate.infrastructure.persistence import (
            Database,
            ReadBase,
            SQLDeadLetterStore,
            SQLReadStore,
            SQLWriteStore,
            WriteBase,
        )

        write_db = Database(
            settings.write_database_url,
            metadata=WriteBase.metadata,
            echo=settings.db_echo,
        )
        read_db = Database(
            settings.read_database_url,
            metadata=ReadBase.metadata,
            echo=settings.db_echo,
        )
        return StoreBundle(
            write_store=SQLWriteStore(write_db),
            read_store=SQLReadStore(read_db),
            dead_letter_store=SQLDeadLetterStore(read_db),
            databases=[write_db, read_db],
        )

    raise ValueError(f"Unsupported storage backend: {settings.storage_backend}")
