"""ReadStore protocols (ports) for queryable view persistence.

Two ports split read and write access to the read store:

    ReadStoreReader: get/find - used by the query service
    ReadStore: reader + checkpoint/upsert/delete/discard - used ONLY by the
        projection engine

Each view is addressed by (projection, view_id) and carries the sequence
number of the last event applied to it. Terminal events leave a tombstone:
content is gone (get/find skip it) but the marker stays, so late redeliveries
remain no-ops.

Implementations:
    - InMemoryReadStore: splitstate/infrastructure/memory/read_store.py
    - SQLReadStore: splitstate/infrastructure/persistence/read_store.py

Adapters raise ReadStoreUnavailableError for transient failures.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True, slots=True, kw_only=True)
class ReadModel:
    """Denormalized view as returned to readers.

    Attributes:
        projection: View kind (e.g., "order_summary").
        view_id: View key (the aggregate id for per-aggregate views).
        content: JSON-compatible denormalized content.
        last_applied_seq: Sequence of the last event applied.
    """

    projection: str
    view_id: str
    content: dict[str, Any] = field(default_factory=dict)
    last_applied_seq: int = 0


@dataclass(frozen=True, slots=True, kw_only=True)
class ViewCheckpoint:
    """Projection-side view state including tombstones.

    Attributes:
        projection: View kind.
        view_id: View key.
        content: Current content, None for a tombstone.
        last_applied_seq: Sequence of the last event applied.
    """

    projection: str
    view_id: str
    content: dict[str, Any] | None
    last_applied_seq: int

    @property
    def is_tombstone(self) -> bool:
        """True once a terminal event removed the view content."""
        return self.content is None


class ReadStoreReader(Protocol):
    """Read-only access to views (query side)."""

    async def get(self, projection: str, view_id: str) -> ReadModel | None:
        """Fetch one live view (None for absent or tombstoned views)."""
        ...

    async def find(
        self,
        projection: str,
        filters: Mapping[str, Any],
        *,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[ReadModel]:
        """Live views whose top-level content fields equal every filter value.

        Results are ordered by view_id.
        """
        ...


class ReadStore(ReadStoreReader, Protocol):
    """Full read-store access (projection engine only)."""

    async def checkpoint(self, projection: str, view_id: str) -> ViewCheckpoint | None:
        """Current content and marker, tombstones included (None if never written)."""
        ...

    async def upsert(
        self,
        projection: str,
        view_id: str,
        content: dict[str, Any],
        last_applied_seq: int,
    ) -> None:
        """Atomically replace view content and marker."""
        ...

    async def delete(self, projection: str, view_id: str, last_applied_seq: int) -> None:
        """Replace the view with a tombstone that keeps the marker."""
        ...

    async def discard(self, projection: str, view_id: str) -> None:
        """Remove the view and its marker entirely (rebuild only)."""
        ...
