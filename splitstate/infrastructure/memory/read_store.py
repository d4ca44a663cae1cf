"""In-memory ReadStore.

Views are stored as (content, marker) pairs replaced in one assignment, so a
reader never sees content from one event with the marker of another.
"""

import copy
from collections.abc import Mapping
from typing import Any

from splitstate.domain.protocols.read_store_protocol import ReadModel, ViewCheckpoint

ViewKey = tuple[str, str]


class InMemoryReadStore:
    """Dict-backed views keyed by (projection, view_id)."""

    def __init__(self) -> None:
        self._views: dict[ViewKey, tuple[dict[str, Any] | None, int]] = {}

    async def get(self, projection: str, view_id: str) -> ReadModel | None:
        entry = self._views.get((projection, view_id))
        if entry is None or entry[0] is None:
            return None
        return self._read_model(projection, view_id, entry)

    async def find(
        self,
        projection: str,
        filters: Mapping[str, Any],
        *,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[ReadModel]:
        matches = [
            self._read_model(name, view_id, entry)
            for (name, view_id), entry in sorted(self._views.items())
            if name == projection
            and entry[0] is not None
            and all(
                key in entry[0] and entry[0][key] == value
                for key, value in filters.items()
            )
        ]
        end = None if limit is None else offset + limit
        return matches[offset:end]

    async def checkpoint(self, projection: str, view_id: str) -> ViewCheckpoint | None:
        entry = self._views.get((projection, view_id))
        if entry is None:
            return None
        content, last_applied_seq = entry
        return ViewCheckpoint(
            projection=projection,
            view_id=view_id,
            content=copy.deepcopy(content),
            last_applied_seq=last_applied_seq,
        )

    async def upsert(
        self,
        projection: str,
        view_id: str,
        content: dict[str, Any],
        last_applied_seq: int,
    ) -> None:
        self._views[(projection, view_id)] = (copy.deepcopy(content), last_applied_seq)

    async def delete(self, projection: str, view_id: str, last_applied_seq: int) -> None:
        self._views[(projection, view_id)] = (None, last_applied_seq)

    async def discard(self, projection: str, view_id: str) -> None:
        self._views.pop((projection, view_id), None)

    def _read_model(
        self, projection: str, view_id: str, entry: tuple[dict[str, Any] | None, int]
    ) -> ReadModel:
        content, last_applied_seq = entry
        return ReadModel(
            projection=projection,
            view_id=view_id,
            content=copy.deepcopy(content or {}),
            last_applied_seq=last_applied_seq,
        )
