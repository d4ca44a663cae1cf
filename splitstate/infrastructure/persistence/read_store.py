"""SQLReadStore - SQLAlchemy implementation of the ReadStore protocol.

Views live in the read database, one row per (projection, view_id). Each
upsert replaces content and marker in a single statement, so readers never
see a half-applied event.

Connection-level failures surface as ReadStoreUnavailableError so the
projection engine retries them.
"""

from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from splitstate.domain.errors.projection_error import ReadStoreUnavailableError
from splitstate.domain.protocols.read_store_protocol import ReadModel, ViewCheckpoint
from splitstate.infrastructure.persistence.database import Database
from splitstate.infrastructure.persistence.models.read_view import ReadView


class SQLReadStore:
    """SQLAlchemy implementation of ReadStore protocol.

    Filtering in find() compares top-level JSON fields in Python after
    loading the projection's live rows ordered by view_id, which keeps the
    adapter portable across SQLite and PostgreSQL.
    """

    def __init__(self, database: Database) -> None:
        """Initialize store with the read database.

        Args:
            database: Read database (ReadBase metadata).
        """
        self._db = database

    async def get(self, projection: str, view_id: str) -> ReadModel | None:
        async with self._session() as session:
            row = await session.get(ReadView, (projection, view_id))
            if row is None or row.content is None:
                return None
            return self._to_read_model(row)

    async def find(
        self,
        projection: str,
        filters: Mapping[str, Any],
        *,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[ReadModel]:
        async with self._session() as session:
            result = await session.execute(
                select(ReadView)
                .where(ReadView.projection == projection, ReadView.content.is_not(None))
                .order_by(ReadView.view_id)
            )
            rows = [
                row
                for row in result.scalars().all()
                if row.content is not None
                and all(
                    key in row.content and row.content[key] == value
                    for key, value in filters.items()
                )
            ]

        end = None if limit is None else offset + limit
        return [self._to_read_model(row) for row in rows[offset:end]]

    async def checkpoint(self, projection: str, view_id: str) -> ViewCheckpoint | None:
        async with self._session() as session:
            row = await session.get(ReadView, (projection, view_id))
            if row is None:
                return None
            return ViewCheckpoint(
                projection=row.projection,
                view_id=row.view_id,
                content=dict(row.content) if row.content is not None else None,
                last_applied_seq=row.last_applied_seq,
            )

    async def upsert(
        self,
        projection: str,
        view_id: str,
        content: dict[str, Any],
        last_applied_seq: int,
    ) -> None:
        await self._write(projection, view_id, content, last_applied_seq)

    async def delete(self, projection: str, view_id: str, last_applied_seq: int) -> None:
        await self._write(projection, view_id, None, last_applied_seq)

    async def discard(self, projection: str, view_id: str) -> None:
        async with self._session() as session:
            await session.execute(
                delete(ReadView).where(
                    ReadView.projection == projection, ReadView.view_id == view_id
                )
            )

    async def _write(
        self,
        projection: str,
        view_id: str,
        content: dict[str, Any] | None,
        last_applied_seq: int,
    ) -> None:
        async with self._session() as session:
            row = await session.get(ReadView, (projection, view_id))
            if row is None:
                session.add(
                    ReadView(
                        projection=projection,
                        view_id=view_id,
                        content=content,
                        last_applied_seq=last_applied_seq,
                    )
                )
            else:
                row.content = content
                row.last_applied_seq = last_applied_seq

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[AsyncSession, None]:
        try:
            async with self._db.get_session() as session:
                yield session
        except (OperationalError, InterfaceError, TimeoutError) as e:
            raise ReadStoreUnavailableError(f"Read database unavailable: {e}") from e

    def _to_read_model(self, row: ReadView) -> ReadModel:
        return ReadModel(
            projection=row.projection,
            view_id=row.view_id,
            content=dict(row.content or {}),
            last_applied_seq=row.last_applied_seq,
        )
