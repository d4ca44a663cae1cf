"""Database connection and session management.

One Database instance per physical database (write and read). Each owns its
async engine, its session factory and the metadata of its declarative base.

Following hexagonal architecture:
- This is an infrastructure concern
- Provides sessions to the SQL store adapters
- Handles transaction boundaries and connection pooling
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool


class Database:
    """Database connection and session management.

    Usage:
        db = Database("sqlite+aiosqlite:///./splitstate_write.db", metadata=WriteBase.metadata)
        await db.create_all()
        async with db.transaction() as session:
            # Commits on success, rolls back on error
            ...
    """

    def __init__(
        self,
        database_url: str,
        *,
        metadata: MetaData,
        echo: bool = False,
        pool_size: int = 20,
        max_overflow: int = 0,
    ) -> None:
        """Initialize database with connection parameters.

        Args:
            database_url: Async connection URL (sqlite+aiosqlite://, postgresql+asyncpg://).
            metadata: Metadata of the declarative base whose tables live here.
            echo: If True, log all SQL statements.
            pool_size: Connections kept in the pool (ignored for SQLite).
            max_overflow: Extra connections above pool_size (ignored for SQLite).
        """
        self.metadata = metadata
        engine_args: dict[str, Any] = {"echo": echo}
        if database_url.startswith("sqlite"):
            engine_args["connect_args"] = {"check_same_thread": False}
            if ":memory:" in database_url or database_url.endswith("://"):
                # One shared connection, otherwise every session sees an empty database.
                engine_args["poolclass"] = StaticPool
        else:
            engine_args.update(
                pool_pre_ping=True,
                pool_size=pool_size,
                max_overflow=max_overflow,
            )

        self.engine: AsyncEngine = create_async_engine(database_url, **engine_args)
        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a session that commits on success and rolls back on error.

        Yields:
            AsyncSession: Database session.
        """
        async with self.async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a session inside one explicit transaction.

        Everything done on the session commits together or not at all.

        Yields:
            AsyncSession: Database session within a transaction.
        """
        async with self.async_session() as session:
            async with session.begin():
                yield session

    async def create_all(self) -> None:
        """Create all tables of this database's metadata (dev/test)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(self.metadata.create_all)

    async def drop_all(self) -> None:
        """Drop all tables of this database's metadata (tests only)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(self.metadata.drop_all)

    async def close(self) -> None:
        """Dispose of all pooled connections."""
        await self.engine.dispose()

    async def check_connection(self) -> bool:
        """Check if the database answers a trivial query.

        Returns:
            bool: True if the connection works, False otherwise.
        """
        try:
            async with self.get_session() as session:
                await session.execute(text("SELECT 1"))
                return True
        except Exception:
            return False
