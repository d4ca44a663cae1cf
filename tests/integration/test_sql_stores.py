"""Integration tests for the SQL store adapters.

Tests cover:
- SQLWriteStore: create, version-checked update, conflicts, history, outbox paging
- SQLReadStore: upsert/get/find, tombstones, discard, unavailable database
- SQLDeadLetterStore: record and filter
- Projection engine over SQL stores: incremental apply equals rebuild

Architecture:
- Integration tests with REAL SQLite databases (aiosqlite)
- Write and read stores live in two separate database files
- Fresh databases per test (tmp_path)
"""

from uuid import uuid4

import pytest
import pytest_asyncio

from splitstate.application.projections.engine import ProjectionEngine
from splitstate.application.projections.order_projectors import (
    ORDER_LINES,
    ORDER_SUMMARY,
    default_projectors,
)
from splitstate.core.result import Failure, Success
from splitstate.domain.errors.projection_error import ReadStoreUnavailableError
from splitstate.domain.events.registry import ORDER_AGGREGATE
from splitstate.domain.protocols.dead_letter_protocol import DeadLetter
from splitstate.infrastructure.persistence import (
    Database,
    ReadBase,
    SQLDeadLetterStore,
    SQLReadStore,
    SQLWriteStore,
    WriteBase,
)
from tests.conftest import deleted_event, order_history


@pytest_asyncio.fixture
async def write_db(tmp_path):
    database = Database(
        f"sqlite+aiosqlite:///{tmp_path / 'write.db'}", metadata=WriteBase.metadata
    )
    await database.create_all()
    yield database
    await database.close()


@pytest_asyncio.fixture
async def read_db(tmp_path):
    database = Database(
        f"sqlite+aiosqlite:///{tmp_path / 'read.db'}", metadata=ReadBase.metadata
    )
    await database.create_all()
    yield database
    await database.close()


@pytest.fixture
def sql_write_store(write_db):
    return SQLWriteStore(write_db)


@pytest.fixture
def sql_read_store(read_db):
    return SQLReadStore(read_db)


@pytest.fixture
def sql_dead_letter_store(read_db):
    return SQLDeadLetterStore(read_db)


async def _save(store, *, expected_version, events, aggregate_id="order-1"):
    return await store.save(
        aggregate_id=aggregate_id,
        aggregate_type=ORDER_AGGREGATE,
        expected_version=expected_version,
        state={"status": "pending", "version_hint": expected_version},
        events=events,
    )


@pytest.mark.integration
class TestSQLWriteStore:
    """Test SQLWriteStore against SQLite."""

    @pytest.mark.asyncio
    async def test_create_and_load(self, sql_write_store):
        result = await _save(sql_write_store, expected_version=0, events=order_history()[:1])

        assert result == Success(value=1)
        stored = await sql_write_store.load("order-1")
        assert stored.version == 1
        assert stored.last_sequence == 1
        assert stored.state == {"status": "pending", "version_hint": 0}

    @pytest.mark.asyncio
    async def test_duplicate_create_conflicts(self, sql_write_store):
        await _save(sql_write_store, expected_version=0, events=order_history()[:1])

        result = await _save(sql_write_store, expected_version=0, events=order_history()[:1])

        assert isinstance(result, Failure)
        assert result.error.actual_version == 1

    @pytest.mark.asyncio
    async def test_update_with_expected_version(self, sql_write_store):
        e1, e2, *_ = order_history()
        await _save(sql_write_store, expected_version=0, events=[e1])

        result = await _save(sql_write_store, expected_version=1, events=[e2])

        assert result == Success(value=2)
        stored = await sql_write_store.load("order-1")
        assert (stored.version, stored.last_sequence) == (2, 2)

    @pytest.mark.asyncio
    async def test_stale_update_writes_nothing(self, sql_write_store):
        e1, e2, e3, _ = order_history()
        await _save(sql_write_store, expected_version=0, events=[e1])
        await _save(sql_write_store, expected_version=1, events=[e2])

        result = await _save(sql_write_store, expected_version=1, events=[e3])

        assert isinstance(result, Failure)
        assert (result.error.expected_version, result.error.actual_version) == (1, 2)
        history = await sql_write_store.load_history("order-1")
        assert [e.sequence for e in history] == [1, 2]

    @pytest.mark.asyncio
    async def test_history_round_trips_events(self, sql_write_store):
        history = order_history()
        await _save(sql_write_store, expected_version=0, events=history)

        loaded = await sql_write_store.load_history("order-1")

        assert loaded == history

    @pytest.mark.asyncio
    async def test_outbox(self, sql_write_store):
        history = order_history()
        await _save(sql_write_store, expected_version=0, events=history)

        await sql_write_store.mark_delivered([history[0].event_id, history[1].event_id])
        await sql_write_store.mark_delivered([history[0].event_id])
        pending = await sql_write_store.fetch_undelivered(10)

        assert [e.sequence for e in pending] == [3, 4]
        assert len(await sql_write_store.fetch_undelivered(1)) == 1

    @pytest.mark.asyncio
    async def test_outbox_after_position(self, sql_write_store):
        for aggregate_id in ("a", "b"):
            await _save(
                sql_write_store,
                expected_version=0,
                events=order_history(aggregate_id)[:2],
                aggregate_id=aggregate_id,
            )

        pending = await sql_write_store.fetch_undelivered(2, after=("a", 1))

        assert [e.key for e in pending] == [("a", 2), ("b", 1)]
        assert await sql_write_store.fetch_undelivered(10, after=("b", 2)) == []

    @pytest.mark.asyncio
    async def test_unknown_aggregate(self, sql_write_store):
        assert await sql_write_store.load("missing") is None
        assert await sql_write_store.load_history("missing") == []


@pytest.mark.integration
class TestSQLReadStore:
    """Test SQLReadStore against SQLite."""

    @pytest.mark.asyncio
    async def test_upsert_replaces_content_and_marker(self, sql_read_store):
        await sql_read_store.upsert(ORDER_SUMMARY, "o-1", {"status": "pending"}, 1)
        await sql_read_store.upsert(ORDER_SUMMARY, "o-1", {"status": "paid"}, 2)

        view = await sql_read_store.get(ORDER_SUMMARY, "o-1")

        assert view.content == {"status": "paid"}
        assert view.last_applied_seq == 2

    @pytest.mark.asyncio
    async def test_tombstone(self, sql_read_store):
        await sql_read_store.upsert(ORDER_SUMMARY, "o-1", {"status": "paid"}, 2)

        await sql_read_store.delete(ORDER_SUMMARY, "o-1", 3)

        assert await sql_read_store.get(ORDER_SUMMARY, "o-1") is None
        checkpoint = await sql_read_store.checkpoint(ORDER_SUMMARY, "o-1")
        assert checkpoint.is_tombstone
        assert checkpoint.last_applied_seq == 3
        assert await sql_read_store.find(ORDER_SUMMARY, {}) == []

    @pytest.mark.asyncio
    async def test_discard(self, sql_read_store):
        await sql_read_store.delete(ORDER_SUMMARY, "o-1", 3)

        await sql_read_store.discard(ORDER_SUMMARY, "o-1")

        assert await sql_read_store.checkpoint(ORDER_SUMMARY, "o-1") is None

    @pytest.mark.asyncio
    async def test_find_filters_and_pages(self, sql_read_store):
        await sql_read_store.upsert(ORDER_SUMMARY, "o-2", {"customer_id": "42"}, 1)
        await sql_read_store.upsert(ORDER_SUMMARY, "o-1", {"customer_id": "42"}, 1)
        await sql_read_store.upsert(ORDER_SUMMARY, "o-3", {"customer_id": "7"}, 1)
        await sql_read_store.upsert(ORDER_LINES, "o-1", {"customer_id": "42"}, 1)

        views = await sql_read_store.find(ORDER_SUMMARY, {"customer_id": "42"})
        page = await sql_read_store.find(ORDER_SUMMARY, {}, limit=2, offset=1)

        assert [view.view_id for view in views] == ["o-1", "o-2"]
        assert [view.view_id for view in page] == ["o-2", "o-3"]

    @pytest.mark.asyncio
    async def test_unavailable_database_is_transient(self, tmp_path):
        # Tables were never created.
        database = Database(
            f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}", metadata=ReadBase.metadata
        )
        store = SQLReadStore(database)
        try:
            with pytest.raises(ReadStoreUnavailableError):
                await store.checkpoint(ORDER_SUMMARY, "o-1")
        finally:
            await database.close()


@pytest.mark.integration
class TestSQLDeadLetterStore:
    """Test SQLDeadLetterStore against SQLite."""

    @pytest.mark.asyncio
    async def test_record_and_find(self, sql_dead_letter_store):
        for aggregate_id in ("o-1", "o-2"):
            await sql_dead_letter_store.record(
                DeadLetter(
                    event_id=uuid4(),
                    projection=ORDER_SUMMARY,
                    aggregate_id=aggregate_id,
                    sequence=2,
                    event_type="OrderItemAdded",
                    payload={"item": None},
                    reason="Malformed OrderItemAdded payload: item must be an object",
                    error_type="MalformedPayloadError",
                    attempts=1,
                )
            )

        letters = await sql_dead_letter_store.find()
        (only,) = await sql_dead_letter_store.find("o-2")

        assert [d.aggregate_id for d in letters] == ["o-1", "o-2"]
        assert only.payload == {"item": None}
        assert only.recorded_at.tzinfo is not None


@pytest.mark.integration
class TestProjectionOverSQL:
    """Run the projection engine against the SQL adapters."""

    @pytest.mark.asyncio
    async def test_rebuild_matches_incremental(
        self, sql_write_store, sql_read_store, sql_dead_letter_store, mock_logger
    ):
        history = [*order_history(), deleted_event(5)]
        await _save(sql_write_store, expected_version=0, events=history[:4])
        await _save(sql_write_store, expected_version=1, events=history[4:])
        engine = ProjectionEngine(
            read_store=sql_read_store,
            dead_letter_store=sql_dead_letter_store,
            history=sql_write_store,
            projectors=default_projectors(),
            logger=mock_logger,
        )

        for event in history[:4]:
            assert (await engine.apply(event)).settled
        incremental = await sql_read_store.get(ORDER_SUMMARY, "order-1")
        await engine.apply(history[4])

        report = await engine.rebuild("order-1")

        assert report.events_replayed == 5
        assert report.last_applied_seq == {ORDER_SUMMARY: 5, ORDER_LINES: 5}
        assert await sql_read_store.get(ORDER_SUMMARY, "order-1") is None
        assert incremental.content["total_amount"] == "17.50"
        assert await sql_dead_letter_store.find() == []
