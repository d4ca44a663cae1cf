"""End-to-end tests through the composition root.

Tests cover:
- Command to query round trip (write store, projection, read store)
- Optimistic concurrency through the public dispatch path
- Deferred delivery caught up by the outbox relay
- Dead-lettered views, resume and rebuild
- The same flow on the SQL backend with two SQLite databases

Architecture:
- build_application() wires real adapters (no mocks except the logger)
- Memory backend by default, SQL backend in its own class
"""

import asyncio

import pytest
import pytest_asyncio

from splitstate.application.commands.order_commands import (
    AddOrderItem,
    ChangeOrderStatus,
    CreateOrder,
    DeleteOrder,
)
from splitstate.application.dtos.projection_dtos import ViewStatus
from splitstate.application.errors.application_error import ApplicationErrorCode
from splitstate.application.projections.order_projectors import (
    ORDER_LINES,
    ORDER_SUMMARY,
)
from splitstate.application.queries.view_queries import (
    orders_for_customer,
    orders_with_status,
)
from splitstate.core.config import Settings
from splitstate.core.container.application import build_application
from splitstate.core.enums import Environment, ProjectionDelivery, StorageBackend
from splitstate.core.errors import NotFoundError
from splitstate.core.result import Failure, Success
from splitstate.domain.enums.order_status import OrderStatus
from tests.conftest import make_item


@pytest.fixture
def app(mock_logger):
    return build_application(
        Settings(environment=Environment.TESTING), logger=mock_logger
    )


@pytest.fixture
def deferred_app(mock_logger):
    return build_application(
        Settings(
            environment=Environment.TESTING,
            projection_delivery=ProjectionDelivery.DEFERRED,
        ),
        logger=mock_logger,
    )


async def _place_order(app, customer_id="42"):
    result = await app.dispatch(
        CreateOrder(
            customer_id=customer_id,
            items=(make_item("A", 2, "5.00"), make_item("B", 1, "7.50")),
        )
    )
    assert isinstance(result, Success)
    return result.value


@pytest.mark.integration
class TestCommandToQuery:
    """Write, project, read."""

    @pytest.mark.asyncio
    async def test_created_order_is_queryable(self, app):
        receipt = await _place_order(app)

        result = await app.query(orders_for_customer("42"))

        assert receipt.version == 1
        (view,) = result.value
        assert view.view_id == receipt.aggregate_id
        assert view.content["status"] == "pending"
        assert view.content["total_amount"] == "17.50"
        assert view.last_applied_seq == receipt.last_sequence

    @pytest.mark.asyncio
    async def test_status_change_with_expected_version(self, app):
        receipt = await _place_order(app)

        result = await app.dispatch(
            ChangeOrderStatus(
                order_id=receipt.aggregate_id,
                status=OrderStatus.SHIPPED,
                expected_version=1,
            )
        )

        assert isinstance(result, Success)
        assert result.value.version == 2
        shipped = await app.query(orders_with_status(OrderStatus.SHIPPED))
        assert [view.view_id for view in shipped.value] == [receipt.aggregate_id]

    @pytest.mark.asyncio
    async def test_lines_view(self, app):
        receipt = await _place_order(app)
        await app.dispatch(
            AddOrderItem(order_id=receipt.aggregate_id, item=make_item("C", 3, "1.00"))
        )

        result = await app.get_by_id(receipt.aggregate_id, ORDER_LINES)

        assert [line["sku"] for line in result.value.content["lines"]] == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_deleted_order_disappears_from_reads(self, app):
        receipt = await _place_order(app)

        await app.dispatch(DeleteOrder(order_id=receipt.aggregate_id, reason="duplicate"))

        result = await app.get_by_id(receipt.aggregate_id)
        assert isinstance(result, Failure)
        assert isinstance(result.error, NotFoundError)
        assert (await app.query(orders_for_customer("42"))).value == []


@pytest.mark.integration
class TestConcurrency:
    """Optimistic concurrency through dispatch."""

    @pytest.mark.asyncio
    async def test_stale_expected_version(self, app):
        receipt = await _place_order(app)
        await app.dispatch(
            ChangeOrderStatus(order_id=receipt.aggregate_id, status=OrderStatus.PAID)
        )

        result = await app.dispatch(
            ChangeOrderStatus(
                order_id=receipt.aggregate_id,
                status=OrderStatus.CANCELLED,
                expected_version=1,
            )
        )

        assert isinstance(result, Failure)
        assert result.error.code is ApplicationErrorCode.CONCURRENT_MODIFICATION
        view = (await app.get_by_id(receipt.aggregate_id)).value
        assert view.content["status"] == "paid"

    @pytest.mark.asyncio
    async def test_concurrent_writers_one_wins(self, app):
        receipt = await _place_order(app)

        results = await asyncio.gather(
            app.dispatch(
                ChangeOrderStatus(
                    order_id=receipt.aggregate_id,
                    status=OrderStatus.PAID,
                    expected_version=1,
                )
            ),
            app.dispatch(
                ChangeOrderStatus(
                    order_id=receipt.aggregate_id,
                    status=OrderStatus.CANCELLED,
                    expected_version=1,
                )
            ),
        )

        winners = [r for r in results if isinstance(r, Success)]
        losers = [r for r in results if isinstance(r, Failure)]
        assert len(winners) == 1
        assert losers[0].error.code is ApplicationErrorCode.CONCURRENT_MODIFICATION
        stored = await app.write_store.load(receipt.aggregate_id)
        assert stored.version == 2


@pytest.mark.integration
class TestDeferredDelivery:
    """Relay catch-up when the dispatcher does not project."""

    @pytest.mark.asyncio
    async def test_relay_projects_committed_events(self, deferred_app):
        receipt = await _place_order(deferred_app)

        before = await deferred_app.get_by_id(receipt.aggregate_id)
        delivered = await deferred_app.relay.run_once()
        after = await deferred_app.get_by_id(receipt.aggregate_id)

        assert isinstance(before, Failure)
        assert delivered == 1
        assert after.value.content["customer_id"] == "42"
        assert await deferred_app.relay.run_once() == 0


@pytest.mark.integration
class TestProjectionFailures:
    """Dead letters, resume and rebuild."""

    @pytest.mark.asyncio
    async def test_dead_letter_then_resume(self, app, monkeypatch):
        upsert = app.read_store.upsert

        async def reject_summaries(projection, view_id, content, last_applied_seq):
            if projection == ORDER_SUMMARY:
                raise ValueError("summary column rejected")
            await upsert(projection, view_id, content, last_applied_seq)

        monkeypatch.setattr(app.read_store, "upsert", reject_summaries)
        receipt = await _place_order(app)

        # The write committed even though one view failed.
        assert receipt.version == 1
        (letter,) = await app.dead_letters(receipt.aggregate_id)
        assert letter.projection == ORDER_SUMMARY
        assert letter.error_type == "ValueError"
        assert (await app.get_by_id(receipt.aggregate_id, ORDER_LINES)).value is not None

        monkeypatch.setattr(app.read_store, "upsert", upsert)
        outcome = await app.engine.resume(ORDER_SUMMARY, receipt.aggregate_id)

        assert outcome.status is ViewStatus.APPLIED
        assert await app.relay.run_once() == 1
        assert (await app.get_by_id(receipt.aggregate_id)).value.last_applied_seq == 1

    @pytest.mark.asyncio
    async def test_rebuild_restores_discarded_views(self, app):
        receipt = await _place_order(app)
        await app.dispatch(
            ChangeOrderStatus(order_id=receipt.aggregate_id, status=OrderStatus.PAID)
        )
        original = (await app.get_by_id(receipt.aggregate_id)).value
        await app.read_store.discard(ORDER_SUMMARY, receipt.aggregate_id)

        report = await app.rebuild_projection(receipt.aggregate_id)

        assert report.events_replayed == 2
        assert report.stalled == []
        assert (await app.get_by_id(receipt.aggregate_id)).value == original


@pytest_asyncio.fixture
async def sql_app(tmp_path, mock_logger):
    application = build_application(
        Settings(
            environment=Environment.TESTING,
            storage_backend=StorageBackend.SQL,
            write_database_url=f"sqlite+aiosqlite:///{tmp_path / 'write.db'}",
            read_database_url=f"sqlite+aiosqlite:///{tmp_path / 'read.db'}",
        ),
        logger=mock_logger,
    )
    await application.initialize()
    yield application
    await application.close()


@pytest.mark.integration
class TestSQLBackend:
    """Full flow on two physically separate SQLite databases."""

    @pytest.mark.asyncio
    async def test_separate_databases(self, sql_app):
        write_db, read_db = sql_app.databases

        assert write_db.engine.url != read_db.engine.url
        assert await write_db.check_connection()
        assert await read_db.check_connection()

    @pytest.mark.asyncio
    async def test_order_lifecycle(self, sql_app):
        receipt = await _place_order(sql_app)
        await sql_app.dispatch(
            AddOrderItem(
                order_id=receipt.aggregate_id,
                item=make_item("C", 1, "2.50"),
                expected_version=1,
            )
        )

        summary = (await sql_app.get_by_id(receipt.aggregate_id)).value
        assert summary.content["total_amount"] == "20.00"
        assert summary.last_applied_seq == 2
        assert await sql_app.write_store.fetch_undelivered(10) == []

        await sql_app.dispatch(DeleteOrder(order_id=receipt.aggregate_id))

        assert isinstance(await sql_app.get_by_id(receipt.aggregate_id), Failure)
        assert (await sql_app.query(orders_for_customer("42"))).value == []
        report = await sql_app.rebuild_projection(receipt.aggregate_id)
        assert report.last_applied_seq == {ORDER_SUMMARY: 3, ORDER_LINES: 3}
