"""Unit tests for CommandDispatcher.

Tests cover:
- Successful creation and mutation (receipt, stored state, outbox events)
- UNKNOWN_COMMAND, NOT_FOUND and COMMAND_REJECTED (nothing written)
- CONCURRENT_MODIFICATION from expected_version and from the store's check
- COMMAND_EXECUTION_FAILED when the write store raises
- Channel failures never fail a committed dispatch
- dispatch_with_retry behavior

Architecture:
- In-memory write store (real optimistic-concurrency check)
- Channel mocked with AsyncMock (projection side not under test here)
"""

from dataclasses import dataclass
from unittest.mock import AsyncMock

import pytest

from splitstate.application.commands.order_commands import (
    AddOrderItem,
    ChangeOrderStatus,
    CreateOrder,
    DeleteOrder,
)
from splitstate.application.cqrs.dispatcher import CommandDispatcher
from splitstate.application.cqrs.registry import build_handler_registry
from splitstate.application.errors.application_error import ApplicationErrorCode
from splitstate.core.result import Failure, Success
from splitstate.domain.enums.order_status import OrderStatus
from splitstate.domain.errors.order_error import OrderError
from splitstate.domain.protocols.write_store_protocol import VersionConflict
from tests.conftest import make_item


@dataclass(frozen=True, kw_only=True)
class UnregisteredCommand:
    order_id: str


@pytest.fixture
def channel():
    return AsyncMock()


@pytest.fixture
def dispatcher(write_store, channel, mock_logger):
    return CommandDispatcher(
        registry=build_handler_registry(),
        write_store=write_store,
        channel=channel,
        logger=mock_logger,
    )


async def _create(dispatcher, order_id="order-1", customer_id="42"):
    result = await dispatcher.dispatch(
        CreateOrder(
            customer_id=customer_id,
            items=(make_item("A", 2, "5.00"),),
            order_id=order_id,
        )
    )
    assert isinstance(result, Success)
    return result.value


@pytest.mark.unit
class TestDispatchSuccess:
    """Test committed commands."""

    @pytest.mark.asyncio
    async def test_create_order_commits_version_one(self, dispatcher, write_store, channel):
        receipt = await _create(dispatcher)

        assert receipt.aggregate_id == "order-1"
        assert receipt.version == 1
        assert receipt.event_count == 1
        assert receipt.last_sequence == 1

        stored = await write_store.load("order-1")
        assert stored.version == 1
        assert stored.state["customer_id"] == "42"

        channel.publish.assert_awaited_once()
        (events,) = channel.publish.await_args.args
        assert [e.event_type for e in events] == ["OrderCreated"]
        assert events[0].sequence == 1

    @pytest.mark.asyncio
    async def test_create_order_generates_id(self, dispatcher, write_store):
        result = await dispatcher.dispatch(
            CreateOrder(customer_id="42", items=(make_item(),))
        )

        assert isinstance(result, Success)
        assert result.value.aggregate_id
        assert await write_store.load(result.value.aggregate_id) is not None

    @pytest.mark.asyncio
    async def test_mutation_increments_version_and_sequence(self, dispatcher, write_store):
        await _create(dispatcher)

        result = await dispatcher.dispatch(
            ChangeOrderStatus(order_id="order-1", status=OrderStatus.SHIPPED, expected_version=1)
        )

        assert isinstance(result, Success)
        assert result.value.version == 2
        assert result.value.last_sequence == 2
        history = await write_store.load_history("order-1")
        assert [e.sequence for e in history] == [1, 2]
        assert history[1].payload == {"previous_status": "pending", "status": "shipped"}

    @pytest.mark.asyncio
    async def test_events_land_in_outbox(self, dispatcher, write_store):
        await _create(dispatcher)
        await dispatcher.dispatch(AddOrderItem(order_id="order-1", item=make_item("B")))

        pending = await write_store.fetch_undelivered(10)

        assert [e.key for e in pending] == [("order-1", 1), ("order-1", 2)]


@pytest.mark.unit
class TestDispatchFailures:
    """Test commands that write nothing."""

    @pytest.mark.asyncio
    async def test_unknown_command(self, dispatcher, write_store, channel):
        result = await dispatcher.dispatch(UnregisteredCommand(order_id="order-1"))

        assert isinstance(result, Failure)
        assert result.error.code is ApplicationErrorCode.UNKNOWN_COMMAND
        assert write_store.undelivered_count == 0
        channel.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_aggregate_is_not_found(self, dispatcher, channel):
        result = await dispatcher.dispatch(
            ChangeOrderStatus(order_id="missing", status=OrderStatus.PAID)
        )

        assert isinstance(result, Failure)
        assert result.error.code is ApplicationErrorCode.NOT_FOUND
        assert result.error.domain_error.resource_id == "missing"
        channel.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_business_rule_violation_is_rejected(self, dispatcher, write_store):
        await _create(dispatcher)
        await dispatcher.dispatch(
            ChangeOrderStatus(order_id="order-1", status=OrderStatus.CANCELLED)
        )

        result = await dispatcher.dispatch(
            ChangeOrderStatus(order_id="order-1", status=OrderStatus.SHIPPED)
        )

        assert isinstance(result, Failure)
        assert result.error.code is ApplicationErrorCode.COMMAND_REJECTED
        assert result.error.message == OrderError.INVALID_STATUS_TRANSITION
        stored = await write_store.load("order-1")
        assert stored.version == 2
        assert stored.state["status"] == "cancelled"

    @pytest.mark.asyncio
    async def test_invalid_create_is_rejected(self, dispatcher, write_store):
        result = await dispatcher.dispatch(
            CreateOrder(customer_id="42", items=(), order_id="order-1")
        )

        assert isinstance(result, Failure)
        assert result.error.code is ApplicationErrorCode.COMMAND_REJECTED
        assert result.error.message == OrderError.NO_ITEMS
        assert await write_store.load("order-1") is None

    @pytest.mark.asyncio
    async def test_create_with_existing_id_is_rejected(self, dispatcher):
        await _create(dispatcher)

        result = await dispatcher.dispatch(
            CreateOrder(customer_id="7", items=(make_item(),), order_id="order-1")
        )

        assert isinstance(result, Failure)
        assert result.error.code is ApplicationErrorCode.COMMAND_REJECTED

    @pytest.mark.asyncio
    async def test_stale_expected_version_conflicts(self, dispatcher, write_store):
        await _create(dispatcher)
        await dispatcher.dispatch(ChangeOrderStatus(order_id="order-1", status=OrderStatus.PAID))

        result = await dispatcher.dispatch(
            ChangeOrderStatus(order_id="order-1", status=OrderStatus.SHIPPED, expected_version=1)
        )

        assert isinstance(result, Failure)
        assert result.error.code is ApplicationErrorCode.CONCURRENT_MODIFICATION
        assert result.error.details["expected_version"] == "1"
        assert result.error.details["actual_version"] == "2"
        assert (await write_store.load("order-1")).state["status"] == "paid"

    @pytest.mark.asyncio
    async def test_store_version_check_conflict(
        self, dispatcher, channel, write_store, monkeypatch
    ):
        await _create(dispatcher)
        channel.reset_mock()

        async def losing_save(**kwargs):
            # Another writer committed between load and save.
            return Failure(
                error=VersionConflict(
                    aggregate_id="order-1", expected_version=1, actual_version=2
                )
            )

        monkeypatch.setattr(write_store, "save", losing_save)

        result = await dispatcher.dispatch(DeleteOrder(order_id="order-1"))

        assert isinstance(result, Failure)
        assert result.error.code is ApplicationErrorCode.CONCURRENT_MODIFICATION
        channel.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_write_store_error_is_execution_failure(self, channel, mock_logger):
        store = AsyncMock()
        store.load.return_value = None
        store.save.side_effect = RuntimeError("disk full")
        dispatcher = CommandDispatcher(build_handler_registry(), store, channel, mock_logger)

        result = await dispatcher.dispatch(
            CreateOrder(customer_id="42", items=(make_item(),), order_id="order-1")
        )

        assert isinstance(result, Failure)
        assert result.error.code is ApplicationErrorCode.COMMAND_EXECUTION_FAILED
        channel.publish.assert_not_awaited()
        mock_logger.error.assert_called_once()


@pytest.mark.unit
class TestAfterCommitHandOff:
    """Test that the hand-off never fails a committed dispatch."""

    @pytest.mark.asyncio
    async def test_channel_failure_does_not_fail_dispatch(
        self, dispatcher, channel, write_store, mock_logger
    ):
        channel.publish.side_effect = RuntimeError("channel down")

        receipt = await _create(dispatcher)

        assert receipt.version == 1
        assert write_store.undelivered_count == 1
        warning_events = [c.args[0] for c in mock_logger.warning.call_args_list]
        assert "event_hand_off_failed" in warning_events


@pytest.mark.unit
class TestDispatchWithRetry:
    """Test dispatch_with_retry."""

    @pytest.mark.asyncio
    async def test_retries_after_conflict(self, dispatcher, write_store, monkeypatch):
        await _create(dispatcher)
        real_save = write_store.save
        calls = []

        async def flaky_save(**kwargs):
            calls.append(kwargs["expected_version"])
            if len(calls) == 1:
                return Failure(
                    error=VersionConflict(
                        aggregate_id="order-1", expected_version=1, actual_version=2
                    )
                )
            return await real_save(**kwargs)

        monkeypatch.setattr(write_store, "save", flaky_save)

        result = await dispatcher.dispatch_with_retry(
            ChangeOrderStatus(order_id="order-1", status=OrderStatus.PAID)
        )

        assert isinstance(result, Success)
        assert result.value.version == 2
        assert calls == [1, 1]

    @pytest.mark.asyncio
    async def test_pinned_version_is_not_retried(self, dispatcher):
        await _create(dispatcher)
        await dispatcher.dispatch(ChangeOrderStatus(order_id="order-1", status=OrderStatus.PAID))

        result = await dispatcher.dispatch_with_retry(
            ChangeOrderStatus(order_id="order-1", status=OrderStatus.SHIPPED, expected_version=1),
            max_attempts=5,
        )

        assert isinstance(result, Failure)
        assert result.error.code is ApplicationErrorCode.CONCURRENT_MODIFICATION

    @pytest.mark.asyncio
    async def test_non_conflict_failure_returned_immediately(self, dispatcher):
        result = await dispatcher.dispatch_with_retry(
            ChangeOrderStatus(order_id="missing", status=OrderStatus.PAID)
        )

        assert isinstance(result, Failure)
        assert result.error.code is ApplicationErrorCode.NOT_FOUND
