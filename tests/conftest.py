"""Pytest configuration and shared fixtures.

Provides:
1. Marker registration (unit, integration)
2. Automatic asyncio marker for coroutine tests
3. In-memory stores and a projection engine wired for tests
4. Helpers to build orders, items and domain events
"""

import inspect
from decimal import Decimal
from typing import Any
from unittest.mock import MagicMock

import pytest

from splitstate.application.projections.engine import ProjectionEngine
from splitstate.application.projections.order_projectors import default_projectors
from splitstate.application.projections.retry import RetryPolicy
from splitstate.core.config import Settings
from splitstate.core.enums import Environment
from splitstate.domain.enums.order_status import OrderStatus
from splitstate.domain.events.base_event import DomainEvent
from splitstate.domain.events.order_events import (
    OrderCreated,
    OrderDeleted,
    OrderItemAdded,
    OrderStatusChanged,
)
from splitstate.domain.events.registry import ORDER_AGGREGATE
from splitstate.domain.value_objects.order_item import OrderItem
from splitstate.infrastructure.memory import (
    InMemoryDeadLetterStore,
    InMemoryReadStore,
    InMemoryWriteStore,
)


# =============================================================================
# Helpers
# =============================================================================


def make_item(sku: str = "SKU-1", quantity: int = 1, unit_price: str = "10.00") -> OrderItem:
    """Build an OrderItem with a Decimal price."""
    return OrderItem(sku=sku, quantity=quantity, unit_price=Decimal(unit_price))


def make_event(
    sequence: int,
    event_type: str,
    payload: dict[str, Any],
    *,
    aggregate_id: str = "order-1",
) -> DomainEvent:
    """Build a stamped order event."""
    return DomainEvent(
        aggregate_id=aggregate_id,
        aggregate_type=ORDER_AGGREGATE,
        sequence=sequence,
        event_type=event_type,
        payload=payload,
    )


def order_history(aggregate_id: str = "order-1", customer_id: str = "42") -> list[DomainEvent]:
    """Typical lifecycle: created, item added, paid, shipped."""
    changes = [
        OrderCreated(customer_id=customer_id, items=(make_item("A", 2, "5.00"),)),
        OrderItemAdded(item=make_item("B", 1, "7.50")),
        OrderStatusChanged(previous_status=OrderStatus.PENDING, status=OrderStatus.PAID),
        OrderStatusChanged(previous_status=OrderStatus.PAID, status=OrderStatus.SHIPPED),
    ]
    return [
        make_event(sequence, change.EVENT_TYPE, change.to_payload(), aggregate_id=aggregate_id)
        for sequence, change in enumerate(changes, start=1)
    ]


def deleted_event(sequence: int, aggregate_id: str = "order-1") -> DomainEvent:
    """Terminal OrderDeleted event."""
    return make_event(
        sequence,
        OrderDeleted.EVENT_TYPE,
        OrderDeleted(reason="test").to_payload(),
        aggregate_id=aggregate_id,
    )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mock_logger():
    """MagicMock logger whose bind() returns itself."""
    logger = MagicMock()
    logger.bind.return_value = logger
    return logger


@pytest.fixture
def test_settings():
    """Settings for tests: memory stores, sync delivery, no retry delay."""
    return Settings(
        environment=Environment.TESTING,
        projection_retry_base_delay=0.0,
        projection_retry_max_delay=0.0,
        projection_max_attempts=3,
    )


@pytest.fixture
def write_store():
    return InMemoryWriteStore()


@pytest.fixture
def read_store():
    return InMemoryReadStore()


@pytest.fixture
def dead_letter_store():
    return InMemoryDeadLetterStore()


@pytest.fixture
def sleeps():
    """Recorded backoff delays (see engine fixture)."""
    return []


@pytest.fixture
def engine(read_store, dead_letter_store, write_store, mock_logger, sleeps):
    """Projection engine over in-memory stores with recorded, instant sleeps."""

    async def fake_sleep(delay: float) -> None:
        sleeps.append(delay)

    return ProjectionEngine(
        read_store=read_store,
        dead_letter_store=dead_letter_store,
        history=write_store,
        projectors=default_projectors(),
        logger=mock_logger,
        retry_policy=RetryPolicy(max_attempts=3, base_delay=0.1, max_delay=1.0),
        sleep=fake_sleep,
    )


# =============================================================================
# Pytest hooks
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests with real database"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions.

    This ensures all async tests are properly marked even if
    the developer forgets to add @pytest.mark.asyncio.
    """
    for item in items:
        if inspect.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)
