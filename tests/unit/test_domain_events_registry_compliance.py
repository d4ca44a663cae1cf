"""Domain Events Registry Compliance Tests.

Self-enforcing tests that fail if an event payload class is added without
registering it, or if payload parsing drifts from serialization.

Test categories:
1. Completeness - every payload class registered exactly once
2. Lookup helpers - metadata by type, by aggregate, terminal flag
3. Payload parsing - malformed payloads raise MalformedPayloadError
4. Envelope validation - DomainEvent rejects invalid sequence/identity
"""

import pytest

from splitstate.domain.enums.order_status import OrderStatus
from splitstate.domain.errors.projection_error import (
    MalformedPayloadError,
    SemanticProjectionError,
)
from splitstate.domain.events import order_events
from splitstate.domain.events.base_event import DomainEvent
from splitstate.domain.events.order_events import (
    OrderCreated,
    OrderDeleted,
    OrderItemAdded,
    OrderStatusChanged,
)
from splitstate.domain.events.payload import EventPayload
from splitstate.domain.events.registry import (
    EVENT_REGISTRY,
    ORDER_AGGREGATE,
    get_event_metadata,
    get_events_for_aggregate,
    is_terminal,
)
from tests.conftest import make_item


def _payload_classes() -> list[type[EventPayload]]:
    return [
        value
        for value in vars(order_events).values()
        if isinstance(value, type)
        and issubclass(value, EventPayload)
        and value is not EventPayload
    ]


@pytest.mark.unit
class TestRegistryCompleteness:
    """Verify every payload class is registered."""

    def test_all_payload_classes_registered(self):
        registered = {metadata.payload_class for metadata in EVENT_REGISTRY}
        missing = [cls.__name__ for cls in _payload_classes() if cls not in registered]
        assert not missing, f"Unregistered event payloads: {missing}"

    def test_no_duplicate_event_types(self):
        event_types = [metadata.event_type for metadata in EVENT_REGISTRY]
        assert len(event_types) == len(set(event_types))

    def test_event_types_are_past_tense(self):
        for metadata in EVENT_REGISTRY:
            assert metadata.event_type.endswith("ed"), metadata.event_type

    def test_only_order_deleted_is_terminal(self):
        terminal = [m.event_type for m in EVENT_REGISTRY if m.terminal]
        assert terminal == [OrderDeleted.EVENT_TYPE]


@pytest.mark.unit
class TestRegistryLookup:
    """Test lookup helpers."""

    def test_get_event_metadata(self):
        metadata = get_event_metadata("OrderCreated")

        assert metadata is not None
        assert metadata.payload_class is OrderCreated
        assert metadata.aggregate_type == ORDER_AGGREGATE

    def test_get_event_metadata_unknown(self):
        assert get_event_metadata("NoSuchEvent") is None

    def test_get_events_for_aggregate(self):
        assert len(get_events_for_aggregate(ORDER_AGGREGATE)) == len(EVENT_REGISTRY)
        assert get_events_for_aggregate("invoice") == []

    def test_is_terminal(self):
        assert is_terminal("OrderDeleted")
        assert not is_terminal("OrderCreated")
        assert not is_terminal("NoSuchEvent")


@pytest.mark.unit
class TestPayloadParsing:
    """Test from_payload on valid and malformed payloads."""

    def test_order_created_parses_serialized_payload(self):
        change = OrderCreated(customer_id="42", items=(make_item("A", 2, "5.00"),))

        parsed = OrderCreated.from_payload(change.to_payload())

        assert parsed == change

    def test_status_changed_parses_serialized_payload(self):
        change = OrderStatusChanged(
            previous_status=OrderStatus.PENDING, status=OrderStatus.PAID
        )

        assert OrderStatusChanged.from_payload(change.to_payload()) == change

    @pytest.mark.parametrize(
        ("payload_class", "payload"),
        [
            (OrderCreated, {"items": []}),
            (OrderCreated, {"customer_id": "42", "items": "not-a-list"}),
            (OrderCreated, {"customer_id": "42", "items": [{"sku": "A"}]}),
            (
                OrderCreated,
                {"customer_id": "42", "items": [{"sku": "A", "quantity": 1, "unit_price": "x"}]},
            ),
            (OrderItemAdded, {}),
            (OrderItemAdded, {"item": "A"}),
            (OrderStatusChanged, {"status": "paid"}),
            (OrderStatusChanged, {"previous_status": "pending", "status": "lost"}),
        ],
    )
    def test_malformed_payload_raises(self, payload_class, payload):
        with pytest.raises(MalformedPayloadError) as exc_info:
            payload_class.from_payload(payload)

        assert exc_info.value.event_type == payload_class.EVENT_TYPE

    def test_malformed_payload_is_semantic(self):
        assert issubclass(MalformedPayloadError, SemanticProjectionError)

    def test_order_deleted_reason_optional(self):
        assert OrderDeleted.from_payload({}) == OrderDeleted(reason=None)


@pytest.mark.unit
class TestDomainEventEnvelope:
    """Test DomainEvent validation."""

    def test_key(self):
        event = DomainEvent(
            aggregate_id="order-1",
            aggregate_type=ORDER_AGGREGATE,
            sequence=3,
            event_type="OrderDeleted",
        )

        assert event.key == ("order-1", 3)
        assert event.occurred_at.tzinfo is not None

    @pytest.mark.parametrize(
        ("aggregate_id", "sequence", "event_type"),
        [("order-1", 0, "OrderCreated"), ("", 1, "OrderCreated"), ("order-1", 1, "")],
    )
    def test_invalid_envelope_rejected(self, aggregate_id, sequence, event_type):
        with pytest.raises(ValueError):
            DomainEvent(
                aggregate_id=aggregate_id,
                aggregate_type=ORDER_AGGREGATE,
                sequence=sequence,
                event_type=event_type,
            )

    def test_event_ids_unique(self):
        first = DomainEvent(
            aggregate_id="o", aggregate_type=ORDER_AGGREGATE, sequence=1, event_type="X"
        )
        second = DomainEvent(
            aggregate_id="o", aggregate_type=ORDER_AGGREGATE, sequence=1, event_type="X"
        )
        assert first.event_id != second.event_id
