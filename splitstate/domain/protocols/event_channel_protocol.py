"""EventChannel protocol (port) between the dispatcher and the projection side.

The dispatcher publishes committed events through this port. The events are
already durable in the write store outbox when publish() is called, so a
channel only has to make a best effort: anything it cannot settle is
redelivered by the outbox relay (at-least-once, FIFO per aggregate).

Implementations:
    - ProjectionEventChannel: splitstate/application/projections/channel.py
"""

from collections.abc import Sequence
from typing import Protocol

from splitstate.domain.events.base_event import DomainEvent


class EventChannel(Protocol):
    """Protocol for after-commit event delivery.

    Notes:
        - ALWAYS called after the write store commit (facts, not intents)
        - Events of one call belong to one aggregate, in sequence order
        - May raise; the dispatcher logs and carries on
    """

    async def publish(self, events: Sequence[DomainEvent]) -> None:
        """Deliver committed events towards the projection engine."""
        ...
