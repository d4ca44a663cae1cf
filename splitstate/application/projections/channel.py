"""Event channel feeding the projection engine.

The dispatcher hands committed events to the channel after commit. Delivery
mode (ProjectionDelivery):

    SYNC        apply inline; dispatch() returns after projection
    BACKGROUND  apply in an asyncio task; drain() waits for outstanding work
    DEFERRED    do nothing; the outbox relay delivers

Events whose ApplyOutcome is settled are marked delivered in the outbox.
Anything else stays undelivered and is picked up again by the relay.
"""

import asyncio
from collections.abc import Sequence

from splitstate.application.projections.engine import ProjectionEngine
from splitstate.core.enums import ProjectionDelivery
from splitstate.domain.events.base_event import DomainEvent
from splitstate.domain.protocols.logger_protocol import LoggerProtocol
from splitstate.domain.protocols.write_store_protocol import WriteStore


async def deliver(
    engine: ProjectionEngine, write_store: WriteStore, events: Sequence[DomainEvent]
) -> int:
    """Apply events in order and settle them in the outbox.

    Args:
        engine: Projection engine.
        write_store: Outbox owner (mark_delivered only).
        events: Events to apply.

    Returns:
        Number of events marked delivered.
    """
    settled = []
    for event in events:
        outcome = await engine.apply(event)
        if outcome.settled:
            settled.append(event.event_id)
    if settled:
        await write_store.mark_delivered(settled)
    return len(settled)


class ProjectionEventChannel:
    """EventChannel implementation backed by the in-process projection engine."""

    def __init__(
        self,
        engine: ProjectionEngine,
        write_store: WriteStore,
        logger: LoggerProtocol,
        mode: ProjectionDelivery = ProjectionDelivery.SYNC,
    ) -> None:
        self._engine = engine
        self._write_store = write_store
        self._logger = logger
        self._mode = mode
        self._tasks: set[asyncio.Task[int]] = set()

    @property
    def mode(self) -> ProjectionDelivery:
        """Configured delivery mode."""
        return self._mode

    async def publish(self, events: Sequence[DomainEvent]) -> None:
        """Hand committed events to the projection side.

        Raises:
            Exception: In SYNC mode, outbox settle failures propagate (the
                dispatcher logs them; the relay redelivers).
        """
        if not events:
            return

        if self._mode is ProjectionDelivery.SYNC:
            await deliver(self._engine, self._write_store, events)
        elif self._mode is ProjectionDelivery.BACKGROUND:
            task = asyncio.create_task(
                deliver(self._engine, self._write_store, list(events))
            )
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)
        else:
            self._logger.debug(
                "projection_delivery_deferred",
                aggregate_id=events[0].aggregate_id,
                event_count=len(events),
            )

    async def drain(self) -> None:
        """Wait until every background delivery started so far has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_task_done(self, task: asyncio.Task[int]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._logger.warning(
                "background_delivery_failed",
                error_type=type(error).__name__,
                error_message=str(error),
            )
