"""Projection engine.

Applies committed domain events to read views. The engine is the only writer
of the read store.

Per view (projection, view_id) the read store keeps the sequence of the last
applied event (the marker). For each offered event:

    sequence <= marker        -> DUPLICATE, no-op (redelivery is harmless)
    sequence > marker + 1     -> BUFFERED until the gap fills
    sequence == marker + 1    -> applied, then buffered successors drained

Failures:
    TransientProjectionError  -> retried per RetryPolicy, marker unchanged
    anything else, or retries exhausted
                              -> DeadLetter recorded, view STALLED; later
                                 events for the view are buffered, never
                                 skipped, until rebuild() or resume()

Events for one aggregate are serialized with a per-aggregate asyncio.Lock;
different aggregates proceed concurrently.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Any
from weakref import WeakValueDictionary

from splitstate.application.dtos.projection_dtos import (
    ApplyOutcome,
    RebuildReport,
    StalledView,
    ViewOutcome,
    ViewStatus,
)
from splitstate.application.projections.projector import Projector
from splitstate.application.projections.retry import RetryPolicy
from splitstate.domain.errors.projection_error import TransientProjectionError
from splitstate.domain.events.base_event import DomainEvent
from splitstate.domain.protocols.dead_letter_protocol import DeadLetter, DeadLetterStore
from splitstate.domain.protocols.logger_protocol import LoggerProtocol
from splitstate.domain.protocols.read_store_protocol import ReadStore
from splitstate.domain.protocols.write_store_protocol import WriteStore

ViewKey = tuple[str, str]


class ProjectionEngine:
    """Event-to-view applier with ordering, idempotency and dead-lettering.

    Dependencies (injected via constructor):
        - ReadStore: view persistence (full access)
        - DeadLetterStore: failed event records
        - WriteStore: event history source for rebuild (read-only use)
        - Projectors: one per view kind
        - LoggerProtocol: structured logging
        - RetryPolicy: backoff for transient failures
        - sleep: awaitable delay (tests inject a recorder)
    """

    def __init__(
        self,
        *,
        read_store: ReadStore,
        dead_letter_store: DeadLetterStore,
        history: WriteStore,
        projectors: Sequence[Projector],
        logger: LoggerProtocol,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        names = [projector.name for projector in projectors]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate projector names: {names}")

        self._read_store = read_store
        self._dead_letter_store = dead_letter_store
        self._history = history
        self._projectors = list(projectors)
        self._logger = logger
        self._retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

        # Entries vanish once no task holds or waits on the lock.
        self._locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()
        self._buffers: dict[ViewKey, dict[int, DomainEvent]] = {}
        self._stalled: dict[ViewKey, int] = {}

    @property
    def projection_names(self) -> list[str]:
        """Names of all registered projections."""
        return [projector.name for projector in self._projectors]

    async def apply(self, event: DomainEvent) -> ApplyOutcome:
        """Offer one event to every view of its aggregate type.

        Never raises for projection failures; they are retried or
        dead-lettered and reported through the outcome.

        Args:
            event: Committed domain event.

        Returns:
            ApplyOutcome with one ViewOutcome per affected view.
        """
        async with self._lock_for(event.aggregate_id):
            views = [
                await self._offer(projector, event)
                for projector in self._projectors_for(event.aggregate_type)
            ]
        return ApplyOutcome(
            aggregate_id=event.aggregate_id, sequence=event.sequence, views=views
        )

    async def rebuild(self, aggregate_id: str) -> RebuildReport:
        """Discard and replay every view of one aggregate from its history.

        Buffers and stall state of the aggregate's views are cleared first.
        Replay goes through the same path as incremental application, so the
        result equals applying the history event by event.

        Args:
            aggregate_id: Aggregate whose views are rebuilt.

        Returns:
            RebuildReport with final markers and any projections that stalled.
        """
        async with self._lock_for(aggregate_id):
            history = await self._history.load_history(aggregate_id)
            projectors = (
                self._projectors_for(history[0].aggregate_type)
                if history
                else self._projectors
            )

            for projector in projectors:
                key = (projector.name, aggregate_id)
                self._buffers.pop(key, None)
                self._stalled.pop(key, None)
                await self._read_store.discard(projector.name, aggregate_id)

            markers = {projector.name: 0 for projector in projectors}
            for event in history:
                for projector in projectors:
                    outcome = await self._offer(projector, event)
                    markers[projector.name] = outcome.last_applied_seq
            stalled = [
                projector.name
                for projector in projectors
                if (projector.name, aggregate_id) in self._stalled
            ]

        self._logger.info(
            "projection_rebuilt",
            aggregate_id=aggregate_id,
            events_replayed=len(history),
            stalled=stalled,
        )
        return RebuildReport(
            aggregate_id=aggregate_id,
            events_replayed=len(history),
            projections=[projector.name for projector in projectors],
            last_applied_seq=markers,
            stalled=stalled,
        )

    async def resume(self, projection: str, aggregate_id: str) -> ViewOutcome:
        """Clear a stall and retry the held events of one view.

        The dead-lettered event is attempted again first; if it fails again
        the view stalls again.

        Args:
            projection: Projection name.
            aggregate_id: Aggregate (view key) to resume.

        Returns:
            ViewOutcome after the retry.

        Raises:
            KeyError: If no projector has that name.
        """
        projector = self._projector_named(projection)
        key = (projection, aggregate_id)
        async with self._lock_for(aggregate_id):
            failed_sequence = self._stalled.pop(key, None)
            marker = await self._marker(projector, aggregate_id, None)
            if marker is None:
                if failed_sequence is not None:
                    self._stalled[key] = failed_sequence
                status = ViewStatus.STALLED
                marker = 0
            else:
                marker, status = await self._drain(projector, aggregate_id, marker)
                if key in self._stalled:
                    status = ViewStatus.DEAD_LETTERED

        self._logger.info(
            "projection_resumed",
            projection=projection,
            aggregate_id=aggregate_id,
            status=status.value,
            last_applied_seq=marker,
        )
        return ViewOutcome(
            projection=projection,
            view_id=aggregate_id,
            status=status,
            last_applied_seq=marker,
        )

    def stalled_views(self) -> list[StalledView]:
        """Views currently held back behind a dead letter."""
        return [
            StalledView(
                projection=projection,
                view_id=view_id,
                failed_sequence=failed_sequence,
                buffered=len(self._buffers.get((projection, view_id), {})),
            )
            for (projection, view_id), failed_sequence in sorted(self._stalled.items())
        ]

    def pending_count(self, projection: str, view_id: str) -> int:
        """Events buffered for one view (gap or stall)."""
        return len(self._buffers.get((projection, view_id), {}))

    @property
    def tracked_aggregates(self) -> int:
        """Aggregates that currently own a lock (in use or awaited)."""
        return len(self._locks)

    async def _offer(self, projector: Projector, event: DomainEvent) -> ViewOutcome:
        view_id = projector.view_id(event)
        key = (projector.name, view_id)

        marker = await self._marker(projector, view_id, event)
        if marker is None:
            return self._outcome(projector, view_id, ViewStatus.DEAD_LETTERED, 0)

        if event.sequence <= marker:
            self._logger.debug(
                "projection_duplicate_ignored",
                projection=projector.name,
                view_id=view_id,
                sequence=event.sequence,
                last_applied_seq=marker,
            )
            return self._outcome(projector, view_id, ViewStatus.DUPLICATE, marker)

        if key in self._stalled:
            self._buffers.setdefault(key, {})[event.sequence] = event
            return self._outcome(projector, view_id, ViewStatus.STALLED, marker)

        if event.sequence > marker + 1:
            self._buffers.setdefault(key, {})[event.sequence] = event
            self._logger.debug(
                "projection_event_buffered",
                projection=projector.name,
                view_id=view_id,
                sequence=event.sequence,
                last_applied_seq=marker,
            )
            return self._outcome(projector, view_id, ViewStatus.BUFFERED, marker)

        self._buffers.setdefault(key, {})[event.sequence] = event
        marker, status = await self._drain(projector, view_id, marker)
        return self._outcome(projector, view_id, status, marker)

    async def _drain(
        self, projector: Projector, view_id: str, marker: int
    ) -> tuple[int, ViewStatus]:
        """Apply buffered events contiguous to the marker, in order."""
        key = (projector.name, view_id)
        buffer = self._buffers.get(key, {})
        for stale in [sequence for sequence in buffer if sequence <= marker]:
            del buffer[stale]

        applied = False
        while marker + 1 in buffer:
            event = buffer[marker + 1]
            ok = await self._apply_with_retry(projector, view_id, event)
            if not ok:
                status = ViewStatus.APPLIED if applied else ViewStatus.DEAD_LETTERED
                return marker, status
            del buffer[marker + 1]
            marker += 1
            applied = True

        if not buffer:
            self._buffers.pop(key, None)
        if applied or not buffer:
            return marker, ViewStatus.APPLIED
        return marker, ViewStatus.BUFFERED

    async def _apply_with_retry(
        self, projector: Projector, view_id: str, event: DomainEvent
    ) -> bool:
        """Apply one event to one view; False if it was dead-lettered."""
        ok, _ = await self._attempt(
            projector, view_id, event, lambda: self._apply_once(projector, view_id, event)
        )
        if ok:
            self._logger.debug(
                "projection_applied",
                projection=projector.name,
                view_id=view_id,
                event_type=event.event_type,
                sequence=event.sequence,
            )
        return ok

    async def _apply_once(
        self, projector: Projector, view_id: str, event: DomainEvent
    ) -> None:
        checkpoint = await self._read_store.checkpoint(projector.name, view_id)
        content = checkpoint.content if checkpoint is not None else None

        if projector.handles(event.event_type):
            new_content = projector.apply(content, event)
        else:
            new_content = content

        if new_content is None:
            await self._read_store.delete(projector.name, view_id, event.sequence)
        else:
            await self._read_store.upsert(
                projector.name, view_id, new_content, event.sequence
            )

    async def _marker(
        self, projector: Projector, view_id: str, event: DomainEvent | None
    ) -> int | None:
        """Current marker of a view; None if the read store stayed unreachable."""

        async def read() -> int:
            checkpoint = await self._read_store.checkpoint(projector.name, view_id)
            return checkpoint.last_applied_seq if checkpoint is not None else 0

        ok, marker = await self._attempt(projector, view_id, event, read)
        return marker if ok else None

    async def _attempt(
        self,
        projector: Projector,
        view_id: str,
        event: DomainEvent | None,
        operation: Callable[[], Awaitable[Any]],
    ) -> tuple[bool, Any]:
        """Run an operation under the retry policy.

        Transient failures are retried with backoff. Anything else, or a
        transient failure on the last attempt, is dead-lettered against the
        event (when there is one) and stalls the view.
        """
        attempts = 0
        while True:
            attempts += 1
            try:
                return True, await operation()
            except TransientProjectionError as e:
                if self._retry_policy.should_retry(attempts):
                    delay = self._retry_policy.calculate_delay(attempts - 1)
                    self._logger.warning(
                        "projection_retry_scheduled",
                        projection=projector.name,
                        view_id=view_id,
                        sequence=event.sequence if event else None,
                        attempt=attempts,
                        delay=delay,
                        error_type=type(e).__name__,
                        error_message=str(e),
                    )
                    await self._sleep(delay)
                    continue
                await self._dead_letter(projector, view_id, event, e, attempts)
                return False, None
            except Exception as e:
                await self._dead_letter(projector, view_id, event, e, attempts)
                return False, None

    async def _dead_letter(
        self,
        projector: Projector,
        view_id: str,
        event: DomainEvent | None,
        error: Exception,
        attempts: int,
    ) -> None:
        key = (projector.name, view_id)
        if event is None:
            self._logger.error(
                "projection_view_unavailable",
                error=error,
                projection=projector.name,
                view_id=view_id,
                attempts=attempts,
            )
            return

        self._stalled[key] = event.sequence
        self._buffers.setdefault(key, {})[event.sequence] = event
        self._logger.error(
            "projection_dead_lettered",
            error=error,
            projection=projector.name,
            view_id=view_id,
            event_type=event.event_type,
            sequence=event.sequence,
            attempts=attempts,
        )
        try:
            await self._dead_letter_store.record(
                DeadLetter(
                    event_id=event.event_id,
                    projection=projector.name,
                    aggregate_id=event.aggregate_id,
                    sequence=event.sequence,
                    event_type=event.event_type,
                    payload=dict(event.payload),
                    reason=str(error),
                    error_type=type(error).__name__,
                    attempts=attempts,
                )
            )
        except Exception as e:
            # The stall itself is tracked in memory and still reported.
            self._logger.critical(
                "dead_letter_record_failed",
                error=e,
                projection=projector.name,
                aggregate_id=event.aggregate_id,
                sequence=event.sequence,
            )

    def _outcome(
        self, projector: Projector, view_id: str, status: ViewStatus, marker: int
    ) -> ViewOutcome:
        return ViewOutcome(
            projection=projector.name,
            view_id=view_id,
            status=status,
            last_applied_seq=marker,
        )

    def _projectors_for(self, aggregate_type: str) -> list[Projector]:
        return [p for p in self._projectors if p.aggregate_type == aggregate_type]

    def _projector_named(self, name: str) -> Projector:
        for projector in self._projectors:
            if projector.name == name:
                return projector
        raise KeyError(name)

    def _lock_for(self, aggregate_id: str) -> asyncio.Lock:
        lock = self._locks.get(aggregate_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[aggregate_id] = lock
        return lock
