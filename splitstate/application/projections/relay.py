"""
Outbox relay.

Background service that pulls undelivered events from the write store's
outbox and feeds them to the projection engine. It recovers events whose
hand-off was lost (crash between commit and delivery, channel failure,
DEFERRED delivery mode) and redelivers events whose views were not settled.

Redelivery is always safe: the engine ignores sequences already applied.

Events held behind a stalled view stay in the outbox. While batches come back
full, each pass resumes after the last event of the previous one, so held
events of one aggregate never take every batch and later aggregates still
get delivered. A short or empty batch restarts the scan from the beginning.
"""

import asyncio

from splitstate.application.projections.channel import deliver
from splitstate.application.projections.engine import ProjectionEngine
from splitstate.domain.protocols.logger_protocol import LoggerProtocol
from splitstate.domain.protocols.write_store_protocol import WriteStore


class OutboxRelay:
    """
    Polls the outbox and delivers events to the projection engine.

    Use run_once() for one-off catch-up (tests, operator scripts) and
    start()/stop() for a polling loop.
    """

    def __init__(
        self,
        write_store: WriteStore,
        engine: ProjectionEngine,
        logger: LoggerProtocol,
        *,
        batch_size: int = 100,
        poll_interval: float = 1.0,
    ) -> None:
        """
        Initialize the relay.

        Args:
            write_store: Outbox owner.
            engine: Projection engine to feed.
            logger: Structured logger.
            batch_size: Maximum events fetched per pass.
            poll_interval: Seconds between passes in the polling loop.
        """
        self._write_store = write_store
        self._engine = engine
        self._logger = logger
        self.batch_size = batch_size
        self.poll_interval = poll_interval

        self._cursor: tuple[str, int] | None = None
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    @property
    def is_running(self) -> bool:
        """True while the polling loop is active."""
        return self._task is not None and not self._task.done()

    async def run_once(self) -> int:
        """
        Deliver one batch of undelivered events.

        Returns:
            Number of events settled and marked delivered.
        """
        events = await self._write_store.fetch_undelivered(
            self.batch_size, after=self._cursor
        )
        if not events and self._cursor is not None:
            self._cursor = None
            events = await self._write_store.fetch_undelivered(self.batch_size)
        if not events:
            return 0
        self._cursor = events[-1].key if len(events) >= self.batch_size else None

        delivered = await deliver(self._engine, self._write_store, events)
        self._logger.info(
            "outbox_relay_pass",
            fetched=len(events),
            delivered=delivered,
            pending=len(events) - delivered,
        )
        return delivered

    async def start(self) -> None:
        """Start the polling loop (no-op if already running)."""
        if self.is_running:
            self._logger.warning("outbox_relay_already_running")
            return

        self._stopping.clear()
        self._task = asyncio.create_task(self._loop())
        self._logger.info(
            "outbox_relay_started",
            batch_size=self.batch_size,
            poll_interval=self.poll_interval,
        )

    async def stop(self) -> None:
        """Stop the polling loop and wait for the current pass to finish."""
        if not self.is_running:
            self._logger.warning("outbox_relay_not_running")
            return

        self._stopping.set()
        assert self._task is not None
        await self._task
        self._task = None
        self._logger.info("outbox_relay_stopped")

    async def _loop(self) -> None:
        while not self._stopping.is_set():
            try:
                await self.run_once()
            except Exception as e:
                self._logger.error("outbox_relay_pass_failed", error=e)

            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self.poll_interval)
            except TimeoutError:
                continue
