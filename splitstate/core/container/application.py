"""Composition root.

build_application() wires the command side, the projection pipeline and the
query side into one Application. All dependencies are passed explicitly;
the only process-wide lookups are the cached settings and logger.
"""

from dataclasses import dataclass, field
from typing import Any

from splitstate.application.cqrs.dispatcher import CommandDispatcher
from splitstate.application.cqrs.registry import build_handler_registry
from splitstate.application.dtos.dispatch_dtos import DispatchReceipt
from splitstate.application.dtos.projection_dtos import RebuildReport
from splitstate.application.errors.application_error import ApplicationError
from splitstate.application.projections.channel import ProjectionEventChannel
from splitstate.application.projections.engine import ProjectionEngine
from splitstate.application.projections.order_projectors import (
    ORDER_SUMMARY,
    default_projectors,
)
from splitstate.application.projections.relay import OutboxRelay
from splitstate.application.projections.retry import RetryPolicy
from splitstate.application.queries.query_service import QueryService
from splitstate.application.queries.view_queries import ViewCriteria
from splitstate.core.config import Settings, get_settings
from splitstate.core.container.infrastructure import build_stores, get_logger
from splitstate.core.errors import NotFoundError
from splitstate.core.result import Result
from splitstate.domain.protocols import (
    DeadLetter,
    DeadLetterStore,
    LoggerProtocol,
    ReadModel,
    ReadStore,
    WriteStore,
)
from splitstate.infrastructure.persistence.database import Database


@dataclass(kw_only=True)
class Application:
    """Wired application.

    Attributes:
        dispatcher: Write side entry point.
        query_service: Read side entry point.
        engine: Projection engine (rebuild/resume/stalled views).
        channel: After-commit event hand-off.
        relay: Outbox catch-up delivery.
        write_store / read_store / dead_letter_store: Adapters in use.
        logger: Application logger.
        databases: SQL databases created by build_application (closed by close()).
    """

    dispatcher: CommandDispatcher
    query_service: QueryService
    engine: ProjectionEngine
    channel: ProjectionEventChannel
    relay: OutboxRelay
    write_store: WriteStore
    read_store: ReadStore
    dead_letter_store: DeadLetterStore
    logger: LoggerProtocol
    databases: list[Database] = field(default_factory=list)

    async def dispatch(self, command: Any) -> Result[DispatchReceipt, ApplicationError]:
        """Execute a command (see CommandDispatcher.dispatch)."""
        return await self.dispatcher.dispatch(command)

    async def query(
        self, criteria: ViewCriteria
    ) -> Result[list[ReadModel], ApplicationError]:
        """Find views (see QueryService.query)."""
        return await self.query_service.query(criteria)

    async def get_by_id(
        self, view_id: str, projection: str = ORDER_SUMMARY
    ) -> Result[ReadModel, NotFoundError | ApplicationError]:
        """Fetch one view (see QueryService.get_by_id)."""
        return await self.query_service.get_by_id(view_id, projection)

    async def rebuild_projection(self, aggregate_id: str) -> RebuildReport:
        """Discard and replay every view of one aggregate."""
        return await self.engine.rebuild(aggregate_id)

    async def dead_letters(self, aggregate_id: str | None = None) -> list[DeadLetter]:
        """Dead-lettered projection failures, oldest first."""
        return await self.dead_letter_store.find(aggregate_id)

    async def initialize(self) -> None:
        """Create SQL tables for owned databases (no-op for memory stores)."""
        for database in self.databases:
            await database.create_all()

    async def close(self) -> None:
        """Stop the relay, finish background deliveries and close databases."""
        if self.relay.is_running:
            await self.relay.stop()
        await self.channel.drain()
        for database in self.databases:
            await database.close()
        self.logger.info("application_closed")


def build_application(
    settings: Settings | None = None,
    *,
    write_store: WriteStore | None = None,
    read_store: ReadStore | None = None,
    dead_letter_store: DeadLetterStore | None = None,
    logger: LoggerProtocol | None = None,
) -> Application:
    """Wire an Application.

    Stores not passed explicitly come from settings.storage_backend.

    Args:
        settings: Settings (defaults to get_settings()).
        write_store: Write store override.
        read_store: Read store override.
        dead_letter_store: Dead-letter store override.
        logger: Logger override (defaults to get_logger()).

    Returns:
        Application ready for initialize().
    """
    settings = settings or get_settings()
    logger = logger or get_logger()

    databases: list[Database] = []
    if write_store is None or read_store is None or dead_letter_store is None:
        bundle = build_stores(settings)
        write_store = write_store or bundle.write_store
        read_store = read_store or bundle.read_store
        dead_letter_store = dead_letter_store or bundle.dead_letter_store
        databases = bundle.databases

    engine = ProjectionEngine(
        read_store=read_store,
        dead_letter_store=dead_letter_store,
        history=write_store,
        projectors=default_projectors(),
        logger=logger.bind(component="projection_engine"),
        retry_policy=RetryPolicy.from_settings(settings),
    )
    channel = ProjectionEventChannel(
        engine,
        write_store,
        logger.bind(component="event_channel"),
        mode=settings.projection_delivery,
    )
    dispatcher = CommandDispatcher(
        registry=build_handler_registry(),
        write_store=write_store,
        channel=channel,
        logger=logger.bind(component="dispatcher"),
    )
    relay = OutboxRelay(
        write_store,
        engine,
        logger.bind(component="outbox_relay"),
        batch_size=settings.relay_batch_size,
        poll_interval=settings.relay_poll_interval,
    )
    query_service = QueryService(
        read_store,
        engine.projection_names,
        logger.bind(component="query_service"),
    )

    logger.info(
        "application_built",
        storage_backend=settings.storage_backend.value,
        projection_delivery=settings.projection_delivery.value,
        projections=engine.projection_names,
    )
    return Application(
        dispatcher=dispatcher,
        query_service=query_service,
        engine=engine,
        channel=channel,
        relay=relay,
        write_store=write_store,
        read_store=read_store,
        dead_letter_store=dead_letter_store,
        logger=logger,
        databases=databases,
    )
