"""Command dispatcher.

Single entry point of the write side. For every command it:

1. Resolves the handler (UNKNOWN_COMMAND if absent)
2. Loads the target aggregate, or prepares a new id for creation commands
3. Runs the handler's business decision
4. Returns COMMAND_REJECTED on a business-rule failure (nothing written)
5. Stamps the produced events and saves state + events in one write-store
   transaction guarded by the version read in step 2
   (CONCURRENT_MODIFICATION on mismatch, never a silent overwrite)
6. Hands the committed events to the event channel

Failures before the commit abort the command with no partial state.
Failures after the commit (channel, projection) are logged and never fail
dispatch(): the events are already durable in the outbox and the relay
redelivers them.

Architecture:
- Application layer (orchestration only, business rules live in handlers)
- Depends on ports: WriteStore, EventChannel, LoggerProtocol
- Returns Result[DispatchReceipt, ApplicationError]
"""

from typing import Any

from uuid_extensions import uuid7

from splitstate.application.commands.handler import CommandHandler, Decision
from splitstate.application.cqrs.handler_registry import CommandHandlerRegistry
from splitstate.application.dtos.dispatch_dtos import DispatchReceipt
from splitstate.application.errors.application_error import (
    ApplicationError,
    ApplicationErrorCode,
)
from splitstate.core.enums import ErrorCode
from splitstate.core.errors import ConflictError, NotFoundError
from splitstate.core.result import Failure, Result, Success
from splitstate.domain.events.base_event import DomainEvent
from splitstate.domain.protocols.event_channel_protocol import EventChannel
from splitstate.domain.protocols.logger_protocol import LoggerProtocol
from splitstate.domain.protocols.write_store_protocol import (
    StoredAggregate,
    VersionConflict,
    WriteStore,
)


class CommandDispatcher:
    """Dispatches commands against the write store.

    Dependencies (injected via constructor):
        - CommandHandlerRegistry: routing table built at startup
        - WriteStore: durable aggregate + outbox persistence
        - EventChannel: after-commit hand-off to the projection side
        - LoggerProtocol: structured logging

    Concurrency:
        Dispatches for different aggregates run independently. Two dispatches
        for the same aggregate based on the same version cannot both commit:
        the write store's expected-version check lets exactly one through.
    """

    def __init__(
        self,
        registry: CommandHandlerRegistry,
        write_store: WriteStore,
        channel: EventChannel,
        logger: LoggerProtocol,
    ) -> None:
        self._registry = registry
        self._write_store = write_store
        self._channel = channel
        self._logger = logger

    async def dispatch(self, command: Any) -> Result[DispatchReceipt, ApplicationError]:
        """Execute a command.

        Args:
            command: Any registered command dataclass instance.

        Returns:
            Success(DispatchReceipt): Write committed (read side may lag).
            Failure(ApplicationError): UNKNOWN_COMMAND, NOT_FOUND,
                COMMAND_REJECTED, CONCURRENT_MODIFICATION or
                COMMAND_EXECUTION_FAILED. Nothing was written.
        """
        command_name = type(command).__name__

        # Step 1: Resolve handler
        handler = self._registry.resolve(type(command))
        if handler is None:
            self._logger.warning("command_unknown", command=command_name)
            return Failure(
                error=ApplicationError(
                    code=ApplicationErrorCode.UNKNOWN_COMMAND,
                    message=f"No handler registered for {command_name}",
                )
            )

        # Step 2: Load target aggregate (or prepare a new one)
        loaded = await self._load_target(command, handler)
        if isinstance(loaded, Failure):
            self._logger.info(
                "command_not_executed",
                command=command_name,
                error_code=loaded.error.code.value,
                reason=loaded.error.message,
            )
            return loaded
        aggregate_id, stored = loaded.value

        aggregate = None
        expected_version = 0
        last_sequence = 0
        if stored is not None:
            aggregate = handler.aggregate_type.from_state(
                stored.aggregate_id, stored.state, stored.version, stored.last_sequence
            )
            expected_version = stored.version
            last_sequence = stored.last_sequence

        # Step 3-4: Business decision
        decision_result = handler.decide(command, aggregate, aggregate_id=aggregate_id)
        if isinstance(decision_result, Failure):
            self._logger.info(
                "command_rejected",
                command=command_name,
                aggregate_id=aggregate_id,
                reason=decision_result.error,
            )
            return Failure(
                error=ApplicationError(
                    code=ApplicationErrorCode.COMMAND_REJECTED,
                    message=decision_result.error,
                    details={"aggregate_id": aggregate_id},
                )
            )
        decision = decision_result.value

        # Step 5: Stamp events and commit under the optimistic-concurrency check
        events = self._stamp_events(
            decision, aggregate_id, handler.aggregate_type.AGGREGATE_TYPE, last_sequence
        )
        try:
            save_result = await self._write_store.save(
                aggregate_id=aggregate_id,
                aggregate_type=handler.aggregate_type.AGGREGATE_TYPE,
                expected_version=expected_version,
                state=decision.aggregate.to_state(),
                events=events,
            )
        except Exception as e:
            self._logger.error(
                "command_commit_failed",
                error=e,
                command=command_name,
                aggregate_id=aggregate_id,
            )
            return Failure(
                error=ApplicationError(
                    code=ApplicationErrorCode.COMMAND_EXECUTION_FAILED,
                    message=f"Write store failed: {e}",
                    details={"aggregate_id": aggregate_id},
                )
            )

        if isinstance(save_result, Failure):
            return Failure(error=self._conflict_error(command_name, save_result.error))

        new_version = save_result.value
        decision.aggregate.version = new_version
        decision.aggregate.last_sequence = events[-1].sequence

        self._logger.info(
            "command_dispatched",
            command=command_name,
            aggregate_id=aggregate_id,
            version=new_version,
            event_count=len(events),
        )

        # Step 6: Hand off committed events (never fails the dispatch)
        await self._hand_off(events)

        return Success(
            value=DispatchReceipt(
                aggregate_id=aggregate_id,
                version=new_version,
                event_count=len(events),
                last_sequence=events[-1].sequence,
            )
        )

    async def dispatch_with_retry(
        self, command: Any, *, max_attempts: int = 3
    ) -> Result[DispatchReceipt, ApplicationError]:
        """Dispatch, reloading and retrying on CONCURRENT_MODIFICATION.

        Commands that pin an expected_version are dispatched once: a stale
        expected version will not become fresh by retrying.

        Args:
            command: Command to dispatch.
            max_attempts: Total attempts (>= 1).

        Returns:
            Result of the last attempt.
        """
        attempts = 1 if getattr(command, "expected_version", None) is not None else max_attempts
        result = await self.dispatch(command)
        for attempt in range(2, attempts + 1):
            if not (
                isinstance(result, Failure)
                and result.error.code is ApplicationErrorCode.CONCURRENT_MODIFICATION
            ):
                break
            self._logger.debug(
                "command_retry_after_conflict",
                command=type(command).__name__,
                attempt=attempt,
            )
            result = await self.dispatch(command)
        return result

    async def _load_target(
        self, command: Any, handler: CommandHandler
    ) -> Result[tuple[str, StoredAggregate | None], ApplicationError]:
        """Resolve the aggregate id and load the stored aggregate (step 2)."""
        aggregate_type = handler.aggregate_type.AGGREGATE_TYPE
        target_id = handler.target_id(command)

        if handler.creates_aggregate:
            if target_id is None:
                return Success(value=(str(uuid7()), None))
            existing = await self._write_store.load(target_id)
            if existing is not None:
                return Failure(
                    error=ApplicationError(
                        code=ApplicationErrorCode.COMMAND_REJECTED,
                        message=f"{aggregate_type} {target_id} already exists",
                        domain_error=ConflictError(
                            code=ErrorCode.RESOURCE_CONFLICT,
                            message="Aggregate already exists",
                            resource_type=aggregate_type,
                            conflicting_field="id",
                        ),
                        details={"aggregate_id": target_id},
                    )
                )
            return Success(value=(target_id, None))

        if not target_id:
            return Failure(
                error=ApplicationError(
                    code=ApplicationErrorCode.COMMAND_REJECTED,
                    message="Command does not address an aggregate",
                )
            )

        stored = await self._write_store.load(target_id)
        if stored is None or stored.aggregate_type != aggregate_type:
            return Failure(
                error=ApplicationError(
                    code=ApplicationErrorCode.NOT_FOUND,
                    message=f"{aggregate_type} {target_id} not found",
                    domain_error=NotFoundError(
                        code=ErrorCode.AGGREGATE_NOT_FOUND,
                        message="Aggregate not found",
                        resource_type=aggregate_type,
                        resource_id=target_id,
                    ),
                )
            )

        expected = getattr(command, "expected_version", None)
        if expected is not None and expected != stored.version:
            return Failure(
                error=self._conflict_error(
                    type(command).__name__,
                    VersionConflict(
                        aggregate_id=target_id,
                        expected_version=expected,
                        actual_version=stored.version,
                    ),
                )
            )
        return Success(value=(target_id, stored))

    def _stamp_events(
        self,
        decision: Decision,
        aggregate_id: str,
        aggregate_type: str,
        last_sequence: int,
    ) -> list[DomainEvent]:
        return [
            DomainEvent(
                aggregate_id=aggregate_id,
                aggregate_type=aggregate_type,
                sequence=last_sequence + offset,
                event_type=change.EVENT_TYPE,
                payload=change.to_payload(),
            )
            for offset, change in enumerate(decision.changes, start=1)
        ]

    def _conflict_error(self, command_name: str, conflict: VersionConflict) -> ApplicationError:
        self._logger.info(
            "command_version_conflict",
            command=command_name,
            aggregate_id=conflict.aggregate_id,
            expected_version=conflict.expected_version,
            actual_version=conflict.actual_version,
        )
        return ApplicationError(
            code=ApplicationErrorCode.CONCURRENT_MODIFICATION,
            message=(
                f"Aggregate {conflict.aggregate_id} was modified concurrently; "
                "reload and retry"
            ),
            domain_error=ConflictError(
                code=ErrorCode.VERSION_CONFLICT,
                message="Version conflict",
                resource_type="aggregate",
                conflicting_field="version",
            ),
            details={
                "aggregate_id": conflict.aggregate_id,
                "expected_version": str(conflict.expected_version),
                "actual_version": str(conflict.actual_version),
            },
        )

    async def _hand_off(self, events: list[DomainEvent]) -> None:
        try:
            await self._channel.publish(events)
        except Exception as e:
            # Events stay undelivered in the outbox; the relay picks them up.
            self._logger.warning(
                "event_hand_off_failed",
                aggregate_id=events[0].aggregate_id,
                first_sequence=events[0].sequence,
                last_sequence=events[-1].sequence,
                error_type=type(e).__name__,
                error_message=str(e),
            )
