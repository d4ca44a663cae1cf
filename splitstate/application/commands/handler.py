"""Command handler contract.

Handlers hold the business logic of one command type. They never touch a
store: the dispatcher loads the aggregate, calls decide(), and persists the
decision. A handler returns either a Decision (new aggregate state plus one or
more event payloads) or a Failure carrying the rejection reason.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from splitstate.core.result import Result
from splitstate.domain.entities.aggregate import Aggregate
from splitstate.domain.events.payload import EventPayload


@dataclass(frozen=True, kw_only=True)
class Decision:
    """Outcome of a successful handler decision.

    Attributes:
        aggregate: Aggregate carrying the new state.
        changes: Event payloads describing the change, in order (at least one).
    """

    aggregate: Any
    changes: Sequence[EventPayload]

    def __post_init__(self) -> None:
        """Validate that a decision records at least one change.

        Raises:
            ValueError: If changes is empty.
        """
        if not self.changes:
            raise ValueError("A decision must produce at least one event")


class CommandHandler(Protocol):
    """Protocol every command handler satisfies.

    Attributes:
        aggregate_type: Aggregate class the handler operates on.
        creates_aggregate: True for creation commands (no load).
    """

    aggregate_type: type[Aggregate]
    creates_aggregate: bool

    def target_id(self, cmd: Any) -> str | None:
        """Aggregate id addressed by the command (None: generate one)."""
        ...

    def decide(
        self, cmd: Any, aggregate: Any | None, *, aggregate_id: str
    ) -> Result[Decision, str]:
        """Apply business rules.

        Args:
            cmd: Command instance.
            aggregate: Loaded aggregate (None for creation commands).
            aggregate_id: Id of the target aggregate.

        Returns:
            Success(Decision): New state and event payloads.
            Failure(reason): Business-rule rejection; nothing is written.
        """
        ...
