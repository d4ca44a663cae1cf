"""Command dispatch result DTOs."""

from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class DispatchReceipt:
    """Successful dispatch result.

    A receipt guarantees the write committed. It does not guarantee the read
    side already reflects it.

    Attributes:
        aggregate_id: Id of the created or mutated aggregate.
        version: New aggregate version.
        event_count: Number of domain events the command produced.
        last_sequence: Sequence number of the last produced event.
    """

    aggregate_id: str
    version: int
    event_count: int
    last_sequence: int
