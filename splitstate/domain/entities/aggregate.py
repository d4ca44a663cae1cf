"""Aggregate protocol.

Structural contract every write-side aggregate satisfies so the dispatcher
can load, version and persist it without knowing its concrete type.
"""

from typing import Any, ClassVar, Protocol, Self


class Aggregate(Protocol):
    """Write-side aggregate contract.

    Attributes:
        AGGREGATE_TYPE: Aggregate kind stored alongside its state.
        id: Opaque unique key.
        version: Incremented by one per successful command (0 = not yet saved).
        last_sequence: Highest event sequence number produced so far.
    """

    AGGREGATE_TYPE: ClassVar[str]

    id: str
    version: int
    last_sequence: int

    def to_state(self) -> dict[str, Any]:
        """Serialize authoritative state (without id/version) to a JSON dict."""
        ...

    @classmethod
    def from_state(
        cls,
        aggregate_id: str,
        state: dict[str, Any],
        version: int,
        last_sequence: int,
    ) -> Self:
        """Rebuild the aggregate from a stored state dict."""
        ...
