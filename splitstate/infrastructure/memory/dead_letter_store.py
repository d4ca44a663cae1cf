"""In-memory DeadLetterStore."""

from splitstate.domain.protocols.dead_letter_protocol import DeadLetter


class InMemoryDeadLetterStore:
    """Append-only list of dead letters."""

    def __init__(self) -> None:
        self._records: list[DeadLetter] = []

    async def record(self, dead_letter: DeadLetter) -> None:
        self._records.append(dead_letter)

    async def find(self, aggregate_id: str | None = None) -> list[DeadLetter]:
        if aggregate_id is None:
            return list(self._records)
        return [r for r in self._records if r.aggregate_id == aggregate_id]
