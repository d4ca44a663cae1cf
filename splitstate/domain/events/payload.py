"""Typed event payload base.

Payload classes are frozen dataclasses that know their event type and can
convert themselves to and from the JSON-compatible dict carried by
DomainEvent.payload.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Self


@dataclass(frozen=True, kw_only=True, slots=True)
class EventPayload:
    """Base class for typed event payloads.

    Subclasses set EVENT_TYPE and implement to_payload/from_payload.
    from_payload raises MalformedPayloadError when the dict does not
    describe a valid payload.
    """

    EVENT_TYPE: ClassVar[str] = ""

    def to_payload(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        raise NotImplementedError

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Self:
        """Parse from a JSON-compatible dict."""
        raise NotImplementedError
