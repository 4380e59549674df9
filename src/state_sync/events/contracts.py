"""Typed contract for invalidation announcements."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, StrictStr

from state_sync.models.revision import (
    Revision,
    RevisionOrder,
    RevisionText,
    compare_revisions,
)

if TYPE_CHECKING:
    from typing import Self


class InvalidationEvent(BaseModel):
    """Announcement that ``topic`` has moved to ``revision``.

    Consumers compare the revision against their last-seen one and pull a
    fresh snapshot only when it is newer. The topic is opaque here; routing
    and namespacing belong to the transport.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    topic: StrictStr
    revision: RevisionText

    @classmethod
    def announce(cls, topic: str, revision: Revision) -> Self:
        """Build an event for ``topic`` carrying the canonical text of ``revision``."""
        return cls(topic=topic, revision=str(revision))

    @classmethod
    def from_message_body(cls, body: str | bytes) -> Self:
        """Parse an invalidation event from a JSON message body."""
        return cls.model_validate_json(body)

    def to_message_body(self) -> str:
        """Encode the event as a JSON message body."""
        return self.model_dump_json()

    def revision_value(self) -> Revision:
        """Return the typed revision carried by this event."""
        return Revision.parse(self.revision)

    def is_newer_than(self, revision: str) -> bool:
        """Return True when this event announces a revision after ``revision``."""
        return compare_revisions(self.revision, revision) is RevisionOrder.GREATER
