"""Snapshot envelope — state payload paired with the revision it was captured at."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from state_sync.models.revision import Revision, RevisionText

if TYPE_CHECKING:
    from typing import Self

T = TypeVar("T")


class SnapshotEnvelope(BaseModel, Generic[T]):
    """Canonical shape returned by snapshot providers.

    ``revision`` always crosses the wire as a decimal string, never a JSON
    number. Parametrize the class (``SnapshotEnvelope[MyState]``) to have
    ``data`` validated on decode.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    revision: RevisionText
    data: T

    @classmethod
    def capture(cls, revision: Revision, data: Any) -> Self:
        """Pair ``data`` with the canonical text of ``revision``."""
        return cls(revision=str(revision), data=data)

    @classmethod
    def from_message_body(cls, body: str | bytes) -> Self:
        """Parse an envelope from a JSON message body."""
        return cls.model_validate_json(body)

    def to_message_body(self) -> str:
        """Encode the envelope as a JSON message body."""
        return self.model_dump_json()

    def revision_value(self) -> Revision:
        """Return the typed revision carried by this envelope."""
        return Revision.parse(self.revision)
