"""Collaborator interfaces the sync engine consumes."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from enum import StrEnum
from typing import Any, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ConfigDict

from state_sync.events.contracts import InvalidationEvent
from state_sync.models.envelope import SnapshotEnvelope

T_co = TypeVar("T_co", covariant=True)
T_contra = TypeVar("T_contra", contravariant=True)

Unsubscribe = Callable[[], None]
InvalidationHandler = Callable[[InvalidationEvent | Mapping[str, Any]], None]


@runtime_checkable
class SnapshotProvider(Protocol[T_co]):
    """Source of the current state for a topic."""

    async def get_snapshot(self) -> SnapshotEnvelope[T_co]:
        """Return the current state together with its revision."""
        ...


@runtime_checkable
class SnapshotApplier(Protocol[T_contra]):
    """Sink that replaces local state with a pulled snapshot."""

    def apply(self, envelope: SnapshotEnvelope[T_contra]) -> Awaitable[None] | None:
        """Absorb the snapshot; may be a coroutine function."""
        ...


@runtime_checkable
class InvalidationSubscriber(Protocol):
    """Transport side that delivers invalidation events.

    Handlers are called on the event loop thread with an ``InvalidationEvent``
    or, for untyped transports, a mapping with ``topic`` and ``revision`` keys.
    """

    async def subscribe(self, handler: InvalidationHandler) -> Unsubscribe:
        """Register ``handler`` and return a callable that removes it."""
        ...


class SyncPhase(StrEnum):
    """Stage of the sync lifecycle an error was raised in."""

    SUBSCRIBE = "subscribe"
    GET_SNAPSHOT = "get_snapshot"
    APPLY = "apply"
    PROTOCOL = "protocol"


class SyncErrorContext(BaseModel):
    """Error report handed to ``on_error`` callbacks.

    Only ``phase``, ``topic`` and ``error`` are always set; the rest is
    best-effort triage context.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    phase: SyncPhase
    topic: str
    error: BaseException
    source_event: Any = None
    local_revision: str | None = None
    event_revision: str | None = None
    snapshot_revision: str | None = None
    attempt: int | None = None
    will_retry: bool | None = None
    next_delay_ms: float | None = None


ErrorCallback = Callable[[SyncErrorContext], None]
