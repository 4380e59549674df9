"""Revision sync engine — pulls snapshots when invalidations announce newer revisions."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from state_sync.errors import ProtocolError
from state_sync.events.contracts import InvalidationEvent
from state_sync.models.envelope import SnapshotEnvelope
from state_sync.models.revision import (
    ZERO_REVISION,
    RevisionOrder,
    compare_revisions,
    is_canonical_revision,
)
from state_sync.sync.contracts import SyncErrorContext, SyncPhase

if TYPE_CHECKING:
    from collections.abc import Callable

    from state_sync.sync.contracts import (
        ErrorCallback,
        InvalidationSubscriber,
        SnapshotApplier,
        SnapshotProvider,
        Unsubscribe,
    )

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _field(message: object, name: str) -> Any:
    """Read ``name`` from a typed model or from an untyped mapping payload."""
    if isinstance(message, Mapping):
        return message.get(name)
    return getattr(message, name, None)


class RevisionSync(Generic[T]):
    """Keeps one topic's local state in step with its producer.

    Subscribes to invalidations, compares each announced revision with the
    last applied one and pulls a fresh snapshot only when the announcement is
    newer. Refreshes never overlap: invalidations arriving while a fetch is in
    flight are coalesced into a single follow-up fetch.
    """

    def __init__(
        self,
        topic: str,
        subscriber: InvalidationSubscriber,
        provider: SnapshotProvider[T],
        applier: SnapshotApplier[T],
        *,
        should_refresh: Callable[[InvalidationEvent], bool] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        """Initialize for ``topic`` with its transport and state collaborators."""
        if not isinstance(topic, str) or not topic.strip():
            raise ValueError("topic must be a non-empty string")
        self._topic = topic
        self._subscriber = subscriber
        self._provider = provider
        self._applier = applier
        self._should_refresh = should_refresh
        self._on_error = on_error

        self._local_revision = ZERO_REVISION
        self._has_applied_snapshot = False
        self._unsubscribe: Unsubscribe | None = None
        self._started = False
        self._stopped = False
        self._refresh_in_flight = False
        self._refresh_queued = False
        self._tasks: set[asyncio.Task] = set()

    @property
    def topic(self) -> str:
        return self._topic

    @property
    def local_revision(self) -> str:
        """Canonical text of the last applied snapshot revision."""
        return self._local_revision

    async def start(self) -> None:
        """Subscribe to invalidations and pull the initial snapshot."""
        if self._stopped:
            raise RuntimeError("start() called after stop()")
        if self._started:
            return
        self._started = True
        logger.debug("Revision sync starting — topic=%s", self._topic)

        try:
            self._unsubscribe = await self._subscriber.subscribe(self._handle_invalidation)
        except Exception as exc:
            self._started = False
            self._report(SyncPhase.SUBSCRIBE, exc)
            raise

        if self._stopped:
            self._release_subscription()
            logger.debug("Revision sync stopped during subscribe — topic=%s", self._topic)
            return

        try:
            await self.refresh()
        except Exception:
            self._release_subscription()
            self._started = False
            raise
        logger.info(
            "Revision sync started — topic=%s revision=%s",
            self._topic,
            self._local_revision,
        )

    def stop(self) -> None:
        """Unsubscribe and stop applying snapshots. Safe to call repeatedly."""
        if self._stopped:
            return
        self._stopped = True
        self._release_subscription()
        logger.info("Revision sync stopped — topic=%s", self._topic)

    async def refresh(self) -> None:
        """Pull the current snapshot and apply it when it is newer than local state."""
        if self._stopped:
            logger.debug("Refresh skipped (stopped) — topic=%s", self._topic)
            return
        if self._refresh_in_flight:
            logger.debug("Refresh coalesced (in flight) — topic=%s", self._topic)
            self._refresh_queued = True
            return

        self._refresh_in_flight = True
        try:
            while True:
                self._refresh_queued = False
                await self._refresh_once()
                if not self._refresh_queued or self._stopped:
                    break
        finally:
            self._refresh_in_flight = False

    async def _refresh_once(self) -> None:
        """Fetch, validate and apply one snapshot."""
        try:
            snapshot = await self._provider.get_snapshot()
        except Exception as exc:
            self._report(
                SyncPhase.GET_SNAPSHOT, exc, local_revision=self._local_revision
            )
            raise

        revision = _field(snapshot, "revision")
        if not is_canonical_revision(revision):
            error = ProtocolError(f"non-canonical snapshot revision: {revision!r}")
            self._report(
                SyncPhase.PROTOCOL,
                error,
                local_revision=self._local_revision,
                snapshot_revision=revision if isinstance(revision, str) else None,
            )
            raise error

        if self._stopped:
            return

        if (
            self._has_applied_snapshot
            and compare_revisions(revision, self._local_revision)
            is not RevisionOrder.GREATER
        ):
            logger.debug(
                "Snapshot skipped (not newer) — topic=%s snapshot=%s local=%s",
                self._topic,
                revision,
                self._local_revision,
            )
            return

        if not isinstance(snapshot, SnapshotEnvelope):
            snapshot = SnapshotEnvelope(revision=revision, data=_field(snapshot, "data"))

        try:
            result = self._applier.apply(snapshot)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            self._report(
                SyncPhase.APPLY,
                exc,
                local_revision=self._local_revision,
                snapshot_revision=revision,
            )
            raise

        if not self._stopped:
            self._has_applied_snapshot = True
            self._local_revision = revision
            logger.debug(
                "Applied snapshot — topic=%s revision=%s", self._topic, revision
            )

    def _handle_invalidation(self, event: InvalidationEvent | Mapping[str, Any]) -> None:
        """Decide whether an invalidation warrants a refresh and schedule it."""
        if self._stopped:
            return

        topic = _field(event, "topic")
        if not isinstance(topic, str) or not topic.strip():
            self._report(
                SyncPhase.PROTOCOL,
                ProtocolError("empty topic in invalidation event"),
                source_event=event,
                local_revision=self._local_revision,
            )
            return

        revision = _field(event, "revision")
        if not is_canonical_revision(revision):
            self._report(
                SyncPhase.PROTOCOL,
                ProtocolError(f"non-canonical revision in invalidation event: {revision!r}"),
                source_event=event,
                event_revision=revision if isinstance(revision, str) else None,
                local_revision=self._local_revision,
            )
            return

        if topic != self._topic:
            return

        if compare_revisions(revision, self._local_revision) is not RevisionOrder.GREATER:
            logger.debug(
                "Invalidation skipped (not newer) — topic=%s event=%s local=%s",
                self._topic,
                revision,
                self._local_revision,
            )
            return

        if self._should_refresh is not None and not self._should_refresh(
            InvalidationEvent(topic=topic, revision=revision)
        ):
            logger.debug(
                "Invalidation skipped (should_refresh) — topic=%s event=%s",
                self._topic,
                revision,
            )
            return

        logger.debug(
            "Invalidation triggered refresh — topic=%s event=%s", self._topic, revision
        )
        task = asyncio.get_running_loop().create_task(self._background_refresh())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _background_refresh(self) -> None:
        """Run a refresh triggered by an invalidation; failures are already reported."""
        try:
            await self.refresh()
        except Exception:  # noqa: BLE001
            logger.debug(
                "Background refresh failed — topic=%s", self._topic, exc_info=True
            )

    def _release_subscription(self) -> None:
        if self._unsubscribe is not None:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            unsubscribe()

    def _report(self, phase: SyncPhase, error: BaseException, **extra: Any) -> None:
        """Log an error and hand it to ``on_error``; callback failures are contained."""
        logger.error(
            "Revision sync %s error — topic=%s: %s",
            phase.value,
            self._topic,
            error,
        )
        if self._on_error is None:
            return
        try:
            self._on_error(
                SyncErrorContext(phase=phase, topic=self._topic, error=error, **extra)
            )
        except Exception:  # noqa: BLE001
            logger.exception("on_error callback raised — topic=%s", self._topic)
