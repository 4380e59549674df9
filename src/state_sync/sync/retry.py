"""Snapshot provider wrappers that retry failed fetches with exponential backoff."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from state_sync.config import RetryConfig
from state_sync.sync.contracts import SyncErrorContext, SyncPhase

if TYPE_CHECKING:
    from collections.abc import Callable

    from state_sync.models.envelope import SnapshotEnvelope
    from state_sync.sync.contracts import ErrorCallback, SnapshotProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryInfo:
    """Details of a failed attempt that is about to be retried."""

    attempt: int
    error: Exception
    next_delay_ms: float


def compute_delay_ms(attempt: int, policy: RetryConfig) -> float:
    """Return the backoff delay before retry ``attempt`` (0-based).

    Growth stops once the delay reaches ``max_delay_ms``, so large attempt
    indexes never overflow.
    """
    delay = policy.initial_delay_ms
    for _ in range(attempt):
        if delay >= policy.max_delay_ms:
            break
        delay *= policy.backoff_multiplier
    return min(delay, policy.max_delay_ms)


class RetryingSnapshotProvider(Generic[T]):
    """Snapshot provider that retries the wrapped provider on failure."""

    def __init__(
        self,
        provider: SnapshotProvider[T],
        policy: RetryConfig,
        on_retry: Callable[[RetryInfo], None] | None = None,
    ) -> None:
        self._provider = provider
        self._policy = policy
        self._on_retry = on_retry

    async def get_snapshot(self) -> SnapshotEnvelope[T]:
        """Fetch a snapshot, retrying until ``max_attempts`` is exhausted."""
        max_attempts = self._policy.max_attempts
        for attempt in range(max_attempts):
            try:
                return await self._provider.get_snapshot()
            except Exception as exc:
                if attempt + 1 >= max_attempts:
                    raise
                delay_ms = compute_delay_ms(attempt, self._policy)
                if self._on_retry is not None:
                    self._on_retry(RetryInfo(attempt + 1, exc, delay_ms))
                await asyncio.sleep(delay_ms / 1000)
        raise RuntimeError("max_attempts must be at least 1")


def with_retry(
    provider: SnapshotProvider[T],
    policy: RetryConfig | None = None,
    on_retry: Callable[[RetryInfo], None] | None = None,
) -> RetryingSnapshotProvider[T]:
    """Wrap ``provider`` so failed fetches are retried with exponential backoff.

    ``on_retry`` is called before each backoff sleep. The last error is
    re-raised once every attempt has failed.
    """
    return RetryingSnapshotProvider(provider, policy or RetryConfig(), on_retry)


def with_retry_reporting(
    provider: SnapshotProvider[T],
    *,
    topic: str,
    policy: RetryConfig | None = None,
    on_error: ErrorCallback | None = None,
) -> RetryingSnapshotProvider[T]:
    """Retry ``provider`` and report each scheduled retry via logging and ``on_error``.

    The final failure is still raised to the caller; a sync engine wrapping
    this provider reports that one itself.
    """

    def _report(info: RetryInfo) -> None:
        logger.warning(
            "Snapshot fetch failed — topic=%s attempt=%d; retrying in %.0fms",
            topic,
            info.attempt,
            info.next_delay_ms,
            exc_info=info.error,
        )
        if on_error is None:
            return
        try:
            on_error(
                SyncErrorContext(
                    phase=SyncPhase.GET_SNAPSHOT,
                    topic=topic,
                    error=info.error,
                    attempt=info.attempt,
                    will_retry=True,
                    next_delay_ms=info.next_delay_ms,
                )
            )
        except Exception:  # noqa: BLE001
            logger.exception("on_error callback raised — topic=%s", topic)

    return with_retry(provider, policy, _report)
