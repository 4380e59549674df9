"""Consumer-side sync engine and its collaborator contracts."""

from state_sync.sync.contracts import (
    InvalidationSubscriber,
    SnapshotApplier,
    SnapshotProvider,
    SyncErrorContext,
    SyncPhase,
    Unsubscribe,
)
from state_sync.sync.engine import RevisionSync
from state_sync.sync.retry import (
    RetryInfo,
    RetryingSnapshotProvider,
    with_retry,
    with_retry_reporting,
)

__all__ = [
    "InvalidationSubscriber",
    "RetryInfo",
    "RetryingSnapshotProvider",
    "RevisionSync",
    "SnapshotApplier",
    "SnapshotProvider",
    "SyncErrorContext",
    "SyncPhase",
    "Unsubscribe",
    "with_retry",
    "with_retry_reporting",
]
