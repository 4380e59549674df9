"""Primitives for revision-based state synchronization.

A producer bumps a ``Revision`` on every mutation and announces it with an
``InvalidationEvent``; consumers that see a newer revision than their own
pull a ``SnapshotEnvelope``. Revisions cross every boundary as canonical
decimal text and are ordered with ``compare_revisions``.
"""

from state_sync.errors import InvalidRevisionText, ProtocolError, StateSyncError
from state_sync.events import InvalidationEvent
from state_sync.models import (
    MAX_REVISION,
    ZERO_REVISION,
    Revision,
    RevisionOrder,
    SnapshotEnvelope,
    compare_revisions,
    is_canonical_revision,
    revision_key,
)
from state_sync.sync import RevisionSync, with_retry, with_retry_reporting

__all__ = [
    "MAX_REVISION",
    "ZERO_REVISION",
    "InvalidRevisionText",
    "InvalidationEvent",
    "ProtocolError",
    "Revision",
    "RevisionOrder",
    "RevisionSync",
    "SnapshotEnvelope",
    "StateSyncError",
    "compare_revisions",
    "is_canonical_revision",
    "revision_key",
    "with_retry",
    "with_retry_reporting",
]
