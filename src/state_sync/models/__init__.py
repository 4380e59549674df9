"""Revision and snapshot data models."""

from state_sync.models.envelope import SnapshotEnvelope
from state_sync.models.revision import (
    MAX_REVISION,
    ZERO_REVISION,
    Revision,
    RevisionOrder,
    RevisionText,
    compare_revisions,
    is_canonical_revision,
    revision_key,
)

__all__ = [
    "MAX_REVISION",
    "ZERO_REVISION",
    "Revision",
    "RevisionOrder",
    "RevisionText",
    "SnapshotEnvelope",
    "compare_revisions",
    "is_canonical_revision",
    "revision_key",
]
