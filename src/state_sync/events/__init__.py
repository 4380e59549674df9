"""Invalidation event contracts."""

from state_sync.events.contracts import InvalidationEvent

__all__ = ["InvalidationEvent"]
