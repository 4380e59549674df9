"""Shared fixtures for sync engine tests."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from state_sync.models import SnapshotEnvelope


class InMemoryTransport:
    """Subscriber and provider backed by process memory.

    ``emit`` delivers events synchronously to every handler. ``gate`` can be
    cleared to hold ``get_snapshot`` calls until it is set again; ``subscribe_gate``
    does the same for ``subscribe``.
    """

    def __init__(self) -> None:
        self.handlers: list[Any] = []
        self.snapshot: Any = None
        self.get_snapshot_calls = 0
        self.gate = asyncio.Event()
        self.gate.set()
        self.subscribe_gate = asyncio.Event()
        self.subscribe_gate.set()

    @property
    def subscriber_count(self) -> int:
        return len(self.handlers)

    def set_snapshot(self, revision: str, data: Any) -> None:
        self.snapshot = SnapshotEnvelope(revision=revision, data=data)

    def emit(self, event: Any) -> None:
        for handler in list(self.handlers):
            handler(event)

    async def subscribe(self, handler: Any) -> Any:
        await self.subscribe_gate.wait()
        self.handlers.append(handler)
        return lambda: self.handlers.remove(handler)

    async def get_snapshot(self) -> Any:
        self.get_snapshot_calls += 1
        await self.gate.wait()
        if self.snapshot is None:
            raise RuntimeError("No snapshot configured")
        return self.snapshot


class RecordingApplier:
    """Applier that records every envelope it receives."""

    def __init__(self) -> None:
        self.applied: list[SnapshotEnvelope[Any]] = []

    def apply(self, envelope: SnapshotEnvelope[Any]) -> None:
        self.applied.append(envelope)

    @property
    def revisions(self) -> list[str]:
        return [envelope.revision for envelope in self.applied]


@pytest.fixture
def transport() -> InMemoryTransport:
    return InMemoryTransport()


@pytest.fixture
def applier() -> RecordingApplier:
    return RecordingApplier()


@pytest.fixture
def make_transport():
    return InMemoryTransport
