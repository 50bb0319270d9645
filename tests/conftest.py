"""Test configuration and fixtures for the offline sync engine.

StepClock: deterministic ISO-8601 clock
Fixtures: pytest fixtures for unit and scenario tests
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import pytest

from synclab.config import SyncConfig
from synclab.offline import MemoryStorage, init_session


@dataclass
class StepClock:
    """Clock that advances a fixed step on every call."""
    start: datetime = field(default_factory=lambda: datetime(2024, 1, 1, tzinfo=timezone.utc))
    step: timedelta = timedelta(seconds=1)
    calls: int = 0

    def __call__(self) -> str:
        ts = self.start + self.step * self.calls
        self.calls += 1
        return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@pytest.fixture
def fast_config() -> SyncConfig:
    """Short latency, receipts silenced."""
    return SyncConfig(latency_ms=20, sync_timeout_ms=2000, emit_receipts=False)


@pytest.fixture
def storage() -> MemoryStorage:
    """Fresh in-memory key-value storage."""
    return MemoryStorage()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def make_session(storage, fast_config, clock):
    """Factory building sessions over the shared storage.

    Calling it twice simulates a reload of the same client.
    """
    def _make(online: bool = True, config: SyncConfig | None = None):
        return init_session(storage, config or fast_config, online=online, clock=clock)
    return _make
