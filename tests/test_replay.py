"""Tests for the replay engine."""
import asyncio

import pytest

from synclab.offline.connectivity import ConnectivityMonitor
from synclab.offline.indicator import SyncIndicator
from synclab.offline.queue import DurableQueue
from synclab.offline.remote import RemoteStore
from synclab.offline.replay import ReplayEngine
from synclab.offline.schemas import SyncState
from synclab.offline.storage import load_json

LATENCY = 0.02


@pytest.fixture
def engine(storage, clock):
    queue = DurableQueue(storage, "q", clock=clock, echo=False)
    remote = RemoteStore(storage, "server")
    connectivity = ConnectivityMonitor(online=True, echo=False)
    indicator = SyncIndicator(echo=False)
    return ReplayEngine(queue, remote, connectivity, indicator,
                        latency_seconds=LATENCY, echo=False)


def answers(engine):
    return [s.answer for s in engine.remote.submissions]


class TestFlush:
    """Test single flush behaviour."""

    def test_offline_is_noop(self, engine):
        """Test offline flush stays queued and drains nothing."""
        engine.queue.enqueue("HLS")
        engine.connectivity.set_online(False)

        result = asyncio.run(engine.flush())

        assert result.status == "offline"
        assert result.pending_count == 1
        assert engine.indicator.label == "queued"
        assert "syncing" not in engine.indicator.history
        assert len(engine.remote) == 0

    def test_empty_queue_settles_synced(self, engine):
        result = asyncio.run(engine.flush())

        assert result.status == "empty"
        assert result.success
        assert engine.indicator.history == ["idle", "synced"]

    def test_flush_moves_queue_to_remote(self, engine, storage):
        """Test FIFO drain and persistence of both sides."""
        for answer in ["HLS", "MP4", "DASH"]:
            engine.queue.enqueue(answer)

        result = asyncio.run(engine.flush())

        assert result.status == "synced"
        assert result.synced_count == 3
        assert result.cycles == 1
        assert answers(engine) == ["HLS", "MP4", "DASH"]
        assert len(engine.queue) == 0
        assert load_json(storage, "q") == []
        assert [s["answer"] for s in load_json(storage, "server")["submissions"]] == ["HLS", "MP4", "DASH"]
        assert engine.indicator.history == ["idle", "syncing", "synced"]

    def test_syncing_entered_synchronously(self, engine):
        """Test syncing is visible before the latency elapses."""
        engine.queue.enqueue("HLS")

        async def scenario():
            task = asyncio.get_running_loop().create_task(engine.flush())
            await asyncio.sleep(0)
            mid = (engine.indicator.label, len(engine.remote), engine.in_flight)
            await task
            return mid

        assert asyncio.run(scenario()) == ("syncing", 0, True)
        assert engine.indicator.label == "synced"
        assert not engine.in_flight

    def test_double_flush_empty_is_idempotent(self, engine):
        engine.queue.enqueue("HLS")

        async def scenario():
            await engine.flush()
            await engine.flush()
            await engine.flush()

        asyncio.run(scenario())

        assert answers(engine) == ["HLS"]
        assert engine.indicator.history[-1] == "synced"
        assert engine.indicator.history.count("syncing") == 1


class TestConcurrentFlush:
    """Test serialization of overlapping flushes."""

    def test_second_caller_joins_inflight(self, engine):
        """Test rapid flushes share one drain."""
        engine.queue.enqueue("HLS")
        engine.queue.enqueue("MP4")

        async def scenario():
            return await asyncio.gather(engine.flush(), engine.flush())

        first, second = asyncio.run(scenario())

        assert first == second
        assert answers(engine) == ["HLS", "MP4"]
        assert engine.indicator.history == ["idle", "syncing", "synced"]

    def test_enqueue_during_delay_deferred_to_next_cycle(self, engine):
        """Test late items miss the snapshot but still sync."""
        engine.queue.enqueue("early")

        async def scenario():
            task = asyncio.get_running_loop().create_task(engine.flush())
            await asyncio.sleep(0)
            engine.queue.enqueue("late")
            return await task

        result = asyncio.run(scenario())

        assert result.cycles == 2
        assert result.synced_count == 2
        assert answers(engine) == ["early", "late"]
        assert engine.indicator.history == ["idle", "syncing", "syncing", "synced"]

    def test_offline_mid_flight_keeps_late_items_queued(self, engine):
        engine.queue.enqueue("early")

        async def scenario():
            task = asyncio.get_running_loop().create_task(engine.flush())
            await asyncio.sleep(0)
            engine.queue.enqueue("late")
            engine.connectivity.set_online(False)
            return await task

        result = asyncio.run(scenario())

        assert result.status == "queued"
        assert answers(engine) == ["early"]
        assert [s.answer for s in engine.queue.snapshot()] == ["late"]
        assert engine.indicator.label == "queued"

    def test_cancelled_caller_does_not_cancel_replay(self, engine):
        """Test once syncing begins it always completes."""
        engine.queue.enqueue("HLS")

        async def scenario():
            caller = asyncio.get_running_loop().create_task(engine.flush())
            await asyncio.sleep(0)
            caller.cancel()
            with pytest.raises(asyncio.CancelledError):
                await caller
            await engine.indicator.wait_for(SyncState.SYNCED, timeout=1)

        asyncio.run(scenario())

        assert answers(engine) == ["HLS"]
        assert len(engine.queue) == 0
