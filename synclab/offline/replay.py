"""Replay engine: drains the durable queue into the remote store.

Flush process:
1. Join an in-flight flush if one exists
2. Check connectivity (offline -> queued)
3. Check queue (empty -> synced)
4. Enter syncing and size the drain snapshot
5. Wait the artificial latency, append snapshot to remote store, drain
6. Items enqueued meanwhile run another cycle while online

Steps 1-4 run synchronously in the caller. Step 5 onward runs in a
shielded task: once syncing begins it always completes.
"""
import asyncio
import logging
from dataclasses import dataclass

from synclab.core.constants import DEFAULT_TENANT_ID, SYNC_LATENCY_MS
from synclab.core.receipt import emit_receipt

from .connectivity import ConnectivityMonitor
from .indicator import SyncIndicator
from .queue import DurableQueue
from .remote import RemoteStore
from .schemas import SyncState

logger = logging.getLogger("synclab.offline.replay")


@dataclass(frozen=True)
class FlushResult:
    """Outcome of one flush() call.

    status is one of:
        offline: connectivity false, nothing drained
        empty: queue already empty, settled to synced
        synced: replay drained everything
        queued: replay stopped with items left because connectivity dropped
    """
    status: str
    synced_count: int = 0
    cycles: int = 0
    pending_count: int = 0
    remote_count: int = 0

    @property
    def success(self) -> bool:
        return self.status in ("empty", "synced")


class ReplayEngine:
    """Serialized flush of the durable queue to the remote store."""

    def __init__(
        self,
        queue: DurableQueue,
        remote: RemoteStore,
        connectivity: ConnectivityMonitor,
        indicator: SyncIndicator,
        latency_seconds: float = SYNC_LATENCY_MS / 1000,
        tenant_id: str = DEFAULT_TENANT_ID,
        echo: bool = True,
    ):
        self.queue = queue
        self.remote = remote
        self.connectivity = connectivity
        self.indicator = indicator
        self.latency_seconds = latency_seconds
        self.tenant_id = tenant_id
        self.echo = echo
        self._inflight: asyncio.Task | None = None

    @property
    def in_flight(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def flush(self) -> FlushResult:
        """Replay pending submissions. Safe to call concurrently.

        Returns:
            FlushResult for this call, or for the in-flight flush it joined
        """
        if self.in_flight:
            logger.debug("Flush already in flight, joining it")
            return await asyncio.shield(self._inflight)

        if not self.connectivity.online:
            self.indicator.transition(SyncState.QUEUED)
            return FlushResult(
                status="offline",
                pending_count=len(self.queue),
                remote_count=len(self.remote),
            )

        if not len(self.queue):
            self.indicator.transition(SyncState.SYNCED)
            return FlushResult(status="empty", remote_count=len(self.remote))

        self.indicator.transition(SyncState.SYNCING)
        snapshot = len(self.queue)
        self._inflight = asyncio.get_running_loop().create_task(self._replay(snapshot))
        return await asyncio.shield(self._inflight)

    async def _replay(self, snapshot: int) -> FlushResult:
        synced_count = 0
        cycles = 0
        try:
            while True:
                cycles += 1
                await asyncio.sleep(self.latency_seconds)

                # Remote store is written before the queue shrinks, so a
                # failure between the two can duplicate but never lose.
                batch = self.queue.peek(snapshot)
                self.remote.append(batch)
                self.queue.drain(len(batch))
                self.queue.persist()
                synced_count += len(batch)

                emit_receipt("offline_sync", {
                    "tenant_id": self.tenant_id,
                    "cycle": cycles,
                    "batch_size": len(batch),
                    "pending_count": len(self.queue),
                    "remote_count": len(self.remote),
                }, echo=self.echo)

                if not len(self.queue):
                    self.indicator.transition(SyncState.SYNCED)
                    status = "synced"
                    break

                if not self.connectivity.online:
                    self.indicator.transition(SyncState.QUEUED)
                    status = "queued"
                    break

                logger.debug("%d submissions arrived during replay, running another cycle",
                             len(self.queue))
                snapshot = len(self.queue)
                self.indicator.transition(SyncState.SYNCING)
        finally:
            self._inflight = None

        return FlushResult(
            status=status,
            synced_count=synced_count,
            cycles=cycles,
            pending_count=len(self.queue),
            remote_count=len(self.remote),
        )
