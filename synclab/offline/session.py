"""Sync session: wires queue, store, connectivity, indicator and replay.

init_session() builds an explicit, injectable state object. Nothing
here is a module-level singleton; tests and UI layers hold the session
by reference.

Usage:
    session = init_session(MemoryStorage(), online=False)
    await session.submit("HLS")          # -> queued
    session.set_online(True)             # schedules a flush
    await session.expect_synced()
    session.remote.last().answer         # "HLS"
"""
import asyncio
import logging

from synclab.config import SyncConfig
from synclab.core.constants import EVENT_BECAME_OFFLINE, EVENT_BECAME_ONLINE
from synclab.core.receipt import StopRule, emit_receipt

from .connectivity import ConnectivityMonitor
from .indicator import SyncIndicator
from .queue import DurableQueue
from .remote import RemoteStore
from .replay import FlushResult, ReplayEngine
from .schemas import Submission, SyncState
from .storage import KeyValueStorage

logger = logging.getLogger("synclab.offline.session")


class SyncSession:
    """One client session of the offline sync engine."""

    def __init__(
        self,
        storage: KeyValueStorage,
        config: SyncConfig | None = None,
        online: bool = True,
        clock=None,
    ):
        self.config = config or SyncConfig()
        self.storage = storage
        echo = self.config.emit_receipts
        tenant_id = self.config.tenant_id

        queue_kwargs = {"clock": clock} if clock is not None else {}
        self.queue = DurableQueue(
            storage, self.config.queue_key, tenant_id=tenant_id, echo=echo, **queue_kwargs
        )
        self.remote = RemoteStore(storage, self.config.server_key)
        self.queue.rehydrate()
        self.remote.rehydrate()

        # Sync state is never persisted, only derived from what was rehydrated
        initial = SyncState.QUEUED if len(self.queue) else SyncState.IDLE
        self.indicator = SyncIndicator(initial, tenant_id=tenant_id, echo=echo)
        self.connectivity = ConnectivityMonitor(online, tenant_id=tenant_id, echo=echo)
        self.engine = ReplayEngine(
            self.queue,
            self.remote,
            self.connectivity,
            self.indicator,
            latency_seconds=self.config.latency_seconds,
            tenant_id=tenant_id,
            echo=echo,
        )
        self._scheduled: set[asyncio.Task] = set()
        self._flush_pending = False

        self.connectivity.subscribe(EVENT_BECAME_ONLINE, self._on_online)
        self.connectivity.subscribe(EVENT_BECAME_OFFLINE, self._on_offline)

        emit_receipt("queue_rehydrate", {
            "tenant_id": tenant_id,
            "pending_count": len(self.queue),
            "remote_count": len(self.remote),
            "initial_state": initial.value,
        }, echo=echo)

    # Connectivity wiring

    def _on_online(self):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Host signalled outside the event loop; settle() or flush() runs it
            logger.debug("No running event loop, flush deferred until settle()")
            self._flush_pending = True
            return
        task = loop.create_task(self.engine.flush())
        self._scheduled.add(task)
        task.add_done_callback(self._scheduled.discard)

    def _on_offline(self):
        if len(self.queue):
            self.indicator.transition(SyncState.QUEUED)

    def set_online(self, online: bool) -> bool:
        """Push a host connectivity change into the session.

        Going online schedules a flush on the running event loop, or marks
        one pending for the next settle() or flush() when no loop is running.
        """
        return self.connectivity.set_online(online)

    # Operations

    async def submit(self, answer: str) -> Submission:
        """Queue a submission and sync it if connectivity allows.

        Offline, or while a replay is already running, the submission waits
        in the queue. Online, it is flushed before this returns.
        """
        submission = self.queue.enqueue(answer)

        if not self.connectivity.online:
            self.indicator.transition(SyncState.QUEUED)
        elif self.engine.in_flight:
            logger.debug("Replay in flight, %r deferred to its next cycle", answer)
        else:
            await self.engine.flush()

        return submission

    async def flush(self) -> FlushResult:
        """Force sync. Joins any in-flight replay."""
        self._flush_pending = False
        return await self.engine.flush()

    async def settle(self):
        """Wait for every connectivity-scheduled flush to finish."""
        if self._flush_pending:
            self._flush_pending = False
            await self.engine.flush()
        while self._scheduled:
            pending = list(self._scheduled)
            await asyncio.gather(*pending)
            self._scheduled.difference_update(pending)

    async def wait_for_state(self, state: SyncState | str, timeout: float | None = None) -> SyncState:
        return await self.indicator.wait_for(state, timeout)

    async def expect_synced(self, timeout: float | None = None) -> SyncState:
        """Wait for synced within the configured sync timeout.

        Raises:
            asyncio.TimeoutError: If synced is not reached in time
        """
        if timeout is None:
            timeout = self.config.sync_timeout_seconds
        return await self.indicator.wait_for(SyncState.SYNCED, timeout)

    # Inspection

    @property
    def sync_state(self) -> str:
        return self.indicator.label

    @property
    def sync_history(self) -> list[str]:
        return self.indicator.history

    @property
    def offline_state(self) -> str:
        return self.connectivity.label

    def server_state(self) -> dict:
        return self.remote.snapshot()

    def status(self) -> dict:
        """Plain inspectable view of the session."""
        return {
            "sync_state": self.sync_state,
            "sync_history": self.sync_history,
            "offline_state": self.offline_state,
            "pending_count": len(self.queue),
            "pending": [s.to_dict() for s in self.queue.snapshot()],
            "server": self.server_state(),
        }


def init_session(
    storage: KeyValueStorage,
    config: SyncConfig | None = None,
    online: bool = True,
    clock=None,
) -> SyncSession:
    """Create a session, rehydrating queue and remote store from storage.

    Raises:
        StopRule: If config fails validation
    """
    config = config or SyncConfig()
    errors = config.validate()
    if errors:
        raise StopRule(f"Invalid sync config: {'; '.join(errors)}")
    return SyncSession(storage, config, online=online, clock=clock)
