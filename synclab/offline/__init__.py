"""Offline submission sync engine.

Accepts submissions while disconnected, keeps them in a durable local
queue, and replays them to a simulated remote store once connectivity
is restored. Every state the sync indicator enters is recorded.

Usage:
    from synclab.offline import MemoryStorage, init_session

    session = init_session(MemoryStorage(), online=False)
    await session.submit("HLS")
    session.sync_state                  # "queued"

    session.set_online(True)
    await session.expect_synced()
    session.server_state()["submissions"][-1]["answer"]   # "HLS"
"""
from synclab.offline.connectivity import ConnectivityMonitor
from synclab.offline.indicator import SyncIndicator
from synclab.offline.queue import DurableQueue
from synclab.offline.remote import RemoteStore
from synclab.offline.replay import FlushResult, ReplayEngine
from synclab.offline.schemas import (
    SYNC_STATES,
    Submission,
    SyncState,
    parse_submissions,
)
from synclab.offline.session import SyncSession, init_session
from synclab.offline.storage import (
    FileStorage,
    KeyValueStorage,
    MemoryStorage,
    load_json,
    save_json,
)

__all__ = [
    # Records
    "Submission",
    "SyncState",
    "SYNC_STATES",
    "parse_submissions",
    # Storage
    "KeyValueStorage",
    "MemoryStorage",
    "FileStorage",
    "load_json",
    "save_json",
    # Components
    "DurableQueue",
    "RemoteStore",
    "ConnectivityMonitor",
    "SyncIndicator",
    "ReplayEngine",
    "FlushResult",
    # Session
    "SyncSession",
    "init_session",
]
