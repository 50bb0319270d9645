"""synclab: offline submission sync engine.

Public API:
- Core: emit_receipt, payload_hash, StopRule
- Config: SyncConfig
- Offline: init_session, SyncSession, SyncState, Submission, storage backends
"""
__version__ = "1.0.0"

from .config import SyncConfig
from .core import StopRule, emit_receipt, payload_hash
from .offline import (
    FileStorage,
    MemoryStorage,
    Submission,
    SyncSession,
    SyncState,
    init_session,
)

__all__ = [
    # Core
    "emit_receipt",
    "payload_hash",
    "StopRule",
    # Config
    "SyncConfig",
    # Offline
    "init_session",
    "SyncSession",
    "SyncState",
    "Submission",
    "MemoryStorage",
    "FileStorage",
    "__version__",
]
