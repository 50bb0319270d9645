"""Sync engine configuration.

All settings can be overridden via environment variables with the
SYNCLAB_ prefix.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path

from synclab.core.constants import (
    DEFAULT_STORAGE_DIR,
    DEFAULT_TENANT_ID,
    QUEUE_STORAGE_KEY,
    SERVER_STORAGE_KEY,
    SYNC_LATENCY_MS,
    SYNC_TIMEOUT_MS,
)


@dataclass
class SyncConfig:
    """Offline sync engine configuration."""

    # Replay timing
    latency_ms: int = SYNC_LATENCY_MS
    sync_timeout_ms: int = SYNC_TIMEOUT_MS

    # Persistence
    storage_dir: Path = field(default_factory=lambda: DEFAULT_STORAGE_DIR)
    queue_key: str = QUEUE_STORAGE_KEY
    server_key: str = SERVER_STORAGE_KEY

    # Receipts
    tenant_id: str = DEFAULT_TENANT_ID
    emit_receipts: bool = True

    @property
    def latency_seconds(self) -> float:
        return self.latency_ms / 1000

    @property
    def sync_timeout_seconds(self) -> float:
        return self.sync_timeout_ms / 1000

    @classmethod
    def from_env(cls) -> "SyncConfig":
        """Load configuration from environment variables."""
        config = cls()

        if "SYNCLAB_LATENCY_MS" in os.environ:
            config.latency_ms = int(os.environ["SYNCLAB_LATENCY_MS"])
        if "SYNCLAB_SYNC_TIMEOUT_MS" in os.environ:
            config.sync_timeout_ms = int(os.environ["SYNCLAB_SYNC_TIMEOUT_MS"])

        if "SYNCLAB_STORAGE_DIR" in os.environ:
            config.storage_dir = Path(os.environ["SYNCLAB_STORAGE_DIR"]).expanduser()
        if "SYNCLAB_QUEUE_KEY" in os.environ:
            config.queue_key = os.environ["SYNCLAB_QUEUE_KEY"]
        if "SYNCLAB_SERVER_KEY" in os.environ:
            config.server_key = os.environ["SYNCLAB_SERVER_KEY"]

        if "SYNCLAB_TENANT_ID" in os.environ:
            config.tenant_id = os.environ["SYNCLAB_TENANT_ID"]
        if "SYNCLAB_EMIT_RECEIPTS" in os.environ:
            config.emit_receipts = os.environ["SYNCLAB_EMIT_RECEIPTS"].lower() == "true"

        return config

    def validate(self) -> list[str]:
        """Validate configuration. Returns list of errors."""
        errors = []

        if self.latency_ms < 0:
            errors.append(f"latency_ms must be >= 0, got {self.latency_ms}")

        if self.sync_timeout_ms <= 0:
            errors.append(f"sync_timeout_ms must be > 0, got {self.sync_timeout_ms}")

        if not self.queue_key or not self.server_key:
            errors.append("queue_key and server_key must be non-empty")
        elif self.queue_key == self.server_key:
            errors.append(f"queue_key and server_key must differ, both are {self.queue_key!r}")

        if not self.tenant_id:
            errors.append("tenant_id must be non-empty")

        return errors
