"""synclab constants and defaults.

All magic numbers live here. No exceptions.
"""
from pathlib import Path

# Replay latency: artificial delay before each drain (simulated network)
SYNC_LATENCY_MS = 400

# Upper bound callers wait for the indicator to reach "synced"
SYNC_TIMEOUT_MS = 5000

# Local key-value storage keys
QUEUE_STORAGE_KEY = "synclab.offline.queue"
SERVER_STORAGE_KEY = "synclab.offline.server"

# File-backed storage location
DEFAULT_STORAGE_DIR = Path.home() / ".synclab"

DEFAULT_TENANT_ID = "default"

# Offline indicator labels
CONNECTIVITY_ONLINE = "online"
CONNECTIVITY_OFFLINE = "offline"

# Connectivity edge events
EVENT_BECAME_ONLINE = "became-online"
EVENT_BECAME_OFFLINE = "became-offline"

# CLI
QUEUE_PEEK_DEFAULT = 10
