"""Local key-value persistence for the offline queue and remote store.

Values are JSON text keyed by logical name. Two backends:
- MemoryStorage: dict-backed, for tests and embedding
- FileStorage: one file per key under a directory (no database required)

Absent or unparseable values are an empty initial state, never an error.
"""
import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger("synclab.offline.storage")


class KeyValueStorage(Protocol):
    """Get/set-string interface over local persistence."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    """In-memory key-value storage."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class FileStorage:
    """File-backed key-value storage.

    Attributes:
        root: Directory holding one <key>.json file per key
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def _ensure_dir(self):
        """Ensure storage directory exists."""
        self.root.mkdir(parents=True, exist_ok=True)

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, encoding="utf-8") as f:
            return f.read()

    def set(self, key: str, value: str) -> None:
        self._ensure_dir()
        path = self._path(key)
        # Write-then-rename so a crash never leaves a half-written value
        tmp = path.with_suffix(".json.tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(value)
        tmp.replace(path)


def load_json(storage: KeyValueStorage, key: str, default=None):
    """Read and decode a JSON value.

    Args:
        storage: Backend to read from
        key: Logical key
        default: Returned when the key is absent or the value is corrupt

    Returns:
        Decoded value or default
    """
    try:
        raw = storage.get(key)
        if raw is None or raw == "":
            return default
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Corrupt value under %r treated as empty: %s", key, e)
        return default


def save_json(storage: KeyValueStorage, key: str, value) -> None:
    """Encode value as JSON and write it under key."""
    storage.set(key, json.dumps(value, sort_keys=True))
