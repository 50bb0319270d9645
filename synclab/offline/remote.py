"""Simulated remote store.

Append-only log of submissions the simulated server has accepted,
persisted locally after every mutation for inspection.
"""
from synclab.core.constants import SERVER_STORAGE_KEY

from .schemas import Submission, parse_submissions
from .storage import KeyValueStorage, load_json, save_json


class RemoteStore:
    """Append-only submission log. Items are never removed or reordered."""

    def __init__(self, storage: KeyValueStorage, key: str = SERVER_STORAGE_KEY):
        self.storage = storage
        self.key = key
        self._submissions: list[Submission] = []

    def __len__(self) -> int:
        return len(self._submissions)

    def append(self, submissions: list[Submission]):
        """Append submissions in order and persist."""
        self._submissions.extend(submissions)
        self.persist()

    def persist(self):
        save_json(self.storage, self.key, self.snapshot())

    def rehydrate(self) -> list[Submission]:
        """Load persisted store; absent or corrupt data is an empty store."""
        data = load_json(self.storage, self.key, default={})
        raw = data.get("submissions") if isinstance(data, dict) else None
        self._submissions = parse_submissions(raw)
        return list(self._submissions)

    def snapshot(self) -> dict:
        """Current contents in wire form: {"submissions": [...]}."""
        return {"submissions": [s.to_dict() for s in self._submissions]}

    @property
    def submissions(self) -> list[Submission]:
        return list(self._submissions)

    def last(self) -> Submission | None:
        return self._submissions[-1] if self._submissions else None
