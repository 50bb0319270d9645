"""Local durable queue for offline submissions.

Submissions are held in FIFO order and the full snapshot is written to
local storage after every mutation, so pending work survives a reload.
Items leave the queue only through drain(), which the replay engine calls
after the remote store has accepted them.

Design constraints:
- No dedup, no size bound
- Synchronous persistence on enqueue
- Corrupt persisted data rehydrates as an empty queue
"""
from datetime import datetime, timezone
from typing import Callable

from synclab.core.constants import DEFAULT_TENANT_ID, QUEUE_STORAGE_KEY
from synclab.core.receipt import emit_receipt, utc_now

from .schemas import Submission, parse_submissions
from .storage import KeyValueStorage, load_json, save_json


def _instant(ts: str) -> datetime | None:
    """Parse an ISO-8601 stamp to an aware datetime, None if unparseable.

    Naive stamps are taken as UTC.
    """
    try:
        parsed = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class DurableQueue:
    """FIFO buffer of pending submissions persisted to key-value storage."""

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = QUEUE_STORAGE_KEY,
        clock: Callable[[], str] = utc_now,
        tenant_id: str = DEFAULT_TENANT_ID,
        echo: bool = True,
    ):
        self.storage = storage
        self.key = key
        self.clock = clock
        self.tenant_id = tenant_id
        self.echo = echo
        self._items: list[Submission] = []

    def __len__(self) -> int:
        return len(self._items)

    def _next_timestamp(self) -> str:
        # Submission timestamps never go backwards in queue order
        ts = self.clock()
        if not self._items:
            return ts
        current, last = _instant(ts), _instant(self._items[-1].submitted_at)
        if current is not None and last is not None and current < last:
            return self._items[-1].submitted_at
        return ts

    def enqueue(self, answer: str) -> Submission:
        """Append a submission and persist the full queue.

        Args:
            answer: User-entered answer (domain not validated)

        Returns:
            The queued Submission
        """
        submission = Submission(answer=answer, submitted_at=self._next_timestamp())
        self._items.append(submission)
        self.persist()

        emit_receipt("offline_enqueue", {
            "tenant_id": self.tenant_id,
            "answer": answer,
            "submitted_at": submission.submitted_at,
            "queue_size": len(self._items),
        }, echo=self.echo)

        return submission

    def drain(self, count: int) -> list[Submission]:
        """Remove and return the oldest count submissions.

        Items enqueued after the caller sized its snapshot stay queued.
        Caller persists the post-drain state.
        """
        count = max(0, min(count, len(self._items)))
        drained = self._items[:count]
        self._items = self._items[count:]
        return drained

    def drain_all(self) -> list[Submission]:
        """Empty the queue, returning every item in original order."""
        return self.drain(len(self._items))

    def persist(self):
        """Write the current snapshot to storage."""
        save_json(self.storage, self.key, [s.to_dict() for s in self._items])

    def rehydrate(self) -> list[Submission]:
        """Load the persisted snapshot into memory.

        Returns:
            Rehydrated submissions (empty if absent or corrupt)
        """
        self._items = parse_submissions(load_json(self.storage, self.key))
        return list(self._items)

    def snapshot(self) -> list[Submission]:
        """Copy of pending submissions, oldest first."""
        return list(self._items)

    def peek(self, n: int = 10) -> list[Submission]:
        """View oldest n submissions without removing."""
        return self._items[:n]

    def clear(self):
        """Drop all pending submissions and persist the empty queue."""
        self._items = []
        self.persist()
