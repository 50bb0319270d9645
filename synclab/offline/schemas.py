"""Submission record and sync state definitions.

Constants:
    SYNC_STATES: Ordered labels of every SyncState variant

Functions:
    parse_submission: Validate one persisted record
    parse_submissions: Validate a persisted list, dropping bad records
"""
import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger("synclab.offline.schemas")


class SyncState(str, Enum):
    """Sync indicator states."""
    IDLE = "idle"  # nothing ever queued this session
    QUEUED = "queued"  # pending work, waiting for connectivity or replay
    SYNCING = "syncing"  # replay in progress
    SYNCED = "synced"  # queue empty and last replay succeeded

    def __str__(self) -> str:
        return self.value


SYNC_STATES = [s.value for s in SyncState]


@dataclass(frozen=True)
class Submission:
    """One user-entered answer.

    Attributes:
        answer: Free-form answer value
        submitted_at: ISO-8601 UTC timestamp assigned at enqueue time
    """
    answer: str
    submitted_at: str

    def to_dict(self) -> dict:
        """Wire form used in local storage."""
        return {"answer": self.answer, "submittedAt": self.submitted_at}

    @classmethod
    def from_dict(cls, data: dict) -> "Submission":
        """Build from wire form.

        Raises:
            ValueError: If data is not a dict with string answer and submittedAt
        """
        if not isinstance(data, dict):
            raise ValueError(f"Submission must be a dict, got {type(data).__name__}")
        answer = data.get("answer")
        submitted_at = data.get("submittedAt")
        if not isinstance(answer, str):
            raise ValueError("Submission.answer must be a string")
        if not isinstance(submitted_at, str) or not submitted_at:
            raise ValueError("Submission.submittedAt must be a non-empty string")
        return cls(answer=answer, submitted_at=submitted_at)


def parse_submission(data) -> Submission | None:
    """Validate one persisted record.

    Returns:
        Submission, or None if the record is malformed
    """
    try:
        return Submission.from_dict(data)
    except ValueError as e:
        logger.warning("Dropping malformed submission record: %s", e)
        return None


def parse_submissions(data) -> list[Submission]:
    """Validate a persisted list of records.

    Non-list input yields an empty list. Malformed entries are skipped,
    valid ones keep their relative order.
    """
    if not isinstance(data, list):
        if data is not None:
            logger.warning("Expected list of submissions, got %s", type(data).__name__)
        return []

    submissions = []
    for item in data:
        submission = parse_submission(item)
        if submission is not None:
            submissions.append(submission)
    return submissions
