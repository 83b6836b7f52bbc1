"""
Error taxonomy for the mood analytics engine and its store collaborator.

Callers decide about retries; nothing in this package retries internally.
"""

from typing import Optional, Sequence


class MoodTrackerError(Exception):
    """Base class for all mood tracker errors."""


class ValidationError(MoodTrackerError):
    """Caller-fixable input problem (HTTP 400)."""

    def __init__(self, field: str, constraint: str, message: str):
        super().__init__(message)
        self.field = field
        self.constraint = constraint
        self.message = message

    def to_dict(self) -> dict:
        return {
            "field": self.field,
            "constraint": self.constraint,
            "message": self.message,
        }


class StoreUnavailable(MoodTrackerError):
    """The backing store could not be reached or timed out."""


class SchemaError(MoodTrackerError):
    """The store is misconfigured, e.g. a sheet does not exist."""


class MalformedRow(MoodTrackerError):
    """A stored row could not be parsed into a MoodEntry."""

    def __init__(self, row_number: int, row: Sequence[str], reason: str):
        super().__init__(f"Row {row_number} is malformed: {reason}")
        self.row_number = row_number
        self.row = list(row)
        self.reason = reason


class InsufficientData(MoodTrackerError):
    """Not enough history to compute the requested statistic."""

    def __init__(self, message: str, available: Optional[int] = None):
        super().__init__(message)
        self.available = available
