"""Pydantic models for mood tracker API requests and responses."""
from .entry import SubmitRequest, MoodEntryOut
from .analytics import MoodStats, MoodRisk
from .envelope import ApiResponse, ErrorDetail, envelope

__all__ = [
    "SubmitRequest",
    "MoodEntryOut",
    "MoodStats",
    "MoodRisk",
    "ApiResponse",
    "ErrorDetail",
    "envelope",
]
