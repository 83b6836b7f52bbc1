"""
Mood Analytics Module.

Turns a history of daily mood entries into descriptive statistics and
windowed risk assessments, and shapes them into persisted summaries.
"""

from .errors import (
    MoodTrackerError,
    ValidationError,
    StoreUnavailable,
    SchemaError,
    MalformedRow,
    InsufficientData,
)
from .models import MoodEntry, MoodSeries, StatsResult, RiskAssessment
from .history import HistoryRepository
from .stats import compute_stats
from .risk import RiskScorer, RiskThresholds, MoodScale, assess_risk, explain
from .summary import SummaryPublisher, build_summary, build_risk_summary

__all__ = [
    "MoodTrackerError",
    "ValidationError",
    "StoreUnavailable",
    "SchemaError",
    "MalformedRow",
    "InsufficientData",
    "MoodEntry",
    "MoodSeries",
    "StatsResult",
    "RiskAssessment",
    "HistoryRepository",
    "compute_stats",
    "RiskScorer",
    "RiskThresholds",
    "MoodScale",
    "assess_risk",
    "explain",
    "SummaryPublisher",
    "build_summary",
    "build_risk_summary",
]
