"""
Data model for the mood analytics engine.

Entries are plain dataclasses; results carry a to_dict() for serialization
using the key names the HTTP clients expect.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional


def round2(value: float) -> float:
    """Round to 2 decimals, half away from zero (2.345 -> 2.35, -2.345 -> -2.35)."""
    rounded = float(Decimal(repr(float(value))).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    # -0.0 -> 0.0
    return rounded + 0.0


@dataclass
class MoodEntry:
    """One submitted mood observation."""

    date: date
    mood: float
    notes: str = ""
    activities: List[str] = field(default_factory=list)
    sleep_hours: Optional[float] = None
    stress_level: Optional[float] = None
    energy: Optional[float] = None
    anxiety: Optional[float] = None
    irritability: Optional[float] = None
    submitted_at: Optional[datetime] = None
    # Sheet row the entry was read from, None for unsaved entries
    row_number: Optional[int] = field(default=None, compare=False)

    def signal(self, name: str) -> float:
        """Auxiliary signal value, with a missing value counted as 0."""
        value = getattr(self, name)
        return float(value) if value is not None else 0.0

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "mood": self.mood,
            "notes": self.notes,
            "activities": list(self.activities),
            "sleep_hours": self.sleep_hours,
            "stress_level": self.stress_level,
            "energy": self.energy,
            "anxiety": self.anxiety,
            "irritability": self.irritability,
        }


# Chronologically ordered list of entries
MoodSeries = List[MoodEntry]


@dataclass(frozen=True)
class StatsResult:
    """Aggregate descriptive statistics over a series."""

    average: float
    highest: float
    lowest: float
    total_entries: int

    @classmethod
    def empty(cls) -> "StatsResult":
        return cls(average=0, highest=0, lowest=0, total_entries=0)

    def to_dict(self) -> dict:
        return {
            "average": self.average,
            "highest": self.highest,
            "lowest": self.lowest,
            "totalEntries": self.total_entries,
        }


@dataclass(frozen=True)
class SevenDayMeans:
    mood: float
    energy: float
    anxiety: float
    irritability: float

    def to_dict(self) -> dict:
        return {
            "mood": self.mood,
            "energy": self.energy,
            "anxiety": self.anxiety,
            "irritability": self.irritability,
        }


@dataclass(frozen=True)
class RiskFlags:
    hypomania: bool
    depression: bool

    def to_dict(self) -> dict:
        return {"hypomania": self.hypomania, "depression": self.depression}


@dataclass(frozen=True)
class RiskAssessment:
    """
    Windowed risk evaluation of one data point.

    The mood mean is on the entries' own scale and the trend on the
    signed-delta scale; z-score and trend are rounded to 2 decimals.
    """

    date: date
    seven_day_means: SevenDayMeans
    mood_z_score: float
    mood_trend: float
    risk_flags: RiskFlags
    window_size: int
    history_size: int

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "sevenDayMeans": self.seven_day_means.to_dict(),
            "moodZScore": self.mood_z_score,
            "moodTrend": self.mood_trend,
            "riskFlags": self.risk_flags.to_dict(),
            "windowSize": self.window_size,
            "historySize": self.history_size,
        }
