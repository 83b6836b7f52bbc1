"""Statistics and risk response models."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from mood_analytics.models import RiskAssessment, StatsResult


class MoodStats(BaseModel):
    """Descriptive statistics for a date range."""

    model_config = ConfigDict(populate_by_name=True)

    average: float
    highest: float
    lowest: float
    total_entries: int = Field(serialization_alias="totalEntries")

    @classmethod
    def from_result(cls, stats: StatsResult) -> "MoodStats":
        return cls(
            average=stats.average,
            highest=stats.highest,
            lowest=stats.lowest,
            total_entries=stats.total_entries,
        )


class SevenDayMeans(BaseModel):
    mood: float
    energy: float
    anxiety: float
    irritability: float


class RiskFlags(BaseModel):
    hypomania: bool
    depression: bool


class MoodRisk(BaseModel):
    """Windowed risk assessment of the most recent entry."""

    model_config = ConfigDict(populate_by_name=True)

    date: str
    seven_day_means: SevenDayMeans = Field(serialization_alias="sevenDayMeans")
    mood_z_score: float = Field(serialization_alias="moodZScore")
    mood_trend: float = Field(serialization_alias="moodTrend")
    risk_flags: RiskFlags = Field(serialization_alias="riskFlags")
    window_size: int = Field(serialization_alias="windowSize")
    history_size: int = Field(serialization_alias="historySize")
    reason: Optional[str] = None

    @classmethod
    def from_assessment(cls, assessment: RiskAssessment, reason: Optional[str] = None) -> "MoodRisk":
        means = assessment.seven_day_means
        return cls(
            date=assessment.date.isoformat(),
            seven_day_means=SevenDayMeans(
                mood=means.mood,
                energy=means.energy,
                anxiety=means.anxiety,
                irritability=means.irritability,
            ),
            mood_z_score=assessment.mood_z_score,
            mood_trend=assessment.mood_trend,
            risk_flags=RiskFlags(
                hypomania=assessment.risk_flags.hypomania,
                depression=assessment.risk_flags.depression,
            ),
            window_size=assessment.window_size,
            history_size=assessment.history_size,
            reason=reason,
        )
