"""
Risk Scoring Module.

Evaluates one data point against its history:
- 7-day means of mood, energy, anxiety and irritability
- z-score of the point's mood against the full history
- least-squares mood trend over the 7-day window
- boolean heuristics for mood-elevation (hypomania) and depression patterns

Heuristics are expressed on the signed-delta mood scale (0 = neutral,
positive = elevated). Entries carrying 1-10 scores are mapped onto it with
MoodScale.
"""

import logging
import math
import statistics
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .errors import InsufficientData
from .models import MoodEntry, RiskAssessment, RiskFlags, SevenDayMeans, round2

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = 7


@dataclass(frozen=True)
class MoodScale:
    """
    Linear map between a stored mood scale and the signed-delta scale.

        delta = (score - neutral) / unit
    """

    neutral: float = 0.0
    unit: float = 1.0

    def to_delta(self, score: float) -> float:
        return (score - self.neutral) / self.unit

    def from_delta(self, delta: float) -> float:
        return self.neutral + delta * self.unit


# Entries already holding signed deltas
DELTA_SCALE = MoodScale()

# 1-10 submissions: 5 is neutral, so 9 -> +4 and 2 -> -3
SCORE_SCALE = MoodScale(neutral=5.0)


@dataclass(frozen=True)
class RiskThresholds:
    """Heuristic thresholds. Mood bounds are on the signed-delta scale."""

    hypomania_mood_min: float = 4.0
    hypomania_trend_min: float = 0.1
    hypomania_energy_min: float = 4.0
    hypomania_anxiety_max: float = 3.0

    depression_mood_max: float = -3.0
    depression_trend_max: float = -0.1
    depression_energy_max: float = 2.0
    depression_anxiety_min: float = 5.0
    depression_irritability_min: float = 5.0

    def mood_bounds_on(self, scale: MoodScale) -> Dict[str, float]:
        """Mood thresholds expressed on another scale."""
        return {
            "hypomania_mood_min": scale.from_delta(self.hypomania_mood_min),
            "depression_mood_max": scale.from_delta(self.depression_mood_max),
        }


def _mean(values: Sequence[float]) -> float:
    return statistics.fmean(values)


def _z_score(value: float, values: Sequence[float]) -> float:
    """Population z-score; 0 when the history has no spread."""
    mu = statistics.fmean(values)
    sigma = statistics.pstdev(values, mu)
    if sigma > 0:
        return (value - mu) / sigma
    return 0.0


def _trend_slope(values: Sequence[float]) -> float:
    """Ordinary least-squares slope of values against their index."""
    n = len(values)
    sum_x = sum(range(n))
    sum_xx = sum(x * x for x in range(n))
    sum_y = sum(values)
    sum_xy = sum(x * y for x, y in enumerate(values))

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return 0.0
    return (n * sum_xy - sum_x * sum_y) / denominator


class RiskScorer:
    """
    Computes RiskAssessments for points of a chronologically sorted series.

    Configuration:
        thresholds: Heuristic thresholds (delta scale)
        scale: How entry moods map onto the delta scale
        window: Number of trailing entries in the rolling window
    """

    def __init__(
        self,
        thresholds: Optional[RiskThresholds] = None,
        scale: MoodScale = DELTA_SCALE,
        window: int = DEFAULT_WINDOW,
    ):
        if window < 1:
            raise ValueError(f"window must be at least 1, got {window}")
        self.thresholds = thresholds or RiskThresholds()
        self.scale = scale
        self.window = window

    def assess(self, point: MoodEntry, series: Sequence[MoodEntry]) -> RiskAssessment:
        """
        Assess the risk at `point`.

        Args:
            point: The entry being evaluated
            series: History sorted by date, ending with `point`

        Raises:
            InsufficientData: The series is empty or yields no finite metrics
            ValueError: `point` is not the last entry of `series`
        """
        series = list(series)
        if not series:
            raise InsufficientData("Cannot assess risk without any mood history", available=0)
        last = series[-1]
        if last != point:
            raise ValueError("point must be the most recent entry of the series")

        window = series[-self.window:]
        try:
            moods = [self.scale.to_delta(e.mood) for e in series]
            window_moods = moods[-len(window):]

            # Reported on the entries' own scale; deltas only feed the flags
            means = SevenDayMeans(
                mood=round2(_mean([e.mood for e in window])),
                energy=round2(_mean([e.signal("energy") for e in window])),
                anxiety=round2(_mean([e.signal("anxiety") for e in window])),
                irritability=round2(_mean([e.signal("irritability") for e in window])),
            )
            z_score = _z_score(moods[-1], moods)
            slope = _trend_slope(window_moods)
        except (ArithmeticError, statistics.StatisticsError, TypeError) as e:
            raise InsufficientData(f"Could not compute risk metrics: {e}", available=len(series)) from e

        if not (math.isfinite(z_score) and math.isfinite(slope)):
            raise InsufficientData("Risk metrics are not finite", available=len(series))

        flags = self._flags(moods[-1], slope, point)

        logger.debug(
            f"[RISK] {point.date}: z={z_score:.2f}, trend={slope:.2f}, "
            f"window={len(window)}, flags={flags}"
        )

        return RiskAssessment(
            date=point.date,
            seven_day_means=means,
            mood_z_score=round2(z_score),
            mood_trend=round2(slope),
            risk_flags=flags,
            window_size=len(window),
            history_size=len(series),
        )

    def assess_series(self, series: Sequence[MoodEntry]) -> List[RiskAssessment]:
        """Assess every point of a series against the history up to it."""
        series = list(series)
        return [self.assess(series[i], series[: i + 1]) for i in range(len(series))]

    def _flags(self, mood: float, slope: float, point: MoodEntry) -> RiskFlags:
        t = self.thresholds
        energy = point.signal("energy")
        anxiety = point.signal("anxiety")
        irritability = point.signal("irritability")

        hypomania = (
            mood >= t.hypomania_mood_min
            and slope > t.hypomania_trend_min
            and energy >= t.hypomania_energy_min
            and anxiety <= t.hypomania_anxiety_max
        )
        depression = (
            mood <= t.depression_mood_max
            and slope < t.depression_trend_max
            and energy <= t.depression_energy_max
            and (anxiety >= t.depression_anxiety_min or irritability >= t.depression_irritability_min)
        )
        return RiskFlags(hypomania=hypomania, depression=depression)


def explain(assessment: RiskAssessment) -> str:
    """Short human-readable reason for the flags of an assessment."""
    detail = f"trend {assessment.mood_trend:+.2f}, z {assessment.mood_z_score:+.2f}"
    flags = assessment.risk_flags
    if flags.hypomania:
        return f"Hypomania pattern: elevated rising mood with high energy and low anxiety ({detail})"
    if flags.depression:
        return (
            "Depression pattern: low falling mood with low energy and high anxiety "
            f"or irritability ({detail})"
        )
    return f"No risk pattern ({detail})"


def assess_risk(point: MoodEntry, series: Sequence[MoodEntry]) -> RiskAssessment:
    """Assess a point with the default thresholds on the delta scale."""
    return RiskScorer().assess(point, series)
