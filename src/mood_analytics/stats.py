"""Descriptive statistics over a mood series."""

import math
import statistics
from typing import Iterable

from .models import MoodEntry, StatsResult, round2


def _numeric_moods(series: Iterable[MoodEntry]) -> list:
    moods = []
    for entry in series:
        mood = entry.mood
        if isinstance(mood, bool) or not isinstance(mood, (int, float)):
            continue
        if math.isfinite(mood):
            moods.append(mood)
    return moods


def compute_stats(series: Iterable[MoodEntry]) -> StatsResult:
    """
    Compute count, mean, min and max of the mood values of a series.

    Entries without a finite numeric mood are left out of every figure.
    An empty series (or one without numeric moods) yields the all-zero
    result rather than an error.
    """
    moods = _numeric_moods(series)
    if not moods:
        return StatsResult.empty()

    return StatsResult(
        average=round2(statistics.fmean(moods)),
        highest=max(moods),
        lowest=min(moods),
        total_entries=len(moods),
    )
