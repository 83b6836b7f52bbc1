"""
Summary Publisher.

Shapes statistics and risk assessments into the summary records kept in the
store. Each summary sheet holds a header row and a single snapshot row that
is overwritten on every recomputation.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import List, Optional, Union

from .history import format_cell
from .models import RiskAssessment, StatsResult
from .risk import explain
from .store import Store

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY_SHEET = "Summary"
DEFAULT_RISK_SUMMARY_SHEET = "RiskSummary"

# Row number of the snapshot in a summary sheet (row 1 is the header)
SNAPSHOT_ROW = 2


@dataclass(frozen=True)
class SummaryRecord:
    """Descriptive statistics snapshot."""

    last_updated: datetime
    total_entries: int
    average: float
    highest: float
    lowest: float

    HEADERS = ["Last Updated", "Total Entries", "Average Mood", "Highest Mood", "Lowest Mood"]

    def to_row(self) -> List[str]:
        return [
            self.last_updated.isoformat(),
            format_cell(self.total_entries),
            format_cell(self.average),
            format_cell(self.highest),
            format_cell(self.lowest),
        ]

    def to_dict(self) -> dict:
        return {
            "lastUpdated": self.last_updated.isoformat(),
            "totalEntries": self.total_entries,
            "average": self.average,
            "highest": self.highest,
            "lowest": self.lowest,
        }


@dataclass(frozen=True)
class RiskSummaryRecord:
    """Per-date risk snapshot."""

    date: date
    mood_mean7: float
    energy_mean7: float
    anxiety_mean7: float
    irritability_mean7: float
    z_mood: float
    trend_mood: float
    risk_hypomania: bool
    risk_depression: bool
    reason: str

    HEADERS = [
        "Date",
        "Mood Mean 7d",
        "Energy Mean 7d",
        "Anxiety Mean 7d",
        "Irritability Mean 7d",
        "Z Mood",
        "Trend Mood",
        "Risk Hypomania",
        "Risk Depression",
        "Reason",
    ]

    def to_row(self) -> List[str]:
        return [
            self.date.isoformat(),
            format_cell(self.mood_mean7),
            format_cell(self.energy_mean7),
            format_cell(self.anxiety_mean7),
            format_cell(self.irritability_mean7),
            format_cell(self.z_mood),
            format_cell(self.trend_mood),
            "TRUE" if self.risk_hypomania else "FALSE",
            "TRUE" if self.risk_depression else "FALSE",
            self.reason,
        ]

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "mood_mean7": self.mood_mean7,
            "energy_mean7": self.energy_mean7,
            "anxiety_mean7": self.anxiety_mean7,
            "irritability_mean7": self.irritability_mean7,
            "z_mood": self.z_mood,
            "trend_mood": self.trend_mood,
            "risk_hypomania": self.risk_hypomania,
            "risk_depression": self.risk_depression,
            "reason": self.reason,
        }


def build_summary(stats: StatsResult, now: Optional[datetime] = None) -> SummaryRecord:
    return SummaryRecord(
        last_updated=now or datetime.now(timezone.utc),
        total_entries=stats.total_entries,
        average=stats.average,
        highest=stats.highest,
        lowest=stats.lowest,
    )


def build_risk_summary(
    entry_date: date,
    assessment: RiskAssessment,
    reason: Optional[str] = None,
) -> RiskSummaryRecord:
    """Flatten an assessment; the reason defaults to an explanation of its flags."""
    means = assessment.seven_day_means
    return RiskSummaryRecord(
        date=entry_date,
        mood_mean7=means.mood,
        energy_mean7=means.energy,
        anxiety_mean7=means.anxiety,
        irritability_mean7=means.irritability,
        z_mood=assessment.mood_z_score,
        trend_mood=assessment.mood_trend,
        risk_hypomania=assessment.risk_flags.hypomania,
        risk_depression=assessment.risk_flags.depression,
        reason=reason if reason is not None else explain(assessment),
    )


class SummaryPublisher:
    """Writes summary records into their single snapshot slot of the store."""

    def __init__(
        self,
        store: Store,
        summary_sheet: str = DEFAULT_SUMMARY_SHEET,
        risk_summary_sheet: str = DEFAULT_RISK_SUMMARY_SHEET,
    ):
        self.store = store
        self.summary_sheet = summary_sheet
        self.risk_summary_sheet = risk_summary_sheet

    build_summary = staticmethod(build_summary)
    build_risk_summary = staticmethod(build_risk_summary)

    def provision(self) -> None:
        for sheet, headers in (
            (self.summary_sheet, SummaryRecord.HEADERS),
            (self.risk_summary_sheet, RiskSummaryRecord.HEADERS),
        ):
            self.store.ensure_table(sheet)
            self.store.ensure_headers(sheet, headers)

    def publish(self, record: Union[SummaryRecord, RiskSummaryRecord]) -> None:
        """Overwrite the snapshot row of the record's sheet."""
        sheet = self.summary_sheet if isinstance(record, SummaryRecord) else self.risk_summary_sheet
        self.store.ensure_table(sheet)
        self.store.ensure_headers(sheet, record.HEADERS)
        self.store.update(sheet, SNAPSHOT_ROW, record.to_row())
        logger.info(f"[SUMMARY] Published snapshot to {sheet}")
