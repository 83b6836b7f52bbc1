"""Mood tracking service.

Runs the submission pipeline (persist entry, audit copy, reload history,
recompute statistics and risk, publish summaries) and the read paths used
by the API routes. Only the primary append can fail a submission; later
steps are reported individually on the outcome.
"""
import datetime
import logging
from dataclasses import dataclass
from typing import Any, Optional

from mood_analytics.errors import InsufficientData, MoodTrackerError, StoreUnavailable, ValidationError
from mood_analytics.history import HistoryRepository
from mood_analytics.models import MoodEntry, MoodSeries, RiskAssessment, StatsResult
from mood_analytics.risk import MoodScale, RiskScorer, explain
from mood_analytics.stats import compute_stats
from mood_analytics.store import AppendResult, Store
from mood_analytics.summary import SummaryPublisher, build_risk_summary, build_summary

from ..config import Settings

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "Mood history is temporarily unavailable"


@dataclass
class SubmitOutcome:
    """What happened to each step of a submission."""

    entry: MoodEntry
    sheet: str
    append_result: AppendResult
    audit_logged: bool = False
    stats: Optional[StatsResult] = None
    summary_refreshed: bool = False
    risk: Optional[RiskAssessment] = None
    risk_reason: Optional[str] = None
    risk_summary_refreshed: bool = False


@dataclass
class ReadOutcome:
    """Result of a read path; `degraded` marks a fallback value."""

    value: Any
    degraded: bool = False
    message: Optional[str] = None


def _check_range(start: Optional[datetime.date], end: Optional[datetime.date]) -> None:
    if start is not None and end is not None and start > end:
        raise ValidationError(
            field="start_date",
            constraint="date.max",
            message=f"start_date {start} is after end_date {end}",
        )


def history_until(
    history: MoodSeries,
    entry: MoodEntry,
    row_number: Optional[int] = None,
) -> tuple[MoodEntry, MoodSeries]:
    """
    Cut a sorted history at the stored copy of `entry`.

    The stored copy is the entry read back from `row_number`. If the reload
    does not contain that row, the entry itself is appended to the entries
    dated on or before it.
    """
    if row_number is not None:
        for index, stored in enumerate(history):
            if stored.row_number == row_number:
                return stored, history[: index + 1]
    prefix = [e for e in history if e.date <= entry.date]
    prefix.append(entry)
    return entry, prefix


class MoodService:
    """Coordinates the history repository, analytics and summary publisher."""

    def __init__(
        self,
        repository: HistoryRepository,
        publisher: SummaryPublisher,
        scorer: Optional[RiskScorer] = None,
    ):
        self.repository = repository
        self.publisher = publisher
        self.scorer = scorer or RiskScorer()

    def provision(self) -> None:
        """Create the default sheets and their headers."""
        self.repository.provision()
        self.publisher.provision()

    def log_entry(self, entry: MoodEntry, sheet_name: Optional[str] = None) -> AppendResult:
        """Append an entry without recomputing any summary."""
        return self.repository.append_entry(entry, sheet_name)

    def submit(self, entry: MoodEntry, sheet_name: Optional[str] = None) -> SubmitOutcome:
        """
        Persist an entry and refresh the analytics derived from its sheet.

        Args:
            entry: Validated entry
            sheet_name: Target sheet, defaults to the mood data sheet

        Returns:
            SubmitOutcome describing each pipeline step

        Raises:
            StoreUnavailable, SchemaError: The entry itself was not stored
        """
        sheet = sheet_name or self.repository.mood_sheet
        result = self.repository.append_entry(entry, sheet)
        outcome = SubmitOutcome(entry=entry, sheet=sheet, append_result=result)

        try:
            self.repository.log_raw_entry(entry, sheet)
            outcome.audit_logged = True
        except MoodTrackerError as e:
            logger.error(f"[SUBMIT] Audit copy not written for {entry.date}: {e}")

        self._recompute(outcome)
        return outcome

    def _recompute(self, outcome: SubmitOutcome) -> None:
        try:
            history = self.repository.fetch_history(sheet_name=outcome.sheet)
        except MoodTrackerError as e:
            logger.error(f"[SUBMIT] Could not reload history from {outcome.sheet}: {e}")
            return

        outcome.stats = compute_stats(history)
        try:
            self.publisher.publish(build_summary(outcome.stats))
            outcome.summary_refreshed = True
        except MoodTrackerError as e:
            logger.error(f"[SUBMIT] Summary not refreshed: {e}")

        point, prefix = history_until(history, outcome.entry, outcome.append_result.row_number)
        try:
            assessment = self.scorer.assess(point, prefix)
        except InsufficientData as e:
            logger.warning(f"[SUBMIT] Risk not assessed for {point.date}: {e}")
            return

        outcome.risk = assessment
        outcome.risk_reason = explain(assessment)
        try:
            self.publisher.publish(build_risk_summary(point.date, assessment, outcome.risk_reason))
            outcome.risk_summary_refreshed = True
        except MoodTrackerError as e:
            logger.error(f"[SUBMIT] Risk summary not refreshed: {e}")

        if assessment.risk_flags.hypomania or assessment.risk_flags.depression:
            logger.info(f"[SUBMIT] Risk flagged for {point.date}: {outcome.risk_reason}")

    def history(
        self,
        start: Optional[datetime.date] = None,
        end: Optional[datetime.date] = None,
    ) -> ReadOutcome:
        """Entries in a date range; an empty list when the store is down."""
        _check_range(start, end)
        try:
            return ReadOutcome(self.repository.fetch_history(start, end))
        except StoreUnavailable as e:
            logger.warning(f"[HISTORY] Returning empty history: {e}")
            return ReadOutcome([], degraded=True, message=UNAVAILABLE_MESSAGE)

    def stats(
        self,
        start: Optional[datetime.date] = None,
        end: Optional[datetime.date] = None,
    ) -> ReadOutcome:
        """Statistics for a date range; the zero result when the store is down."""
        outcome = self.history(start, end)
        return ReadOutcome(compute_stats(outcome.value), outcome.degraded, outcome.message)

    def risk(
        self,
        start: Optional[datetime.date] = None,
        end: Optional[datetime.date] = None,
    ) -> ReadOutcome:
        """
        Risk assessment of the latest entry in a date range, or None.

        The z-score covers the whole history up to that entry, so `start`
        only bounds which entry may be assessed.
        """
        _check_range(start, end)
        outcome = self.history(end=end)
        if outcome.degraded:
            return ReadOutcome(None, True, outcome.message)

        series = outcome.value
        if start is not None and series and series[-1].date < start:
            series = []
        try:
            assessment = self.scorer.assess(series[-1] if series else None, series)
        except InsufficientData as e:
            logger.info(f"[RISK] {e}")
            return ReadOutcome(None, message="Not enough mood history to assess risk")
        return ReadOutcome(assessment)


def build_service(settings: Settings, store: Store) -> MoodService:
    """Wire a MoodService from settings."""
    repository = HistoryRepository(store, mood_sheet=settings.mood_sheet, raw_sheet=settings.raw_sheet)
    publisher = SummaryPublisher(
        store,
        summary_sheet=settings.summary_sheet,
        risk_summary_sheet=settings.risk_summary_sheet,
    )
    scorer = RiskScorer(scale=MoodScale(neutral=settings.mood_neutral), window=settings.risk_window)
    return MoodService(repository, publisher, scorer)
