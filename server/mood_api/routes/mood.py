"""Mood history, statistics and risk API routes."""
import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from mood_analytics.risk import explain

from ..dependencies import get_service
from ..models.analytics import MoodRisk, MoodStats
from ..models.entry import MoodEntryOut, SubmitRequest
from ..models.envelope import ApiResponse, envelope
from ..services.mood_service import MoodService

router = APIRouter(prefix="/api/mood", tags=["Mood"])

START_DATE = Query(default=None, description="First date to include (YYYY-MM-DD)")
END_DATE = Query(default=None, description="Last date to include (YYYY-MM-DD)")


@router.post("", response_model=ApiResponse, status_code=201)
async def log_mood_entry(
    body: SubmitRequest,
    service: MoodService = Depends(get_service),
):
    """
    Log a mood entry without recomputing summaries.

    Kept for older clients; new clients use POST /api/submit.
    """
    entry = body.to_entry(submitted_at=datetime.datetime.now(datetime.timezone.utc))
    result = service.log_entry(entry, body.sheet_name)
    return envelope(
        message="Mood entry logged successfully",
        data={"entry": MoodEntryOut.from_entry(entry), "sheetResult": result.to_dict()},
        status_code=201,
    )


@router.get("", response_model=ApiResponse)
async def get_mood_history(
    start_date: Optional[datetime.date] = START_DATE,
    end_date: Optional[datetime.date] = END_DATE,
    service: MoodService = Depends(get_service),
):
    """Get mood entries in chronological order, optionally within a date range."""
    outcome = service.history(start_date, end_date)
    return envelope(
        data=[MoodEntryOut.from_entry(e) for e in outcome.value],
        message=outcome.message,
    )


@router.get("/stats", response_model=ApiResponse)
async def get_mood_stats(
    start_date: Optional[datetime.date] = START_DATE,
    end_date: Optional[datetime.date] = END_DATE,
    service: MoodService = Depends(get_service),
):
    """Get average, highest and lowest mood and the entry count for a date range."""
    outcome = service.stats(start_date, end_date)
    return envelope(data=MoodStats.from_result(outcome.value), message=outcome.message)


@router.get("/risk", response_model=ApiResponse)
async def get_mood_risk(
    start_date: Optional[datetime.date] = START_DATE,
    end_date: Optional[datetime.date] = END_DATE,
    service: MoodService = Depends(get_service),
):
    """
    Get the windowed risk assessment of the most recent entry.

    `start_date` only limits which entry is assessed; the z-score covers all
    history up to it. `data` is null when there is no entry to assess.
    """
    outcome = service.risk(start_date, end_date)
    assessment = outcome.value
    data = MoodRisk.from_assessment(assessment, explain(assessment)) if assessment else None
    return envelope(data=data, message=outcome.message, include_data=True)
