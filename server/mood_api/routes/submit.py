"""Mood submission API route."""
import datetime
import logging

from fastapi import APIRouter, Depends

from ..dependencies import get_service
from ..models.analytics import MoodRisk, MoodStats
from ..models.entry import MoodEntryOut, SubmitRequest
from ..models.envelope import ApiResponse, envelope
from ..services.mood_service import MoodService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Submit"])


@router.post("/submit", response_model=ApiResponse, status_code=201)
async def submit_mood(
    body: SubmitRequest,
    service: MoodService = Depends(get_service),
):
    """
    Submit a mood entry and recompute the analytics of its sheet.

    The entry is written to its sheet and copied to the audit sheet, then
    statistics and the risk assessment are recomputed from the reloaded
    history and published to the summary sheets. Only a failure to store
    the entry fails the request; the other steps are reported as flags.
    """
    entry = body.to_entry(submitted_at=datetime.datetime.now(datetime.timezone.utc))
    outcome = service.submit(entry, body.sheet_name)

    logger.info(
        f"[SUBMIT] {entry.date} -> {outcome.sheet} row {outcome.append_result.row_number} "
        f"(audit={outcome.audit_logged}, summary={outcome.summary_refreshed})"
    )

    return envelope(
        message="Mood data submitted successfully",
        data={
            "submittedData": MoodEntryOut.from_entry(entry),
            "sheetResult": outcome.append_result.to_dict(),
            "auditLogged": outcome.audit_logged,
            "summaryStats": MoodStats.from_result(outcome.stats) if outcome.stats else None,
            "summaryRefreshed": outcome.summary_refreshed,
            "riskAssessment": (
                MoodRisk.from_assessment(outcome.risk, outcome.risk_reason) if outcome.risk else None
            ),
            "riskSummaryRefreshed": outcome.risk_summary_refreshed,
        },
        status_code=201,
    )
