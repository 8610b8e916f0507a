# app/api/v1/cron.py

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Response, status

from app.api.deps import DailyGenerationRunner, get_daily_generation_runner
from app.config import settings
from app.core.care_events.batch import BatchGenerationReport

router = APIRouter(prefix="/v1/cron", tags=["Cron"])
log = logging.getLogger(__name__)


def verify_cron_request(authorization: str | None = Header(None)) -> None:
    """Require ``Authorization: Bearer <CRON_SECRET>`` when a secret is configured."""
    if settings.CRON_SECRET and authorization != f"Bearer {settings.CRON_SECRET}":
        log.error("Cron job authentication failed: invalid or missing authorization token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing authorization token",
        )


@router.post(
    "/daily-event-generation",
    response_model=BatchGenerationReport,
    dependencies=[Depends(verify_cron_request)],
    summary="Generate due care events for every pet",
)
async def daily_event_generation(
    response: Response,
    run: DailyGenerationRunner = Depends(get_daily_generation_runner),
) -> BatchGenerationReport:
    report = await run()
    response.status_code = report.status_code
    return report
