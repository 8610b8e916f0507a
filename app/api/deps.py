# app/api/deps.py

"""FastAPI dependencies shared by the v1 routers."""

from __future__ import annotations

from functools import partial
from typing import Awaitable, Callable

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.care_events.batch import BatchGenerationReport, run_daily_generation_from_db
from app.core.care_events.service import CareEventGenerationService, build_sql_generation_service
from app.core.care_schedules.catalog import CareScheduleCatalog, get_catalog
from app.db.base import get_async_db_session

DailyGenerationRunner = Callable[[], Awaitable[BatchGenerationReport]]


def get_care_schedule_catalog() -> CareScheduleCatalog:
    """The process-wide catalog; tests override this dependency."""
    return get_catalog()


def get_generation_service(
    db: AsyncSession = Depends(get_async_db_session),
    catalog: CareScheduleCatalog = Depends(get_care_schedule_catalog),
) -> CareEventGenerationService:
    return build_sql_generation_service(db, catalog=catalog)


def get_daily_generation_runner(
    catalog: CareScheduleCatalog = Depends(get_care_schedule_catalog),
) -> DailyGenerationRunner:
    return partial(run_daily_generation_from_db, catalog=catalog)
