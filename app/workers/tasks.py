# /app/app/workers/tasks.py

from __future__ import annotations

import asyncio
from typing import Any, Dict

from celery import Celery
from celery.schedules import crontab
from celery.signals import worker_init
from celery.utils.log import get_task_logger

from app.config import settings
from app.core.care_events.batch import generate_in_new_session, run_daily_generation_from_db
from app.core.care_schedules.catalog import get_catalog
from app.db.base import engine

log = get_task_logger(__name__)

celery_app = Celery(
    "petcare-scheduler",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=['app.workers.tasks'],
    task_serializer='json',
    result_serializer='json',
    accept_content=['json']
)
celery_app.conf.update(
    task_track_started=True,
    timezone='UTC',
    broker_connection_retry_on_startup=True,
)
celery_app.conf.beat_schedule = {
    "daily-care-event-generation": {
        "task": "app.workers.tasks.daily_event_generation_task",
        "schedule": crontab(hour=settings.CARE_EVENTS_BEAT_HOUR, minute=settings.CARE_EVENTS_BEAT_MINUTE),
    },
}


@worker_init.connect
def load_care_schedules(**_kwargs: Any) -> None:
    """Validate the catalog before the worker accepts tasks; a bad catalog aborts startup."""
    catalog = get_catalog()
    log.info("Worker loaded %d care schedule rules (version=%s)", len(catalog), catalog.version)


async def _run_generate_for_pet_logic(pet_id: str) -> Dict[str, Any]:
    try:
        result = await generate_in_new_session(pet_id, catalog=get_catalog())
        return result.model_dump()
    finally:
        # Pooled connections are bound to this task's event loop.
        await engine.dispose()


async def _run_daily_generation_logic() -> Dict[str, Any]:
    try:
        report = await run_daily_generation_from_db(catalog=get_catalog())
        return report.model_dump(mode="json")
    finally:
        await engine.dispose()


@celery_app.task(name="app.workers.tasks.generate_events_for_pet_task", bind=True)
def generate_events_for_pet_task(self, pet_id: str) -> Dict[str, Any]:
    """Generate due care events for one pet; errors are returned, not raised."""
    log.info("Task %s: generating care events for pet '%s'", self.request.id, pet_id)
    return asyncio.run(_run_generate_for_pet_logic(pet_id))


@celery_app.task(
    name="app.workers.tasks.daily_event_generation_task",
    bind=True,
    autoretry_for=(ConnectionError,),
    retry_kwargs={'max_retries': 3},
    retry_backoff=True,
    retry_backoff_max=60 * 5,
    retry_jitter=True
)
def daily_event_generation_task(self) -> Dict[str, Any]:
    """Batch generation over every pet, scheduled daily by Celery beat."""
    log.info("Task %s: daily care event generation started", self.request.id)
    report = asyncio.run(_run_daily_generation_logic())
    log.info(
        "Task %s: finished, success=%s created=%s skipped=%s failed=%s",
        self.request.id, report["success"], report["total_events_created"],
        report["total_events_skipped"], report["failed_pets"],
    )
    return report


__all__ = ["celery_app", "generate_events_for_pet_task", "daily_event_generation_task"]
