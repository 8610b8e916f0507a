# app/core/care_events/batch.py

"""Batch driver: runs generation for many pets with per-pet error isolation."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Awaitable, Callable, Iterable, List, Optional

from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError

from app.core.care_schedules.catalog import CareScheduleCatalog
from app.core.pets.store import SqlPetStore
from app.db.base import async_session_context

from .schemas import GenerationResult
from .service import build_sql_generation_service

log = logging.getLogger(__name__)

GenerateForPet = Callable[[str], Awaitable[GenerationResult]]


class PetFailure(BaseModel):
    pet_id: str
    error: str


class BatchGenerationReport(BaseModel):
    success: bool = False
    total_pets: int = 0
    processed_pets: int = 0
    total_events_created: int = 0
    total_events_skipped: int = 0
    failed_pets: int = 0
    errors: List[PetFailure] = Field(default_factory=list)
    execution_time_ms: int = 0
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def status_code(self) -> int:
        """200 when clean, 207 when successful with errors, 500 otherwise."""
        if not self.success:
            return 500
        return 207 if self.errors else 200


async def run_daily_generation(pet_ids: Iterable[str], generate: GenerateForPet) -> BatchGenerationReport:
    """
    Invoke ``generate`` once per pet and aggregate the results.

    A pet counts as failed when its result carries any error or when
    ``generate`` itself raises; other pets are unaffected.
    """
    started = time.monotonic()
    pet_ids = list(pet_ids)
    report = BatchGenerationReport(total_pets=len(pet_ids))
    log.info("Daily care event generation started for %d pets", len(pet_ids))

    for pet_id in pet_ids:
        try:
            result = await generate(pet_id)
        except Exception as exc:
            log.exception("Unexpected error processing pet %s", pet_id)
            report.failed_pets += 1
            report.errors.append(PetFailure(pet_id=pet_id, error=str(exc) or type(exc).__name__))
            continue

        report.processed_pets += 1
        report.total_events_created += result.created
        report.total_events_skipped += result.skipped
        if result.errors:
            report.failed_pets += 1
            report.errors.append(PetFailure(pet_id=pet_id, error="; ".join(result.errors)))
        log.info(
            "Pet processing result: pet=%s created=%d skipped=%d errors=%s",
            pet_id, result.created, result.skipped, result.errors,
        )

    report.success = report.failed_pets == 0 or (
        report.processed_pets > 0 and report.failed_pets < report.total_pets
    )
    report.execution_time_ms = int((time.monotonic() - started) * 1000)
    log.info(
        "Daily care event generation completed: success=%s pets=%d processed=%d created=%d skipped=%d failed=%d in %dms",
        report.success, report.total_pets, report.processed_pets, report.total_events_created,
        report.total_events_skipped, report.failed_pets, report.execution_time_ms,
    )
    return report


async def generate_in_new_session(
    pet_id: str,
    catalog: Optional[CareScheduleCatalog] = None,
) -> GenerationResult:
    """Run generation for one pet in its own session, committed on exit."""
    async with async_session_context() as session:
        service = build_sql_generation_service(session, catalog=catalog)
        return await service.generate_events_for_pet(pet_id)


async def run_daily_generation_from_db(
    catalog: Optional[CareScheduleCatalog] = None,
) -> BatchGenerationReport:
    """
    Batch over every pet in the database.

    Each pet gets a separate session so a failed insert for one pet cannot
    roll back events already stored for another.
    """
    started = time.monotonic()
    try:
        async with async_session_context() as session:
            pet_ids = await SqlPetStore(session).list_pet_ids()
    except SQLAlchemyError as exc:
        log.exception("Failed to fetch pets for daily care event generation")
        return BatchGenerationReport(
            success=False,
            errors=[PetFailure(pet_id="N/A", error=f"Failed to fetch pets: {exc}")],
            execution_time_ms=int((time.monotonic() - started) * 1000),
        )
    return await run_daily_generation(
        pet_ids, lambda pet_id: generate_in_new_session(pet_id, catalog=catalog)
    )


__all__ = [
    "BatchGenerationReport", "PetFailure", "run_daily_generation",
    "generate_in_new_session", "run_daily_generation_from_db",
]
