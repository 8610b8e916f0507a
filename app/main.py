from __future__ import annotations
import logging

from fastapi import FastAPI

from app.api.v1.care_events import router as care_events_router
from app.api.v1.care_schedules import router as care_schedules_router
from app.api.v1.cron import router as cron_router
from app.api.v1.health import router as health_router
from app.config import settings
from app.core.care_schedules.catalog import get_catalog

logging.basicConfig(level=logging.INFO)
log = logging.getLogger(__name__)

description = "Generates due pet care events (vaccinations, exams, parasite prevention, dental care, grooming) from a catalog of schedule rules."
tags_metadata = [
    {"name": "Care Events", "description": "On-demand generation of care events for a pet."},
    {"name": "Care Schedules", "description": "Read-only views of the care schedule rule catalog."},
    {"name": "Cron", "description": "Scheduled batch generation over all pets."},
    {"name": "Health", "description": "Infrastructure checks."},
]

app = FastAPI(
    title="PetCare Scheduler API",
    description=description,
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=tags_metadata,
)

app.include_router(care_events_router)
app.include_router(care_schedules_router)
app.include_router(cron_router)
app.include_router(health_router)

log.info("\U0001F331 FastAPI application configured. Environment: %s", settings.ENVIRONMENT)


@app.on_event("startup")
async def startup_event() -> None:
    # An invalid catalog raises CatalogValidationError here and aborts startup.
    catalog = get_catalog()
    log.info("\U0001F680 FastAPI application startup complete. %d care schedule rules loaded.", len(catalog))


@app.on_event("shutdown")
async def shutdown_event() -> None:
    log.info("\U0001F44B FastAPI application shutdown.")
