from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import get_care_schedule_catalog
from app.config import settings
from app.core.care_schedules.catalog import CareScheduleCatalog
from app.db.base import engine

router = APIRouter(tags=["Health"])
log = logging.getLogger(__name__)


@router.get("/healthz")
async def healthz(catalog: CareScheduleCatalog = Depends(get_care_schedule_catalog)):
    out: dict[str, str] = {"environment": settings.ENVIRONMENT}

    # DB
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        out["db"] = "ok"
    except SQLAlchemyError as exc:
        log.exception("DB health check failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="db error") from exc

    # Broker
    redis = Redis.from_url(settings.CELERY_BROKER_URL, socket_connect_timeout=2)
    try:
        if not await redis.ping():
            raise RedisError("ping returned false")
        out["broker"] = "ok"
    except RedisError as exc:
        log.exception("Broker health check failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="broker error") from exc
    finally:
        await redis.aclose()

    out["care_schedules"] = f"{len(catalog)} rules"
    return out
