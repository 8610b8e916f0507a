# /app/app/config.py

from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)

DEFAULT_CAT_BREED_KEYWORDS: List[str] = [
    "persian", "siamese", "maine coon", "ragdoll", "british shorthair",
    "abyssinian", "bengal", "birman", "russian blue", "scottish fold",
    "sphynx", "cat", "kitten", "domestic shorthair", "domestic longhair",
]


class Settings(BaseSettings):
    """
    Project-wide configuration. Reads environment variables.
    Pydantic v2 + pydantic-settings.
    """
    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    # --- Core ---
    ENVIRONMENT: str = Field("dev", description="Application environment (dev, test, prod)")

    # --- Database ---
    DATABASE_URL: str = Field(..., description="Async database URL (postgresql+asyncpg://... or sqlite+aiosqlite://...)")

    # --- Redis / Celery ---
    REDIS_URL: str = Field("redis://redis:6379/0", description="URL for Redis connection")
    CELERY_BROKER_URL: Optional[str] = Field(None, description="Celery broker URL (defaults to REDIS_URL)")
    CELERY_RESULT_BACKEND: Optional[str] = Field(None, description="Celery result backend URL (defaults to REDIS_URL)")
    CARE_EVENTS_BEAT_HOUR: int = Field(3, ge=0, le=23, description="UTC hour of the daily generation run")
    CARE_EVENTS_BEAT_MINUTE: int = Field(0, ge=0, le=59, description="UTC minute of the daily generation run")

    # --- JWT ---
    JWT_SECRET_KEY: str = Field(..., description="Secret key for signing JWT tokens")
    JWT_ALGORITHM: str = Field("HS256", description="Algorithm for JWT signing")

    # --- Cron endpoint ---
    CRON_SECRET: Optional[str] = Field(None, description="Bearer secret required by the cron endpoint, if set")

    # --- Care schedules ---
    CARE_SCHEDULES_PATH: Optional[str] = Field(
        None, description="Override path to the care schedule catalog JSON file"
    )
    CAT_BREED_KEYWORDS: List[str] = Field(
        default_factory=lambda: list(DEFAULT_CAT_BREED_KEYWORDS),
        description="Lower-case keywords that classify a breed string as a cat",
    )

    @model_validator(mode='after')
    def set_celery_defaults(self) -> 'Settings':
        if self.CELERY_BROKER_URL is None:
            log.debug("Setting CELERY_BROKER_URL default from REDIS_URL")
            self.CELERY_BROKER_URL = self.REDIS_URL
        if self.CELERY_RESULT_BACKEND is None:
            log.debug("Setting CELERY_RESULT_BACKEND default from REDIS_URL")
            self.CELERY_RESULT_BACKEND = self.REDIS_URL
        return self


try:
    settings = Settings()
    log.info("Settings loaded successfully for ENVIRONMENT=%s", settings.ENVIRONMENT)
    log.debug("Loaded settings: DB URL=%s..., Redis URL=%s",
              str(settings.DATABASE_URL)[:25], settings.REDIS_URL)
except Exception:
    log.exception("Failed to instantiate Settings.")
    raise
