# app/core/care_schedules/models.py
"""
Pydantic types for care schedule rules.

Rules are immutable once loaded (``frozen=True``); the catalog hands the
same instances to every caller.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PetType(str, Enum):
    DOG = "dog"
    CAT = "cat"


class CareEventType(str, Enum):
    VACCINATION = "vaccination"
    WELLNESS_EXAM = "wellness_exam"
    PARASITE_PREVENTION = "parasite_prevention"
    DENTAL_CARE = "dental_care"
    GROOMING = "grooming"


class RecurrenceUnit(str, Enum):
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class RecurrenceConditions(_FrozenModel):
    age_min_months: Optional[int] = Field(None, ge=0)
    age_max_months: Optional[int] = Field(None, ge=0)


class Recurrence(_FrozenModel):
    interval: int = Field(..., gt=0, description="Number of units between occurrences")
    unit: RecurrenceUnit
    conditions: Optional[RecurrenceConditions] = None


class StartCondition(_FrozenModel):
    age_months: Optional[int] = Field(None, ge=0)
    # Trigger-based starts are accepted in the data but not evaluated.
    event_trigger: Optional[str] = None


class EndCondition(_FrozenModel):
    age_months: Optional[int] = Field(None, ge=0)


class CareScheduleRule(_FrozenModel):
    """A declarative recurrence definition for one category of pet care."""

    id: str = Field(..., description="Unique rule key, stored as the event source")
    name: str
    description: str
    pet_type: PetType
    event_type: CareEventType
    start_condition: StartCondition = Field(default_factory=StartCondition)
    recurrence: Recurrence
    end_condition: Optional[EndCondition] = None
    priority: Priority
    source: str = Field(..., description="Care-authority attribution")
    created_at: datetime
    updated_at: datetime


__all__ = [
    "PetType", "CareEventType", "RecurrenceUnit", "Priority",
    "RecurrenceConditions", "Recurrence", "StartCondition", "EndCondition",
    "CareScheduleRule",
]
