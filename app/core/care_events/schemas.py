# app/core/care_events/schemas.py
"""
Pydantic schemas of the care-event engine.

Used in:
    * app/core/care_events/service.py   ― generation input/output
    * app/core/care_events/store.py     ― store boundary
    * app/api/v1/care_events.py         ― REST responses
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.care_schedules.models import CareEventType, Priority


class EventStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PetFacts(BaseModel):
    """The subset of a pet profile the engine reads."""

    id: str
    owner_id: str
    breed: Optional[str] = None
    date_of_birth: Optional[date] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)


class ExistingEvent(BaseModel):
    """A previously persisted event that was produced by a rule."""

    source: str = Field(..., description="Id of the rule that produced the event")
    due_date: date

    model_config = ConfigDict(from_attributes=True, frozen=True)


class GeneratedCareEvent(BaseModel):
    """Candidate event, created in memory and possibly persisted."""

    pet_id: str
    title: str
    description: str
    due_date: date
    event_type: CareEventType
    schedule_rule_id: str
    priority: Priority
    status: EventStatus = EventStatus.PENDING

    @property
    def source(self) -> str:
        return self.schedule_rule_id

    model_config = ConfigDict(frozen=True)


class GenerationResult(BaseModel):
    created: int = 0
    skipped: int = 0
    errors: List[str] = Field(default_factory=list)


__all__ = [
    "EventStatus", "PetFacts", "ExistingEvent", "GeneratedCareEvent", "GenerationResult",
]
