# app/api/v1/care_schedules.py

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_care_schedule_catalog
from app.core.care_schedules.catalog import CareScheduleCatalog
from app.core.care_schedules.models import CareEventType, CareScheduleRule, PetType

router = APIRouter(prefix="/v1/care-schedules", tags=["Care Schedules"])


@router.get("/stats")
def catalog_stats(catalog: CareScheduleCatalog = Depends(get_care_schedule_catalog)) -> Dict[str, Any]:
    return {"version": catalog.version, **catalog.stats()}


@router.get("/{pet_type}", response_model=List[CareScheduleRule])
def list_care_schedules(
    pet_type: PetType,
    event_type: Optional[CareEventType] = None,
    age_months: Optional[int] = Query(None, ge=0, description="Only rules whose age gates admit this age"),
    catalog: CareScheduleCatalog = Depends(get_care_schedule_catalog),
) -> List[CareScheduleRule]:
    if age_months is not None:
        rules = catalog.applicable_rules(pet_type, age_months)
    else:
        rules = catalog.rules_for_pet_type(pet_type)
    if event_type is not None:
        rules = tuple(r for r in rules if r.event_type == event_type)
    return list(rules)
