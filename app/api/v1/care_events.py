# app/api/v1/care_events.py

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field

from app.api.deps import get_generation_service
from app.core.auth.security import get_current_user_id
from app.core.care_events.service import CareEventGenerationService

router = APIRouter(prefix="/v1/pets", tags=["Care Events"])
log = logging.getLogger(__name__)


class GenerateEventsOut(BaseModel):
    success: bool = Field(..., description="True if events were created, or nothing needed creating")
    created: int
    skipped: int
    errors: List[str]


@router.post(
    "/{pet_id}/events/generate",
    response_model=GenerateEventsOut,
    status_code=status.HTTP_201_CREATED,
    summary="Generate due care events for one of my pets",
    responses={207: {"description": "Generation finished with errors"}},
)
async def generate_pet_events(
    pet_id: str,
    response: Response,
    owner_id: str = Depends(get_current_user_id),
    service: CareEventGenerationService = Depends(get_generation_service),
) -> GenerateEventsOut:
    pet = await service.pet_store.get_pet(pet_id)
    if pet is None or pet.owner_id != owner_id:
        log.warning("API: owner '%s' requested generation for unknown or foreign pet '%s'", owner_id, pet_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pet not found or access denied")

    result = await service.generate_events_for_pet(pet_id)
    if result.errors:
        log.error("Event generation errors: pet=%s owner=%s errors=%s", pet_id, owner_id, result.errors)
        response.status_code = status.HTTP_207_MULTI_STATUS

    return GenerateEventsOut(
        success=result.created > 0 or (not result.errors and result.skipped > 0),
        created=result.created,
        skipped=result.skipped,
        errors=result.errors,
    )
