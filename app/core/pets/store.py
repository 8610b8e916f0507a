# app/core/pets/store.py
"""
Pet store boundary.

• ``BasePetStore`` – abstract async interface consumed by the engine.
• ``SqlPetStore`` – reads the ``pets`` table through an ``AsyncSession``.
• ``InMemoryPetStore`` – dict-backed store for tests and local tooling.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.care_events.schemas import PetFacts

from .models import Pet

log = logging.getLogger(__name__)


class BasePetStore(ABC):
    """Read-only access to pet facts (ASYNC)."""

    @abstractmethod
    async def get_pet(self, pet_id: str) -> Optional[PetFacts]:
        """Return the pet's facts, or None if the id is unknown."""
        ...

    @abstractmethod
    async def list_pet_ids(self) -> List[str]:
        """Ids of all pets, oldest first; used by the batch driver."""
        ...


class SqlPetStore(BasePetStore):
    def __init__(self, db_session: AsyncSession) -> None:
        self.db: AsyncSession = db_session

    async def get_pet(self, pet_id: str) -> Optional[PetFacts]:
        log.debug("Fetching pet id=%s", pet_id)
        pet = await self.db.get(Pet, pet_id)
        if pet is None:
            log.info("Pet id=%s not found", pet_id)
            return None
        return PetFacts.model_validate(pet)

    async def list_pet_ids(self) -> List[str]:
        stmt = select(Pet.id).order_by(Pet.created_at, Pet.id)
        result = await self.db.scalars(stmt)
        return list(result.all())


class InMemoryPetStore(BasePetStore):
    """Keeps pets in insertion order in a plain dict."""

    def __init__(self, pets: Iterable[PetFacts] = ()) -> None:
        self._pets: Dict[str, PetFacts] = {p.id: p for p in pets}

    def add(self, pet: PetFacts) -> None:
        self._pets[pet.id] = pet

    async def get_pet(self, pet_id: str) -> Optional[PetFacts]:
        return self._pets.get(pet_id)

    async def list_pet_ids(self) -> List[str]:
        return list(self._pets)


__all__ = ["BasePetStore", "SqlPetStore", "InMemoryPetStore"]
