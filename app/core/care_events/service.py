# app/core/care_events/service.py

"""Service layer for automated care-event generation."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Callable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.care_schedules.catalog import CareScheduleCatalog, get_catalog
from app.core.pets.age import age_in_months
from app.core.pets.classifier import PetTypeClassifier, get_pet_type_classifier
from app.core.pets.store import BasePetStore, SqlPetStore

from .errors import (
    AgeIndeterminate, CareEventError, CatalogValidationError, PetNotFound, TypeIndeterminate,
)
from .recurrence import build_candidate, is_duplicate, next_occurrence
from .schemas import GeneratedCareEvent, GenerationResult
from .store import BaseEventStore, SqlEventStore

log = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class CareEventGenerationService:
    """
    Computes and persists the next due care events of a pet.

    All collaborators are injected: the rule catalog, the pet and event
    stores, the breed classifier and the clock. An invalid catalog is rejected
    with ``CatalogValidationError`` at construction. ``generate_events_for_pet``
    never raises; per-pet failures come back in ``GenerationResult.errors``.
    """

    def __init__(
        self,
        catalog: CareScheduleCatalog,
        pet_store: BasePetStore,
        event_store: BaseEventStore,
        classifier: PetTypeClassifier,
        clock: Callable[[], date] = utc_today,
    ) -> None:
        validation = catalog.validate()
        if not validation.valid:
            raise CatalogValidationError(validation.errors)
        self.catalog = catalog
        self.pet_store = pet_store
        self.event_store = event_store
        self.classifier = classifier
        self.clock = clock

    # ------------------------------------------------------------------ #
    #                       Public business-methods                      #
    # ------------------------------------------------------------------ #

    async def generate_events_for_pet(self, pet_id: str, today: Optional[date] = None) -> GenerationResult:
        """
        Generate the next due event of every applicable rule for one pet.

        Args:
            pet_id (str): Pet identifier.
            today (date | None, optional): Evaluation date; defaults to the clock.

        Returns:
            GenerationResult: Created/skipped counters and error messages.
        """
        result = GenerationResult()
        today = today or self.clock()
        try:
            await self._generate(pet_id, today, result)
        except CareEventError as exc:
            log.warning("Care event generation for pet %s stopped: %s", pet_id, exc.message)
            result.errors.append(exc.message)
        except Exception as exc:
            log.exception("Unexpected error generating care events for pet %s", pet_id)
            result.errors.append(f"Unexpected error: {exc}")
        log.info(
            "Care events for pet %s: created=%d skipped=%d errors=%d",
            pet_id, result.created, result.skipped, len(result.errors),
        )
        return result

    # ------------------------------------------------------------------ #
    #                              internals                             #
    # ------------------------------------------------------------------ #

    async def _generate(self, pet_id: str, today: date, result: GenerationResult) -> None:
        pet = await self.pet_store.get_pet(pet_id)
        if pet is None:
            raise PetNotFound(pet_id)

        age = age_in_months(pet.date_of_birth, today)
        if age is None:
            raise AgeIndeterminate(pet_id)

        existing = await self.event_store.get_events_with_source(pet_id)

        pet_type = self.classifier.classify(pet.breed)
        if pet_type is None:
            raise TypeIndeterminate(pet_id, pet.breed)

        batch: List[GeneratedCareEvent] = []
        for rule in self.catalog.rules_for_pet_type(pet_type):
            due_date = next_occurrence(rule, pet, age, existing, today)
            if due_date is None:
                log.debug("Rule %s not applicable to pet %s (age %d months)", rule.id, pet_id, age)
                continue
            candidate = build_candidate(rule, pet, due_date)
            if is_duplicate(candidate, existing):
                log.debug("Rule %s already has an event on %s for pet %s", rule.id, due_date, pet_id)
                result.skipped += 1
            else:
                batch.append(candidate)

        if batch:
            await self.event_store.insert_events(pet_id, pet.owner_id, batch)
            result.created = len(batch)


def build_sql_generation_service(
    db_session: AsyncSession,
    catalog: Optional[CareScheduleCatalog] = None,
    classifier: Optional[PetTypeClassifier] = None,
) -> CareEventGenerationService:
    """Wire the service to SQL stores sharing ``db_session``."""
    return CareEventGenerationService(
        catalog=catalog or get_catalog(),
        pet_store=SqlPetStore(db_session),
        event_store=SqlEventStore(db_session),
        classifier=classifier or get_pet_type_classifier(),
    )


__all__ = ["CareEventGenerationService", "build_sql_generation_service", "utc_today"]
