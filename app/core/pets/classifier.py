# app/core/pets/classifier.py

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from app.core.care_schedules.models import PetType

log = logging.getLogger(__name__)


class PetTypeClassifier:
    """
    Keyword heuristic mapping a free-text breed to a coarse pet type.

    Any cat keyword found as a substring of the lower-cased breed means a cat;
    any other non-empty breed is assumed to be a dog.
    """

    def __init__(self, cat_keywords: Iterable[str]) -> None:
        self.cat_keywords: Tuple[str, ...] = tuple(
            k.strip().lower() for k in cat_keywords if k and k.strip()
        )

    def classify(self, breed: Optional[str]) -> Optional[PetType]:
        if breed is None or not breed.strip():
            return None
        breed_lower = breed.lower()
        if any(keyword in breed_lower for keyword in self.cat_keywords):
            return PetType.CAT
        return PetType.DOG


def get_pet_type_classifier() -> PetTypeClassifier:
    """Classifier built from ``settings.CAT_BREED_KEYWORDS``."""
    from app.config import settings

    log.debug("Building pet type classifier with %d cat keywords", len(settings.CAT_BREED_KEYWORDS))
    return PetTypeClassifier(settings.CAT_BREED_KEYWORDS)


__all__ = ["PetTypeClassifier", "get_pet_type_classifier"]
