# app/core/care_events/errors.py

"""
Closed error taxonomy of the care-event engine.

Per-pet errors are raised inside the generation service and translated to
display strings only at its public boundary, so a batch driver always
receives a well-formed result.
"""

from __future__ import annotations

from typing import List, Optional, Sequence


class CareEventError(Exception):
    """Base class for errors scoped to one pet's generation attempt."""

    def __init__(self, pet_id: str) -> None:
        self.pet_id = pet_id
        super().__init__(self.message)

    @property
    def message(self) -> str:  # pragma: no cover - overridden
        raise NotImplementedError


class PetNotFound(CareEventError):
    @property
    def message(self) -> str:
        return "Pet not found"


class AgeIndeterminate(CareEventError):
    @property
    def message(self) -> str:
        return "Unable to determine pet age"


class TypeIndeterminate(CareEventError):
    def __init__(self, pet_id: str, breed: Optional[str] = None) -> None:
        self.breed = breed
        super().__init__(pet_id)

    @property
    def message(self) -> str:
        return "Unable to determine pet type from breed"


class PersistenceError(CareEventError):
    """The bulk insert failed; nothing from the batch is considered created."""

    def __init__(self, pet_id: str, detail: str) -> None:
        self.detail = detail
        super().__init__(pet_id)

    @property
    def message(self) -> str:
        return f"Database error: {self.detail}"


class CatalogValidationError(Exception):
    """Raised at startup when the rule catalog is malformed. Fatal to the engine."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors: List[str] = list(errors)
        super().__init__("Care schedule catalog is invalid: " + "; ".join(self.errors))


__all__ = [
    "CareEventError", "PetNotFound", "AgeIndeterminate", "TypeIndeterminate",
    "PersistenceError", "CatalogValidationError",
]
