# app/core/care_schedules/catalog.py

"""Immutable, constructed-once repository of care schedule rules."""

from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from app.config import settings
from app.core.care_events.errors import CatalogValidationError
from app.core.care_events.recurrence import is_age_eligible

from .models import CareEventType, CareScheduleRule, PetType
from .validator import validate_rule

log = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "care_schedules.json"


@dataclass(frozen=True)
class CatalogValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


def _duplicate_ids(ids: Iterable[str]) -> List[str]:
    counts = Counter(ids)
    return sorted(rule_id for rule_id, n in counts.items() if n > 1)


class CareScheduleCatalog:
    """
    Read-only collection of rules, partitioned by pet type.

    Built once (normally by :func:`load_catalog`) and passed into the
    generation service; tests construct their own instances.
    """

    def __init__(self, rules: Iterable[CareScheduleRule], version: Optional[str] = None) -> None:
        self._rules: Tuple[CareScheduleRule, ...] = tuple(rules)
        self.version = version
        self._by_pet_type: Dict[PetType, Tuple[CareScheduleRule, ...]] = {
            pet_type: tuple(r for r in self._rules if r.pet_type == pet_type)
            for pet_type in PetType
        }

    def __len__(self) -> int:
        return len(self._rules)

    def all_rules(self) -> Tuple[CareScheduleRule, ...]:
        return self._rules

    def rules_for_pet_type(self, pet_type: PetType) -> Tuple[CareScheduleRule, ...]:
        return self._by_pet_type.get(PetType(pet_type), ())

    def rules_for_event_type(
        self, pet_type: PetType, event_type: CareEventType
    ) -> Tuple[CareScheduleRule, ...]:
        event_type = CareEventType(event_type)
        return tuple(r for r in self.rules_for_pet_type(pet_type) if r.event_type == event_type)

    def get_rule(self, rule_id: str) -> Optional[CareScheduleRule]:
        return next((r for r in self._rules if r.id == rule_id), None)

    def applicable_rules(self, pet_type: PetType, age_months: int) -> Tuple[CareScheduleRule, ...]:
        """Rules whose age gates admit a pet of ``age_months``."""
        return tuple(r for r in self.rules_for_pet_type(pet_type) if is_age_eligible(r, age_months))

    def validate(self) -> CatalogValidationResult:
        """Validate every rule and check id uniqueness."""
        errors: List[str] = []
        for rule in self._rules:
            rule_errors = validate_rule(rule)
            if rule_errors:
                errors.append(f"Rule {rule.id}: {', '.join(rule_errors)}")
        for rule_id in _duplicate_ids(r.id for r in self._rules):
            errors.append(f"Duplicate rule id: {rule_id}")
        return CatalogValidationResult(valid=not errors, errors=errors)

    def stats(self) -> Dict[str, Any]:
        return {
            "total_rules": len(self._rules),
            "by_pet_type": {pt.value: len(self._by_pet_type[pt]) for pt in PetType},
            "by_event_type": dict(Counter(r.event_type.value for r in self._rules)),
            "by_priority": dict(Counter(r.priority.value for r in self._rules)),
            "sources": sorted({r.source for r in self._rules}),
        }


def validate_catalog(catalog: CareScheduleCatalog) -> CatalogValidationResult:
    return catalog.validate()


def build_catalog(raw_rules: Iterable[Mapping[str, Any]], version: Optional[str] = None) -> CareScheduleCatalog:
    """
    Validate raw rule mappings and build a catalog from them.

    Raises:
        CatalogValidationError: If any rule fails validation or ids repeat.
    """
    raw_rules = list(raw_rules)
    errors: List[str] = []
    rules: List[CareScheduleRule] = []

    for index, raw in enumerate(raw_rules):
        label = raw.get("id") if isinstance(raw, Mapping) and raw.get("id") else f"#{index}"
        if not isinstance(raw, Mapping):
            errors.append(f"Rule {label}: rule must be an object")
            continue
        rule_errors = validate_rule(raw)
        if rule_errors:
            errors.append(f"Rule {label}: {', '.join(rule_errors)}")
            continue
        try:
            rules.append(CareScheduleRule.model_validate(raw))
        except ValidationError as exc:
            details = ", ".join(f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors())
            errors.append(f"Rule {label}: {details}")

    for rule_id in _duplicate_ids(r.get("id") for r in raw_rules if isinstance(r, Mapping)):
        errors.append(f"Duplicate rule id: {rule_id}")

    if errors:
        log.error("Care schedule validation errors: %s", errors)
        raise CatalogValidationError(errors)

    catalog = CareScheduleCatalog(rules, version=version)
    stats = catalog.stats()
    log.info(
        "Care schedules initialized: %d dog rules, %d cat rules, %d total (version=%s)",
        stats["by_pet_type"]["dog"], stats["by_pet_type"]["cat"], stats["total_rules"], version,
    )
    return catalog


def load_catalog(path: Optional[Path | str] = None) -> CareScheduleCatalog:
    """Read the versioned catalog file and build a validated catalog."""
    catalog_path = Path(path) if path else DEFAULT_CATALOG_PATH
    log.info("Loading care schedule catalog from %s", catalog_path)
    try:
        payload = json.loads(catalog_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogValidationError([f"Failed to read care schedule catalog {catalog_path}: {exc}"]) from exc

    if not isinstance(payload, Mapping) or not isinstance(payload.get("rules"), list):
        raise CatalogValidationError([f"Catalog {catalog_path} must contain a 'rules' list"])
    return build_catalog(payload["rules"], version=payload.get("version"))


@lru_cache(maxsize=1)
def get_catalog() -> CareScheduleCatalog:
    """Process-wide catalog, loaded on first use from ``settings.CARE_SCHEDULES_PATH``."""
    return load_catalog(settings.CARE_SCHEDULES_PATH)


__all__ = [
    "CareScheduleCatalog", "CatalogValidationResult", "DEFAULT_CATALOG_PATH",
    "build_catalog", "load_catalog", "get_catalog", "validate_catalog",
]
