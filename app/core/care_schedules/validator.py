# app/core/care_schedules/validator.py

"""Structural and semantic checks for care schedule rules."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Mapping, Union

from pydantic import TypeAdapter, ValidationError

from .models import CareEventType, CareScheduleRule, PetType, Priority, RecurrenceUnit

_DATETIME = TypeAdapter(datetime)

_PET_TYPES = {member.value for member in PetType}
_EVENT_TYPES = {member.value for member in CareEventType}
_UNITS = {member.value for member in RecurrenceUnit}
_PRIORITIES = {member.value for member in Priority}


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_age(value: Any) -> bool:
    return value is None or (isinstance(value, int) and not isinstance(value, bool) and value >= 0)


def validate_rule(rule: Union[CareScheduleRule, Mapping[str, Any]]) -> List[str]:
    """
    Check one rule and return every problem found.

    Accepts either a loaded ``CareScheduleRule`` or the raw mapping read from
    the catalog file, so malformed data is reported field by field instead of
    failing on the first pydantic error.

    Returns:
        List[str]: Error messages; empty when the rule is valid.
    """
    data: Mapping[str, Any] = (
        rule.model_dump(mode="json") if isinstance(rule, CareScheduleRule) else rule
    )
    errors: List[str] = []

    if _is_blank(data.get("id")):
        errors.append("Care schedule rule must have a valid ID")
    if _is_blank(data.get("name")):
        errors.append("Care schedule rule must have a name")
    if _is_blank(data.get("description")):
        errors.append("Care schedule rule must have a description")
    if data.get("pet_type") not in _PET_TYPES:
        errors.append("Care schedule rule must have a valid pet_type (dog or cat)")
    if data.get("event_type") not in _EVENT_TYPES:
        errors.append(
            "Care schedule rule must have a valid event_type ("
            + ", ".join(sorted(_EVENT_TYPES)) + ")"
        )

    recurrence = data.get("recurrence")
    if not isinstance(recurrence, Mapping):
        errors.append("Care schedule rule must have recurrence configuration")
    else:
        if not _is_positive_int(recurrence.get("interval")):
            errors.append("Recurrence interval must be a positive number")
        if recurrence.get("unit") not in _UNITS:
            errors.append("Recurrence unit must be days, weeks, months, or years")
        conditions = recurrence.get("conditions") or {}
        if not isinstance(conditions, Mapping):
            errors.append("Recurrence conditions must be an object")
        else:
            for key in ("age_min_months", "age_max_months"):
                if not _is_age(conditions.get(key)):
                    errors.append(f"Recurrence condition {key} must be a non-negative integer")

    start = data.get("start_condition") or {}
    if not isinstance(start, Mapping) or not _is_age(start.get("age_months")):
        errors.append("Start condition age_months must be a non-negative integer")
    end = data.get("end_condition") or {}
    if not isinstance(end, Mapping) or not _is_age(end.get("age_months")):
        errors.append("End condition age_months must be a non-negative integer")

    if data.get("priority") not in _PRIORITIES:
        errors.append("Priority must be high, medium, or low")
    if _is_blank(data.get("source")):
        errors.append("Care schedule rule must have a source")

    for key in ("created_at", "updated_at"):
        try:
            _DATETIME.validate_python(data.get(key))
        except ValidationError:
            errors.append(f"Care schedule rule must have a parseable {key} timestamp")

    return errors


__all__ = ["validate_rule"]
