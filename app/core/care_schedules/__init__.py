# app/core/care_schedules/__init__.py

"""
Care schedule rules.

Only the rule types and the validator are re-exported here; import the
catalog from ``app.core.care_schedules.catalog`` (it depends on the
recurrence module, which in turn depends on these types).
"""

from .models import (  # noqa: F401
    CareEventType,
    CareScheduleRule,
    EndCondition,
    PetType,
    Priority,
    Recurrence,
    RecurrenceConditions,
    RecurrenceUnit,
    StartCondition,
)
from .validator import validate_rule  # noqa: F401

__all__: list[str] = [
    "CareEventType", "CareScheduleRule", "EndCondition", "PetType", "Priority",
    "Recurrence", "RecurrenceConditions", "RecurrenceUnit", "StartCondition",
    "validate_rule",
]
