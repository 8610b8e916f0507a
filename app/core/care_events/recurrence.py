# app/core/care_events/recurrence.py

"""
Next-occurrence calculation and duplicate detection.

Everything here is pure: no I/O, no clock reads. ``today`` is always an
argument, so results are reproducible for a fixed date.

Month and year arithmetic uses ``dateutil.relativedelta`` and clamps to the
end of month (Jan 31 + 1 month = Feb 28/29). Occurrence ``k`` is always
computed as ``base + k * interval`` so a clamped date never shifts later ones.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from app.core.care_schedules.models import CareScheduleRule, RecurrenceUnit

from .schemas import ExistingEvent, GeneratedCareEvent, PetFacts


def _delta(unit: RecurrenceUnit, amount: int) -> relativedelta:
    unit = RecurrenceUnit(unit)
    if unit is RecurrenceUnit.DAYS:
        return relativedelta(days=amount)
    if unit is RecurrenceUnit.WEEKS:
        return relativedelta(weeks=amount)
    if unit is RecurrenceUnit.MONTHS:
        return relativedelta(months=amount)
    return relativedelta(years=amount)


def add_interval(start: date, interval: int, unit: RecurrenceUnit) -> date:
    """Return ``start`` advanced by ``interval`` units."""
    return start + _delta(unit, interval)


def is_age_eligible(rule: CareScheduleRule, age_months: int) -> bool:
    """Apply the start, end and recurrence-window age gates of ``rule``."""
    start_age = rule.start_condition.age_months
    if start_age is not None and age_months < start_age:
        return False
    end_age = rule.end_condition.age_months if rule.end_condition else None
    if end_age is not None and age_months > end_age:
        return False
    conditions = rule.recurrence.conditions
    if conditions is not None:
        if conditions.age_min_months is not None and age_months < conditions.age_min_months:
            return False
        if conditions.age_max_months is not None and age_months > conditions.age_max_months:
            return False
    return True


def base_date(
    rule: CareScheduleRule,
    pet: PetFacts,
    existing_events: Iterable[ExistingEvent],
    today: date,
) -> date:
    """
    Date the next occurrence is counted from.

    The latest existing event of this rule wins; otherwise the pet's birth
    date shifted by the rule's start age; otherwise ``today``.
    """
    matching = [e.due_date for e in existing_events if e.source == rule.id]
    if matching:
        return max(matching)
    start_age = rule.start_condition.age_months
    if start_age is not None and pet.date_of_birth is not None:
        return pet.date_of_birth + relativedelta(months=start_age)
    return today


def _first_step_after(base: date, today: date, interval: int, unit: RecurrenceUnit) -> int:
    """Smallest k >= 1 worth trying so that ``base + k * interval`` lands near ``today``."""
    unit = RecurrenceUnit(unit)
    if unit in (RecurrenceUnit.DAYS, RecurrenceUnit.WEEKS):
        span = interval * (7 if unit is RecurrenceUnit.WEEKS else 1)
        return max(1, (today - base).days // span + 1)
    span = interval * (12 if unit is RecurrenceUnit.YEARS else 1)
    months = (today.year - base.year) * 12 + (today.month - base.month)
    return max(1, months // span)


def next_occurrence(
    rule: CareScheduleRule,
    pet: PetFacts,
    age_months: int,
    existing_events: Iterable[ExistingEvent],
    today: date,
) -> Optional[date]:
    """
    Next due date of ``rule`` for ``pet``, strictly after ``today``.

    Returns None when an age gate excludes the pet. Missed occurrences
    between the base date and ``today`` are not returned; only the nearest
    future one is.

    Re-advancing uses ``base + k * interval`` rather than stepping from the
    previous candidate, so a month-end base gives Apr 30 (not Apr 29) after
    Jan 31 -> Feb 29.
    """
    if not is_age_eligible(rule, age_months):
        return None

    interval = rule.recurrence.interval
    unit = rule.recurrence.unit
    base = base_date(rule, pet, existing_events, today)

    candidate = add_interval(base, interval, unit)
    if candidate > today:
        return candidate

    step = _first_step_after(base, today, interval, unit)
    candidate = add_interval(base, interval * step, unit)
    while candidate <= today:
        step += 1
        candidate = add_interval(base, interval * step, unit)
    return candidate


def build_candidate(rule: CareScheduleRule, pet: PetFacts, due_date: date) -> GeneratedCareEvent:
    return GeneratedCareEvent(
        pet_id=pet.id,
        title=rule.name,
        description=rule.description,
        due_date=due_date,
        event_type=rule.event_type,
        schedule_rule_id=rule.id,
        priority=rule.priority,
    )


def is_duplicate(candidate: GeneratedCareEvent, existing_events: Iterable[ExistingEvent]) -> bool:
    """True iff an existing event has the same source and exactly the same due date."""
    return any(
        e.source == candidate.schedule_rule_id and e.due_date == candidate.due_date
        for e in existing_events
    )


__all__ = [
    "add_interval", "is_age_eligible", "base_date", "next_occurrence",
    "build_candidate", "is_duplicate",
]
