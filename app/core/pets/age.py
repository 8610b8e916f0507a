# app/core/pets/age.py

from __future__ import annotations

from datetime import date
from typing import Optional


def age_in_months(date_of_birth: Optional[date], today: date) -> Optional[int]:
    """
    Whole calendar-month age of a pet on ``today``.

    Day-of-month is ignored, so the result can be ahead of the true age by
    up to a month near a birthday boundary.

    Returns:
        int | None: Age in months, or None if the birth date is missing or
        lies in a later month than ``today``.
    """
    if date_of_birth is None:
        return None
    months = (today.year - date_of_birth.year) * 12 + (today.month - date_of_birth.month)
    return months if months >= 0 else None


__all__ = ["age_in_months"]
