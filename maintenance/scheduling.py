"""
IT round scheduling helpers.
"""
import calendar
from datetime import date
from typing import Optional, Tuple

from django.utils import timezone

DUE_SOON_DAYS = 30


class DueStatus:
    OVERDUE = 'overdue'
    DUE_SOON = 'due_soon'
    ON_TRACK = 'on_track'


def add_months(day: date, months: int) -> date:
    """Same day ``months`` later, clamped to the end of shorter months"""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def calculate_next_due_date(performed_at: Optional[date], frequency_months: Optional[int]) -> Optional[date]:
    if performed_at is None or not frequency_months:
        return None
    return add_months(performed_at, frequency_months)


def evaluate_due_status(next_due_at: Optional[date], today: date = None) -> Tuple[str, Optional[int]]:
    """
    Returns (status, days until due). A round with no due date is on track.
    """
    if next_due_at is None:
        return DueStatus.ON_TRACK, None
    today = today or timezone.localdate()
    days = (next_due_at - today).days
    if days < 0:
        return DueStatus.OVERDUE, days
    if days <= DUE_SOON_DAYS:
        return DueStatus.DUE_SOON, days
    return DueStatus.ON_TRACK, days
