"""
Warranty status of a piece of equipment.

expired        warranty end date has passed
expiring_soon  ends today or within WARRANTY_WARNING_DAYS
active         ends later
"""
from datetime import date
from typing import Optional, Tuple

from django.utils import timezone

from core.constants import Defaults


class WarrantyStatus:
    EXPIRED = 'expired'
    EXPIRING_SOON = 'expiring_soon'
    ACTIVE = 'active'


def evaluate_warranty(warranty_end: Optional[date], today: date = None,
                      warning_days: int = Defaults.WARRANTY_WARNING_DAYS) -> Tuple[Optional[str], Optional[int]]:
    """
    Returns:
        (status, days_left); (None, None) when no warranty end is recorded.
        days_left is negative once the warranty has expired.
    """
    if warranty_end is None:
        return None, None
    today = today or timezone.localdate()
    days_left = (warranty_end - today).days
    if days_left < 0:
        return WarrantyStatus.EXPIRED, days_left
    if days_left <= warning_days:
        return WarrantyStatus.EXPIRING_SOON, days_left
    return WarrantyStatus.ACTIVE, days_left
