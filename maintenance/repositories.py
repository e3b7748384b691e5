"""
Maintenance repositories - Data access layer for IT rounds and repair tickets.
"""
from datetime import date
from django.db.models import QuerySet
from core.constants import ITRoundStatus, RepairStatus
from core.repositories import BaseRepository
from .models import ITRound, RepairTicket


class ITRoundRepository(BaseRepository[ITRound]):
    """Repository for ITRound"""

    def __init__(self):
        super().__init__(ITRound)

    def due_by(self, day: date) -> QuerySet[ITRound]:
        """Rounds whose next visit falls on or before ``day``"""
        return self.get_all(next_due_at__lte=day).exclude(status=ITRoundStatus.CANCELLED)

    def for_equipment(self, equipment_code: str) -> QuerySet[ITRound]:
        return self.get_all(equipment_code=equipment_code)


class RepairRepository(BaseRepository[RepairTicket]):
    """Repository for RepairTicket"""

    def __init__(self):
        super().__init__(RepairTicket)

    def open_tickets(self) -> QuerySet[RepairTicket]:
        return self.get_all().exclude(status__in=[RepairStatus.RESOLVED, RepairStatus.CLOSED])

    def for_equipment(self, equipment_code: str) -> QuerySet[RepairTicket]:
        return self.get_all(equipment_code=equipment_code)
