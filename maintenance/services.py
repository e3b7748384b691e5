"""
Maintenance services - Business logic for IT rounds and repair tickets.

These records carry no stock, so a mutation is a plain row change run through
MutationService for diffing and auditing.
"""
from decimal import Decimal, InvalidOperation

from audit.records import RecordService
from core.constants import IT_ROUND_TASKS, ITRoundFrequency, ITRoundStatus, RepairStatus
from core.dto import ITRoundDTO, RepairDTO
from core.exceptions import ValidationError
from .repositories import ITRoundRepository, RepairRepository
from .scheduling import calculate_next_due_date
from .schemas import IT_ROUND_SCHEMA, REPAIR_SCHEMA


class ITRoundService(RecordService):
    """IT maintenance rounds with per-task activity flags"""

    schema = IT_ROUND_SCHEMA
    repository_class = ITRoundRepository

    def clean(self, data: ITRoundDTO) -> dict:
        performed_at = self._require(data.performed_at, 'performed_at', 'Performed date')
        frequency = data.frequency_months
        if frequency is not None:
            frequency = self._choice(frequency, ITRoundFrequency.CHOICES, 'frequency_months', 'Frequency')

        next_due_at = data.next_due_at or calculate_next_due_date(performed_at, frequency)
        if next_due_at is not None and next_due_at < performed_at:
            raise ValidationError(
                message="Next due date cannot be before the performed date",
                code="INVALID_DUE_DATE",
                details={'field': 'next_due_at'}
            )

        return {
            'equipment_code': (data.equipment_code or '').strip(),
            'performed_at': performed_at,
            'next_due_at': next_due_at,
            'frequency_months': frequency,
            'technician': (data.technician or '').strip() or None,
            'notes': (data.notes or '').strip() or None,
            'status': self._choice(data.status or ITRoundStatus.COMPLETED, ITRoundStatus.CHOICES,
                                   'status', 'Status'),
            'activities': self.clean_activities(data.activities),
        }

    @staticmethod
    def clean_activities(activities) -> dict:
        """Every known task as a boolean; unknown task keys are rejected"""
        activities = activities or {}
        known = [task for task, _ in IT_ROUND_TASKS]
        unknown = sorted(set(activities) - set(known))
        if unknown:
            raise ValidationError(
                message=f"Unknown IT round task(s): {', '.join(unknown)}",
                code="UNKNOWN_TASK",
                details={'tasks': unknown}
            )
        return {task: activities.get(task) is True for task in known}


class RepairService(RecordService):
    """Repair / replacement tickets with the parts they used"""

    schema = REPAIR_SCHEMA
    repository_class = RepairRepository

    def clean(self, data: RepairDTO) -> dict:
        return {
            'equipment_code': self._require(data.equipment_code, 'equipment_code', 'Equipment'),
            'reported_at': self._require(data.reported_at, 'reported_at', 'Reported date'),
            'status': self._choice(data.status or RepairStatus.OPEN, RepairStatus.CHOICES, 'status', 'Status'),
            'cost': self._amount(data.cost, 'cost', 'Cost'),
            'description': (data.description or '').strip() or None,
            'parts_replaced': self.clean_parts(data.parts_replaced),
        }

    def clean_parts(self, parts) -> list:
        cleaned = []
        for part in parts or []:
            name = (part.get('part_name') or '').strip()
            if not name:
                continue
            quantity = part.get('quantity') or 1
            if int(quantity) <= 0:
                raise ValidationError(
                    message=f"Quantity for {name} must be positive",
                    code="INVALID_QUANTITY",
                    details={'part_name': name}
                )
            cleaned.append({
                'part_name': name,
                'part_no': (part.get('part_no') or '').strip(),
                'quantity': int(quantity),
                'unit_cost': str(self._amount(part.get('unit_cost'), 'unit_cost', 'Unit cost')),
            })
        return cleaned

    @staticmethod
    def _amount(value, field_name, label) -> Decimal:
        try:
            amount = Decimal(str(value if value not in (None, '') else 0))
        except InvalidOperation:
            raise ValidationError(
                message=f"{label} must be a number",
                code="INVALID_NUMBER",
                details={'field': field_name}
            )
        if amount < 0:
            raise ValidationError(
                message=f"{label} cannot be negative",
                code="INVALID_NUMBER",
                details={'field': field_name}
            )
        return amount
