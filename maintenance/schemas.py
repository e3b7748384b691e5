"""
Audit schemas for IT rounds and repair tickets.

Round activities are flattened to one boolean field per task
(``activities.<task>``) so that ticking a single task audits a single row.
"""
from audit.schema import EntitySchema, FieldKind, FieldSpec
from core.constants import (
    EntityType,
    IT_ROUND_TASKS,
    ITRoundFrequency,
    ITRoundStatus,
    RepairStatus,
)

ACTIVITY_PREFIX = 'activities.'
ACTIVITY_CHOICES = (('true', 'Done'), ('false', 'Not done'))
FREQUENCY_CHOICES = tuple((str(months), label) for months, label in ITRoundFrequency.CHOICES)

PART_FIELDS = (
    FieldSpec('part_name', FieldKind.TEXT, 'Part'),
    FieldSpec('part_no', FieldKind.TEXT, 'Part no.', optional_text=True),
    FieldSpec('quantity', FieldKind.INTEGER, 'Quantity'),
    FieldSpec('unit_cost', FieldKind.CURRENCY, 'Unit cost'),
)


def activity_field(task):
    return f"{ACTIVITY_PREFIX}{task}"


def it_round_values(it_round):
    values = {
        'equipment_code': it_round.equipment_code,
        'performed_at': it_round.performed_at,
        'next_due_at': it_round.next_due_at,
        'frequency_months': it_round.frequency_months,
        'technician': it_round.technician,
        'notes': it_round.notes,
        'status': it_round.status,
    }
    activities = it_round.activities or {}
    for task, _ in IT_ROUND_TASKS:
        values[activity_field(task)] = activities.get(task, False)
    return values


def repair_values(ticket):
    return {
        'equipment_code': ticket.equipment_code,
        'reported_at': ticket.reported_at,
        'status': ticket.status,
        'cost': ticket.cost,
        'description': ticket.description,
        'parts_replaced': ticket.parts_replaced or [],
    }


IT_ROUND_SCHEMA = EntitySchema(
    EntityType.IT_ROUND,
    label='IT round',
    reader=it_round_values,
    fields=[
        FieldSpec('equipment_code', FieldKind.TEXT, 'Equipment', optional_text=True),
        FieldSpec('performed_at', FieldKind.DATE, 'Performed on'),
        FieldSpec('next_due_at', FieldKind.DATE, 'Next due'),
        FieldSpec('frequency_months', FieldKind.INTEGER, 'Frequency', choices=FREQUENCY_CHOICES),
        FieldSpec('technician', FieldKind.TEXT, 'Technician', optional_text=True),
        FieldSpec('notes', FieldKind.TEXT, 'Notes', optional_text=True),
        FieldSpec('status', FieldKind.ENUM, 'Status', choices=tuple(ITRoundStatus.CHOICES),
                  default=ITRoundStatus.COMPLETED),
    ] + [
        FieldSpec(activity_field(task), FieldKind.BOOLEAN, label, choices=ACTIVITY_CHOICES, default=False)
        for task, label in IT_ROUND_TASKS
    ],
)

REPAIR_SCHEMA = EntitySchema(
    EntityType.REPAIR,
    label='repair ticket',
    reader=repair_values,
    fields=[
        FieldSpec('equipment_code', FieldKind.TEXT, 'Equipment'),
        FieldSpec('reported_at', FieldKind.DATE, 'Reported on'),
        FieldSpec('status', FieldKind.ENUM, 'Status', choices=tuple(RepairStatus.CHOICES),
                  default=RepairStatus.OPEN),
        FieldSpec('cost', FieldKind.CURRENCY, 'Cost'),
        FieldSpec('description', FieldKind.TEXT, 'Description', optional_text=True),
        FieldSpec('parts_replaced', FieldKind.LIST, 'Parts replaced', item_fields=PART_FIELDS,
                  sort_key=('part_name', 'part_no')),
    ],
)
