# tests/test_maintenance.py - IT rounds and repair tickets
from datetime import date
from decimal import Decimal

import pytest

from audit.models import AuditLog
from core.constants import AuditAction, EntityType, ITRoundStatus, RepairStatus
from core.dto import ITRoundDTO, RepairDTO
from core.exceptions import ValidationError
from maintenance.models import ITRound
from maintenance.scheduling import DueStatus, add_months, calculate_next_due_date, evaluate_due_status
from maintenance.services import ITRoundService, RepairService

pytestmark = pytest.mark.django_db


def it_round(**overrides):
    values = dict(
        equipment_code="PC-ACC-01",
        performed_at=date(2024, 1, 31),
        frequency_months=3,
        technician="Somchai",
        activities={"dust_cleaning": True},
    )
    values.update(overrides)
    return ITRoundDTO(**values)


def test_add_months_clamps_to_month_end():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)
    assert calculate_next_due_date(None, 3) is None


def test_due_status():
    today = date(2024, 6, 1)
    assert evaluate_due_status(date(2024, 5, 31), today) == (DueStatus.OVERDUE, -1)
    assert evaluate_due_status(date(2024, 6, 20), today) == (DueStatus.DUE_SOON, 19)
    assert evaluate_due_status(date(2024, 9, 1), today)[0] == DueStatus.ON_TRACK
    assert evaluate_due_status(None, today) == (DueStatus.ON_TRACK, None)


def test_create_round_fills_next_due_and_all_tasks(technician):
    result = ITRoundService().create(it_round(), technician)

    record = ITRound.objects.get(pk=result.record_id)
    assert record.next_due_at == date(2024, 4, 30)
    assert record.status == ITRoundStatus.COMPLETED
    assert record.activities["dust_cleaning"] is True
    assert record.activities["virus_scan"] is False
    row = AuditLog.objects.for_record(EntityType.IT_ROUND, result.record_id).get()
    assert row.action == AuditAction.INSERT
    assert row.reason == "Created IT round"


def test_ticking_one_task_audits_one_field(technician):
    service = ITRoundService()
    created = service.create(it_round(), technician)

    result = service.update(created.record_id, it_round(activities={"dust_cleaning": True, "virus_scan": True}),
                            technician, "Scan done later")

    assert [(c.field, c.old_value, c.new_value) for c in result.changes] == [
        ("activities.virus_scan", "false", "true")
    ]


def test_unknown_task_is_rejected(technician):
    with pytest.raises(ValidationError) as exc:
        ITRoundService().create(it_round(activities={"defrag": True}), technician)
    assert exc.value.code == "UNKNOWN_TASK"


def test_invalid_frequency_is_rejected(technician):
    with pytest.raises(ValidationError) as exc:
        ITRoundService().create(it_round(frequency_months=2), technician)
    assert exc.value.code == "INVALID_CHOICE"


def test_repair_parts_are_compared_as_a_set(technician):
    service = RepairService()
    parts = [
        {"part_name": "RAM 8GB", "part_no": "K-8", "quantity": 1, "unit_cost": Decimal("900")},
        {"part_name": "SSD 256GB", "part_no": "S-256", "quantity": 1, "unit_cost": Decimal("1200")},
    ]
    created = service.create(RepairDTO(equipment_code="PC-ACC-01", reported_at=date(2024, 2, 1),
                                       cost=Decimal("2100"), parts_replaced=parts), technician)

    result = service.update(
        created.record_id,
        RepairDTO(equipment_code="PC-ACC-01", reported_at=date(2024, 2, 1), status=RepairStatus.RESOLVED,
                  cost=Decimal("2100.00"), parts_replaced=list(reversed(parts))),
        technician, "Fixed",
    )

    assert [change.field for change in result.changes] == ["status"]


def test_delete_repair_writes_snapshot(technician):
    service = RepairService()
    created = service.create(RepairDTO(equipment_code="PR-02", reported_at=date(2024, 2, 1)), technician)

    service.delete(created.record_id, technician, "Opened by mistake")

    rows = list(AuditLog.objects.for_record(EntityType.REPAIR, created.record_id).newest_first())
    assert rows[0].action == AuditAction.DELETE
    assert rows[0].reason == "Opened by mistake"
    assert '"equipment_code":"PR-02"' in rows[0].old_value
