# tests/test_audit_writer.py - audit rows are append-only and failures do not undo mutations
from unittest import mock

import pytest
from django.core.exceptions import PermissionDenied
from django.db import DatabaseError

from audit.helpers import log_changes
from audit.diff import FieldChange
from audit.models import AuditLog
from core.constants import AuditAction, EntityType
from core.exceptions import AuditWriteError
from inventory.models import InkReceipt
from inventory.services import ReceiptService

pytestmark = pytest.mark.django_db


def write_row(actor):
    return log_changes(
        EntityType.INK_RECEIPT, 1, AuditAction.UPDATE,
        [FieldChange("note", None, "checked")], actor, "Spot check",
    )[0]


def test_rows_cannot_be_edited(technician):
    row = write_row(technician)
    row.reason = "rewritten"
    with pytest.raises(PermissionDenied):
        row.save()


def test_rows_cannot_be_deleted(technician):
    row = write_row(technician)
    with pytest.raises(PermissionDenied):
        row.delete()
    with pytest.raises(PermissionDenied):
        AuditLog.objects.filter(pk=row.pk).delete()
    with pytest.raises(PermissionDenied):
        AuditLog.objects.filter(pk=row.pk).update(reason="rewritten")


def test_rows_snapshot_the_actor(technician):
    row = write_row(technician)
    assert row.changed_by == str(technician.pk)
    assert row.changed_by_name == "Somchai K."
    assert row.user_email == "somchai@example.com"
    assert row.metadata["request_id"] == "N/A"


def test_no_changes_write_no_rows(technician):
    assert log_changes(EntityType.INK_RECEIPT, 1, AuditAction.UPDATE, [], technician, "x") == []
    assert AuditLog.objects.count() == 0


def test_failed_audit_write_keeps_the_mutation(technician, product, receipt_data):
    with mock.patch.object(AuditLog.objects, "bulk_create", side_effect=DatabaseError("audit db down")):
        with pytest.raises(AuditWriteError) as exc:
            ReceiptService().create(receipt_data(), technician)

    result = exc.value.result
    assert result is not None
    assert result.audited is False
    assert result.warning
    assert InkReceipt.objects.filter(pk=result.record_id).exists()
    product.refresh_from_db()
    assert product.stock_quantity == 5
    assert AuditLog.objects.count() == 0
