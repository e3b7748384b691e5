# tests/test_receipt_flow.py - receipts and issues end to end through the services
import json
from datetime import date
from decimal import Decimal

import pytest

from audit.diff import ENTIRE_RECORD
from audit.models import AuditLog
from core.constants import AuditAction, EntityType, SensitiveAction
from core.dto import IssueDTO, LineItemDTO
from core.exceptions import AuthError, ValidationError
from inventory.models import InkReceipt, InkReceiptItem
from inventory.repositories import ReceiptRepository
from inventory.services import IssueService, ReceiptService
from stepup.grants import consume_grant
from stepup.services import StepUpService
from tests.conftest import PASSWORD

pytestmark = pytest.mark.django_db


def stock(product):
    product.refresh_from_db()
    return product.stock_quantity


def audit_rows(record_id):
    return list(AuditLog.objects.for_record(EntityType.INK_RECEIPT, record_id).order_by("id"))


def test_create_receipt_adds_stock_and_audits_snapshot(technician, product, receipt_data):
    result = ReceiptService().create(receipt_data(), technician, reason="Delivery")

    assert stock(product) == 5
    assert result.audited is True
    rows = audit_rows(result.record_id)
    assert len(rows) == 1
    assert rows[0].action == AuditAction.INSERT
    assert rows[0].field_name == ENTIRE_RECORD
    assert rows[0].old_value is None
    assert rows[0].changed_by == str(technician.pk)
    assert rows[0].reason == "Delivery"
    assert rows[0].metadata["stock_movements"] == [
        {"product_id": product.pk, "delta": 5, "stock_after": 5}
    ]

    receipt = InkReceipt.objects.get(pk=result.record_id)
    assert receipt.total_amount == Decimal("1750.00")
    assert receipt.items.get().unit == "piece"


def test_create_without_reason_uses_default(technician, receipt_data):
    result = ReceiptService().create(receipt_data(), technician)
    assert audit_rows(result.record_id)[0].reason == "Created ink receipt"


def test_edit_quantity_moves_stock_and_audits_only_items(technician, product, receipt_data):
    service = ReceiptService()
    created = service.create(receipt_data(quantity=5), technician)

    outcome = StepUpService().request_sensitive_action(
        technician, EntityType.INK_RECEIPT, created.record_id, SensitiveAction.EDIT,
        PASSWORD, "Counted wrong on delivery",
    )
    assert outcome.draft["items"][0]["quantity"] == 5
    grant = consume_grant(outcome.grant.token, technician, EntityType.INK_RECEIPT,
                          created.record_id, SensitiveAction.EDIT)

    result = service.update(created.record_id, receipt_data(quantity=8), technician, grant.reason)

    assert stock(product) == 8
    assert [change.field for change in result.changes] == ["items"]
    update_rows = [row for row in audit_rows(created.record_id) if row.action == AuditAction.UPDATE]
    assert len(update_rows) == 1
    assert update_rows[0].field_name == "items"
    assert update_rows[0].reason == "Counted wrong on delivery"


def test_saving_unchanged_receipt_writes_no_rows(technician, product, receipt_data):
    service = ReceiptService()
    created = service.create(receipt_data(), technician)

    result = service.update(created.record_id, receipt_data(), technician, "No-op save")

    assert result.changes == []
    assert stock(product) == 5
    assert len(audit_rows(created.record_id)) == 1


def test_delete_through_gate_reverses_stock(technician, product, receipt_data):
    created = ReceiptService().create(receipt_data(quantity=8), technician)

    outcome = StepUpService().request_sensitive_action(
        technician, EntityType.INK_RECEIPT, created.record_id, SensitiveAction.DELETE,
        PASSWORD, "Duplicate entry",
    )

    assert outcome.deleted is True
    assert outcome.result.audited is True
    assert stock(product) == 0
    assert not InkReceipt.objects.filter(pk=created.record_id).exists()
    assert not InkReceiptItem.objects.filter(receipt_id=created.record_id).exists()
    delete_row = audit_rows(created.record_id)[-1]
    assert delete_row.action == AuditAction.DELETE
    assert delete_row.field_name == ENTIRE_RECORD
    assert delete_row.new_value is None
    assert delete_row.reason == "Duplicate entry"


def test_wrong_password_changes_nothing(technician, product, receipt_data):
    created = ReceiptService().create(receipt_data(), technician)

    with pytest.raises(AuthError):
        StepUpService().request_sensitive_action(
            technician, EntityType.INK_RECEIPT, created.record_id, SensitiveAction.DELETE,
            "not-my-password", "Duplicate entry",
        )

    assert stock(product) == 5
    assert InkReceipt.objects.filter(pk=created.record_id).exists()
    assert len(audit_rows(created.record_id)) == 1


def test_history_lists_all_rows_newest_first(technician, product, receipt_data):
    service = ReceiptService()
    created = service.create(receipt_data(quantity=5), technician)
    service.update(created.record_id, receipt_data(quantity=8), technician, "Recount")
    service.update(created.record_id, receipt_data(quantity=8, document_no="RC-0001A"), technician, "Typo")

    outcome = StepUpService().request_sensitive_action(
        technician, EntityType.INK_RECEIPT, created.record_id, SensitiveAction.VIEW_HISTORY, PASSWORD, None,
    )

    assert len(outcome.entries) == 3
    assert [entry.field_name for entry in outcome.entries] == ["document_no", "items", ENTIRE_RECORD]
    assert {entry.changed_by_name for entry in outcome.entries} == {"Somchai K."}


def test_receipt_lines_without_price_are_dropped(technician, product, toner, receipt_data):
    data = receipt_data()
    data.items.append(LineItemDTO(product_id=toner.pk, quantity=3, unit_price=Decimal("0")))

    ReceiptService().create(data, technician)

    assert stock(product) == 5
    assert stock(toner) == 0


def test_receipt_without_usable_lines_is_rejected(technician, product, receipt_data):
    with pytest.raises(ValidationError) as exc:
        ReceiptService().create(receipt_data(quantity=0), technician)
    assert exc.value.code == "ITEMS_REQUIRED"
    assert stock(product) == 0
    assert not InkReceipt.objects.exists()


def test_duplicate_document_number_is_rejected(technician, receipt_data):
    ReceiptService().create(receipt_data(), technician)
    with pytest.raises(ValidationError) as exc:
        ReceiptService().create(receipt_data(), technician)
    assert exc.value.code == "DUPLICATE_DOCUMENT_NO"


def test_issue_takes_stock_out(technician, product, receipt_data):
    ReceiptService().create(receipt_data(quantity=5), technician)

    IssueService().create(IssueDTO(
        document_no="IS-0001",
        department="Finance",
        issued_at=date(2024, 3, 4),
        items=[LineItemDTO(product_id=product.pk, quantity=2)],
    ), technician)

    assert stock(product) == 3


def test_update_reverses_the_lines_stored_when_the_row_is_locked(technician, admin_user, product,
                                                                  receipt_data, monkeypatch):
    service = ReceiptService()
    created = service.create(receipt_data(quantity=5), technician)
    locked_fetch = ReceiptRepository.get_by_id_or_raise
    raced = []

    def concurrent_update_then_lock(repo, id, lock=False, **filters):
        # Another session commits its update just before this one takes the lock
        if lock and not raced:
            raced.append(True)
            ReceiptService().update(created.record_id, receipt_data(quantity=8), admin_user, "Recount")
        return locked_fetch(repo, id, lock=lock, **filters)

    monkeypatch.setattr(ReceiptRepository, "get_by_id_or_raise", concurrent_update_then_lock)

    result = service.update(created.record_id, receipt_data(quantity=9), technician, "Second recount")

    assert raced
    assert stock(product) == 9
    assert [item.quantity for item in InkReceiptItem.objects.filter(receipt_id=created.record_id)] == [9]
    assert [change.field for change in result.changes] == ["items"]
    assert json.loads(result.changes[0].old_value)[0]["quantity"] == 8
    assert json.loads(result.changes[0].new_value)[0]["quantity"] == 9


def test_delete_reverses_the_lines_stored_when_the_row_is_locked(technician, admin_user, product,
                                                                  receipt_data, monkeypatch):
    created = ReceiptService().create(receipt_data(quantity=5), technician)
    locked_fetch = ReceiptRepository.get_by_id_or_raise
    raced = []

    def concurrent_update_then_lock(repo, id, lock=False, **filters):
        if lock and not raced:
            raced.append(True)
            ReceiptService().update(created.record_id, receipt_data(quantity=8), admin_user, "Recount")
        return locked_fetch(repo, id, lock=lock, **filters)

    monkeypatch.setattr(ReceiptRepository, "get_by_id_or_raise", concurrent_update_then_lock)

    ReceiptService().delete(created.record_id, technician, "Duplicate entry")

    assert stock(product) == 0
    delete_row = audit_rows(created.record_id)[-1]
    assert delete_row.action == AuditAction.DELETE
    assert json.loads(delete_row.old_value)["items"][0]["quantity"] == 8
