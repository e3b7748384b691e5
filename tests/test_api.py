# tests/test_api.py - HTTP surface: create, step-up, gated update, errors
from unittest import mock

import pytest
from django.db import DatabaseError

from audit.models import AuditLog
from core.constants import EntityType, SensitiveAction
from inventory.models import InkProduct, InkReceipt, InkSupplier
from tests.conftest import PASSWORD

pytestmark = pytest.mark.django_db

RECEIPTS_URL = "/api/ink/receipts/"
STEP_UP_URL = "/api/step-up/"


def receipt_payload(supplier, product, quantity=5, **extra):
    payload = {
        "document_no": "RC-0001",
        "supplier_id": supplier.pk,
        "received_at": "2024-03-01",
        "items": [{"product_id": product.pk, "quantity": quantity, "unit_price": "350.00"}],
    }
    payload.update(extra)
    return payload


def create_receipt(client, supplier, product, quantity=5):
    response = client.post(RECEIPTS_URL, receipt_payload(supplier, product, quantity), format="json")
    assert response.status_code == 201, response.content
    return response.json()["record"]["id"]


def test_requires_authentication(api_client):
    assert api_client.get(RECEIPTS_URL).status_code == 401


def test_create_receipt(tech_client, supplier, product):
    response = tech_client.post(RECEIPTS_URL, receipt_payload(supplier, product, reason="Delivery"), format="json")

    assert response.status_code == 201
    body = response.json()
    assert body["audit"]["audited"] is True
    assert body["audit"]["action"] == "INSERT"
    assert body["record"]["items"][0]["quantity"] == 5
    product.refresh_from_db()
    assert product.stock_quantity == 5


def test_read_only_role_cannot_create(viewer, supplier, product, api_client):
    api_client.force_authenticate(user=viewer)
    response = api_client.post(RECEIPTS_URL, receipt_payload(supplier, product), format="json")
    assert response.status_code == 403


def test_validation_errors_use_error_envelope(tech_client, supplier, product):
    response = tech_client.post(RECEIPTS_URL, receipt_payload(supplier, product, quantity=0), format="json")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ITEMS_REQUIRED"


def test_update_without_step_up_is_forbidden(tech_client, supplier, product):
    receipt_id = create_receipt(tech_client, supplier, product)

    response = tech_client.put(f"{RECEIPTS_URL}{receipt_id}/", receipt_payload(supplier, product, 8), format="json")

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "STEP_UP_REQUIRED"
    product.refresh_from_db()
    assert product.stock_quantity == 5


def test_edit_through_step_up(tech_client, supplier, product):
    receipt_id = create_receipt(tech_client, supplier, product)

    step_up = tech_client.post(STEP_UP_URL, {
        "entity_type": EntityType.INK_RECEIPT,
        "record_id": receipt_id,
        "action": SensitiveAction.EDIT,
        "password": PASSWORD,
        "reason": "Recount",
    }, format="json")
    assert step_up.status_code == 200, step_up.content
    token = step_up.json()["token"]
    assert step_up.json()["draft"]["document_no"] == "RC-0001"

    payload = receipt_payload(supplier, product, 8, step_up_token=token)
    response = tech_client.put(f"{RECEIPTS_URL}{receipt_id}/", payload, format="json")

    assert response.status_code == 200, response.content
    assert [change["field"] for change in response.json()["audit"]["changes"]] == ["items"]
    product.refresh_from_db()
    assert product.stock_quantity == 8

    replay = tech_client.put(f"{RECEIPTS_URL}{receipt_id}/", payload, format="json")
    assert replay.status_code == 403


def test_wrong_password_is_forbidden(tech_client, supplier, product):
    receipt_id = create_receipt(tech_client, supplier, product)

    response = tech_client.post(STEP_UP_URL, {
        "entity_type": EntityType.INK_RECEIPT,
        "record_id": receipt_id,
        "action": SensitiveAction.DELETE,
        "password": "nope",
        "reason": "Duplicate",
    }, format="json")

    assert response.status_code == 403
    assert response.json()["error"]["kind"] == "auth_error"
    assert InkReceipt.objects.filter(pk=receipt_id).exists()


def test_delete_through_step_up(tech_client, supplier, product):
    receipt_id = create_receipt(tech_client, supplier, product)

    response = tech_client.post(STEP_UP_URL, {
        "entity_type": EntityType.INK_RECEIPT,
        "record_id": receipt_id,
        "action": SensitiveAction.DELETE,
        "password": PASSWORD,
        "reason": "Duplicate",
    }, format="json")

    assert response.status_code == 200
    assert response.json()["deleted"] is True
    assert response.json()["audited"] is True
    product.refresh_from_db()
    assert product.stock_quantity == 0


def test_delete_method_is_not_allowed(tech_client, supplier, product):
    receipt_id = create_receipt(tech_client, supplier, product)
    assert tech_client.delete(f"{RECEIPTS_URL}{receipt_id}/").status_code == 405


def test_missing_record_is_404(tech_client):
    response = tech_client.post(STEP_UP_URL, {
        "entity_type": EntityType.INK_RECEIPT,
        "record_id": "12345",
        "action": SensitiveAction.VIEW_HISTORY,
        "password": PASSWORD,
    }, format="json")
    assert response.status_code == 404


def test_viewer_may_view_history_but_not_delete(viewer, tech_client, api_client, supplier, product):
    receipt_id = create_receipt(tech_client, supplier, product)
    api_client.force_authenticate(user=viewer)
    request = {
        "entity_type": EntityType.INK_RECEIPT,
        "record_id": receipt_id,
        "password": PASSWORD,
        "reason": "Look",
    }

    history = api_client.post(STEP_UP_URL, dict(request, action=SensitiveAction.VIEW_HISTORY), format="json")
    assert history.status_code == 200
    assert len(history.json()["entries"]) == 1
    assert history.json()["entries"][0]["field_label"] == "Entire record"

    delete = api_client.post(STEP_UP_URL, dict(request, action=SensitiveAction.DELETE), format="json")
    assert delete.status_code == 403


def test_unaudited_create_is_reported_as_saved(tech_client, supplier, product):
    with mock.patch.object(AuditLog.objects, "bulk_create", side_effect=DatabaseError("audit db down")):
        response = tech_client.post(RECEIPTS_URL, receipt_payload(supplier, product), format="json")

    assert response.status_code == 200
    assert response.json()["audited"] is False
    assert response.json()["warning"]
    assert InkReceipt.objects.count() == 1


def test_audit_log_listing_is_admin_only(tech_client, admin_client, supplier, product):
    create_receipt(tech_client, supplier, product)

    assert tech_client.get("/api/audit/logs/").status_code == 403

    response = admin_client.get("/api/audit/logs/", {"action": "insert"})
    assert response.status_code == 200
    assert response.json()["count"] == 1
    assert response.json()["results"][0]["action"] == "INSERT"


@pytest.mark.parametrize("params", [
    {"table_name": EntityType.INK_RECEIPT},
    {"record_id": "1"},
    {"table_name": EntityType.INK_RECEIPT, "record_id": "1"},
])
def test_record_history_is_not_readable_from_the_listing(admin_client, tech_client, supplier, product, params):
    record_id = create_receipt(tech_client, supplier, product)
    if "record_id" in params:
        params = dict(params, record_id=str(record_id))

    response = admin_client.get("/api/audit/logs/", params)

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "STEP_UP_REQUIRED"

    recent = admin_client.get("/api/audit/logs/recent/", params)
    assert recent.status_code == 403


def test_record_history_is_readable_after_step_up(admin_client, tech_client, supplier, product):
    record_id = create_receipt(tech_client, supplier, product)

    response = admin_client.post(STEP_UP_URL, {
        "entity_type": EntityType.INK_RECEIPT,
        "record_id": record_id,
        "action": SensitiveAction.VIEW_HISTORY,
        "password": PASSWORD,
    }, format="json")

    assert response.status_code == 200
    assert len(response.json()["entries"]) == 1


@pytest.mark.parametrize("limit", ["0", "-5", "lots"])
def test_user_activity_rejects_bad_limit(admin_client, limit):
    response = admin_client.get("/api/audit/logs/user_activity/", {"limit": limit})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_LIMIT"


def test_user_activity_lists_own_rows(admin_user, admin_client, supplier, product):
    create_receipt(admin_client, supplier, product)

    response = admin_client.get("/api/audit/logs/user_activity/", {"limit": "10"})

    assert response.status_code == 200
    assert [row["changed_by"] for row in response.json()] == [str(admin_user.pk)]


def test_product_used_by_a_receipt_cannot_be_deleted(tech_client, supplier, product):
    create_receipt(tech_client, supplier, product)

    response = tech_client.delete(f"/api/ink/products/{product.pk}/")

    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "RECORD_IN_USE"
    assert error["details"]["used_by"] == ["Ink Receipt Item"]
    assert InkProduct.objects.filter(pk=product.pk).exists()


def test_supplier_with_receipts_cannot_be_deleted(tech_client, supplier, product):
    create_receipt(tech_client, supplier, product)

    response = tech_client.delete(f"/api/ink/suppliers/{supplier.pk}/")

    assert response.status_code == 409
    assert response.json()["error"]["kind"] == "conflict"
    assert InkSupplier.objects.filter(pk=supplier.pk).exists()


def test_unused_product_can_be_deleted(tech_client, toner):
    response = tech_client.delete(f"/api/ink/products/{toner.pk}/")

    assert response.status_code == 204
    assert not InkProduct.objects.filter(pk=toner.pk).exists()


def test_it_round_create(tech_client):
    response = tech_client.post("/api/it-rounds/", {
        "equipment_code": "PC-ACC-01",
        "performed_at": "2024-01-31",
        "frequency_months": 3,
        "activities": {"virus_scan": True},
    }, format="json")

    assert response.status_code == 201, response.content
    assert response.json()["record"]["next_due_at"] == "2024-04-30"
    assert response.json()["record"]["frequency_display"] == "Every 3 months"
