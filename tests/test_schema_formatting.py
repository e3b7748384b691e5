# tests/test_schema_formatting.py - display formatting of stored audit values
import json

import pytest

from audit.diff import ENTIRE_RECORD
from audit.history import format_audit_field_label, format_audit_value
from core.constants import EntityType


@pytest.mark.parametrize("entity, field, raw, expected", [
    (EntityType.INK_RECEIPT, "received_at", "2024-03-01", "01 Mar 2024"),
    (EntityType.REPAIR, "cost", "1234.5", "1,234.50"),
    (EntityType.IT_ROUND, "frequency_months", "3", "Every 3 months"),
    (EntityType.IT_ROUND, "status", "completed", "Completed"),
    (EntityType.REPAIR, "status", "WAITING_PARTS", "Waiting for parts"),
    (EntityType.IT_ROUND, "activities.virus_scan", "true", "Done"),
    (EntityType.IT_ROUND, "activities.virus_scan", "false", "Not done"),
    (EntityType.INK_RECEIPT, "document_no", "RC-0001", "RC-0001"),
])
def test_values_are_formatted_by_field_kind(entity, field, raw, expected):
    assert format_audit_value(entity, field, raw) == expected


def test_list_values_render_one_line_per_element():
    raw = json.dumps([
        {"product_id": 2, "quantity": 1, "unit_price": "90", "unit": "box"},
        {"product_id": 7, "quantity": 5, "unit_price": "350", "unit": "piece"},
    ])
    shown = format_audit_value(EntityType.INK_RECEIPT, "items", raw)
    assert shown.splitlines() == [
        "Product: 2, Quantity: 1, Unit price: 90.00, Unit: box",
        "Product: 7, Quantity: 5, Unit price: 350.00, Unit: piece",
    ]


def test_entire_record_is_pretty_printed():
    shown = format_audit_value(EntityType.INK_RECEIPT, ENTIRE_RECORD, '{"document_no":"RC-0001"}')
    assert json.loads(shown) == {"document_no": "RC-0001"}
    assert "\n" in shown


@pytest.mark.parametrize("raw", [None, ""])
def test_empty_values_render_as_dash(raw):
    assert format_audit_value(EntityType.INK_RECEIPT, "note", raw) == "-"


@pytest.mark.parametrize("entity, field, raw", [
    (EntityType.INK_RECEIPT, "received_at", "2024-13-45"),
    (EntityType.INK_RECEIPT, "received_at", "yesterday"),
    (EntityType.REPAIR, "cost", "about ten"),
    (EntityType.INK_RECEIPT, "items", "[not json"),
    (EntityType.INK_RECEIPT, ENTIRE_RECORD, "{broken"),
    ("unknown_table", "whatever", "raw text"),
    (EntityType.INK_RECEIPT, "no_such_field", "raw text"),
])
def test_malformed_values_fall_back_to_raw(entity, field, raw):
    assert format_audit_value(entity, field, raw) == raw


def test_field_labels():
    assert format_audit_field_label(EntityType.INK_RECEIPT, "received_at") == "Received on"
    assert format_audit_field_label(EntityType.IT_ROUND, "activities.dust_cleaning") == "Dust cleaning"
    assert format_audit_field_label(EntityType.INK_RECEIPT, ENTIRE_RECORD) == "Entire record"
    assert format_audit_field_label(EntityType.INK_RECEIPT, "mystery") == "mystery"
    assert format_audit_field_label(EntityType.INK_RECEIPT, None) == "Unknown field"
