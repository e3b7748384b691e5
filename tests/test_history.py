# tests/test_history.py - audit history ordering and actor name resolution
from datetime import timedelta

import pytest
from django.utils import timezone

from audit.diff import ENTIRE_RECORD
from audit.history import fetch_history
from audit.models import AuditLog
from core.constants import AuditAction, EntityType

pytestmark = pytest.mark.django_db


def add_row(changed_by, name="", minutes_ago=0, field="note", record_id="1"):
    return AuditLog.objects.create(
        table_name=EntityType.INK_RECEIPT,
        record_id=record_id,
        action=AuditAction.UPDATE,
        field_name=field,
        old_value=None,
        new_value="x",
        changed_by=changed_by,
        changed_by_name=name,
        reason="test",
        changed_at=timezone.now() - timedelta(minutes=minutes_ago),
    )


def test_rows_are_newest_first_with_id_tiebreak():
    now = timezone.now()
    first = AuditLog.objects.create(table_name=EntityType.INK_RECEIPT, record_id="1", action=AuditAction.INSERT,
                                    field_name=ENTIRE_RECORD, new_value="{}", changed_at=now)
    second = AuditLog.objects.create(table_name=EntityType.INK_RECEIPT, record_id="1", action=AuditAction.UPDATE,
                                     field_name="note", new_value="x", changed_at=now)
    older = add_row(None, minutes_ago=10)

    entries = fetch_history(EntityType.INK_RECEIPT, 1)

    assert [entry.id for entry in entries] == [second.pk, first.pk, older.pk]


def test_only_rows_of_the_record_are_returned():
    add_row(None, record_id="1")
    add_row(None, record_id="2")
    assert len(fetch_history(EntityType.INK_RECEIPT, "1")) == 1


def test_actor_names_resolve_in_one_query(technician, admin_user, django_assert_num_queries):
    add_row(str(technician.pk), minutes_ago=3)
    add_row(str(admin_user.pk), minutes_ago=2)
    add_row(str(technician.pk), minutes_ago=1)

    # one query for the rows, one for the names
    with django_assert_num_queries(2):
        entries = fetch_history(EntityType.INK_RECEIPT, 1)

    assert [entry.changed_by_name for entry in entries] == ["Somchai K.", "Registry Admin", "Somchai K."]


def test_renamed_user_shows_current_name(technician):
    add_row(str(technician.pk), name="Old Name")
    technician.full_name = "Somchai Kittisak"
    technician.save()

    assert fetch_history(EntityType.INK_RECEIPT, 1)[0].changed_by_name == "Somchai Kittisak"


def test_unresolved_actor_falls_back_to_snapshot_then_id():
    add_row("999", name="Former Staff", minutes_ago=1)
    add_row("legacy-uuid")
    add_row(None, minutes_ago=2)

    names = [entry.changed_by_name for entry in fetch_history(EntityType.INK_RECEIPT, 1)]

    assert names == ["legacy-uuid", "Former Staff", "Unknown user"]


def test_entries_carry_display_values():
    row = AuditLog.objects.create(table_name=EntityType.INK_RECEIPT, record_id="1", action=AuditAction.UPDATE,
                                  field_name="received_at", old_value="2024-03-01", new_value=None)

    entry = fetch_history(EntityType.INK_RECEIPT, 1)[0]

    assert entry.id == row.pk
    assert entry.field_label == "Received on"
    assert entry.old_display == "01 Mar 2024"
    assert entry.new_display == "-"
