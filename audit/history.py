"""
Audit history for one record, resolved and formatted for display.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
import logging

from users.services import resolve_display_names
from .diff import ENTIRE_RECORD
from .helpers import get_record_audit_trail
from .registry import find_schema
from .schema import format_snapshot

logger = logging.getLogger(__name__)

UNKNOWN_FIELD_LABEL = "Unknown field"
ENTIRE_RECORD_LABEL = "Entire record"
UNKNOWN_ACTOR = "Unknown user"


@dataclass(frozen=True)
class AuditEntry:
    id: int
    table_name: str
    record_id: str
    action: str
    field_name: Optional[str]
    field_label: str
    old_value: Optional[str]
    new_value: Optional[str]
    old_display: str
    new_display: str
    changed_by: Optional[str]
    changed_by_name: str
    changed_at: datetime
    reason: Optional[str]


def format_audit_field_label(entity_type: str, field_name: Optional[str]) -> str:
    if not field_name:
        return UNKNOWN_FIELD_LABEL
    if field_name == ENTIRE_RECORD:
        return ENTIRE_RECORD_LABEL
    schema = find_schema(entity_type)
    spec = schema.field(field_name) if schema else None
    return spec.label if spec else field_name


def format_audit_value(entity_type: str, field_name: Optional[str], raw: Optional[str]) -> str:
    """
    Display text for a stored audit value.

    Pure and total: unknown entity types or fields and malformed stored
    values fall back to the raw string.
    """
    if raw is None or raw == "":
        return "-"
    if field_name == ENTIRE_RECORD:
        return format_snapshot(raw)
    schema = find_schema(entity_type)
    spec = schema.field(field_name) if schema and field_name else None
    if spec is None:
        return raw
    return spec.format(raw)


def fetch_history(table_name: str, record_id) -> List[AuditEntry]:
    """
    All audit rows of a record, newest first, with actor names resolved.

    Actor ids are resolved in one batch lookup; ids without a profile keep the
    name captured when the row was written, or the raw id.
    """
    rows = list(get_record_audit_trail(table_name, record_id))
    actor_ids = {row.changed_by for row in rows if row.changed_by}
    names = resolve_display_names(actor_ids) if actor_ids else {}

    entries = []
    for row in rows:
        if row.changed_by and row.changed_by in names:
            actor_name = names[row.changed_by]
        else:
            actor_name = row.changed_by_name or row.changed_by or UNKNOWN_ACTOR
        entries.append(AuditEntry(
            id=row.pk,
            table_name=row.table_name,
            record_id=row.record_id,
            action=row.action,
            field_name=row.field_name,
            field_label=format_audit_field_label(row.table_name, row.field_name),
            old_value=row.old_value,
            new_value=row.new_value,
            old_display=format_audit_value(row.table_name, row.field_name, row.old_value),
            new_display=format_audit_value(row.table_name, row.field_name, row.new_value),
            changed_by=row.changed_by,
            changed_by_name=actor_name,
            changed_at=row.changed_at,
            reason=row.reason,
        ))

    logger.debug(f"Loaded {len(entries)} audit entries for {table_name} #{record_id}")
    return entries
