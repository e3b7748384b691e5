"""
Audit Logging Helper Functions

Provides the single write path for audit rows.
"""

from typing import Iterable, List, Optional
import logging

from django.db import DatabaseError, transaction
from django.utils import timezone

from audit.models import AuditLog
from common.logging_config import get_request_id
from core.exceptions import AuditWriteError

logger = logging.getLogger(__name__)


def actor_fields(actor) -> dict:
    """Identity columns for an audit row; tolerates a missing actor"""
    if actor is None:
        return {'changed_by': None, 'changed_by_name': 'System', 'user_email': None}
    display_name = getattr(actor, 'display_name', None) or getattr(actor, 'username', '') or str(actor.pk)
    return {
        'changed_by': str(actor.pk),
        'changed_by_name': display_name[:150],
        'user_email': getattr(actor, 'email', None) or None,
    }


def log_changes(table_name, record_id, action, changes: Iterable, actor, reason: Optional[str],
                metadata=None) -> List[AuditLog]:
    """
    Append one audit row per field change, all stamped with the same time.

    Args:
        table_name: Audited table (entity type)
        record_id: ID of the record
        action: INSERT, UPDATE or DELETE
        changes: FieldChange objects from the diff engine
        actor: User who performed the mutation
        reason: Justification (stored verbatim, blank becomes NULL)
        metadata: Additional context data (optional)

    Returns:
        The created AuditLog rows (empty when there was nothing to record)

    Raises:
        AuditWriteError: if the rows could not be stored
    """
    changes = list(changes)
    if not changes:
        logger.info(f"Audit: nothing to record for {table_name} #{record_id} ({action})")
        return []

    changed_at = timezone.now()
    context = dict(metadata or {})
    context.setdefault('request_id', get_request_id())
    identity = actor_fields(actor)

    rows = [
        AuditLog(
            table_name=table_name,
            record_id=str(record_id),
            action=action,
            field_name=change.field,
            old_value=change.old_value,
            new_value=change.new_value,
            reason=(reason or '').strip() or None,
            metadata=context,
            changed_at=changed_at,
            **identity
        )
        for change in changes
    ]

    try:
        with transaction.atomic():
            created = AuditLog.objects.bulk_create(rows)
    except DatabaseError as e:
        logger.error(
            f"Failed to write audit log for {table_name} #{record_id} ({action}): {e}",
            exc_info=True
        )
        raise AuditWriteError(
            details={
                'table_name': table_name,
                'record_id': str(record_id),
                'action': action,
                'fields': [change.field for change in changes],
            }
        ) from e

    logger.info(
        f"Audit: {identity['changed_by_name']} - {action} - {table_name} #{record_id} "
        f"({len(created)} field(s))"
    )
    return created


def get_record_audit_trail(table_name, record_id, limit=None):
    """
    Get the raw audit trail for a record, newest first.

    Returns:
        QuerySet of AuditLog entries
    """
    queryset = AuditLog.objects.for_record(table_name, record_id).newest_first()
    if limit:
        return queryset[:limit]
    return queryset


def get_user_activity(actor_id, limit=100):
    """
    Get recent audit rows written by a user.

    Returns:
        QuerySet of AuditLog entries
    """
    return AuditLog.objects.for_actor(actor_id).recent(limit)
