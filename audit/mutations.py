"""
Audited mutation orchestration.

submit_mutation runs a domain mutation (with any stock reconciliation) in one
database transaction, diffs the before/after drafts and appends the audit rows.
The audit write happens after the mutation committed: if it fails, the data
change stays and AuditWriteError is raised carrying the committed result.
"""
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union

from django.db import transaction

from core.constants import AuditAction
from core.exceptions import AuditWriteError, ValidationError
from core.services import BaseService
from .diff import FieldChange, compute_changes
from .drafts import Draft
from .helpers import log_changes
from .registry import get_schema

DEFAULT_REASONS = {
    AuditAction.INSERT: "Created {label}",
    AuditAction.UPDATE: "Updated {label}",
    AuditAction.DELETE: "Deleted {label}",
}


@dataclass
class MutationResult:
    """Outcome of one audited mutation"""
    entity_type: str
    record_id: Optional[str]
    action: str
    changes: List[FieldChange] = field(default_factory=list)
    audit_entry_ids: List[int] = field(default_factory=list)
    audited: bool = True
    warning: Optional[str] = None
    instance: object = None

    @property
    def ok(self):
        return True

    def as_dict(self):
        return {
            'ok': self.ok,
            'entity_type': self.entity_type,
            'record_id': self.record_id,
            'action': self.action,
            'changes': [change.as_dict() for change in self.changes],
            'audited': self.audited,
            'warning': self.warning,
        }


def infer_action(before: Optional[Draft], after: Optional[Draft]) -> str:
    if before is None and after is None:
        raise ValidationError(
            message="A mutation needs a before or an after draft",
            code="EMPTY_MUTATION"
        )
    if before is None:
        return AuditAction.INSERT
    if after is None:
        return AuditAction.DELETE
    return AuditAction.UPDATE


class MutationService(BaseService):
    """Runs domain mutations and records them in the audit log"""

    def submit_mutation(self, entity_type: str, record_id, before: Union[Draft, Callable, None],
                        after: Optional[Draft], reason: Optional[str], actor, action: str = None,
                        mutate: Callable = None, metadata: dict = None) -> MutationResult:
        """
        Apply ``mutate`` atomically, then diff and audit.

        Args:
            entity_type: Audited table name
            record_id: Record ID, or None for a creation (taken from ``mutate``)
            before: Draft before the change (None for creation), or a
                callable returning it once ``mutate`` has run; updates and
                deletions pass a callable so the draft is the row state read
                under ``mutate``'s lock
            after: Draft after the change (None for deletion)
            reason: Justification; a default is used when blank
            actor: Acting user
            action: INSERT / UPDATE / DELETE; inferred from the drafts when omitted
            mutate: Callable performing the domain change; for creations it
                returns the created instance (or its id)
            metadata: Extra context stored with every audit row

        Raises:
            ValidationError, ReconciliationError, NotFoundError: from the
                mutation itself; nothing was committed
            AuditWriteError: the mutation committed but was not audited
        """
        schema = get_schema(entity_type)
        inferred = infer_action(before, after)
        if action is not None and action != inferred:
            raise ValidationError(
                message=f"{action} does not match the submitted drafts ({inferred})",
                code="ACTION_MISMATCH",
                details={'action': action, 'inferred': inferred}
            )
        action = inferred

        self._check_draft(entity_type, after)
        instance = None
        if mutate is not None:
            with transaction.atomic():
                instance = mutate()
                if callable(before):
                    before = before()
                self._check_draft(entity_type, before)
            if record_id is None and instance is not None:
                record_id = getattr(instance, 'pk', instance)
        else:
            if callable(before):
                before = before()
            self._check_draft(entity_type, before)

        if record_id is None:
            raise ValidationError(message="Record id is required", code="RECORD_ID_REQUIRED")

        record_id = str(record_id)
        reason = (reason or '').strip() or DEFAULT_REASONS[action].format(label=schema.label)
        changes = compute_changes(before, after, schema=schema)
        result = MutationResult(
            entity_type=entity_type,
            record_id=record_id,
            action=action,
            changes=changes,
            instance=instance,
        )

        try:
            entries = log_changes(
                table_name=entity_type,
                record_id=record_id,
                action=action,
                changes=changes,
                actor=actor,
                reason=reason,
                metadata=metadata,
            )
        except AuditWriteError as e:
            result.audited = False
            result.warning = e.message
            e.result = result
            self.log_error(
                "Mutation committed without audit trail",
                error=e,
                entity_type=entity_type,
                record_id=record_id,
                action=action,
            )
            raise

        result.audit_entry_ids = [entry.pk for entry in entries]
        self.log_info(
            f"{action} {entity_type} #{record_id}",
            fields=[change.field for change in changes],
            actor_id=getattr(actor, 'pk', None),
        )
        return result

    @staticmethod
    def _check_draft(entity_type: str, draft: Optional[Draft]):
        if draft is not None and draft.entity_type != entity_type:
            raise ValidationError(
                message=f"Draft for {draft.entity_type} submitted as {entity_type}",
                code="DRAFT_TYPE_MISMATCH"
            )
