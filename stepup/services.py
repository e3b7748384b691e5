"""
Step-up service - runs the gate for one request and acts on its outcome.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from audit.history import AuditEntry, fetch_history
from audit.mutations import MutationResult
from audit.registry import get_record_service
from core.constants import SensitiveAction
from core.exceptions import AuditWriteError
from core.services import BaseService
from users.services import CredentialVerifier
from .gate import StepUpGate
from .grants import StepUpGrant, issue_grant


@dataclass
class StepUpOutcome:
    """What an authorized sensitive action produced"""
    action: str
    entity_type: str
    record_id: str
    reason: str
    grant: Optional[StepUpGrant] = None
    draft: Optional[dict] = None
    result: Optional[MutationResult] = None
    entries: List[AuditEntry] = field(default_factory=list)

    @property
    def deleted(self):
        return self.action == SensitiveAction.DELETE and self.result is not None


class StepUpService(BaseService):
    """
    Verifies the acting user and then performs the sensitive action.

    - edit: issues a single-use grant and returns the record's current draft
    - delete: deletes the record with the given reason
    - view_history: returns the record's audit history
    """

    gate_class = StepUpGate

    def __init__(self, verifier: CredentialVerifier = None):
        super().__init__()
        self.verifier = verifier or CredentialVerifier()

    def request_sensitive_action(self, user, entity_type, record_id, action, secret,
                                 reason=None, request=None) -> StepUpOutcome:
        """
        Raises:
            ValidationError: unknown entity/action, missing password or reason
            PermissionDeniedError: the user's role may not run this action here
            NotFoundError: the record no longer exists (checked before verifying)
            AuthError: wrong password; nothing was changed
            ReconciliationError: the delete could not reverse its stock
        """
        record_service = get_record_service(entity_type)
        gate = self.gate_class(
            user, action,
            verifier=lambda who, password: self.verifier.verify(who, password, request=request),
        )
        record_service.check_action_allowed(user, action)
        record = record_service.get_record(record_id)
        gate.open(record)
        reason = gate.submit(secret, reason)

        outcome = StepUpOutcome(
            action=action,
            entity_type=entity_type,
            record_id=str(record.pk),
            reason=reason,
        )

        if action == SensitiveAction.EDIT:
            outcome.grant = issue_grant(user, entity_type, record.pk, action, reason)
            outcome.draft = record_service.build_draft(record).as_dict()
        elif action == SensitiveAction.DELETE:
            try:
                outcome.result = record_service.delete(record.pk, user, reason)
            except AuditWriteError as e:
                outcome.result = e.result
        else:
            outcome.entries = fetch_history(entity_type, record.pk)

        self.log_info(
            "Sensitive action completed",
            action=action,
            entity_type=entity_type,
            record_id=outcome.record_id,
            user_id=user.pk,
        )
        return outcome
