"""
Step-up authentication gate.

Before a sensitive action (edit, delete, view history) runs, the acting user
must confirm their own password and, for edit and delete, give a reason.

    IDLE -> AWAITING_CONFIRMATION -> VERIFYING -> AUTHORIZED | REJECTED

A REJECTED gate may be submitted again. cancel() returns to IDLE and drops
everything that was entered.
"""
import logging

from core.constants import SensitiveAction
from core.exceptions import AuthError, ValidationError
from core.validators import CredentialValidator, ReasonValidator

logger = logging.getLogger('stepup')


class GateState:
    IDLE = 'IDLE'
    AWAITING_CONFIRMATION = 'AWAITING_CONFIRMATION'
    VERIFYING = 'VERIFYING'
    AUTHORIZED = 'AUTHORIZED'
    REJECTED = 'REJECTED'


class StepUpGate:
    """
    One confirmation dialog for one user and one sensitive action.

    ``verifier`` is called as ``verifier(user, secret)`` and raises AuthError
    when the secret is wrong.
    """

    def __init__(self, user, action, verifier):
        if action not in dict(SensitiveAction.CHOICES):
            raise ValidationError(
                message=f"Unknown sensitive action: {action}",
                code="UNKNOWN_ACTION",
                details={'action': action}
            )
        self.user = user
        self.action = action
        self.verifier = verifier
        self.state = GateState.IDLE
        self.record = None
        self.secret = ''
        self.reason = ''

    @property
    def authorized(self):
        return self.state == GateState.AUTHORIZED

    def open(self, record):
        self.record = record
        self.secret = ''
        self.reason = ''
        self.state = GateState.AWAITING_CONFIRMATION

    def submit(self, secret, reason=None):
        """
        Verify the secret and capture the reason.

        Raises:
            ValidationError: gate not open, secret missing, or reason missing
                for edit/delete; the gate keeps waiting for input
            AuthError: wrong secret; the gate is REJECTED and may be retried
        """
        if self.state not in (GateState.AWAITING_CONFIRMATION, GateState.REJECTED):
            raise ValidationError(
                message=f"Cannot submit while the gate is {self.state}",
                code="GATE_NOT_OPEN",
                details={'state': self.state}
            )

        self.state = GateState.AWAITING_CONFIRMATION
        secret = CredentialValidator.validate_secret(secret)
        reason = ReasonValidator.validate_reason(self.action, reason)

        self.secret = secret
        self.reason = reason
        self.state = GateState.VERIFYING
        try:
            self.verifier(self.user, secret)
        except AuthError:
            self.secret = ''
            self.state = GateState.REJECTED
            logger.warning(f"Step-up rejected | Context: user_id={self.user.pk} action={self.action}")
            raise

        self.secret = ''
        self.state = GateState.AUTHORIZED
        logger.info(f"Step-up authorized | Context: user_id={self.user.pk} action={self.action}")
        return self.reason

    def cancel(self):
        self.record = None
        self.secret = ''
        self.reason = ''
        self.state = GateState.IDLE
