# tests/test_stepup_gate.py - gate state machine and single-use grants
from unittest import mock

import pytest

from core.constants import EntityType, SensitiveAction
from core.exceptions import AuthError, NotFoundError, PermissionDeniedError, ValidationError
from inventory.services import ReceiptService
from stepup.gate import GateState, StepUpGate
from stepup.grants import consume_grant, issue_grant
from stepup.services import StepUpService
from tests.conftest import PASSWORD

pytestmark = pytest.mark.django_db


def accepting(user, secret):
    return None


def rejecting(user, secret):
    raise AuthError("Incorrect password")


def test_open_waits_for_confirmation(technician):
    gate = StepUpGate(technician, SensitiveAction.EDIT, accepting)
    assert gate.state == GateState.IDLE
    gate.open(object())
    assert gate.state == GateState.AWAITING_CONFIRMATION


def test_correct_secret_and_reason_authorize(technician):
    gate = StepUpGate(technician, SensitiveAction.DELETE, accepting)
    gate.open(object())
    assert gate.submit("pw", "  Duplicate  ") == "Duplicate"
    assert gate.authorized
    assert gate.secret == ""


@pytest.mark.parametrize("action", [SensitiveAction.EDIT, SensitiveAction.DELETE])
def test_blank_reason_keeps_waiting_without_verifying(technician, action):
    verifier = mock.Mock()
    gate = StepUpGate(technician, action, verifier)
    gate.open(object())

    with pytest.raises(ValidationError) as exc:
        gate.submit("pw", "   ")

    assert exc.value.code == "REASON_REQUIRED"
    assert gate.state == GateState.AWAITING_CONFIRMATION
    verifier.assert_not_called()


def test_missing_secret_keeps_waiting(technician):
    verifier = mock.Mock()
    gate = StepUpGate(technician, SensitiveAction.VIEW_HISTORY, verifier)
    gate.open(object())

    with pytest.raises(ValidationError) as exc:
        gate.submit("", None)

    assert exc.value.code == "CREDENTIAL_REQUIRED"
    assert gate.state == GateState.AWAITING_CONFIRMATION
    verifier.assert_not_called()


def test_history_needs_no_reason(technician):
    gate = StepUpGate(technician, SensitiveAction.VIEW_HISTORY, accepting)
    gate.open(object())
    gate.submit("pw", None)
    assert gate.authorized


def test_wrong_secret_rejects_and_allows_retry(technician):
    gate = StepUpGate(technician, SensitiveAction.EDIT, rejecting)
    gate.open(object())

    with pytest.raises(AuthError):
        gate.submit("wrong", "Fix typo")
    assert gate.state == GateState.REJECTED
    assert gate.secret == ""

    gate.verifier = accepting
    gate.submit("right", "Fix typo")
    assert gate.authorized


def test_verifier_receives_the_acting_user(technician):
    verifier = mock.Mock()
    gate = StepUpGate(technician, SensitiveAction.EDIT, verifier)
    gate.open(object())
    gate.submit("pw", "Fix typo")
    verifier.assert_called_once_with(technician, "pw")


def test_cancel_discards_input(technician):
    gate = StepUpGate(technician, SensitiveAction.EDIT, accepting)
    gate.open(object())
    gate.submit("pw", "Fix typo")
    gate.cancel()
    assert gate.state == GateState.IDLE
    assert gate.reason == ""
    assert gate.record is None


def test_submit_before_open_is_rejected(technician):
    gate = StepUpGate(technician, SensitiveAction.EDIT, accepting)
    with pytest.raises(ValidationError) as exc:
        gate.submit("pw", "Fix typo")
    assert exc.value.code == "GATE_NOT_OPEN"


def test_unknown_action_is_rejected(technician):
    with pytest.raises(ValidationError):
        StepUpGate(technician, "purge", accepting)


def test_vanished_record_is_reported_before_verifying(technician):
    with pytest.raises(NotFoundError):
        StepUpService().request_sensitive_action(
            technician, EntityType.INK_RECEIPT, 424242, SensitiveAction.DELETE, "anything", "Gone",
        )


def test_unknown_entity_type_is_rejected(technician):
    with pytest.raises(ValidationError) as exc:
        StepUpService().request_sensitive_action(
            technician, "equipment", 1, SensitiveAction.DELETE, PASSWORD, "Gone",
        )
    assert exc.value.code == "UNKNOWN_ENTITY_TYPE"


def test_old_password_is_rejected_after_change(admin_user, receipt_data):
    created = ReceiptService().create(receipt_data(), admin_user)
    admin_user.set_password("a-different-password")
    admin_user.save()

    with pytest.raises(AuthError):
        StepUpService().request_sensitive_action(
            admin_user, EntityType.INK_RECEIPT, created.record_id, SensitiveAction.EDIT, PASSWORD, "Fix",
        )


def test_grant_is_single_use(technician):
    grant = issue_grant(technician, EntityType.INK_RECEIPT, 7, SensitiveAction.EDIT, "Fix typo")

    redeemed = consume_grant(grant.token, technician, EntityType.INK_RECEIPT, "7", SensitiveAction.EDIT)
    assert redeemed.reason == "Fix typo"

    with pytest.raises(PermissionDeniedError) as exc:
        consume_grant(grant.token, technician, EntityType.INK_RECEIPT, 7, SensitiveAction.EDIT)
    assert exc.value.code == "STEP_UP_GRANT_INVALID"


def test_grant_is_bound_to_user_and_record(technician, admin_user):
    grant = issue_grant(technician, EntityType.INK_RECEIPT, 7, SensitiveAction.EDIT, "Fix typo")

    with pytest.raises(PermissionDeniedError) as exc:
        consume_grant(grant.token, technician, EntityType.INK_RECEIPT, 8, SensitiveAction.EDIT)
    assert exc.value.code == "STEP_UP_GRANT_MISMATCH"

    with pytest.raises(PermissionDeniedError):
        consume_grant(grant.token, admin_user, EntityType.INK_RECEIPT, 7, SensitiveAction.EDIT)


def test_missing_token_requires_step_up(technician):
    with pytest.raises(PermissionDeniedError) as exc:
        consume_grant("", technician, EntityType.INK_RECEIPT, 7, SensitiveAction.EDIT)
    assert exc.value.code == "STEP_UP_REQUIRED"
