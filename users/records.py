"""
User accounts as audited records.

Accounts are created and edited through the Django admin; the only sensitive
action offered here is deletion (super admins only) and reading an account's
history.
"""
from audit.records import RecordService
from core.constants import SensitiveAction, UserRole
from core.exceptions import PermissionDeniedError
from .repositories import UserRepository
from .schemas import USER_SCHEMA


class UserRecordService(RecordService):

    schema = USER_SCHEMA
    repository_class = UserRepository
    action_roles = {
        SensitiveAction.DELETE: {UserRole.SUPER_ADMIN},
        SensitiveAction.VIEW_HISTORY: UserRole.ADMINS,
    }

    def delete(self, record_id, actor, reason: str):
        if str(record_id) == str(actor.pk):
            raise PermissionDeniedError(
                message="You cannot delete your own account",
                code="CANNOT_DELETE_SELF",
                details={'record_id': str(record_id)}
            )
        return super().delete(record_id, actor, reason)

    def delete_metadata(self, record) -> dict:
        # The row is gone afterwards; keep who it was on the audit entry
        return {
            'deleted_user_email': record.email,
            'deleted_user_name': record.display_name,
        }
