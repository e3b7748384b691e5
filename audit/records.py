"""
Base service for audited records.

A record service owns one entity type: it loads records for the step-up gate,
drafts them through the entity's schema and runs create / update / delete
through MutationService. Plain rows use the flow here as is; stock documents
override the mutations to move stock as well.
"""
from audit.drafts import Draft
from audit.mutations import MutationResult, MutationService
from core.constants import SensitiveAction, UserRole
from core.exceptions import PermissionDeniedError, ValidationError
from core.services import BaseService
from users.services import has_role


class RecordService(BaseService):
    """
    Shared create / update / delete flow for audited rows.

    Subclasses set ``schema`` and ``repository_class`` and implement ``clean``.
    ``action_roles`` lists who may run each sensitive action; ``None`` means
    any signed-in user. Actions missing from it are not offered.
    """

    schema = None
    repository_class = None
    action_roles = {
        SensitiveAction.EDIT: UserRole.STAFF,
        SensitiveAction.DELETE: UserRole.STAFF,
        SensitiveAction.VIEW_HISTORY: None,
    }

    def __init__(self, mutations: MutationService = None):
        super().__init__()
        self.repo = self.repository_class()
        self.mutations = mutations or MutationService()

    @property
    def entity_type(self):
        return self.schema.entity_type

    # ------------------------------------------------------------------
    # Record access used by the step-up gate
    # ------------------------------------------------------------------

    def get_record(self, record_id):
        return self.repo.get_by_id_or_raise(record_id)

    def build_draft(self, instance) -> Draft:
        return self.schema.draft_from_instance(instance)

    def check_action_allowed(self, user, action) -> None:
        """
        Raises:
            ValidationError: the action is not offered for this entity type
            PermissionDeniedError: the user's role may not run it
        """
        if action not in self.action_roles:
            raise ValidationError(
                message=f"{action} is not available for {self.schema.label}",
                code="UNSUPPORTED_ACTION",
                details={'entity_type': self.entity_type, 'action': action}
            )
        roles = self.action_roles[action]
        if roles is not None and not has_role(user, roles):
            raise PermissionDeniedError(
                message=f"Your role cannot {action.replace('_', ' ')} {self.schema.label} records",
                code="ROLE_NOT_ALLOWED",
                details={'entity_type': self.entity_type, 'action': action}
            )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def clean(self, data) -> dict:
        """Model field values for ``data``; raises ValidationError"""
        raise NotImplementedError

    def validate_unique(self, fields: dict, exclude_id=None) -> None:
        """Raises ValidationError when ``fields`` clash with another stored row"""

    def create(self, data, actor, reason: str = None) -> MutationResult:
        fields = self.clean(data)
        self.validate_unique(fields)
        after = self._draft(fields)

        def mutate():
            return self.repo.create(created_by=actor, **fields)

        return self.mutations.submit_mutation(self.entity_type, None, None, after, reason, actor, mutate=mutate)

    def update(self, record_id, data, actor, reason: str) -> MutationResult:
        record = self.get_record(record_id)
        fields = self.clean(data)
        self.validate_unique(fields, exclude_id=record.pk)
        after = self._draft(fields)
        state = {}

        def mutate():
            locked = self.repo.get_by_id_or_raise(record.pk, lock=True)
            state['before'] = self.build_draft(locked)
            return self.repo.update(locked, **fields)

        return self.mutations.submit_mutation(self.entity_type, record.pk, lambda: state['before'], after,
                                              reason, actor, mutate=mutate)

    def delete(self, record_id, actor, reason: str) -> MutationResult:
        record = self.get_record(record_id)
        state = {}

        def mutate():
            locked = self.repo.get_by_id_or_raise(record.pk, lock=True)
            state['before'] = self.build_draft(locked)
            self.repo.delete(locked)

        return self.mutations.submit_mutation(self.entity_type, record.pk, lambda: state['before'], None,
                                              reason, actor, mutate=mutate, metadata=self.delete_metadata(record))

    def delete_metadata(self, record) -> dict:
        """Extra context stored on the DELETE audit row"""
        return {}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _draft(self, fields: dict) -> Draft:
        # Unsaved instance, read through the same schema reader as stored rows
        return self.schema.draft_from_instance(self.repo.model(**fields))

    @staticmethod
    def _require(value, field_name, label):
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(
                message=f"{label} is required",
                code="FIELD_REQUIRED",
                details={'field': field_name}
            )
        return value.strip() if isinstance(value, str) else value

    @staticmethod
    def _choice(value, choices, field_name, label):
        allowed = [key for key, _ in choices]
        if value not in allowed:
            raise ValidationError(
                message=f"{label} must be one of {', '.join(str(key) for key in allowed)}",
                code="INVALID_CHOICE",
                details={'field': field_name, 'value': value}
            )
        return value
