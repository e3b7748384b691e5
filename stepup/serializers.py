from rest_framework import serializers

from audit.serializers import AuditEntrySerializer
from core.constants import SensitiveAction


class StepUpRequestSerializer(serializers.Serializer):
    """
    Confirmation for a sensitive action.

    Password and reason are checked by the gate, not here, so that a missing
    value is reported with the same error codes as any other caller gets.
    """
    entity_type = serializers.CharField(max_length=64)
    record_id = serializers.CharField(max_length=64)
    action = serializers.ChoiceField(choices=SensitiveAction.CHOICES)
    password = serializers.CharField(required=False, allow_blank=True, default='',
                                     trim_whitespace=False, write_only=True)
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')


class StepUpOutcomeSerializer(serializers.Serializer):
    action = serializers.CharField()
    entity_type = serializers.CharField()
    record_id = serializers.CharField()

    def to_representation(self, outcome):
        data = super().to_representation(outcome)
        if outcome.action == SensitiveAction.EDIT:
            data['token'] = outcome.grant.token
            data['draft'] = outcome.draft
            data['reason'] = outcome.reason
        elif outcome.action == SensitiveAction.DELETE:
            data['deleted'] = outcome.deleted
            data['audited'] = outcome.result.audited
            data['warning'] = outcome.result.warning
        else:
            data['entries'] = AuditEntrySerializer(outcome.entries, many=True).data
        return data
