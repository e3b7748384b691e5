"""
Audit Log Serializers
"""

from dataclasses import asdict

from rest_framework import serializers
from audit.history import format_audit_field_label, format_audit_value
from audit.models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    """
    Serializer for AuditLog model.

    Read-only: Audit logs cannot be created/updated via API.
    """

    field_label = serializers.SerializerMethodField()
    old_display = serializers.SerializerMethodField()
    new_display = serializers.SerializerMethodField()

    class Meta:
        model = AuditLog
        fields = [
            'id',
            'table_name',
            'record_id',
            'action',
            'field_name',
            'field_label',
            'old_value',
            'new_value',
            'old_display',
            'new_display',
            'changed_by',
            'changed_by_name',
            'user_email',
            'reason',
            'metadata',
            'changed_at',
        ]
        read_only_fields = fields  # All fields are read-only

    def get_field_label(self, obj):
        return format_audit_field_label(obj.table_name, obj.field_name)

    def get_old_display(self, obj):
        return format_audit_value(obj.table_name, obj.field_name, obj.old_value)

    def get_new_display(self, obj):
        return format_audit_value(obj.table_name, obj.field_name, obj.new_value)


class AuditEntrySerializer(serializers.Serializer):
    """
    Serializer for resolved history entries (audit.history.AuditEntry).
    """

    id = serializers.IntegerField()
    table_name = serializers.CharField()
    record_id = serializers.CharField()
    action = serializers.CharField()
    field_name = serializers.CharField(allow_null=True)
    field_label = serializers.CharField()
    old_value = serializers.CharField(allow_null=True)
    new_value = serializers.CharField(allow_null=True)
    old_display = serializers.CharField()
    new_display = serializers.CharField()
    changed_by = serializers.CharField(allow_null=True)
    changed_by_name = serializers.CharField()
    changed_at = serializers.DateTimeField()
    reason = serializers.CharField(allow_null=True)

    def to_representation(self, instance):
        if not isinstance(instance, dict):
            instance = asdict(instance)
        return super().to_representation(instance)
