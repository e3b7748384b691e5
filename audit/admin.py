"""
Audit Log Admin - READ ONLY

Audit logs are immutable and cannot be edited or deleted via admin.
"""

from django.contrib import admin
from audit.history import format_audit_field_label, format_audit_value
from audit.models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """
    Read-only admin for audit logs.

    Values are shown both as stored and formatted for display.
    """

    list_display = [
        'id',
        'changed_at',
        'actor_display',
        'action',
        'table_name',
        'record_id',
        'field_label',
        'reason_short',
    ]

    list_filter = [
        'action',
        'changed_at',
    ]

    # No table or record lookups: per-record history goes through step-up
    search_fields = [
        'changed_by',
        'changed_by_name',
        'user_email',
        'reason',
    ]

    readonly_fields = [
        'table_name',
        'record_id',
        'action',
        'field_name',
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

    fieldsets = (
        ('Change', {
            'fields': ('table_name', 'record_id', 'action', 'field_name', 'reason')
        }),
        ('Values', {
            'fields': ('old_display', 'new_display', 'old_value', 'new_value')
        }),
        ('Actor', {
            'fields': ('changed_by', 'changed_by_name', 'user_email', 'changed_at')
        }),
        ('Additional Context', {
            'fields': ('metadata',),
            'classes': ('collapse',)
        }),
    )

    date_hierarchy = 'changed_at'

    ordering = ['-changed_at', '-id']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def get_actions(self, request):
        """Disable bulk actions"""
        actions = super().get_actions(request)
        if 'delete_selected' in actions:
            del actions['delete_selected']
        return actions

    @admin.display(description='Field')
    def field_label(self, obj):
        return format_audit_field_label(obj.table_name, obj.field_name)

    @admin.display(description='Old value (display)')
    def old_display(self, obj):
        return format_audit_value(obj.table_name, obj.field_name, obj.old_value)

    @admin.display(description='New value (display)')
    def new_display(self, obj):
        return format_audit_value(obj.table_name, obj.field_name, obj.new_value)

    @admin.display(description='Reason')
    def reason_short(self, obj):
        max_length = 80
        reason = obj.reason or ''
        if len(reason) > max_length:
            return f"{reason[:max_length]}..."
        return reason
