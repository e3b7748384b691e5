from django.contrib import admin
from .models import ITRound, RepairTicket


class AuditedRecordAdmin(admin.ModelAdmin):
    """Browse-only: changes go through the API so they are audited"""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(ITRound)
class ITRoundAdmin(AuditedRecordAdmin):
    list_display = ['equipment_code', 'performed_at', 'next_due_at', 'frequency_months', 'technician', 'status']
    list_filter = ['status', 'frequency_months']
    search_fields = ['equipment_code', 'technician', 'notes']
    date_hierarchy = 'performed_at'


@admin.register(RepairTicket)
class RepairTicketAdmin(AuditedRecordAdmin):
    list_display = ['equipment_code', 'reported_at', 'status', 'cost']
    list_filter = ['status']
    search_fields = ['equipment_code', 'description']
    date_hierarchy = 'reported_at'
