from django.contrib import admin

from maintenance.admin import AuditedRecordAdmin
from .models import Equipment


@admin.register(Equipment)
class EquipmentAdmin(AuditedRecordAdmin):
    list_display = ['asset_number', 'name', 'equipment_type', 'location', 'status', 'warranty_end']
    list_filter = ['status', 'equipment_type']
    search_fields = ['asset_number', 'name', 'serial_number']
