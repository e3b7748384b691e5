from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    User management.

    Roles: SUPER_ADMIN and ADMIN manage catalogue data and can view audit logs,
    TECHNICIAN records IT rounds and repairs, USER has read access.
    """
    list_display = ['username', 'full_name', 'email', 'role', 'department', 'is_active', 'is_staff']
    list_filter = ['role', 'is_active', 'is_staff', 'department']
    search_fields = ['username', 'full_name', 'email', 'phone']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Registry profile', {
            'fields': ('full_name', 'role', 'department', 'phone'),
        }),
    )

    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Registry profile', {
            'fields': ('full_name', 'email', 'role', 'department', 'phone'),
        }),
    )
