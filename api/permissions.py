"""
Role-based permissions for the equipment registry API
"""
from rest_framework import permissions

from core.constants import UserRole
from users.services import has_role


class IsStaffOrReadOnly(permissions.BasePermission):
    """
    Everyone signed in may read; only technicians and admins may write.
    """

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return has_role(request.user, UserRole.STAFF)


class IsAdminRole(permissions.BasePermission):
    """
    Permission to allow Super Admin and Admin roles
    """

    def has_permission(self, request, view):
        return has_role(request.user, UserRole.ADMINS)
