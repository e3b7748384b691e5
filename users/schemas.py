"""
Audit schema for user accounts. Passwords and login timestamps are not audited.
"""
from audit.schema import EntitySchema, FieldKind, FieldSpec
from core.constants import EntityType, UserRole

ACTIVE_CHOICES = (('true', 'Active'), ('false', 'Inactive'))


def user_values(user):
    return {
        'username': user.username,
        'full_name': user.full_name,
        'email': user.email,
        'role': user.role,
        'department': user.department,
        'phone': user.phone,
        'is_active': user.is_active,
    }


USER_SCHEMA = EntitySchema(
    EntityType.USER,
    label='user',
    reader=user_values,
    fields=[
        FieldSpec('username', FieldKind.TEXT, 'Username'),
        FieldSpec('full_name', FieldKind.TEXT, 'Full name', optional_text=True),
        FieldSpec('email', FieldKind.TEXT, 'Email', optional_text=True),
        FieldSpec('role', FieldKind.ENUM, 'Role', choices=tuple(UserRole.CHOICES), default=UserRole.USER),
        FieldSpec('department', FieldKind.TEXT, 'Department', optional_text=True),
        FieldSpec('phone', FieldKind.TEXT, 'Phone', optional_text=True),
        FieldSpec('is_active', FieldKind.BOOLEAN, 'Account', choices=ACTIVE_CHOICES, default=True),
    ],
)
