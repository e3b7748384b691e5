from django.apps import AppConfig


class UsersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'users'
    verbose_name = 'Users'

    def ready(self):
        """Register user accounts with the audit registry"""
        from audit.registry import register_entity
        from .records import UserRecordService
        from .schemas import USER_SCHEMA
        register_entity(USER_SCHEMA, UserRecordService)
