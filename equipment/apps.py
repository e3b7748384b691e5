from django.apps import AppConfig


class EquipmentConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'equipment'
    verbose_name = 'Equipment Register'

    def ready(self):
        """Register equipment with the audit registry"""
        from audit.registry import register_entity
        from .schemas import EQUIPMENT_SCHEMA
        from .services import EquipmentService
        register_entity(EQUIPMENT_SCHEMA, EquipmentService)
