from django.apps import AppConfig


class MaintenanceConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'maintenance'
    verbose_name = 'Equipment Maintenance'

    def ready(self):
        """Register IT rounds and repairs with the audit registry"""
        from audit.registry import register_entity
        from .schemas import IT_ROUND_SCHEMA, REPAIR_SCHEMA
        from .services import ITRoundService, RepairService
        register_entity(IT_ROUND_SCHEMA, ITRoundService)
        register_entity(REPAIR_SCHEMA, RepairService)
