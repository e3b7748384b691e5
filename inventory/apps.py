"""
Inventory app configuration
"""

from django.apps import AppConfig


class InventoryConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'inventory'
    verbose_name = 'Ink & Toner Inventory'

    def ready(self):
        """Register stock documents with the audit registry"""
        from audit.registry import register_entity
        from .schemas import ISSUE_SCHEMA, RECEIPT_SCHEMA
        from .services import IssueService, ReceiptService

        register_entity(RECEIPT_SCHEMA, ReceiptService)
        register_entity(ISSUE_SCHEMA, IssueService)
