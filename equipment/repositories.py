"""
Equipment repository - Data access layer for registered equipment.
"""
from typing import Optional

from django.db.models import Q, QuerySet

from core.repositories import BaseRepository
from .models import Equipment


class EquipmentRepository(BaseRepository[Equipment]):
    """Repository for Equipment"""

    def __init__(self):
        super().__init__(Equipment)

    def asset_number_taken(self, asset_number: str, exclude_id=None) -> bool:
        queryset = self.get_all(asset_number__iexact=asset_number)
        if exclude_id is not None:
            queryset = queryset.exclude(pk=exclude_id)
        return queryset.exists()

    def asset_numbers_with_base(self, base: str) -> QuerySet:
        return self.get_all(asset_number__istartswith=f"{base}/").values_list('asset_number', flat=True)

    def search(self, query: Optional[str] = None, status: Optional[str] = None,
               equipment_type: Optional[str] = None) -> QuerySet[Equipment]:
        queryset = self.get_all()
        if query:
            queryset = queryset.filter(Q(asset_number__icontains=query) | Q(name__icontains=query))
        if status:
            queryset = queryset.filter(status=status)
        if equipment_type:
            queryset = queryset.filter(equipment_type__iexact=equipment_type)
        return queryset
