"""
Repository pattern implementation.
Abstracts data access and provides a clean interface for domain services.
"""
from typing import Generic, TypeVar
from django.db.models import QuerySet, Model
import logging

from core.exceptions import NotFoundError

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=Model)


class BaseRepository(Generic[T]):
    """
    Base repository providing common CRUD operations.
    Follows Repository pattern for data access abstraction.
    """

    def __init__(self, model: type[T]):
        self.model = model

    def get_by_id_or_raise(self, id, lock: bool = False, **filters) -> T:
        """Get a single instance by ID or raise NotFoundError"""
        try:
            queryset = self.model.objects.filter(id=id, **filters)
        except (TypeError, ValueError):
            raise NotFoundError(resource_type=self.model.__name__, resource_id=id)
        if lock:
            queryset = queryset.select_for_update()
        instance = queryset.first()
        if instance is None:
            raise NotFoundError(resource_type=self.model.__name__, resource_id=id)
        return instance

    def get_all(self, **filters) -> QuerySet[T]:
        """Get all instances matching filters"""
        return self.model.objects.filter(**filters)

    def create(self, **kwargs) -> T:
        """Create a new instance"""
        return self.model.objects.create(**kwargs)

    def update(self, instance: T, **kwargs) -> T:
        """Update an existing instance"""
        for key, value in kwargs.items():
            setattr(instance, key, value)
        instance.save()
        return instance

    def delete(self, instance: T) -> None:
        """Delete an instance"""
        instance.delete()
        logger.debug(f"Deleted {self.model.__name__} #{instance.pk}")

    def get_queryset(self) -> QuerySet[T]:
        """Get base queryset for custom queries"""
        return self.model.objects.all()
