"""
Registry of audited entity types.

Domain apps register their schema and their record service from
``AppConfig.ready()``; the gate, the mutation engine and the history reader
look entities up here by table name.
"""
import logging
from typing import Callable, Dict

from core.exceptions import ValidationError
from .schema import EntitySchema

logger = logging.getLogger(__name__)

_schemas: Dict[str, EntitySchema] = {}
_service_factories: Dict[str, Callable] = {}


def register_entity(schema: EntitySchema, service_factory: Callable = None):
    """Register a schema and, optionally, the service class that owns its records"""
    existing = _schemas.get(schema.entity_type)
    if existing is not None and existing is not schema:
        logger.warning(f"Replacing audit schema for {schema.entity_type}")
    _schemas[schema.entity_type] = schema
    if service_factory is not None:
        _service_factories[schema.entity_type] = service_factory


def get_schema(entity_type: str) -> EntitySchema:
    try:
        return _schemas[entity_type]
    except KeyError:
        raise ValidationError(
            message=f"Unknown entity type: {entity_type}",
            code="UNKNOWN_ENTITY_TYPE",
            details={"entity_type": entity_type}
        )


def find_schema(entity_type: str):
    """Like get_schema but returns None for unknown types"""
    return _schemas.get(entity_type)


def get_record_service(entity_type: str):
    """Instantiate the service that loads, drafts and deletes records of this type"""
    get_schema(entity_type)
    factory = _service_factories.get(entity_type)
    if factory is None:
        raise ValidationError(
            message=f"Entity type {entity_type} does not support sensitive actions",
            code="UNSUPPORTED_ENTITY_TYPE",
            details={"entity_type": entity_type}
        )
    return factory()
