"""
Drafts: immutable canonical snapshots of a record's fields.

A Draft is what the diff engine compares. It is built explicitly from a
persisted instance or from submitted form data via the entity's schema
(see ``audit.schema``), never from live, mutating state.
"""
import json
from collections.abc import Mapping
from types import MappingProxyType

from django.core.serializers.json import DjangoJSONEncoder


class Draft(Mapping):
    """Read-only, ordered mapping of field name -> canonical value."""

    __slots__ = ('entity_type', '_values')

    def __init__(self, entity_type: str, values):
        object.__setattr__(self, 'entity_type', entity_type)
        object.__setattr__(self, '_values', MappingProxyType(dict(values)))

    def __setattr__(self, name, value):
        raise AttributeError("Draft is immutable")

    def __getitem__(self, key):
        return self._values[key]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __eq__(self, other):
        if isinstance(other, Draft):
            return self.entity_type == other.entity_type and dict(self._values) == dict(other._values)
        return NotImplemented

    def __hash__(self):
        return hash((self.entity_type, serialize_value(dict(self._values))))

    def __repr__(self):
        return f"Draft({self.entity_type!r}, {dict(self._values)!r})"

    def as_dict(self) -> dict:
        """Plain, JSON-ready copy in declared field order"""
        return {
            key: [dict(element) for element in value] if isinstance(value, tuple) else value
            for key, value in self._values.items()
        }


def serialize_value(value) -> str:
    """
    Canonical text form used for whole-record snapshots and list fields.

    Keys keep their declared order; dates and decimals go through Django's encoder.
    The same function produces what is stored in audit rows.
    """
    return json.dumps(value, cls=DjangoJSONEncoder, ensure_ascii=False, separators=(',', ':'))


def serialize_draft(draft: Draft) -> str:
    return serialize_value(draft.as_dict())


def deserialize_value(text):
    """Inverse of serialize_value; raises ValueError on malformed input"""
    return json.loads(text)
