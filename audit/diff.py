"""
Field-level difference between two drafts of the same record.
"""
from dataclasses import dataclass
from typing import List, Optional

from core.exceptions import ValidationError
from .drafts import Draft, serialize_draft
from .registry import get_schema
from .schema import EntitySchema

ENTIRE_RECORD = 'entire_record'


@dataclass(frozen=True)
class FieldChange:
    field: str
    old_value: Optional[str]
    new_value: Optional[str]

    def as_dict(self):
        return {'field': self.field, 'old_value': self.old_value, 'new_value': self.new_value}


def compute_changes(before: Optional[Draft], after: Optional[Draft],
                    schema: EntitySchema = None) -> List[FieldChange]:
    """
    Compare two drafts and return the changed fields in declared field order.

    - both missing: no changes
    - ``before`` missing (creation): one ``entire_record`` change with the new snapshot
    - ``after`` missing (deletion): one ``entire_record`` change with the old snapshot
    - otherwise one change per scalar field whose canonical string differs, and
      at most one change per list field (compared as one sorted, serialized list)
    """
    if before is None and after is None:
        return []

    if before is None:
        return [FieldChange(ENTIRE_RECORD, None, serialize_draft(after))]

    if after is None:
        return [FieldChange(ENTIRE_RECORD, serialize_draft(before), None)]

    if before.entity_type != after.entity_type:
        raise ValidationError(
            message="Cannot compare drafts of different entity types",
            code="DRAFT_TYPE_MISMATCH",
            details={"before": before.entity_type, "after": after.entity_type}
        )

    schema = schema or get_schema(after.entity_type)
    changes = []
    for spec in schema.fields:
        old_value = spec.canonical(before.get(spec.name))
        new_value = spec.canonical(after.get(spec.name))
        if old_value == new_value:
            continue
        changes.append(FieldChange(spec.name, old_value, new_value))
    return changes
