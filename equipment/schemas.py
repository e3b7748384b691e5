"""
Audit schema for registered equipment.

Specs are audited as a list of ``{spec, value}`` rows sorted by spec name, so
reordering keys in the stored dict is not a change.
"""
from audit.schema import EntitySchema, FieldKind, FieldSpec
from core.constants import EntityType, EquipmentStatus

SPEC_FIELDS = (
    FieldSpec('spec', FieldKind.TEXT, 'Spec'),
    FieldSpec('value', FieldKind.TEXT, 'Value', optional_text=True),
)


def equipment_values(equipment):
    specs = equipment.specs or {}
    return {
        'asset_number': equipment.asset_number,
        'name': equipment.name,
        'equipment_type': equipment.equipment_type,
        'brand': equipment.brand,
        'model': equipment.model,
        'serial_number': equipment.serial_number,
        'location': equipment.location,
        'assigned_to': equipment.assigned_to,
        'status': equipment.status,
        'quantity': equipment.quantity,
        'purchase_date': equipment.purchase_date,
        'warranty_end': equipment.warranty_end,
        'specs': [{'spec': key, 'value': value} for key, value in specs.items()],
    }


EQUIPMENT_SCHEMA = EntitySchema(
    EntityType.EQUIPMENT,
    label='equipment',
    reader=equipment_values,
    fields=[
        FieldSpec('asset_number', FieldKind.TEXT, 'Asset number'),
        FieldSpec('name', FieldKind.TEXT, 'Name'),
        FieldSpec('equipment_type', FieldKind.TEXT, 'Type'),
        FieldSpec('brand', FieldKind.TEXT, 'Brand', optional_text=True),
        FieldSpec('model', FieldKind.TEXT, 'Model', optional_text=True),
        FieldSpec('serial_number', FieldKind.TEXT, 'Serial number', optional_text=True),
        FieldSpec('location', FieldKind.TEXT, 'Location', optional_text=True),
        FieldSpec('assigned_to', FieldKind.TEXT, 'Assigned to', optional_text=True),
        FieldSpec('status', FieldKind.ENUM, 'Status', choices=tuple(EquipmentStatus.CHOICES),
                  default=EquipmentStatus.WORKING),
        FieldSpec('quantity', FieldKind.INTEGER, 'Quantity', default=1),
        FieldSpec('purchase_date', FieldKind.DATE, 'Purchased on'),
        FieldSpec('warranty_end', FieldKind.DATE, 'Warranty ends'),
        FieldSpec('specs', FieldKind.LIST, 'Specs', item_fields=SPEC_FIELDS, sort_key=('spec',)),
    ],
)
