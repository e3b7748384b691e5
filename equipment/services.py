"""
Equipment services - Business logic for the equipment register.
"""
from audit.records import RecordService
from core.constants import EquipmentStatus, SensitiveAction, UserRole
from core.dto import EquipmentDTO
from core.exceptions import ValidationError
from .asset_numbers import normalize_asset_number
from .repositories import EquipmentRepository
from .schemas import EQUIPMENT_SCHEMA


class EquipmentService(RecordService):
    """Registered equipment; only a super admin may remove an asset"""

    schema = EQUIPMENT_SCHEMA
    repository_class = EquipmentRepository
    action_roles = {
        SensitiveAction.EDIT: UserRole.STAFF,
        SensitiveAction.DELETE: {UserRole.SUPER_ADMIN},
        SensitiveAction.VIEW_HISTORY: None,
    }

    def clean(self, data: EquipmentDTO) -> dict:
        raw_number = self._require(data.asset_number, 'asset_number', 'Asset number')
        base = raw_number.rpartition('/')[0] or raw_number
        asset_number = normalize_asset_number(raw_number, self.repo.asset_numbers_with_base(base.strip()))
        if not asset_number.base:
            raise ValidationError(
                message="Asset number needs a prefix before the sequence",
                code="INVALID_ASSET_NUMBER",
                details={'field': 'asset_number', 'value': raw_number}
            )

        quantity = data.quantity if data.quantity is not None else 1
        if int(quantity) < 1:
            raise ValidationError(
                message="Quantity must be at least 1",
                code="INVALID_QUANTITY",
                details={'field': 'quantity'}
            )

        if data.purchase_date and data.warranty_end and data.warranty_end < data.purchase_date:
            raise ValidationError(
                message="Warranty cannot end before the purchase date",
                code="INVALID_WARRANTY",
                details={'field': 'warranty_end'}
            )

        return {
            'asset_number': asset_number.formatted,
            'name': self._require(data.name, 'name', 'Name'),
            'equipment_type': self._require(data.equipment_type, 'equipment_type', 'Type'),
            'brand': (data.brand or '').strip(),
            'model': (data.model or '').strip(),
            'serial_number': (data.serial_number or '').strip(),
            'location': (data.location or '').strip(),
            'assigned_to': (data.assigned_to or '').strip(),
            'status': self._choice(data.status or EquipmentStatus.WORKING, EquipmentStatus.CHOICES,
                                   'status', 'Status'),
            'quantity': int(quantity),
            'purchase_date': data.purchase_date,
            'warranty_end': data.warranty_end,
            'specs': self.clean_specs(data.specs),
        }

    def validate_unique(self, fields: dict, exclude_id=None) -> None:
        if self.repo.asset_number_taken(fields['asset_number'], exclude_id=exclude_id):
            raise ValidationError(
                message=f"Asset number {fields['asset_number']} is already registered",
                code="DUPLICATE_ASSET_NUMBER",
                details={'field': 'asset_number', 'value': fields['asset_number']}
            )

    @staticmethod
    def clean_specs(specs) -> dict:
        """Trimmed spec names; blank names are dropped"""
        cleaned = {}
        for key, value in (specs or {}).items():
            key = str(key).strip()
            if key:
                cleaned[key] = '' if value is None else str(value).strip()
        return cleaned
