from rest_framework import serializers

from core.constants import EquipmentStatus
from core.dto import EquipmentDTO
from api.serializers import AuditedWriteSerializer
from .models import Equipment
from .warranty import evaluate_warranty


class EquipmentSerializer(serializers.ModelSerializer):
    """Read serializer for equipment, with the derived warranty status"""
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    warranty_status = serializers.SerializerMethodField()
    warranty_days_left = serializers.SerializerMethodField()

    class Meta:
        model = Equipment
        fields = [
            'id', 'asset_number', 'name', 'equipment_type', 'brand', 'model', 'serial_number',
            'location', 'assigned_to', 'status', 'status_display', 'quantity', 'purchase_date',
            'warranty_end', 'warranty_status', 'warranty_days_left', 'specs',
            'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_warranty_status(self, obj):
        return evaluate_warranty(obj.warranty_end)[0]

    def get_warranty_days_left(self, obj):
        return evaluate_warranty(obj.warranty_end)[1]


class EquipmentWriteSerializer(AuditedWriteSerializer):
    asset_number = serializers.CharField(max_length=100)
    name = serializers.CharField(max_length=200)
    equipment_type = serializers.CharField(max_length=100)
    brand = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    model = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    serial_number = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    location = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    assigned_to = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')
    status = serializers.ChoiceField(choices=EquipmentStatus.CHOICES, required=False,
                                     default=EquipmentStatus.WORKING)
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)
    purchase_date = serializers.DateField(required=False, allow_null=True, default=None)
    warranty_end = serializers.DateField(required=False, allow_null=True, default=None)
    specs = serializers.DictField(child=serializers.CharField(allow_blank=True), required=False, default=dict)

    def to_dto(self) -> EquipmentDTO:
        data = self.validated_data
        return EquipmentDTO(
            asset_number=data['asset_number'],
            name=data['name'],
            equipment_type=data['equipment_type'],
            brand=data['brand'],
            model=data['model'],
            serial_number=data['serial_number'],
            location=data['location'],
            assigned_to=data['assigned_to'],
            status=data['status'],
            quantity=data['quantity'],
            purchase_date=data['purchase_date'],
            warranty_end=data['warranty_end'],
            specs=dict(data['specs']),
        )
