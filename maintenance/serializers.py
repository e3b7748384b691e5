from rest_framework import serializers

from core.constants import IT_ROUND_TASKS, ITRoundFrequency, ITRoundStatus, RepairStatus
from core.dto import ITRoundDTO, RepairDTO
from api.serializers import AuditedWriteSerializer
from .models import ITRound, RepairTicket
from .scheduling import evaluate_due_status


class ITRoundSerializer(serializers.ModelSerializer):
    """Read serializer for IT rounds, with the derived due status"""
    frequency_display = serializers.CharField(source='get_frequency_months_display', read_only=True)
    due_status = serializers.SerializerMethodField()
    days_until_due = serializers.SerializerMethodField()

    class Meta:
        model = ITRound
        fields = [
            'id', 'equipment_code', 'performed_at', 'next_due_at', 'frequency_months',
            'frequency_display', 'technician', 'notes', 'status', 'activities',
            'due_status', 'days_until_due', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_due_status(self, obj):
        return evaluate_due_status(obj.next_due_at)[0]

    def get_days_until_due(self, obj):
        return evaluate_due_status(obj.next_due_at)[1]


class RepairTicketSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = RepairTicket
        fields = [
            'id', 'equipment_code', 'reported_at', 'status', 'status_display', 'cost',
            'description', 'parts_replaced', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class ITRoundWriteSerializer(AuditedWriteSerializer):
    equipment_code = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    performed_at = serializers.DateField()
    next_due_at = serializers.DateField(required=False, allow_null=True, default=None)
    frequency_months = serializers.ChoiceField(choices=ITRoundFrequency.CHOICES, required=False,
                                               allow_null=True, default=None)
    technician = serializers.CharField(max_length=150, required=False, allow_blank=True, allow_null=True,
                                       default=None)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    status = serializers.ChoiceField(choices=ITRoundStatus.CHOICES, required=False,
                                     default=ITRoundStatus.COMPLETED)
    activities = serializers.DictField(child=serializers.BooleanField(), required=False, default=dict)

    def validate_activities(self, value):
        known = {task for task, _ in IT_ROUND_TASKS}
        unknown = sorted(set(value) - known)
        if unknown:
            raise serializers.ValidationError(f"Unknown task(s): {', '.join(unknown)}")
        return value

    def to_dto(self) -> ITRoundDTO:
        data = self.validated_data
        return ITRoundDTO(
            equipment_code=data['equipment_code'],
            performed_at=data['performed_at'],
            next_due_at=data['next_due_at'],
            frequency_months=data['frequency_months'],
            technician=data['technician'],
            notes=data['notes'],
            status=data['status'],
            activities=dict(data['activities']),
        )


class PartSerializer(serializers.Serializer):
    part_name = serializers.CharField(max_length=200)
    part_no = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)
    unit_cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False, default=0)


class RepairWriteSerializer(AuditedWriteSerializer):
    equipment_code = serializers.CharField(max_length=100)
    reported_at = serializers.DateField()
    status = serializers.ChoiceField(choices=RepairStatus.CHOICES, required=False, default=RepairStatus.OPEN)
    cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False, default=0)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    parts_replaced = PartSerializer(many=True, required=False, default=list)

    def to_dto(self) -> RepairDTO:
        data = self.validated_data
        return RepairDTO(
            equipment_code=data['equipment_code'],
            reported_at=data['reported_at'],
            status=data['status'],
            cost=data['cost'],
            description=data['description'],
            parts_replaced=[dict(part) for part in data['parts_replaced']],
        )
