from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.mixins import AuditedWriteMixin
from api.permissions import IsStaffOrReadOnly
from maintenance.repositories import ITRoundRepository, RepairRepository
from maintenance.serializers import ITRoundSerializer, RepairTicketSerializer
from .repositories import EquipmentRepository
from .serializers import EquipmentSerializer, EquipmentWriteSerializer
from .services import EquipmentService


class EquipmentViewSet(AuditedWriteMixin, viewsets.ModelViewSet):
    """
    Equipment register.
    POST registers an asset; PUT needs a step-up grant.
    """
    serializer_class = EquipmentSerializer
    write_serializer_class = EquipmentWriteSerializer
    service_class = EquipmentService
    permission_classes = [IsAuthenticated, IsStaffOrReadOnly]

    def get_queryset(self):
        params = self.request.query_params
        return EquipmentRepository().search(
            query=params.get('search'),
            status=params.get('status'),
            equipment_type=params.get('type'),
        ).order_by('asset_number')

    @action(detail=True, methods=['get'])
    def maintenance(self, request, pk=None):
        """IT rounds and repair tickets recorded against this asset number"""
        equipment = self.get_object()
        rounds = ITRoundRepository().for_equipment(equipment.asset_number).order_by('-performed_at', '-id')
        repairs = RepairRepository().for_equipment(equipment.asset_number).order_by('-reported_at', '-id')
        return Response({
            'asset_number': equipment.asset_number,
            'it_rounds': ITRoundSerializer(rounds, many=True).data,
            'repairs': RepairTicketSerializer(repairs, many=True).data,
        })
