from datetime import timedelta

from django.utils import timezone
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.mixins import AuditedWriteMixin
from api.permissions import IsStaffOrReadOnly
from .repositories import ITRoundRepository, RepairRepository
from .serializers import (
    ITRoundSerializer,
    ITRoundWriteSerializer,
    RepairTicketSerializer,
    RepairWriteSerializer,
)
from .scheduling import DUE_SOON_DAYS
from .services import ITRoundService, RepairService


class ITRoundViewSet(AuditedWriteMixin, viewsets.ModelViewSet):
    """
    IT maintenance rounds.
    POST records a round; PUT needs a step-up grant.
    """
    serializer_class = ITRoundSerializer
    write_serializer_class = ITRoundWriteSerializer
    service_class = ITRoundService
    permission_classes = [IsAuthenticated, IsStaffOrReadOnly]

    def get_queryset(self):
        repo = ITRoundRepository()
        queryset = repo.get_queryset()

        equipment_code = self.request.query_params.get('equipment_code')
        if equipment_code:
            queryset = repo.for_equipment(equipment_code)

        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset.order_by('-performed_at', '-id')

    @action(detail=False, methods=['get'])
    def due(self, request):
        """Rounds overdue or due within the next 30 days"""
        horizon = timezone.localdate() + timedelta(days=DUE_SOON_DAYS)
        rounds = ITRoundRepository().due_by(horizon).order_by('next_due_at')
        serializer = self.get_serializer(rounds, many=True)
        return Response(serializer.data)


class RepairTicketViewSet(AuditedWriteMixin, viewsets.ModelViewSet):
    """
    Repair / replacement tickets.
    POST opens a ticket; PUT needs a step-up grant.
    """
    serializer_class = RepairTicketSerializer
    write_serializer_class = RepairWriteSerializer
    service_class = RepairService
    permission_classes = [IsAuthenticated, IsStaffOrReadOnly]

    def get_queryset(self):
        repo = RepairRepository()
        queryset = repo.get_queryset()

        equipment_code = self.request.query_params.get('equipment_code')
        if equipment_code:
            queryset = repo.for_equipment(equipment_code)

        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset.order_by('-reported_at', '-id')

    @action(detail=False, methods=['get'])
    def open(self, request):
        """Tickets not yet resolved or closed"""
        tickets = RepairRepository().open_tickets().order_by('-reported_at', '-id')
        serializer = self.get_serializer(tickets, many=True)
        return Response(serializer.data)
