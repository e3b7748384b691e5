from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.mixins import AuditedWriteMixin
from api.permissions import IsStaffOrReadOnly
from .models import InkIssue, InkProduct, InkReceipt, InkSupplier
from .serializers import (
    InkIssueSerializer,
    InkProductSerializer,
    InkReceiptSerializer,
    InkSupplierSerializer,
    IssueWriteSerializer,
    ReceiptWriteSerializer,
)
from .services import IssueService, ReceiptService


class InkSupplierViewSet(viewsets.ModelViewSet):
    """ViewSet for ink suppliers"""
    queryset = InkSupplier.objects.all().order_by('name')
    serializer_class = InkSupplierSerializer
    permission_classes = [IsAuthenticated, IsStaffOrReadOnly]


class InkProductViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the ink/toner catalogue.
    Stock levels are read-only; they change through receipts and issues.
    """
    serializer_class = InkProductSerializer
    permission_classes = [IsAuthenticated, IsStaffOrReadOnly]

    def get_queryset(self):
        queryset = InkProduct.objects.all().order_by('brand', 'model_code')

        ink_type = self.request.query_params.get('ink_type')
        if ink_type:
            queryset = queryset.filter(ink_type=ink_type)
        return queryset

    @action(detail=False, methods=['get'])
    def reorder(self, request):
        """Products at or below their reorder point"""
        from .repositories import StockRepository
        products = StockRepository().below_reorder_point()
        serializer = self.get_serializer(products, many=True)
        return Response(serializer.data)

    @action(detail=False, methods=['get'])
    def negative(self, request):
        """Products issued beyond what was received (stock below zero)"""
        from .repositories import StockRepository
        products = StockRepository().negative_stock()
        serializer = self.get_serializer(products, many=True)
        return Response(serializer.data)


class InkReceiptViewSet(AuditedWriteMixin, viewsets.ModelViewSet):
    """
    Ink receipts (stock in).
    POST creates and adds stock; PUT needs a step-up grant.
    """
    serializer_class = InkReceiptSerializer
    write_serializer_class = ReceiptWriteSerializer
    service_class = ReceiptService
    permission_classes = [IsAuthenticated, IsStaffOrReadOnly]

    def get_queryset(self):
        queryset = InkReceipt.objects.select_related('supplier').prefetch_related('items__product')

        supplier_id = self.request.query_params.get('supplier')
        if supplier_id:
            queryset = queryset.filter(supplier_id=supplier_id)
        return queryset.order_by('-received_at', '-id')


class InkIssueViewSet(AuditedWriteMixin, viewsets.ModelViewSet):
    """
    Ink issues (consumption, stock out).
    POST creates and takes stock; PUT needs a step-up grant.
    """
    serializer_class = InkIssueSerializer
    write_serializer_class = IssueWriteSerializer
    service_class = IssueService
    permission_classes = [IsAuthenticated, IsStaffOrReadOnly]

    def get_queryset(self):
        queryset = InkIssue.objects.prefetch_related('items__product')

        department = self.request.query_params.get('department')
        if department:
            queryset = queryset.filter(department__iexact=department)
        return queryset.order_by('-issued_at', '-id')
