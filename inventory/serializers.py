from rest_framework import serializers

from api.serializers import AuditedWriteSerializer
from core.dto import IssueDTO, LineItemDTO, ReceiptDTO
from .models import InkIssue, InkIssueItem, InkProduct, InkReceipt, InkReceiptItem, InkSupplier


class InkSupplierSerializer(serializers.ModelSerializer):
    """Serializer for InkSupplier"""

    class Meta:
        model = InkSupplier
        fields = ['id', 'name', 'contact_name', 'phone', 'email', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']


class InkProductSerializer(serializers.ModelSerializer):
    """
    Serializer for InkProduct.

    Stock is read-only here: it only moves through receipts and issues.
    """
    needs_reorder = serializers.ReadOnlyField()

    class Meta:
        model = InkProduct
        fields = [
            'id', 'brand', 'model_code', 'ink_type', 'description', 'sku', 'unit',
            'stock_quantity', 'reorder_point', 'needs_reorder', 'version',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'stock_quantity', 'needs_reorder', 'version', 'created_at', 'updated_at']


class LineItemSerializer(serializers.Serializer):
    """Input line: product, quantity, unit price, unit"""
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=0)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False, default=0)
    unit = serializers.CharField(max_length=30, required=False, allow_blank=True, default='')

    def to_dto(self, data):
        return LineItemDTO(
            product_id=data['product_id'],
            quantity=data['quantity'],
            unit_price=data['unit_price'],
            unit=data['unit'],
        )


class _StockLineReadSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.__str__', read_only=True)

    class Meta:
        fields = ['id', 'product_id', 'product_name', 'quantity', 'unit', 'unit_price', 'line_total']
        read_only_fields = fields


class InkReceiptItemSerializer(_StockLineReadSerializer):
    class Meta(_StockLineReadSerializer.Meta):
        model = InkReceiptItem


class InkIssueItemSerializer(_StockLineReadSerializer):
    class Meta(_StockLineReadSerializer.Meta):
        model = InkIssueItem


class InkReceiptSerializer(serializers.ModelSerializer):
    """Read serializer for receipts with their lines"""
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    items = InkReceiptItemSerializer(many=True, read_only=True)

    class Meta:
        model = InkReceipt
        fields = [
            'id', 'document_no', 'supplier', 'supplier_name', 'received_at', 'total_amount',
            'note', 'items', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class InkIssueSerializer(serializers.ModelSerializer):
    """Read serializer for issues with their lines"""
    items = InkIssueItemSerializer(many=True, read_only=True)

    class Meta:
        model = InkIssue
        fields = [
            'id', 'document_no', 'department', 'requested_by', 'issued_at', 'total_amount',
            'note', 'items', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class ReceiptWriteSerializer(AuditedWriteSerializer):
    document_no = serializers.CharField(max_length=50)
    supplier_id = serializers.IntegerField()
    received_at = serializers.DateField()
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    items = LineItemSerializer(many=True)

    def to_dto(self) -> ReceiptDTO:
        data = self.validated_data
        return ReceiptDTO(
            document_no=data['document_no'],
            supplier_id=data['supplier_id'],
            received_at=data['received_at'],
            note=data['note'],
            items=[LineItemSerializer().to_dto(item) for item in data['items']],
        )


class IssueWriteSerializer(AuditedWriteSerializer):
    document_no = serializers.CharField(max_length=50)
    department = serializers.CharField(max_length=100)
    requested_by = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')
    issued_at = serializers.DateField()
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    items = LineItemSerializer(many=True)

    def to_dto(self) -> IssueDTO:
        data = self.validated_data
        return IssueDTO(
            document_no=data['document_no'],
            department=data['department'],
            requested_by=data['requested_by'],
            issued_at=data['issued_at'],
            note=data['note'],
            items=[LineItemSerializer().to_dto(item) for item in data['items']],
        )
