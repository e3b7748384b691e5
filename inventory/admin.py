from django.contrib import admin
from .models import InkIssue, InkIssueItem, InkProduct, InkReceipt, InkReceiptItem, InkSupplier


@admin.register(InkSupplier)
class InkSupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact_name', 'phone', 'email', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name', 'contact_name', 'email']


@admin.register(InkProduct)
class InkProductAdmin(admin.ModelAdmin):
    list_display = ['brand', 'model_code', 'ink_type', 'stock_quantity', 'reorder_point', 'unit']
    list_filter = ['ink_type', 'brand']
    search_fields = ['brand', 'model_code', 'sku']
    readonly_fields = ['stock_quantity', 'version', 'created_at', 'updated_at']


class ReadOnlyLineInline(admin.TabularInline):
    fields = ['product', 'quantity', 'unit', 'unit_price', 'line_total']
    readonly_fields = fields
    extra = 0
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class InkReceiptItemInline(ReadOnlyLineInline):
    model = InkReceiptItem


class InkIssueItemInline(ReadOnlyLineInline):
    model = InkIssueItem


class StockDocumentAdmin(admin.ModelAdmin):
    """
    Receipts and issues are browse-only here: changing them moves stock and
    must go through the API so it is reconciled and audited.
    """

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(InkReceipt)
class InkReceiptAdmin(StockDocumentAdmin):
    list_display = ['document_no', 'supplier', 'received_at', 'total_amount', 'created_by']
    list_filter = ['supplier', 'received_at']
    search_fields = ['document_no', 'note']
    inlines = [InkReceiptItemInline]


@admin.register(InkIssue)
class InkIssueAdmin(StockDocumentAdmin):
    list_display = ['document_no', 'department', 'requested_by', 'issued_at', 'created_by']
    list_filter = ['department', 'issued_at']
    search_fields = ['document_no', 'department', 'requested_by']
    inlines = [InkIssueItemInline]
