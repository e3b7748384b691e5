from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from core.constants import Defaults, InkType


class InkSupplier(models.Model):
    """Vendor ink and toner is bought from"""
    name = models.CharField(max_length=200, unique=True)
    contact_name = models.CharField(max_length=200, blank=True)
    phone = models.CharField(max_length=30, blank=True)
    email = models.EmailField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = "Ink Supplier"
        verbose_name_plural = "Ink Suppliers"

    def __str__(self):
        return self.name


class InkProduct(models.Model):
    """
    Ink / toner catalogue entry and its running stock counter.

    stock_quantity is denormalized: it equals the sum of all signed deltas
    applied by receipts and issues. It is never floored at zero; a negative
    value signals over-issuance. version increases with every stock movement.
    """
    brand = models.CharField(max_length=100)
    model_code = models.CharField(max_length=100)
    ink_type = models.CharField(max_length=10, choices=InkType.CHOICES, default=InkType.INK)
    description = models.CharField(max_length=255, blank=True)
    sku = models.CharField(max_length=100, unique=True, null=True, blank=True)
    unit = models.CharField(max_length=30, default=Defaults.UNIT)
    stock_quantity = models.IntegerField(default=0)
    reorder_point = models.PositiveIntegerField(default=0)
    version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['brand', 'model_code']
        unique_together = ['brand', 'model_code', 'ink_type']
        verbose_name = "Ink Product"
        verbose_name_plural = "Ink Products"

    def __str__(self):
        return f"{self.brand} {self.model_code} ({self.get_ink_type_display()})"

    @property
    def needs_reorder(self):
        return self.stock_quantity <= self.reorder_point


class StockDocument(models.Model):
    """Common header fields of receipts and issues"""
    document_no = models.CharField(max_length=50, unique=True)
    note = models.TextField(null=True, blank=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0,
                                       validators=[MinValueValidator(0)])
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                   null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class StockLine(models.Model):
    """Common fields of receipt and issue lines"""
    product = models.ForeignKey(InkProduct, on_delete=models.PROTECT, related_name='+')
    quantity = models.PositiveIntegerField()
    unit = models.CharField(max_length=30, default=Defaults.UNIT)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=0,
                                     validators=[MinValueValidator(0)])
    line_total = models.DecimalField(max_digits=14, decimal_places=2, default=0)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        """Keep line_total = quantity * unit_price"""
        self.line_total = self.quantity * self.unit_price
        super().save(*args, **kwargs)


class InkReceipt(StockDocument):
    """Goods received from a supplier - increases stock"""
    supplier = models.ForeignKey(InkSupplier, on_delete=models.PROTECT, related_name='receipts')
    received_at = models.DateField()

    class Meta:
        ordering = ['-received_at', '-id']
        verbose_name = "Ink Receipt"
        verbose_name_plural = "Ink Receipts"

    def __str__(self):
        return f"Receipt {self.document_no} ({self.received_at})"


class InkReceiptItem(StockLine):
    receipt = models.ForeignKey(InkReceipt, on_delete=models.CASCADE, related_name='items')

    class Meta:
        ordering = ['id']


class InkIssue(StockDocument):
    """Ink handed out to a department - decreases stock"""
    department = models.CharField(max_length=100)
    requested_by = models.CharField(max_length=150, blank=True)
    issued_at = models.DateField()

    class Meta:
        ordering = ['-issued_at', '-id']
        verbose_name = "Ink Issue"
        verbose_name_plural = "Ink Issues"

    def __str__(self):
        return f"Issue {self.document_no} to {self.department} ({self.issued_at})"


class InkIssueItem(StockLine):
    issue = models.ForeignKey(InkIssue, on_delete=models.CASCADE, related_name='items')

    class Meta:
        ordering = ['id']
