from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from core.constants import EquipmentStatus


class Equipment(models.Model):
    """
    One registered asset (computer, printer, UPS ...).

    ``asset_number`` is stored normalized as ``<base>/<sequence>``; IT rounds
    and repair tickets refer to it through their ``equipment_code``.
    ``specs`` maps a technical spec name to its value.
    """
    asset_number = models.CharField(max_length=100, unique=True)
    name = models.CharField(max_length=200)
    equipment_type = models.CharField(max_length=100, db_index=True)
    brand = models.CharField(max_length=100, blank=True)
    model = models.CharField(max_length=100, blank=True)
    serial_number = models.CharField(max_length=100, blank=True)
    location = models.CharField(max_length=200, blank=True)
    assigned_to = models.CharField(max_length=150, blank=True)
    status = models.CharField(max_length=20, choices=EquipmentStatus.CHOICES, default=EquipmentStatus.WORKING,
                              db_index=True)
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    purchase_date = models.DateField(null=True, blank=True)
    warranty_end = models.DateField(null=True, blank=True)
    specs = models.JSONField(default=dict, blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                   null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['asset_number']
        verbose_name = "Equipment"
        verbose_name_plural = "Equipment"

    def __str__(self):
        return f"{self.asset_number} {self.name}"
