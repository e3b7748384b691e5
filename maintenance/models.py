from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from core.constants import ITRoundFrequency, ITRoundStatus, RepairStatus


class ITRound(models.Model):
    """
    A periodic IT maintenance round on one piece of equipment.

    ``activities`` maps task keys (see IT_ROUND_TASKS) to done/not done.
    """
    equipment_code = models.CharField(max_length=100, blank=True, db_index=True)
    performed_at = models.DateField()
    next_due_at = models.DateField(null=True, blank=True)
    frequency_months = models.PositiveSmallIntegerField(choices=ITRoundFrequency.CHOICES, null=True, blank=True)
    technician = models.CharField(max_length=150, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=ITRoundStatus.CHOICES, default=ITRoundStatus.COMPLETED)
    activities = models.JSONField(default=dict, blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                   null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-performed_at', '-id']
        verbose_name = "IT Round"
        verbose_name_plural = "IT Rounds"

    def __str__(self):
        return f"IT round {self.equipment_code or '-'} ({self.performed_at})"


class RepairTicket(models.Model):
    """Repair or part replacement on one piece of equipment"""
    equipment_code = models.CharField(max_length=100, db_index=True)
    reported_at = models.DateField()
    status = models.CharField(max_length=20, choices=RepairStatus.CHOICES, default=RepairStatus.OPEN)
    cost = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    description = models.TextField(null=True, blank=True)
    parts_replaced = models.JSONField(default=list, blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                   null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-reported_at', '-id']
        verbose_name = "Repair Ticket"
        verbose_name_plural = "Repair Tickets"

    def __str__(self):
        return f"Repair {self.equipment_code} ({self.get_status_display()})"
