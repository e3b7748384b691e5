"""
Audit Log Model

IMMUTABLE: Audit logs cannot be edited or deleted after creation.
Purpose: durable record of who changed which field of which record, when and why.
"""

from django.db import models
from django.core.exceptions import PermissionDenied
from django.utils import timezone

from core.constants import AuditAction


# ============================================================================
# CUSTOM MANAGER AND QUERYSET
# ============================================================================

class AuditLogQuerySet(models.QuerySet):
    """Custom queryset for audit logs with filtering helpers"""

    def for_record(self, table_name, record_id):
        """Filter logs for a specific record"""
        return self.filter(table_name=table_name, record_id=str(record_id))

    def for_actor(self, actor_id):
        """Filter logs written by a specific actor"""
        return self.filter(changed_by=str(actor_id))

    def for_action(self, action):
        """Filter logs for a specific action"""
        return self.filter(action=action)

    def newest_first(self):
        return self.order_by('-changed_at', '-id')

    def recent(self, limit=100):
        """Get recent logs"""
        return self.newest_first()[:limit]

    def update(self, **kwargs):
        raise PermissionDenied("Audit logs are immutable and cannot be modified after creation.")

    def delete(self):
        raise PermissionDenied("Audit logs are immutable and cannot be deleted.")


class AuditLogManager(models.Manager.from_queryset(AuditLogQuerySet)):
    """Custom manager for audit logs"""


# ============================================================================
# AUDIT LOG MODEL
# ============================================================================

class AuditLog(models.Model):
    """
    One row per changed field per mutation.

    A whole-record change (creation or deletion) is a single row whose
    ``field_name`` is ``entire_record`` and whose value holds the serialized
    snapshot. Values are stored as text exactly as the diff engine produced them.
    """

    ACTION_INSERT = AuditAction.INSERT
    ACTION_UPDATE = AuditAction.UPDATE
    ACTION_DELETE = AuditAction.DELETE

    table_name = models.CharField(
        max_length=64,
        db_index=True,
        help_text="Audited table, e.g. ink_receipts"
    )

    record_id = models.CharField(
        max_length=64,
        db_index=True,
        help_text="Primary key of the audited record, as text"
    )

    action = models.CharField(
        max_length=10,
        choices=AuditAction.CHOICES,
        db_index=True,
        help_text="Type of mutation"
    )

    field_name = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        help_text="Changed field, or entire_record"
    )

    old_value = models.TextField(null=True, blank=True)
    new_value = models.TextField(null=True, blank=True)

    changed_by = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        db_index=True,
        help_text="Identifier of the acting user"
    )

    changed_by_name = models.CharField(
        max_length=150,
        blank=True,
        help_text="Display name of the acting user at the time of the change"
    )

    user_email = models.EmailField(null=True, blank=True)

    reason = models.TextField(
        null=True,
        blank=True,
        help_text="Justification entered by the user"
    )

    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Additional context data (request id, stock movements)"
    )

    changed_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="When the change was committed"
    )

    objects = AuditLogManager()

    class Meta:
        verbose_name = "Audit Log"
        verbose_name_plural = "Audit Logs"
        ordering = ['-changed_at', '-id']
        indexes = [
            models.Index(fields=['table_name', 'record_id', '-changed_at']),
            models.Index(fields=['changed_by', '-changed_at']),
            models.Index(fields=['action', '-changed_at']),
        ]

    def __str__(self):
        actor = self.changed_by_name or self.changed_by or 'System'
        return f"{actor} - {self.action} - {self.table_name} #{self.record_id} ({self.field_name}) - {self.changed_at}"

    def save(self, *args, **kwargs):
        """
        Override save to enforce immutability.
        Only allow creation, not updates.
        """
        if self.pk is not None:
            raise PermissionDenied(
                "Audit logs are immutable and cannot be modified after creation."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """
        Override delete to prevent deletion.
        """
        raise PermissionDenied(
            "Audit logs are immutable and cannot be deleted."
        )

    @property
    def actor_display(self):
        return self.changed_by_name or self.changed_by or "System"
