from rest_framework import serializers


class AuditedWriteSerializer(serializers.Serializer):
    """
    Fields shared by every audited write.

    ``reason`` is optional on create; updates take the reason captured by the
    step-up gate and must carry the grant token it issued.
    """
    reason = serializers.CharField(required=False, allow_blank=True, default='')
    step_up_token = serializers.CharField(required=False, allow_blank=True, default='')
