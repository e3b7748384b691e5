"""
Audit Log API Views

Provides a read-only activity feed of audit logs for administrators.
The history of a single record is not served here: it is only returned by
the step-up endpoint (action ``view_history``) after re-authentication.
"""

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.permissions import IsAdminRole
from audit.models import AuditLog
from audit.serializers import AuditLogSerializer
from core.exceptions import PermissionDeniedError, ValidationError

# Query parameters that would narrow the feed down to one record's history
RECORD_SCOPED_PARAMS = ('table_name', 'record_id')

MAX_ACTIVITY_LIMIT = 500


class AuditLogViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only ViewSet for audit logs.

    Filters (query params): action, changed_by.
    """

    serializer_class = AuditLogSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get_queryset(self):
        scoped = [name for name in RECORD_SCOPED_PARAMS if self.request.query_params.get(name)]
        if scoped:
            raise PermissionDeniedError(
                message="Record history requires step-up confirmation (POST /api/step-up/ with action view_history)",
                code="STEP_UP_REQUIRED",
                details={'params': scoped}
            )

        queryset = AuditLog.objects.all()

        action_filter = self.request.query_params.get('action')
        if action_filter:
            queryset = queryset.for_action(action_filter.upper())

        changed_by = self.request.query_params.get('changed_by')
        if changed_by:
            queryset = queryset.for_actor(changed_by)

        return queryset.newest_first()

    @action(detail=False, methods=['get'])
    def recent(self, request):
        """
        Get recent audit logs (last 50).

        Example: GET /api/audit/logs/recent/
        """
        queryset = self.get_queryset().recent(50)
        serializer = self.get_serializer(queryset, many=True)
        return Response({
            'recent_logs': serializer.data,
            'count': len(serializer.data)
        })

    @action(detail=False, methods=['get'])
    def user_activity(self, request):
        """
        Get activity of one user (defaults to the current user).

        Example: GET /api/audit/logs/user_activity/?user_id=5&limit=100
        """
        from audit.helpers import get_user_activity

        user_id = request.query_params.get('user_id') or request.user.pk
        try:
            limit = int(request.query_params.get('limit', 100))
        except ValueError:
            limit = None
        if limit is None or limit < 1:
            raise ValidationError(
                message="limit must be a positive whole number",
                code="INVALID_LIMIT",
                details={'limit': request.query_params.get('limit')}
            )

        entries = get_user_activity(user_id, limit=min(limit, MAX_ACTIVITY_LIMIT))
        serializer = self.get_serializer(entries, many=True)
        return Response(serializer.data)
