from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import StepUpOutcomeSerializer, StepUpRequestSerializer
from .services import StepUpService


class StepUpView(APIView):
    """
    POST /api/step-up/

    Re-authenticates the current user for one sensitive action on one record.
    - edit: returns a single-use token and the record's current values
    - delete: deletes the record
    - view_history: returns the record's audit history

    Which roles may run each action is decided by the record's service.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = StepUpRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        outcome = StepUpService().request_sensitive_action(
            request.user,
            data['entity_type'],
            data['record_id'],
            data['action'],
            data['password'],
            data['reason'],
            request=request._request,
        )
        return Response(StepUpOutcomeSerializer(outcome).data)
