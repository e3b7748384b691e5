"""
Shared create/update flow for audited records.

Writes never go through serializer.save(): the view validates input into a
DTO and hands it to the domain service, which mutates, reconciles and audits.
Updates must present a step-up grant for the record; deletion is only
available through the step-up endpoint.
"""
from rest_framework import status
from rest_framework.response import Response

from core.constants import SensitiveAction
from stepup.grants import consume_grant


class AuditedWriteMixin:
    service_class = None
    write_serializer_class = None
    http_method_names = ['get', 'post', 'put', 'head', 'options']

    def get_service(self):
        return self.service_class()

    def audited_response(self, result, status_code):
        instance = self.get_queryset().get(pk=result.record_id)
        return Response(
            {
                'record': self.get_serializer(instance).data,
                'audit': result.as_dict(),
            },
            status=status_code
        )

    def create(self, request, *args, **kwargs):
        serializer = self.write_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = self.get_service()
        result = service.create(serializer.to_dto(), request.user, reason=serializer.validated_data['reason'])
        return self.audited_response(result, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Replace a record; requires the grant issued by an authorized edit"""
        serializer = self.write_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = self.get_service()
        record_id = kwargs.get(self.lookup_field, kwargs.get('pk'))
        service.get_record(record_id)

        grant = consume_grant(
            serializer.validated_data['step_up_token'],
            request.user,
            service.entity_type,
            record_id,
            SensitiveAction.EDIT,
        )
        result = service.update(record_id, serializer.to_dto(), request.user, grant.reason)
        return self.audited_response(result, status.HTTP_200_OK)
