"""
REST framework exception handler for application exceptions.

Application errors are rendered as
``{"error": {"kind", "code", "message", "details"}}``; everything else goes
through DRF's default handler. Deleting a row that protected foreign keys
still point at is reported as a ConflictError.
"""
import logging

from django.db.models import ProtectedError, RestrictedError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import (
    AuditWriteError,
    AuthError,
    BaseApplicationException,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ReconciliationError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_EXCEPTION = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthError, status.HTTP_403_FORBIDDEN),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ReconciliationError, status.HTTP_409_CONFLICT),
    (ConflictError, status.HTTP_409_CONFLICT),
]


def status_for(exc) -> int:
    for exc_class, code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_class):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def in_use_error(exc) -> ConflictError:
    """ConflictError naming the kinds of rows that still reference the record"""
    blocking = exc.protected_objects if isinstance(exc, ProtectedError) else exc.restricted_objects
    used_by = sorted({str(obj._meta.verbose_name).title() for obj in blocking})
    return ConflictError(
        message=f"Still referenced by: {', '.join(used_by)}",
        details={'used_by': used_by, 'count': len(blocking)}
    )


def api_exception_handler(exc, context):
    if isinstance(exc, AuditWriteError):
        # The change is committed; report it as done but unaudited
        body = exc.result.as_dict() if exc.result is not None else {'ok': True}
        body['audited'] = False
        body['warning'] = exc.message
        return Response(body, status=status.HTTP_200_OK)

    if isinstance(exc, (ProtectedError, RestrictedError)):
        exc = in_use_error(exc)

    if isinstance(exc, BaseApplicationException):
        code = status_for(exc)
        if code >= 500:
            logger.error(f"Unhandled application error: {exc.code}", exc_info=exc)
        return Response({'error': exc.to_dict()}, status=code)

    return exception_handler(exc, context)
