"""
Logging configuration with request ID support
"""
import logging
import threading
import uuid

_request_context = threading.local()

NO_REQUEST_ID = 'N/A'


def get_request_id():
    """Request ID of the request being served on this thread, or 'N/A'"""
    return getattr(_request_context, 'request_id', None) or NO_REQUEST_ID


class RequestIDFilter(logging.Filter):
    """
    Logging filter to add request ID to log records
    """
    def filter(self, record):
        if not getattr(record, 'request_id', None):
            record.request_id = get_request_id()
        return True


class RequestIDMiddleware:
    """
    Middleware to generate and attach unique request ID to each request.
    Request ID is available in request.request_id, in all log messages
    and in the metadata of audit rows written while serving the request.
    """

    header = 'X-Request-ID'

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.headers.get(self.header) or str(uuid.uuid4())[:8]
        request.request_id = request_id[:64]
        _request_context.request_id = request.request_id

        try:
            response = self.get_response(request)
        finally:
            _request_context.request_id = None

        response[self.header] = request.request_id
        return response

    def process_exception(self, request, exception):
        """Log exceptions with request ID"""
        request_id = getattr(request, 'request_id', NO_REQUEST_ID)
        logger = logging.getLogger('django.request')
        logger.error(
            f"[{request_id}] Exception: {type(exception).__name__}: {str(exception)}",
            exc_info=True,
            extra={'request_id': request_id}
        )
