"""
Custom exceptions for the application.
Following domain-driven design principles with specific exception types.

Every exception carries a stable machine-readable ``kind`` and ``code`` plus a
human-readable message, so callers can tell failures apart without parsing text.
"""


class BaseApplicationException(Exception):
    """Base exception for all application-specific exceptions"""
    default_message = "An application error occurred"
    default_code = "APPLICATION_ERROR"
    kind = "application_error"

    def __init__(self, message=None, code=None, details=None):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self):
        return {
            'kind': self.kind,
            'code': self.code,
            'message': self.message,
            'details': self.details,
        }


class ValidationError(BaseApplicationException):
    """Raised when input is missing or malformed; nothing has been changed yet"""
    default_message = "Validation failed"
    default_code = "VALIDATION_FAILED"
    kind = "validation_error"


class AuthError(BaseApplicationException):
    """Raised when step-up credential verification fails"""
    default_message = "Credential verification failed"
    default_code = "AUTH_FAILED"
    kind = "auth_error"


class NotFoundError(BaseApplicationException):
    """Raised when a resource is not found"""
    default_message = "Resource not found"
    default_code = "NOT_FOUND"
    kind = "not_found"

    def __init__(self, resource_type=None, resource_id=None, **kwargs):
        self.resource_type = resource_type
        self.resource_id = resource_id
        if 'message' not in kwargs and resource_type:
            kwargs['message'] = f"{resource_type} #{resource_id} not found"
        details = kwargs.pop('details', None) or {}
        details.setdefault('resource_type', resource_type)
        details.setdefault('resource_id', resource_id)
        super().__init__(details=details, **kwargs)


class PermissionDeniedError(BaseApplicationException):
    """Raised when user doesn't have permission"""
    default_message = "Permission denied"
    default_code = "PERMISSION_DENIED"
    kind = "permission_denied"


class ReconciliationError(BaseApplicationException):
    """
    Raised when a stock write-back failed part way through a batch.

    Items already applied in the same call have been reversed (best effort)
    before this is raised; ``details`` records what was applied and undone.
    """
    default_message = "Stock reconciliation failed"
    default_code = "RECONCILIATION_FAILED"
    kind = "reconciliation_error"


class ConflictError(BaseApplicationException):
    """Raised when a record cannot be removed because other records still use it"""
    default_message = "The record is still in use"
    default_code = "RECORD_IN_USE"
    kind = "conflict"


class AuditWriteError(BaseApplicationException):
    """
    Raised when a mutation committed but its audit rows could not be written.

    The data change is NOT rolled back; ``result`` holds the committed outcome.
    """
    default_message = "The change was saved but could not be written to the audit log"
    default_code = "AUDIT_WRITE_FAILED"
    kind = "audit_write_error"

    def __init__(self, message=None, code=None, details=None, result=None):
        self.result = result
        super().__init__(message=message, code=code, details=details)
