"""
Error taxonomy shared by the services and the API layer.

Services raise these; `core.utils.exception_handler.api_exception_handler`
turns them into JSON responses carrying a `message` string.
"""


class ServiceError(Exception):
    """Base class for failures that map onto a specific HTTP status"""
    status_code = 500
    default_message = 'Internal server error.'

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(ServiceError):
    """Missing or malformed input"""
    status_code = 400
    default_message = 'Invalid input.'


class AuthError(ServiceError):
    """Missing or unverifiable credentials"""
    status_code = 401
    default_message = 'Authentication credentials were not provided.'


class ForbiddenError(ServiceError):
    """Authenticated, but wrong role or not the owner"""
    status_code = 403
    default_message = 'Forbidden'


class NotFoundError(ServiceError):
    """An id or join code that does not resolve"""
    status_code = 404
    default_message = 'Not found.'


class ConflictError(ServiceError):
    """The request clashes with existing state (e.g. a repeated submission)"""
    status_code = 409
    default_message = 'Conflict.'


class PersistenceError(ServiceError):
    """Storage failure, including constraint violations"""
    status_code = 500
    default_message = 'Failed to store data.'
