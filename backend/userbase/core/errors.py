"""
Error taxonomy shared by the store, the service and the HTTP layer.

Each error knows the HTTP status and envelope category it is rendered with,
so the exception handlers in userbase.api.exception_handlers stay generic.
"""


class ServiceError(Exception):
    status_code = 500
    category = "Internal Server Error"
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidArgument(ServiceError):
    status_code = 400
    category = "Bad Request"
    default_message = "Bad request"


class NotFound(ServiceError):
    status_code = 404
    category = "Not Found"
    default_message = "Not found"


class DuplicateEmail(ServiceError):
    status_code = 409
    category = "Conflict"
    default_message = "A user with this email already exists"


class AuthFailed(ServiceError):
    status_code = 401
    category = "Unauthorized"
    default_message = "Invalid email or password"


class StorageFailure(ServiceError):
    # Message is shown to the caller; backend details only go to the log
    default_message = "A storage error occurred"


class ConstraintViolation(Exception):
    """Raised by the store when a write hits a unique constraint"""
