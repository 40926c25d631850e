"""Service-wide exception hierarchy.

Every error raised on purpose derives from AppException and carries its own
HTTP status code and error type, so handlers can render a uniform response.
Domain packages subclass the base kinds defined here.
"""


class AppException(Exception):
    """Base exception for all application errors."""

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(message)


# 400
class ValidationError(AppException):
    """Base class for client-side validation failures."""

    status_code = 400
    error_type = "validation_error"

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message)


class BadRequestError(ValidationError):
    """Raised for general bad request errors."""

    error_type = "bad_request"

    def __init__(self, message: str = "Bad request"):
        super().__init__(message)


# 401
class AuthenticationError(AppException):
    """Base class for authentication failures."""

    status_code = 401
    error_type = "authentication_error"

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


# 403
class AuthorizationError(AppException):
    """Base class for authorization failures."""

    status_code = 403
    error_type = "authorization_error"

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


# 404
class NotFoundError(AppException):
    """Base class for resource not found errors."""

    status_code = 404
    error_type = "not_found"

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


# 409
class ConflictError(AppException):
    """Base class for resource conflict errors."""

    status_code = 409
    error_type = "conflict"

    def __init__(self, message: str = "Resource conflict"):
        super().__init__(message)


# 429
class RateLimitError(AppException):
    """Raised when the auth provider throttles us."""

    status_code = 429
    error_type = "rate_limit_exceeded"

    def __init__(
        self,
        message: str = "Too many requests, please try again later",
        retry_after: int | None = None,
    ):
        self.retry_after = retry_after
        super().__init__(message)


# 502
class ExternalServiceError(AppException):
    """Base class for external service failures."""

    status_code = 502
    error_type = "external_service_error"

    def __init__(self, message: str = "External service error"):
        super().__init__(message)


class ProviderError(ExternalServiceError):
    """Raised when the auth provider is unreachable or answers unexpectedly."""

    error_type = "provider_error"

    def __init__(
        self, message: str = "Authentication provider returned an invalid response"
    ):
        super().__init__(message)


# 500
class InternalError(AppException):
    """Raised for internal server errors."""

    status_code = 500
    error_type = "internal_error"

    def __init__(self, message: str = "An internal error occurred"):
        super().__init__(message)
