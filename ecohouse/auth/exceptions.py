"""Auth domain exceptions.

Errors coming back from the auth provider are translated into these so
callers can special-case them (most importantly EmailNotConfirmedError,
which should send the user to OTP verification rather than fail).
"""

from ecohouse.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ExternalServiceError,
    ValidationError,
)


class InvalidCredentialsError(AuthenticationError):
    """Raised when email/password combination is invalid."""

    error_type = "invalid_credentials"

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Raised when an access or refresh token is invalid or expired."""

    error_type = "invalid_token"

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message)


class EmailNotConfirmedError(AuthenticationError):
    """Raised on sign-in before the email OTP has been verified."""

    error_type = "email_not_confirmed"

    def __init__(self, message: str = "Email not confirmed"):
        super().__init__(message)


class UserDisabledError(AuthorizationError):
    error_type = "user_disabled"

    def __init__(self, message: str = "User account is disabled"):
        super().__init__(message)


class EmailExistsError(ConflictError):
    """Raised when attempting to sign up with a registered email."""

    error_type = "email_exists"

    def __init__(self, message: str = "Email already registered"):
        super().__init__(message)


class WeakPasswordError(ValidationError):
    error_type = "weak_password"

    def __init__(
        self,
        message: str = "Password is too weak",
        reasons: list[str] | None = None,
    ):
        self.reasons = reasons or []
        if self.reasons:
            message = f"{message}: {', '.join(self.reasons)}"
        super().__init__(message)


class OtpVerificationError(ValidationError):
    """Raised when an email OTP is wrong, expired or already used."""

    error_type = "otp_verification_error"

    def __init__(self, message: str = "Invalid or expired verification code"):
        super().__init__(message)


class ProviderNotConfiguredError(ExternalServiceError):
    error_type = "auth_provider_not_configured"

    def __init__(self, message: str = "Auth provider is not configured"):
        super().__init__(message)
