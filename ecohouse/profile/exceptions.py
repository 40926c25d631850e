"""Profile domain exceptions."""

from ecohouse.core.exceptions import ConflictError, NotFoundError


class ProfileNotFoundError(NotFoundError):
    error_type = "profile_not_found"

    def __init__(self, message: str = "Profile not found"):
        super().__init__(message)


class ProfileExistsError(ConflictError):
    """Raised when an account already has a profile."""

    error_type = "profile_exists"

    def __init__(self, message: str = "Profile already exists"):
        super().__init__(message)
