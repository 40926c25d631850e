"""House domain exceptions."""

from ecohouse.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)


class InvalidHouseCodeError(ValidationError):
    """Raised when a house code is not in ECO-YYYY-XXXXXX form."""

    error_type = "invalid_house_code"

    def __init__(
        self,
        message: str = "Invalid house code format (expected e.g. ECO-2024-AB12CD)",
    ):
        super().__init__(message)


class HouseNotFoundError(NotFoundError):
    error_type = "house_not_found"

    def __init__(
        self,
        message: str = "House code not found. Please check the code and try again.",
    ):
        super().__init__(message)


class NotHouseMemberError(NotFoundError):
    error_type = "not_house_member"

    def __init__(self, message: str = "You are not a member of any house"):
        super().__init__(message)


class AlreadyMemberError(ConflictError):
    """Raised when joining a house the account already belongs to."""

    error_type = "already_member"

    def __init__(self, message: str = "You are already a member of this house."):
        super().__init__(message)


class AlreadyInHouseError(ConflictError):
    """Raised when the account already belongs to some other house."""

    error_type = "already_in_house"

    def __init__(self, message: str = "You already belong to a house"):
        super().__init__(message)


class HeadOfHouseholdCannotLeaveError(ConflictError):
    error_type = "head_cannot_leave"

    def __init__(self, message: str = "The head of household cannot leave the house"):
        super().__init__(message)


class NotHeadOfHouseholdError(AuthorizationError):
    error_type = "not_head_of_household"

    def __init__(
        self, message: str = "Only the head of household can change the house"
    ):
        super().__init__(message)


class HouseCodeGenerationError(InternalError):
    """Raised when every generated code collided with an existing one."""

    error_type = "house_code_generation_failed"

    def __init__(self, message: str = "Could not generate a unique house code"):
        super().__init__(message)
