"""Auth domain schemas.

Request and response schemas for sign-up, sign-in and session operations.
"""

from datetime import date
from typing import Literal, Self

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from ecohouse.house.codes import is_valid_house_code, normalize_house_code
from ecohouse.profile.schemas import ProfileRead

MIN_PASSWORD_LENGTH = 6


class HouseholdChoice(BaseModel):
    """Head-of-household choice collected on the personal details step.

    When the user is not the head, a well-formed house code is required.
    """

    is_head_of_household: bool
    existing_house_code: str | None = Field(default=None, max_length=32)

    @field_validator("existing_house_code")
    @classmethod
    def normalize_code(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return normalize_house_code(value)

    @model_validator(mode="after")
    def check_house_code(self) -> Self:
        if self.is_head_of_household:
            self.existing_house_code = None
            return self
        if self.existing_house_code is None:
            raise ValueError("existing_house_code is required to join a household")
        if not is_valid_house_code(self.existing_house_code):
            raise ValueError(
                "existing_house_code must look like ECO-2024-AB12CD"
            )
        return self


class PersonalDetails(HouseholdChoice):
    full_name: str = Field(min_length=1, max_length=100)
    date_of_birth: date
    gender: str = Field(min_length=1, max_length=30)


class SignUpRequest(PersonalDetails):
    """Everything collected by the multi-step sign-up form."""

    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class CompleteProfileRequest(PersonalDetails):
    """Personal details for an account that has no profile yet."""


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class VerifyOtpRequest(BaseModel):
    email: EmailStr
    token: str = Field(pattern=r"^[0-9]{6}$")
    type: Literal["signup", "email", "recovery", "email_change"] = "signup"


class ResendOtpRequest(BaseModel):
    email: EmailStr
    type: Literal["signup", "email_change"] = "signup"


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class PasswordResetRequest(BaseModel):
    email: EmailStr


class AccountRead(BaseModel):
    id: str
    email: str | None
    email_confirmed: bool


class SessionRead(BaseModel):
    access_token: str
    refresh_token: str
    expires_in: int | None = None
    token_type: str = "bearer"


class SignUpResponse(BaseModel):
    """Result of a completed sign-up.

    session is None while the email still has to be confirmed with the OTP.
    """

    account: AccountRead
    session: SessionRead | None = None
    profile: ProfileRead
    house_code: str | None = None
    email_confirmation_required: bool


class SignInResponse(BaseModel):
    """Result of sign-in.

    profile_complete is False for accounts stuck in the partial sign-up state;
    clients should route them to POST /auth/complete-profile.
    """

    account: AccountRead
    session: SessionRead
    profile: ProfileRead | None = None
    profile_complete: bool


class MeResponse(BaseModel):
    account: AccountRead
    profile: ProfileRead | None = None
    profile_complete: bool


class SessionResponse(BaseModel):
    """Result of OTP verification and token refresh."""

    account: AccountRead
    session: SessionRead | None = None
