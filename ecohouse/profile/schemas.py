"""Profile domain schemas.

Request and response schemas for profile operations.

Security notes:
- ProfileUpdateMe only exposes personal fields; household linkage and
  verification status change through their own operations.
"""

import uuid
from datetime import date, datetime

from pydantic import EmailStr, Field, field_serializer
from sqlmodel import SQLModel

from ecohouse.models.common import to_utc_iso
from ecohouse.profile.models import VerificationStatus


class ProfileCreate(SQLModel):
    """Internal schema used by the account service after sign-up."""

    user_id: str
    email: EmailStr
    full_name: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    is_head_of_household: bool = False
    house_id: uuid.UUID | None = None
    verification_status: VerificationStatus | None = None


class ProfileRead(SQLModel):
    id: uuid.UUID
    user_id: str
    email: str
    full_name: str | None
    date_of_birth: date | None
    gender: str | None
    is_head_of_household: bool
    house_id: uuid.UUID | None
    verification_status: VerificationStatus
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_datetime(self, value: datetime) -> str:
        return to_utc_iso(value)


class ProfileUpdate(SQLModel):
    """Partial update used internally (any stored field except identity)."""

    full_name: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    is_head_of_household: bool | None = None
    house_id: uuid.UUID | None = None
    verification_status: VerificationStatus | None = None


class ProfileUpdateMe(SQLModel):
    """Fields a user may change on their own profile."""

    full_name: str | None = Field(default=None, min_length=1, max_length=100)
    date_of_birth: date | None = None
    gender: str | None = Field(default=None, min_length=1, max_length=30)


class VerificationStatusUpdate(SQLModel):
    status: VerificationStatus
