"""House domain schemas.

Response shapes mirror what the mobile client reads: a house row, a member
row enriched with profile fields, and the user's own membership.
"""

import uuid
from dataclasses import dataclass
from datetime import date, datetime

from pydantic import Field, field_serializer
from sqlmodel import SQLModel

from ecohouse.house.models import House, HouseMember
from ecohouse.models.common import to_utc_iso


class HouseRead(SQLModel):
    id: uuid.UUID
    house_code: str
    head_of_household_id: str
    house_name: str | None
    address: str | None
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_datetime(self, value: datetime) -> str:
        return to_utc_iso(value)


class HouseMemberRead(SQLModel):
    """A member of a house with the profile fields shown in member lists.

    Profile fields are None when the member has no profile yet.
    """

    user_id: str
    is_head: bool
    joined_at: datetime
    full_name: str | None = None
    email: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None

    @field_serializer("joined_at")
    def serialize_joined_at(self, value: datetime) -> str:
        return to_utc_iso(value)


class HouseDetail(HouseRead):
    """A house together with its members, head first."""

    members: list[HouseMemberRead] = []


class UserHouseRead(SQLModel):
    """The current account's membership and the house it points to."""

    user_id: str
    is_head: bool
    joined_at: datetime
    house: HouseRead

    @field_serializer("joined_at")
    def serialize_joined_at(self, value: datetime) -> str:
        return to_utc_iso(value)


class HouseCreate(SQLModel):
    house_name: str | None = Field(default=None, max_length=100)
    address: str | None = Field(default=None, max_length=255)


class HouseUpdate(SQLModel):
    """Partial update of a house. Only name and address are editable."""

    house_name: str | None = Field(default=None, max_length=100)
    address: str | None = Field(default=None, max_length=255)


class JoinHouseRequest(SQLModel):
    house_code: str = Field(min_length=1, max_length=32)


class HouseLookupResponse(SQLModel):
    """Advisory answer for the sign-up form's house code field."""

    house_code: str
    valid_format: bool
    found: bool
    house_name: str | None = None


@dataclass(frozen=True)
class JoinResult:
    house: House
    member: HouseMember
