"""House domain models.

SQLModel table definitions for households and their memberships.
"""

import uuid
from datetime import datetime

from sqlalchemy import Column, ForeignKey, Uuid
from sqlmodel import Field, SQLModel

from ecohouse.core.mixins import TimestampMixin, UUIDPrimaryKeyMixin, utc_now
from ecohouse.house.codes import HOUSE_CODE_LENGTH


class House(UUIDPrimaryKeyMixin, TimestampMixin, SQLModel, table=True):
    """A household.

    house_code is unique and never changes after creation. The head of
    household is the account that created the house.
    """

    __tablename__: str = "houses"

    house_code: str = Field(index=True, unique=True, max_length=HOUSE_CODE_LENGTH)
    head_of_household_id: str = Field(index=True, max_length=255)
    house_name: str | None = Field(default=None, max_length=100)
    address: str | None = Field(default=None, max_length=255)


class HouseMember(UUIDPrimaryKeyMixin, SQLModel, table=True):
    """Membership of one account in one house.

    user_id is unique across the table: an account belongs to at most one
    household. Exactly one row per house has is_head set.
    """

    __tablename__: str = "house_members"

    house_id: uuid.UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("houses.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    user_id: str = Field(index=True, unique=True, max_length=255)
    is_head: bool = Field(default=False)
    joined_at: datetime = Field(default_factory=utc_now)
