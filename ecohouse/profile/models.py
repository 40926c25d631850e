"""Profile domain models.

SQLModel table definition for UserProfile.
"""

import uuid
from datetime import date
from enum import Enum

from sqlalchemy import Column, ForeignKey, Uuid
from sqlmodel import Field, SQLModel

from ecohouse.core.mixins import TimestampMixin, UUIDPrimaryKeyMixin


class VerificationStatus(str, Enum):
    """Identity verification outcome recorded during sign-up.

    - pending: not attempted yet (default for every new profile)
    - verified: identity documents checked
    - skipped: user chose to skip the step
    - failed: verification attempted and rejected
    """

    pending = "pending"
    verified = "verified"
    skipped = "skipped"
    failed = "failed"


class UserProfile(UUIDPrimaryKeyMixin, TimestampMixin, SQLModel, table=True):
    """Per-account profile.

    user_id is the auth provider's account id; one profile per account.
    """

    __tablename__: str = "user_profiles"

    user_id: str = Field(index=True, unique=True, max_length=255)
    email: str = Field(index=True, max_length=255)
    full_name: str | None = Field(default=None, max_length=100)
    date_of_birth: date | None = Field(default=None)
    gender: str | None = Field(default=None, max_length=30)
    is_head_of_household: bool = Field(default=False)
    house_id: uuid.UUID | None = Field(
        default=None,
        sa_column=Column(
            Uuid,
            ForeignKey("houses.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
    )
    verification_status: VerificationStatus = Field(
        default=VerificationStatus.pending, max_length=20
    )
