"""Column mixins shared by the household tables.

All three tables use a random UUID key and second-precision UTC stamps, so
values round-trip identically through SQLite and Postgres.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import text
from sqlmodel import Field


def utc_now() -> datetime:
    return datetime.now(UTC).replace(microsecond=0)


class UUIDPrimaryKeyMixin:
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)


class TimestampMixin:
    """created_at/updated_at with database-side defaults.

    ``onupdate`` only fires for ORM-issued UPDATEs; services call ``touch()``
    before committing a partial update so the stamp is explicit.
    """

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={
            "server_default": text("CURRENT_TIMESTAMP"),
            "onupdate": utc_now,
        },
    )

    def touch(self) -> None:
        self.updated_at = utc_now()
