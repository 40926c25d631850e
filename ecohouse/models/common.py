"""Schemas and helpers shared by every domain."""

from datetime import UTC, datetime

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response schema.

    All API errors return this format for consistency.
    """

    type: str
    message: str


class MessageResponse(BaseModel):
    message: str


def to_utc_iso(value: datetime) -> str:
    """Format datetime as ISO 8601 in UTC with a Z suffix.

    Naive values are assumed to already be UTC (SQLite drops tzinfo).
    """
    if value.tzinfo is not None:
        utc_value = value.astimezone(UTC)
    else:
        utc_value = value.replace(tzinfo=UTC)
    return utc_value.replace(microsecond=0).isoformat().replace("+00:00", "Z")
