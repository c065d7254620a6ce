"""
Shared/common Pydantic schemas used across multiple endpoints

Timestamps are rendered as second-precision UTC with a "Z" suffix
(``2025-03-01T12:00:00Z``). Stored values are naive UTC; aware values are
converted before formatting.
"""

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BaseModel, PlainSerializer


def format_utc(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


UTCDatetime = Annotated[datetime, PlainSerializer(format_utc, return_type=str)]
UTCDatetimeOptional = Annotated[datetime | None, PlainSerializer(format_utc, return_type=str | None)]


class UserSummary(BaseModel):
    """
    Minimal user information for embedding in responses.

    Used by reviews and lists so clients get the author without a second request.
    """

    user_id: int
    username: str
    name: str | None = None

    model_config = {"from_attributes": True}
