"""Shared pydantic building blocks for request/response schemas."""
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, field_validator


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops the offset)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class IdentifiedResponse(BaseModel):
    """Base for anything carrying an identifier.

    Ids are strings on the wire so that server UUIDs and locally
    generated identifiers share one type.
    """

    id: str

    class Config:
        from_attributes = True

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return str(value)


class RecordResponse(IdentifiedResponse):
    """Base for top-level persisted records with UTC timestamps."""

    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _normalize_timestamps(cls, value: datetime) -> datetime:
        return ensure_utc(value)
