"""Sighting models: stored record, creation body, sparse update payload."""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.errors import InvalidStatusError

# Fields a generic edit may touch. Everything else is owned by creation or the status guard.
MUTABLE_FIELDS = ("city", "state", "country", "shape", "duration", "summary", "latitude", "longitude")
PROTECTED_FIELDS = ("id", "submitted_by", "submission_date", "user_submitted", "submission_status")


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, token: Any) -> "SubmissionStatus":
        """Case-insensitive lookup; raises InvalidStatusError for anything outside the closed set."""
        if isinstance(token, cls):
            return token
        if isinstance(token, str):
            normalized = token.strip().lower()
            for status in cls:
                if status.value == normalized:
                    return status
        raise InvalidStatusError(token)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are always aware UTC; naive input is taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Sighting(_CamelModel):
    """A stored sighting. Frozen: new states are made with model_copy(update=...)."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    occurred_at: Optional[datetime] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    shape: Optional[str] = None
    duration: Optional[str] = None
    summary: Optional[str] = None
    posted: Optional[str] = None
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    submitted_by: Optional[str] = None
    submission_date: Optional[datetime] = None
    user_submitted: bool = False
    submission_status: SubmissionStatus = SubmissionStatus.PENDING

    @field_validator("occurred_at", "submission_date")
    @classmethod
    def normalize_timestamps(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class SightingCreate(_CamelModel):
    """Request body for POST /api/sightings.

    Server-owned fields (submissionStatus, submissionDate, userSubmitted) are
    accepted on the wire and ignored.
    """

    occurred_at: Optional[datetime] = None
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=50)
    country: Optional[str] = Field(default=None, max_length=100)
    shape: Optional[str] = Field(default=None, max_length=50)
    duration: Optional[str] = Field(default=None, max_length=100)
    summary: Optional[str] = Field(default=None, max_length=5000)
    posted: Optional[str] = None
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    submitted_by: Optional[str] = None

    @field_validator("occurred_at")
    @classmethod
    def normalize_occurred_at(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class SightingUpdate(_CamelModel):
    """Sparse update payload.

    A field is "present" when it appears in ``model_fields_set``; absent fields
    are left untouched by the merge. Explicit nulls are rejected since absence
    is the only way to leave a field alone.
    """

    model_config = ConfigDict(extra="forbid")

    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=50)
    country: Optional[str] = Field(default=None, max_length=100)
    shape: Optional[str] = Field(default=None, max_length=50)
    duration: Optional[str] = Field(default=None, max_length=100)
    summary: Optional[str] = Field(default=None, max_length=5000)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> "SightingUpdate":
        nulls = sorted(name for name in self.model_fields_set if getattr(self, name) is None)
        if nulls:
            raise ValueError(f"explicit null is not allowed for: {', '.join(nulls)}")
        return self

    def changes(self) -> dict[str, Any]:
        """Present mutable fields and their new values."""
        return {name: getattr(self, name) for name in MUTABLE_FIELDS if name in self.model_fields_set}
