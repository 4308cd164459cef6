"""Update events arriving from external sources (batch correction feeds, admin tools)."""
from datetime import datetime
from typing import Optional

from pydantic import Field

from app.models.sighting import SightingUpdate, _CamelModel


class SyncPayload(SightingUpdate):
    """Sparse payload plus an optional status, routed through the status guard."""

    submission_status: Optional[str] = None


class UpdateSource(_CamelModel):
    source_system: str  # e.g. "admin-portal", "external-feed", "user-correction"
    updated_by_user_id: Optional[str] = None
    update_timestamp: datetime


class SightingUpdateEvent(_CamelModel):
    """A single update with provenance, applied with the same rules as direct edits."""

    target_id: str
    payload: SyncPayload = Field(default_factory=SyncPayload)
    source: UpdateSource
