"""Internal router for trusted callers: generic edits, sync events, audit log."""
from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from app.models.sighting import Sighting
from app.services.merge import apply_update
from app.services.sync import handle_sighting_update
from app.store import SightingStore, get_store
from app.utils.audit import get_audit_log

router = APIRouter(prefix="/api/internal", tags=["internal"])


@router.patch("/sightings/{sighting_id}", response_model=Sighting)
async def edit_sighting(
    sighting_id: str,
    body: dict[str, Any] = Body(...),
    store: SightingStore = Depends(get_store),
):
    """Sparse edit of content fields. Status and ownership fields are rejected."""
    return apply_update(store, sighting_id, body, actor="internal")


@router.post("/sync", response_model=Sighting)
async def ingest_sync_event(
    body: dict[str, Any] = Body(...),
    store: SightingStore = Depends(get_store),
):
    """Apply one update event from an external source."""
    return handle_sighting_update(store, body)


@router.get("/audit")
async def list_audit_entries(limit: int = Query(100, ge=1, le=1000)):
    """Recent audit entries, newest first."""
    return [
        {
            "actor": e.actor,
            "action": e.action,
            "sighting_id": e.sighting_id,
            "details": e.details,
            "timestamp": e.timestamp.isoformat(),
        }
        for e in get_audit_log(limit)
    ]
