"""Seed router: POST /api/seed to load the historical dataset into an empty store."""
from fastapi import APIRouter, Depends

from app.seed_data import seed_all
from app.store import SightingStore, get_store

router = APIRouter(prefix="/api", tags=["seed"])


@router.post("/seed")
async def seed_sightings(store: SightingStore = Depends(get_store)):
    """Load the bundled dataset. Idempotent: does nothing once the store has data."""
    counts = seed_all(store)
    return {"status": "seeded" if counts["loaded"] else "skipped", **counts}
