"""Sightings router: list, filter, bounds, get, submit, moderate."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.models.page import PageRequest, SightingPage
from app.models.sighting import Sighting, SightingCreate
from app.services import sightings as sighting_service
from app.services.filters import SightingFilter
from app.services.status import update_status
from app.store import SightingStore, get_store

router = APIRouter(prefix="/api/sightings", tags=["sightings"])


def page_params(
    page: int = Query(0, description="0-based page index"),
    size: Optional[int] = Query(None, description="Page size"),
    sort: Optional[str] = Query(None, description="field[,asc|desc], e.g. occurredAt,desc"),
) -> PageRequest:
    return sighting_service.build_page_request(page, size, sort)


@router.get("", response_model=SightingPage)
async def list_sightings(
    page: PageRequest = Depends(page_params),
    store: SightingStore = Depends(get_store),
):
    """Paged list of all sightings in store order."""
    return sighting_service.list_sightings(store, page)


@router.get("/filter", response_model=SightingPage)
async def filter_sightings(
    shape: Optional[str] = None,
    city: Optional[str] = None,
    country: Optional[str] = None,
    state: Optional[str] = None,
    search_text: Optional[str] = Query(None, alias="searchText"),
    submission_status: Optional[str] = Query(None, alias="submissionStatus"),
    submitted_by: Optional[str] = Query(None, alias="submittedBy"),
    page: PageRequest = Depends(page_params),
    store: SightingStore = Depends(get_store),
):
    """Case-insensitive exact filters AND'd together, plus an optional substring search."""
    criteria = SightingFilter(
        shape=shape,
        city=city,
        country=country,
        state=state,
        search_text=search_text,
        submission_status=submission_status,
        submitted_by=submitted_by,
    )
    return sighting_service.filter_sightings(store, criteria, page)


@router.get("/bounds", response_model=SightingPage)
async def sightings_in_bounds(
    north: float,
    south: float,
    east: float,
    west: float,
    page: PageRequest = Depends(page_params),
    store: SightingStore = Depends(get_store),
):
    """Sightings inside the inclusive box. west > east returns nothing (no wraparound)."""
    return sighting_service.sightings_in_bounds(store, north, south, east, west, page)


@router.get("/{sighting_id}", response_model=Sighting)
async def get_sighting(sighting_id: str, store: SightingStore = Depends(get_store)):
    return sighting_service.get_sighting(store, sighting_id)


@router.post("", response_model=Sighting, status_code=201)
async def submit_sighting(body: SightingCreate, store: SightingStore = Depends(get_store)):
    """Public submission. Always stored as pending, user-submitted, dated now."""
    return sighting_service.create_sighting(store, body)


@router.patch("/{sighting_id}/status", response_model=Sighting)
async def update_sighting_status(
    sighting_id: str,
    status: str = Query(..., description="pending | approved | rejected (case-insensitive)"),
    store: SightingStore = Depends(get_store),
):
    """Moderation: change only the submission status."""
    return update_status(store, sighting_id, status, actor="moderator")
