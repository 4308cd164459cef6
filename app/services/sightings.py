"""Sighting creation and read queries."""
import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from app.config import settings
from app.errors import ValidationError
from app.models.page import SORTABLE_FIELDS, PageRequest, SightingPage
from app.models.sighting import Sighting, SightingCreate, SubmissionStatus
from app.services.filters import BoundingBox, SightingFilter
from app.store import SightingStore
from app.utils.audit import log_action

logger = logging.getLogger(__name__)


def build_page_request(page: int = 0, size: Optional[int] = None, sort: Optional[str] = None) -> PageRequest:
    """Validate paging parameters. sort is "field" or "field,asc|desc" using wire field names."""
    size = settings.default_page_size if size is None else size
    if page < 0:
        raise ValidationError("page must be >= 0")
    if size < 1 or size > settings.max_page_size:
        raise ValidationError(f"size must be between 1 and {settings.max_page_size}")
    sort_by = None
    descending = False
    if sort:
        name, _, direction = sort.partition(",")
        name, direction = name.strip(), direction.strip().lower()
        if name not in SORTABLE_FIELDS:
            raise ValidationError(f"Cannot sort by '{name}'; allowed: {', '.join(SORTABLE_FIELDS)}")
        if direction not in ("", "asc", "desc"):
            raise ValidationError(f"Sort direction must be asc or desc, got '{direction}'")
        sort_by = SORTABLE_FIELDS[name]
        descending = direction == "desc"
    return PageRequest(page=page, size=size, sort_by=sort_by, descending=descending)


def create_sighting(store: SightingStore, body: Union[SightingCreate, Mapping[str, Any]]) -> Sighting:
    """User submission: status forced to pending, user_submitted true, submission_date now."""
    if not isinstance(body, SightingCreate):
        try:
            body = SightingCreate.model_validate(body)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e
    sighting = Sighting.model_validate({
        **body.model_dump(),
        "submission_status": SubmissionStatus.PENDING,
        "user_submitted": True,
        "submission_date": datetime.now(timezone.utc),
    })
    saved = store.insert(sighting)
    logger.info("Created sighting %s (pending moderation)", saved.id)
    log_action(body.submitted_by or "anonymous", "sighting_submitted", saved.id)
    return saved


def get_sighting(store: SightingStore, sighting_id: str) -> Sighting:
    return store.get(sighting_id)


def list_sightings(store: SightingStore, page: Optional[PageRequest] = None) -> SightingPage:
    return store.scan(None, page)


def filter_sightings(
    store: SightingStore,
    criteria: SightingFilter,
    page: Optional[PageRequest] = None,
) -> SightingPage:
    return store.scan(criteria.predicate(), page)


def sightings_in_bounds(
    store: SightingStore,
    north: Optional[float],
    south: Optional[float],
    east: Optional[float],
    west: Optional[float],
    page: Optional[PageRequest] = None,
) -> SightingPage:
    """Sightings inside the inclusive box. All four bounds are required."""
    bounds = {"north": north, "south": south, "east": east, "west": west}
    missing = [name for name, value in bounds.items() if value is None]
    if missing:
        raise ValidationError(f"Missing required bounds parameter(s): {', '.join(missing)}")
    return store.scan(BoundingBox(north=north, south=south, east=east, west=west), page)
