"""Paging models for list, filter and bounds queries."""
import math
from typing import Optional

from pydantic import BaseModel, Field

from app.models.sighting import Sighting, _CamelModel

# Wire name -> attribute name of fields that may be used as a sort key.
SORTABLE_FIELDS = {
    "occurredAt": "occurred_at",
    "submissionDate": "submission_date",
    "city": "city",
    "state": "state",
    "country": "country",
    "shape": "shape",
    "latitude": "latitude",
    "longitude": "longitude",
}


class PageRequest(BaseModel):
    page: int = Field(default=0, ge=0)
    size: int = Field(default=20, ge=1)
    sort_by: Optional[str] = None  # attribute name, already resolved from SORTABLE_FIELDS
    descending: bool = False

    @property
    def offset(self) -> int:
        return self.page * self.size


class SightingPage(_CamelModel):
    items: list[Sighting]
    page: int
    size: int
    total: int
    total_pages: int
    has_next: bool

    @classmethod
    def build(cls, items: list[Sighting], request: PageRequest, total: int) -> "SightingPage":
        return cls(
            items=items,
            page=request.page,
            size=request.size,
            total=total,
            total_pages=math.ceil(total / request.size) if total else 0,
            has_next=request.offset + len(items) < total,
        )
