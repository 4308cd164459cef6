"""Selection predicates for filter and bounding-box queries.

Two matching strategies are kept apart:

* ``ExactMatch`` - case-insensitive equality on one field.
* ``SubstringMatch`` - case-insensitive containment OR'd across several fields.

``SightingFilter.predicate()`` ANDs every supplied constraint. A criterion left
as ``None`` imposes nothing; an empty string is a literal match request.
"""
from dataclasses import dataclass
from typing import Callable, Optional

from app.models.sighting import Sighting

SEARCH_FIELDS = ("city", "state", "country", "summary", "shape")


def _fold(value: object) -> Optional[str]:
    if value is None:
        return None
    # Enum members (submission_status) compare by their wire value
    return str(getattr(value, "value", value)).lower()


@dataclass(frozen=True)
class ExactMatch:
    field: str
    value: str

    def __call__(self, sighting: Sighting) -> bool:
        stored = _fold(getattr(sighting, self.field))
        return stored is not None and stored == self.value.lower()


@dataclass(frozen=True)
class SubstringMatch:
    fields: tuple[str, ...]
    term: str

    def __call__(self, sighting: Sighting) -> bool:
        needle = self.term.lower()
        for name in self.fields:
            stored = _fold(getattr(sighting, name))
            if stored is not None and needle in stored:
                return True
        return False


@dataclass(frozen=True)
class SightingFilter:
    shape: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    search_text: Optional[str] = None
    submission_status: Optional[str] = None
    submitted_by: Optional[str] = None

    def exact_matches(self) -> list[ExactMatch]:
        criteria = {
            "shape": self.shape,
            "city": self.city,
            "country": self.country,
            "state": self.state,
            "submission_status": self.submission_status,
            "submitted_by": self.submitted_by,
        }
        return [ExactMatch(name, value) for name, value in criteria.items() if value is not None]

    def substring_match(self) -> Optional[SubstringMatch]:
        if self.search_text is None:
            return None
        return SubstringMatch(SEARCH_FIELDS, self.search_text)

    def predicate(self) -> Callable[[Sighting], bool]:
        checks: list[Callable[[Sighting], bool]] = list(self.exact_matches())
        substring = self.substring_match()
        if substring is not None:
            checks.append(substring)
        return lambda sighting: all(check(sighting) for check in checks)


@dataclass(frozen=True)
class BoundingBox:
    """Inclusive lat/lng rectangle. No antimeridian wraparound: west > east matches nothing."""

    north: float
    south: float
    east: float
    west: float

    def __call__(self, sighting: Sighting) -> bool:
        return (
            self.south <= sighting.latitude <= self.north
            and self.west <= sighting.longitude <= self.east
        )
