"""Seed ingest: bulk-load historical sightings from the bundled JSON dataset."""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from app.config import settings
from app.errors import InvalidStatusError
from app.models.sighting import Sighting, SubmissionStatus
from app.store import SightingStore

logger = logging.getLogger(__name__)

SEED_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


def _text(raw: dict[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    return None if value is None else str(value)


def _timestamp(raw: dict[str, Any], key: str) -> Optional[datetime]:
    value = raw.get(key)
    if value is None:
        return None
    return datetime.strptime(str(value), SEED_DATETIME_FORMAT)


def parse_seed_record(raw: dict[str, Any]) -> Optional[Sighting]:
    """Build a Sighting from one dataset entry.

    Returns None when either coordinate is missing. Raises ValueError,
    TypeError or InvalidStatusError for malformed entries.
    """
    if not isinstance(raw, dict):
        raise TypeError(f"expected an object, got {type(raw).__name__}")
    if raw.get("latitude") is None or raw.get("longitude") is None:
        return None
    status = raw.get("submissionStatus")
    return Sighting(
        occurred_at=_timestamp(raw, "dateTime"),
        city=_text(raw, "city"),
        state=_text(raw, "state"),
        country=_text(raw, "country"),
        shape=_text(raw, "shape"),
        duration=_text(raw, "duration"),
        summary=_text(raw, "summary"),
        posted=_text(raw, "posted"),
        latitude=float(str(raw["latitude"])),
        longitude=float(str(raw["longitude"])),
        submitted_by=_text(raw, "submittedBy"),
        submission_date=_timestamp(raw, "submissionDate"),
        user_submitted=str(raw.get("isUserSubmitted", False)).lower() == "true",
        submission_status=SubmissionStatus.APPROVED if status is None else SubmissionStatus.parse(status),
    )


def seed_sightings(store: SightingStore, records: list[Any]) -> dict[str, int]:
    """Parse and insert records, dropping malformed or coordinate-less entries."""
    sightings: list[Sighting] = []
    malformed = 0
    missing_coordinates = 0
    for index, raw in enumerate(records):
        try:
            sighting = parse_seed_record(raw)
        except (ValueError, TypeError, InvalidStatusError) as e:
            malformed += 1
            logger.error("Error parsing sighting record %d: %s", index, e)
            continue
        if sighting is None:
            missing_coordinates += 1
            continue
        sightings.append(sighting)
    logger.info("Successfully parsed %d valid sightings", len(sightings))
    store.insert_many(sightings)
    return {
        "loaded": len(sightings),
        "malformed": malformed,
        "missing_coordinates": missing_coordinates,
    }


def seed_all(store: SightingStore, path: Union[str, Path, None] = None) -> dict[str, int]:
    """Load the dataset into an empty store. No-op when the store already has data."""
    if store.count() > 0:
        logger.info("Store already contains data, skipping seed load")
        return {"loaded": 0, "malformed": 0, "missing_coordinates": 0}

    path = Path(path or settings.seed_data_path)
    logger.info("Loading initial sightings data from %s", path)
    try:
        records = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error("Failed to load initial sightings data: %s", e)
        return {"loaded": 0, "malformed": 0, "missing_coordinates": 0}
    if not isinstance(records, list):
        logger.error("Seed file %s must contain a JSON array", path)
        return {"loaded": 0, "malformed": 0, "missing_coordinates": 0}

    logger.info("Found %d sighting records in JSON file", len(records))
    counts = seed_sightings(store, records)
    logger.info("Loaded %d sightings into the store", counts["loaded"])
    return counts
