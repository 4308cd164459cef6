"""Tests for app.seed_data - bulk ingest of the historical dataset."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from app.config import settings
from app.errors import InvalidStatusError
from app.models.sighting import SubmissionStatus
from app.seed_data import parse_seed_record, seed_all, seed_sightings
from app.store import SightingStore

from conftest import make_sighting


class TestParseSeedRecord:
    def test_defaults_for_historical_data(self):
        sighting = parse_seed_record({"city": "Phoenix", "latitude": 33.4, "longitude": -112.0})
        assert sighting.submission_status is SubmissionStatus.APPROVED
        assert sighting.user_submitted is False

    def test_full_record(self):
        sighting = parse_seed_record({
            "dateTime": "2021-02-18T05:30:00",
            "city": "Austin",
            "latitude": "30.2672",
            "longitude": "-97.7431",
            "submittedBy": "skywatcher42",
            "submissionDate": "2021-02-18T09:12:00",
            "isUserSubmitted": "TRUE",
            "submissionStatus": "Pending",
        })
        assert sighting.occurred_at == datetime(2021, 2, 18, 5, 30, tzinfo=timezone.utc)
        assert sighting.latitude == pytest.approx(30.2672)
        assert sighting.user_submitted is True
        assert sighting.submission_status is SubmissionStatus.PENDING

    def test_missing_coordinate_returns_none(self):
        assert parse_seed_record({"city": "Nowhere", "latitude": 10}) is None

    def test_bad_timestamp_raises(self):
        with pytest.raises(ValueError):
            parse_seed_record({"latitude": 1, "longitude": 1, "dateTime": "March 3rd"})

    def test_bad_status_raises(self):
        with pytest.raises(InvalidStatusError):
            parse_seed_record({"latitude": 1, "longitude": 1, "submissionStatus": "maybe"})


class TestSeedSightings:
    def test_drops_malformed_and_coordinate_less_records(self, store: SightingStore):
        counts = seed_sightings(store, [
            {"city": "Good", "latitude": 1, "longitude": 2},
            {"city": "NoLongitude", "latitude": 1},
            {"city": "BadLatitude", "latitude": "north", "longitude": 2},
            {"city": "OutOfRange", "latitude": 95, "longitude": 2},
            "not an object",
            {"city": "AlsoGood", "latitude": -1, "longitude": -2},
        ])

        assert counts == {"loaded": 2, "malformed": 3, "missing_coordinates": 1}
        assert sorted(s.city for s in store.scan().items) == ["AlsoGood", "Good"]


class TestSeedAll:
    def test_loads_into_empty_store(self, store: SightingStore, tmp_path: Path):
        path = tmp_path / "seed.json"
        path.write_text(json.dumps([{"city": "Reno", "latitude": 39.5, "longitude": -119.8}]))

        counts = seed_all(store, path)

        assert counts["loaded"] == 1
        assert store.count() == 1

    def test_skips_non_empty_store(self, store: SightingStore, tmp_path: Path):
        store.insert(make_sighting())
        path = tmp_path / "seed.json"
        path.write_text(json.dumps([{"city": "Reno", "latitude": 39.5, "longitude": -119.8}]))

        assert seed_all(store, path)["loaded"] == 0
        assert store.count() == 1

    def test_missing_file_is_not_fatal(self, store: SightingStore, tmp_path: Path):
        assert seed_all(store, tmp_path / "absent.json")["loaded"] == 0
        assert store.count() == 0

    def test_non_array_file_is_not_fatal(self, store: SightingStore, tmp_path: Path):
        path = tmp_path / "seed.json"
        path.write_text(json.dumps({"city": "Reno"}))
        assert seed_all(store, path)["loaded"] == 0

    def test_bundled_dataset_loads_cleanly(self, store: SightingStore):
        records = json.loads(Path(settings.seed_data_path).read_text())

        counts = seed_all(store)

        assert counts == {"loaded": len(records), "malformed": 0, "missing_coordinates": 0}
