"""Tests for app.services.merge - sparse updates through the generic edit path."""
from __future__ import annotations

from datetime import datetime

import pytest

from app.errors import NotFoundError, ValidationError
from app.models.sighting import MUTABLE_FIELDS, SightingUpdate, SubmissionStatus
from app.services.merge import apply_update, merge_fields, parse_update
from app.store import SightingStore
from app.utils.audit import get_audit_log

from conftest import make_sighting


@pytest.fixture
def stored(store: SightingStore):
    return store.insert(
        make_sighting(
            submitted_by="skywatcher",
            submission_date=datetime(2024, 5, 1, 12, 0, 0),
            user_submitted=True,
            submission_status=SubmissionStatus.PENDING,
            posted="2024-05-02",
        )
    )


class TestParseUpdate:
    def test_presence_tracks_supplied_keys(self):
        update = parse_update({"city": "Sparks", "latitude": 39.6})
        assert update.changes() == {"city": "Sparks", "latitude": 39.6}

    def test_already_parsed_update_passes_through(self):
        update = SightingUpdate(city="Sparks")
        assert parse_update(update) is update

    def test_empty_string_is_a_value(self):
        assert parse_update({"summary": ""}).changes() == {"summary": ""}

    @pytest.mark.parametrize(
        "key",
        ["submissionStatus", "submission_status", "submittedBy", "submissionDate", "userSubmitted", "id"],
    )
    def test_protected_fields_rejected(self, key):
        with pytest.raises(ValidationError, match=key):
            parse_update({"city": "Sparks", key: "anything"})

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            parse_update({"colour": "green"})

    def test_explicit_null_rejected(self):
        with pytest.raises(ValidationError, match="explicit null"):
            parse_update({"city": None})

    def test_out_of_range_latitude_rejected(self):
        with pytest.raises(ValidationError):
            parse_update({"latitude": 91})

    def test_non_mapping_rejected(self):
        with pytest.raises(ValidationError):
            parse_update(["city", "Reno"])


class TestMergeFields:
    def test_absent_fields_untouched(self, stored):
        merged = merge_fields(stored, SightingUpdate(summary="new summary"))

        assert merged.summary == "new summary"
        for name in MUTABLE_FIELDS:
            if name != "summary":
                assert getattr(merged, name) == getattr(stored, name)

    def test_every_mutable_field_applied(self, stored):
        values = {
            "city": "Sparks",
            "state": "CA",
            "country": "Mexico",
            "shape": "cigar",
            "duration": "1 hour",
            "summary": "changed",
            "latitude": -10.5,
            "longitude": 20.25,
        }
        merged = merge_fields(stored, SightingUpdate(**values))
        for name, value in values.items():
            assert getattr(merged, name) == value

    def test_fields_outside_mutable_set_untouched(self, stored):
        merged = merge_fields(stored, SightingUpdate(city="Sparks", latitude=1.0, longitude=2.0))

        for name in ("id", "submitted_by", "submission_date", "user_submitted",
                     "submission_status", "occurred_at", "posted"):
            assert getattr(merged, name) == getattr(stored, name)


class TestApplyUpdate:
    def test_persists_merged_record(self, store: SightingStore, stored):
        result = apply_update(store, stored.id, {"shape": "triangle"})

        assert result.shape == "triangle"
        assert store.get(stored.id) == result
        assert result.city == stored.city

    def test_unknown_id(self, store: SightingStore):
        with pytest.raises(NotFoundError):
            apply_update(store, "SGT-MISSING", {"city": "Sparks"})

    def test_status_tampering_leaves_record_unchanged(self, store: SightingStore, stored):
        with pytest.raises(ValidationError):
            apply_update(store, stored.id, {"summary": "x", "submissionStatus": "approved"})

        assert store.get(stored.id) == stored

    def test_empty_payload_is_noop(self, store: SightingStore, stored):
        assert apply_update(store, stored.id, {}) == stored

    def test_writes_audit_entry(self, store: SightingStore, stored):
        apply_update(store, stored.id, {"city": "Sparks"}, actor="admin")

        entry = get_audit_log(1)[0]
        assert entry.actor == "admin"
        assert entry.action == "sighting_updated"
        assert entry.sighting_id == stored.id
        assert "city" in entry.details
