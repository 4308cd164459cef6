"""Shared fixtures: a fresh store per test and a TestClient wired to it."""
from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.models.sighting import Sighting, SubmissionStatus
from app.store import SightingStore, get_store
from app.utils.audit import clear_audit_log


def make_sighting(**overrides: Any) -> Sighting:
    """Create a test sighting with default values."""
    fields: dict[str, Any] = {
        "city": "Reno",
        "state": "NV",
        "country": "USA",
        "shape": "disk",
        "duration": "5 minutes",
        "summary": "silent glowing object",
        "latitude": 39.5,
        "longitude": -119.8,
        "submission_status": SubmissionStatus.APPROVED,
    }
    fields.update(overrides)
    return Sighting(**fields)


@pytest.fixture(autouse=True)
def _clean_audit_log():
    clear_audit_log()
    yield
    clear_audit_log()


@pytest.fixture
def store() -> SightingStore:
    return SightingStore()


@pytest.fixture
def client(store: SightingStore):
    # No context manager: the lifespan seed ingest stays out of API tests
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
