"""Moderation status guard.

Any status may move to any other; the guard only insists that the token is
one of pending / approved / rejected (case-insensitive) and that nothing but
the status is written.
"""
import logging
from typing import Any

from app.models.sighting import Sighting, SubmissionStatus
from app.store import SightingStore
from app.utils.audit import log_action

logger = logging.getLogger(__name__)


def with_status(current: Sighting, status: SubmissionStatus) -> Sighting:
    return current.model_copy(update={"submission_status": status})


def update_status(store: SightingStore, sighting_id: str, token: Any, actor: str = "system") -> Sighting:
    """Validate token and persist it as the sighting's status.

    Raises InvalidStatusError before touching the store, NotFoundError if the id
    does not resolve.
    """
    status = SubmissionStatus.parse(token)
    updated = store.modify(sighting_id, lambda current: with_status(current, status))
    logger.info("Sighting %s status -> %s", sighting_id, status.value)
    log_action(actor, "status_changed", sighting_id, status.value)
    return updated
