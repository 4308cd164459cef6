"""Apply externally sourced update events with the same rules as direct edits.

Non-status fields go through the merge rules, a status (if present) through the
status guard. Both are applied inside one store write so a reader never sees
the merge without the status change. Provenance ends up in the audit log only;
it is not stored on the sighting.
"""
import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from app.errors import ValidationError
from app.models.sighting import Sighting, SubmissionStatus
from app.models.sync import SightingUpdateEvent
from app.services.merge import merge_fields
from app.services.status import with_status
from app.store import SightingStore
from app.utils.audit import log_action

logger = logging.getLogger(__name__)


def parse_event(event: Union[SightingUpdateEvent, Mapping[str, Any]]) -> SightingUpdateEvent:
    if isinstance(event, SightingUpdateEvent):
        return event
    try:
        return SightingUpdateEvent.model_validate(event)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


def handle_sighting_update(
    store: SightingStore,
    event: Union[SightingUpdateEvent, Mapping[str, Any]],
) -> Sighting:
    """Apply one update event. Raises ValidationError, InvalidStatusError or NotFoundError."""
    event = parse_event(event)
    payload = event.payload
    source = event.source

    status: Optional[SubmissionStatus] = None
    if "submission_status" in payload.model_fields_set:
        status = SubmissionStatus.parse(payload.submission_status)

    logger.info(
        "Processing update for sighting %s from %s (timestamp %s)",
        event.target_id,
        source.source_system,
        source.update_timestamp.isoformat(),
    )

    def mutate(current: Sighting) -> Sighting:
        merged = merge_fields(current, payload)
        return with_status(merged, status) if status is not None else merged

    updated = store.modify(event.target_id, mutate)

    fields = list(payload.changes())
    if status is not None:
        fields.append("submission_status")
    details = (
        f"source={source.source_system}; updated_at={source.update_timestamp.isoformat()}; "
        f"fields={', '.join(fields) or 'none'}"
    )
    log_action(source.updated_by_user_id or source.source_system, "sync_update", event.target_id, details)
    logger.info("Successfully updated sighting %s from %s", event.target_id, source.source_system)
    return updated
