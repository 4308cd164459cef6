"""Partial update merge: apply a sparse payload without touching absent or protected fields."""
import logging
from typing import Any, Mapping, Union

from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from app.errors import ValidationError
from app.models.sighting import PROTECTED_FIELDS, Sighting, SightingUpdate
from app.store import SightingStore
from app.utils.audit import log_action

logger = logging.getLogger(__name__)

_PROTECTED_KEYS = frozenset(PROTECTED_FIELDS) | {to_camel(f) for f in PROTECTED_FIELDS} | {"isUserSubmitted"}


def parse_update(payload: Union[SightingUpdate, Mapping[str, Any]]) -> SightingUpdate:
    """Validate a loosely-typed payload into a SightingUpdate.

    Payloads naming a protected field (id, submitter, submission date,
    user-submitted flag, status) are rejected outright.
    """
    if isinstance(payload, SightingUpdate):
        return payload
    if not isinstance(payload, Mapping):
        raise ValidationError("Update payload must be a JSON object")
    protected = sorted(k for k in payload if k in _PROTECTED_KEYS)
    if protected:
        raise ValidationError(f"Fields cannot be changed through a generic edit: {', '.join(protected)}")
    try:
        return SightingUpdate.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


def merge_fields(current: Sighting, update: SightingUpdate) -> Sighting:
    """New record state: present fields from update, everything else from current."""
    return current.model_copy(update=update.changes())


def apply_update(
    store: SightingStore,
    sighting_id: str,
    payload: Union[SightingUpdate, Mapping[str, Any]],
    actor: str = "system",
) -> Sighting:
    """Merge payload into the stored sighting and persist the result. Raises NotFoundError."""
    update = parse_update(payload)
    updated = store.modify(sighting_id, lambda current: merge_fields(current, update))
    fields = ", ".join(update.changes()) or "none"
    logger.info("Updated sighting %s (fields: %s)", sighting_id, fields)
    log_action(actor, "sighting_updated", sighting_id, f"fields: {fields}")
    return updated
