"""In-memory audit log for sighting writes and sync provenance."""
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from app.config import settings


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AuditEntry:
    actor: str
    action: str
    sighting_id: Optional[str]
    details: Optional[str]
    timestamp: datetime = field(default_factory=_utcnow)


_audit_log: deque[AuditEntry] = deque(maxlen=settings.audit_log_size)


def log_action(
    actor: str,
    action: str,
    sighting_id: Optional[str] = None,
    details: Optional[str] = None,
) -> None:
    """Record an action to the in-memory audit log."""
    _audit_log.append(
        AuditEntry(actor=actor, action=action, sighting_id=sighting_id, details=details)
    )


def get_audit_log(limit: int = 100) -> list[AuditEntry]:
    """Retrieve recent audit entries (most recent first)."""
    if limit <= 0:
        return []
    entries = list(_audit_log)
    return list(reversed(entries[-limit:]))


def clear_audit_log() -> None:
    _audit_log.clear()
