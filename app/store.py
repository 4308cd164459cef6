"""In-memory sighting store with optional JSON snapshot persistence."""
import json
import logging
import threading
from pathlib import Path
from typing import Callable, Iterable, Optional

from app.config import settings
from app.errors import NotFoundError, StoreError
from app.models.page import PageRequest, SightingPage
from app.models.sighting import Sighting
from app.utils.ids import generate_sighting_id

logger = logging.getLogger(__name__)

Predicate = Callable[[Sighting], bool]
Mutation = Callable[[Sighting], Sighting]

_instance: "SightingStore | None" = None
_instance_lock = threading.Lock()


class SightingStore:
    """Keyed sighting storage.

    Records are kept in insertion order, which is the scan order, so paging a
    fixed predicate never duplicates or skips rows. Every write holds the lock
    for its whole resolve-then-write sequence; a failed snapshot write rolls
    the in-memory change back before raising StoreError.
    """

    def __init__(self, snapshot_path: Optional[Path] = None) -> None:
        self._records: dict[str, Sighting] = {}
        self._lock = threading.RLock()
        self._snapshot_path = snapshot_path
        if snapshot_path is not None and snapshot_path.exists():
            self._load_snapshot()

    @classmethod
    def get_instance(cls) -> "SightingStore":
        """Return the process-wide store, built from settings on first use."""
        global _instance
        if _instance is None:
            with _instance_lock:
                if _instance is None:
                    path = Path(settings.store_snapshot_path) if settings.store_snapshot_path else None
                    _instance = cls(snapshot_path=path)
        return _instance

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def get(self, sighting_id: str) -> Sighting:
        with self._lock:
            sighting = self._records.get(sighting_id)
        if sighting is None:
            raise NotFoundError(sighting_id)
        return sighting

    def insert(self, sighting: Sighting) -> Sighting:
        """Store a new record under a freshly assigned id."""
        return self.insert_many([sighting])[0]

    def insert_many(self, sightings: Iterable[Sighting]) -> list[Sighting]:
        """Store several records in one write (used by the seed ingest)."""
        stored = [s.model_copy(update={"id": generate_sighting_id()}) for s in sightings]
        with self._lock:
            for s in stored:
                self._records[s.id] = s
            try:
                self._persist()
            except StoreError:
                for s in stored:
                    del self._records[s.id]
                raise
        return stored

    def update(self, sighting_id: str, sighting: Sighting) -> Sighting:
        """Replace the record stored under sighting_id. The id itself never changes."""
        return self.modify(sighting_id, lambda _current: sighting)

    def modify(self, sighting_id: str, mutate: Mutation) -> Sighting:
        """Atomically resolve a record, derive its new state and write it back."""
        with self._lock:
            current = self._records.get(sighting_id)
            if current is None:
                raise NotFoundError(sighting_id)
            updated = mutate(current)
            if updated.id != sighting_id:
                updated = updated.model_copy(update={"id": sighting_id})
            self._records[sighting_id] = updated
            try:
                self._persist()
            except StoreError:
                self._records[sighting_id] = current
                raise
        return updated

    def scan(self, predicate: Optional[Predicate] = None, page: Optional[PageRequest] = None) -> SightingPage:
        """Return one page of records matching predicate, in store order unless a sort is requested."""
        page = page or PageRequest(size=settings.default_page_size)
        with self._lock:
            rows = list(self._records.values())
        if predicate is not None:
            rows = [s for s in rows if predicate(s)]
        if page.sort_by:
            rows = _sorted(rows, page.sort_by, page.descending)
        items = rows[page.offset:page.offset + page.size]
        return SightingPage.build(items, page, total=len(rows))

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
            self._persist()

    def _persist(self) -> None:
        if self._snapshot_path is None:
            return
        data = [s.model_dump(mode="json", by_alias=True) for s in self._records.values()]
        tmp = self._snapshot_path.with_suffix(self._snapshot_path.suffix + ".tmp")
        try:
            self._snapshot_path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data), encoding="utf-8")
            tmp.replace(self._snapshot_path)
        except OSError as e:
            logger.error("Failed to write store snapshot %s: %s", self._snapshot_path, e)
            raise StoreError(f"Failed to persist sightings: {e}") from e

    def _load_snapshot(self) -> None:
        try:
            data = json.loads(self._snapshot_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StoreError(f"Failed to read store snapshot {self._snapshot_path}: {e}") from e
        for raw in data:
            sighting = Sighting.model_validate(raw)
            self._records[sighting.id] = sighting
        logger.info("Loaded %d sightings from snapshot %s", len(self._records), self._snapshot_path)


def _sorted(rows: list[Sighting], attr: str, descending: bool) -> list[Sighting]:
    """Stable sort on attr; records with no value go last in either direction."""

    def key(s: Sighting):
        value = getattr(s, attr)
        return value.lower() if isinstance(value, str) else value

    present = [s for s in rows if getattr(s, attr) is not None]
    missing = [s for s in rows if getattr(s, attr) is None]
    return sorted(present, key=key, reverse=descending) + missing


def get_store() -> SightingStore:
    """FastAPI dependency: the process-wide store."""
    return SightingStore.get_instance()
