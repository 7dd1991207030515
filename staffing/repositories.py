"""
In-memory replicas of the hospitals and people collections.

Each repository keeps an ordered list in sync with the record store. Writes go to the
store first; the local list is only touched after the store accepted the write, so a
failed call leaves it exactly as it was. Nothing here retries.

One repository is shared by every request thread of the web app. Each load, load-more
and write holds the repository lock from reading its state until the list is rebound.
"""
import logging
import threading
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

from .errors import PersistenceError
from .models import Hospital, Person, TimelineEntry, compact, utcnow_iso
from .store import Cursor, Page, RecordStore
from .timeline import initial_timeline, reassign

logger = logging.getLogger(__name__)


def _store_value(v: Any) -> Any:
    if isinstance(v, TimelineEntry):
        return v.to_record()
    if isinstance(v, list):
        return [_store_value(x) for x in v]
    if isinstance(v, dict):
        return compact(v)
    return v


class EntityRepository:
    """Shared create/update/delete for one collection. Subclasses decide load order and placement."""

    collection = ""
    record_type: type = object

    def __init__(
        self,
        store: RecordStore,
        clock: Callable[[], str] = utcnow_iso,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self.store = store
        self.items: List[Any] = []
        self.loading = True
        self._clock = clock
        self._on_change = on_change
        # reentrant: change listeners may call back into the repository
        self._lock = threading.RLock()

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def find(self, record_id: str) -> Optional[Any]:
        for item in self.items:
            if item.id == record_id:
                return item
        return None

    # ---- hooks ----

    def _prepare_create(self, data: Dict[str, Any], now: str) -> Dict[str, Any]:
        return data

    def _prepare_update(self, current: Any, changes: Dict[str, Any], now: str) -> Dict[str, Any]:
        return changes

    def _place_new(self, record: Any) -> List[Any]:
        raise NotImplementedError

    def _place_merged(self, items: List[Any]) -> List[Any]:
        return items

    # ---- operations ----

    def _current(self, record_id: str) -> Any:
        current = self.find(record_id)
        if current is not None:
            return current
        # Not on a loaded page yet (people); the stored copy is the baseline.
        data = self.store.get(self.collection, record_id)
        if data is None:
            raise PersistenceError(f"{self.collection}/{record_id} does not exist", self.collection, record_id)
        return self.record_type.from_record(data)

    def create(self, data: Dict[str, Any]) -> Any:
        with self._lock:
            now = self._clock()
            data = self._prepare_create(dict(data), now)
            record = self.record_type.from_record({**data, "created_at": now, "updated_at": now})
            try:
                record_id = self.store.add(self.collection, record.to_record())
            except PersistenceError:
                logger.exception("Error adding %s record", self.collection)
                raise
            record = replace(record, id=record_id)
            self.items = self._place_new(record)
            logger.info("Added %s/%s", self.collection, record_id)
            self._changed()
            return record

    def update(self, record_id: str, changes: Dict[str, Any]) -> Any:
        """Write only the given fields (None clears one) and merge them into the local copy."""
        with self._lock:
            try:
                current = self._current(record_id)
                now = self._clock()
                changes = self._prepare_update(current, dict(changes), now)
                changes["updated_at"] = now
                self.store.update(self.collection, record_id, {k: _store_value(v) for k, v in changes.items()})
            except PersistenceError:
                logger.exception("Error updating %s/%s", self.collection, record_id)
                raise
            merged = current.merged(changes)
            self.items = self._place_merged([merged if item.id == record_id else item for item in self.items])
            logger.info("Updated %s/%s (%s)", self.collection, record_id, ", ".join(sorted(changes)))
            self._changed()
            return merged

    def delete(self, record_id: str) -> None:
        """Delete remotely, then locally. Other collections are not consulted."""
        with self._lock:
            try:
                self.store.delete(self.collection, record_id)
            except PersistenceError:
                logger.exception("Error deleting %s/%s", self.collection, record_id)
                raise
            self.items = [item for item in self.items if item.id != record_id]
            logger.info("Deleted %s/%s", self.collection, record_id)
            self._changed()


def _by_name(hospitals: List[Hospital]) -> List[Hospital]:
    return sorted(hospitals, key=lambda h: h.name.casefold())


class HospitalRepository(EntityRepository):
    """Whole collection, kept sorted by name (case-insensitive)."""

    collection = "hospitals"
    record_type = Hospital

    def load(self) -> None:
        with self._lock:
            self.loading = True
            try:
                records = self.store.read_all(self.collection, order_by="name")
                # the store's collation is case-sensitive; match _place_new's order
                self.items = _by_name([Hospital.from_record(r) for r in records])
                self._changed()
            except PersistenceError:
                logger.exception("Error loading hospitals")
            finally:
                self.loading = False

    def _place_new(self, record: Hospital) -> List[Hospital]:
        return _by_name(self.items + [record])

    def _place_merged(self, items: List[Hospital]) -> List[Hospital]:
        return _by_name(items)


class PeopleRepository(EntityRepository):
    """
    People by last name, one page at a time.
    New people are prepended rather than placed alphabetically; load_more appends
    without de-duplication.
    """

    collection = "people"
    record_type = Person
    order_by = "last_name"

    def __init__(self, store: RecordStore, page_size: int = 10, **kwargs):
        super().__init__(store, **kwargs)
        self.page_size = page_size
        self.cursor: Optional[Cursor] = None
        self.has_more = True

    def _advance(self, page: Page) -> None:
        full = len(page.records) == self.page_size
        self.has_more = full
        self.cursor = page.last if full else None

    def load(self) -> None:
        """Fresh load: first page, list replaced, cursor reset."""
        with self._lock:
            self.loading = True
            try:
                page = self.store.read_page(self.collection, self.order_by, self.page_size)
                self.items = [Person.from_record(r) for r in page.records]
                self._advance(page)
                self._changed()
            except PersistenceError:
                logger.exception("Error loading people")
            finally:
                self.loading = False

    def load_more(self) -> List[Person]:
        """Append the next page after the cursor. Returns the people added."""
        with self._lock:
            if not self.has_more or self.cursor is None:
                return []
            try:
                page = self.store.read_page(self.collection, self.order_by, self.page_size, start_after=self.cursor)
            except PersistenceError:
                logger.exception("Error loading more people")
                return []
            added = [Person.from_record(r) for r in page.records]
            self.items = self.items + added
            self._advance(page)
            self._changed()
            return added

    def _prepare_create(self, data: Dict[str, Any], now: str) -> Dict[str, Any]:
        if not data.get("timeline"):
            data["timeline"] = [
                e.to_record() for e in initial_timeline(data.get("current_hospital_id"), data["current_grade"], now)
            ]
        return data

    def _prepare_update(self, current: Person, changes: Dict[str, Any], now: str) -> Dict[str, Any]:
        timeline = reassign(current, changes, now)
        if timeline is not None:
            changes["timeline"] = timeline
        return changes

    def _place_new(self, record: Person) -> List[Person]:
        return [record] + self.items
