"""
StaffingDataService: the one object a session holds to read and change staffing data.
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import Settings, load_settings
from .coverage import CoverageSummary, compute_coverage
from .models import Hospital, Person, utcnow_iso
from .repositories import HospitalRepository, PeopleRepository
from .search import filter_hospitals, filter_people, hospital_label
from .store import RecordStore

logger = logging.getLogger(__name__)

Listener = Callable[["StaffingDataService"], None]


class StaffingDataService:
    def __init__(
        self,
        store: RecordStore,
        page_size: int = 10,
        clock: Callable[[], str] = utcnow_iso,
    ):
        self.store = store
        self.hospitals = HospitalRepository(store, clock=clock, on_change=self._notify)
        self.people = PeopleRepository(store, page_size=page_size, clock=clock, on_change=self._notify)
        self._listeners: List[Listener] = []

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "StaffingDataService":
        """Build against the configured store. Raises InitializationError when unconfigured."""
        settings = settings or load_settings()
        return cls(RecordStore.from_settings(settings), page_size=settings.people_page_size)

    # ---- subscription ----

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener(service)` after every load or successful write. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ---- loading ----

    @property
    def loading(self) -> bool:
        return self.hospitals.loading or self.people.loading

    def refresh(self) -> None:
        """Reload hospitals in full and people from the first page."""
        self.hospitals.load()
        self.people.load()
        logger.info("Refreshed: %d hospitals, %d people loaded", len(self.hospitals.items), len(self.people.items))

    def load_more_people(self) -> List[Person]:
        return self.people.load_more()

    @property
    def has_more_people(self) -> bool:
        return self.people.has_more

    # ---- writes ----

    def add_hospital(self, data: Dict[str, Any]) -> Hospital:
        return self.hospitals.create(data)

    def update_hospital(self, hospital_id: str, changes: Dict[str, Any]) -> Hospital:
        return self.hospitals.update(hospital_id, changes)

    def delete_hospital(self, hospital_id: str) -> None:
        self.hospitals.delete(hospital_id)

    def add_person(self, data: Dict[str, Any]) -> Person:
        return self.people.create(data)

    def update_person(self, person_id: str, changes: Dict[str, Any]) -> Person:
        return self.people.update(person_id, changes)

    def delete_person(self, person_id: str) -> None:
        self.people.delete(person_id)

    # ---- queries ----

    def coverage(self) -> CoverageSummary:
        return compute_coverage(self.hospitals.items, self.people.items)

    def search_hospitals(self, term: str = "") -> List[Hospital]:
        return filter_hospitals(self.hospitals.items, term)

    def search_people(self, term: str = "") -> List[Person]:
        return filter_people(self.people.items, term)

    def people_with_hospitals(self, term: str = "") -> List[Tuple[Person, str]]:
        by_id = {h.id: h for h in self.hospitals.items}
        return [(p, hospital_label(p.current_hospital_id, by_id)) for p in self.search_people(term)]
