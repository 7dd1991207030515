import copy
import threading

import pytest

from staffing.errors import PersistenceError
from staffing.search import HOSPITAL_NOT_FOUND
from staffing.timeline import INITIAL_NOTE, UPDATED_NOTE

from .conftest import hospital_data, person_data


def _seed_people(store, n):
    for i in range(n):
        store.add("people", {
            "first_name": "P",
            "last_name": f"Person{i:02d}",
            "slmc_number": str(i),
            "current_grade": "MO",
            "timeline": [],
        })


def test_hospitals_kept_sorted_by_name(service):
    service.add_hospital(hospital_data("Zebra Clinic"))
    service.add_hospital(hospital_data("Alpha Base"))
    assert [h.name for h in service.hospitals.items] == ["Alpha Base", "Zebra Clinic"]


def test_hospital_create_sets_timestamps_and_id(service, store):
    h = service.add_hospital(hospital_data("Mid", notes="ICU only"))
    assert h.id
    assert h.created_at == h.updated_at
    stored = store.get("hospitals", h.id)
    assert stored["notes"] == "ICU only"
    assert stored["created_at"] == h.created_at


def test_hospital_update_resorts(service):
    a = service.add_hospital(hospital_data("Alpha"))
    service.add_hospital(hospital_data("Beta"))
    updated = service.update_hospital(a.id, {"name": "Gamma"})
    assert updated.updated_at > a.updated_at
    assert updated.created_at == a.created_at
    assert [h.name for h in service.hospitals.items] == ["Beta", "Gamma"]


def test_full_load_replaces_list(service, store):
    store.add("hospitals", hospital_data("B"))
    store.add("hospitals", hospital_data("A"))
    service.hospitals.load()
    assert [h.name for h in service.hospitals.items] == ["A", "B"]
    assert service.hospitals.loading is False


def test_full_load_orders_names_case_insensitively(service, store):
    store.add("hospitals", hospital_data("alpha clinic"))
    store.add("hospitals", hospital_data("Beta"))
    service.hospitals.load()
    assert [h.name for h in service.hospitals.items] == ["alpha clinic", "Beta"]
    service.add_hospital(hospital_data("Zed"))
    assert [h.name for h in service.hospitals.items] == ["alpha clinic", "Beta", "Zed"]


def test_load_failure_keeps_list(service, monkeypatch):
    service.add_hospital(hospital_data("Kept"))

    def boom(*a, **kw):
        raise PersistenceError("offline", "hospitals")

    monkeypatch.setattr(service.store, "read_all", boom)
    service.hospitals.load()
    assert [h.name for h in service.hospitals.items] == ["Kept"]
    assert service.hospitals.loading is False


def test_people_pagination(service, store):
    _seed_people(store, 25)
    service.people.load()
    assert len(service.people.items) == 10
    assert service.has_more_people is True

    service.load_more_people()
    assert len(service.people.items) == 20
    assert service.has_more_people is True

    added = service.load_more_people()
    assert len(added) == 5
    assert len(service.people.items) == 25
    assert service.has_more_people is False
    assert service.people.cursor is None
    assert [p.last_name for p in service.people.items] == [f"Person{i:02d}" for i in range(25)]

    assert service.load_more_people() == []


def test_exact_page_boundary(service, store):
    _seed_people(store, 10)
    service.people.load()
    assert service.has_more_people is True
    assert service.load_more_people() == []
    assert service.has_more_people is False
    assert len(service.people.items) == 10


def test_fresh_load_resets_cursor(service, store):
    _seed_people(store, 15)
    service.people.load()
    service.load_more_people()
    assert len(service.people.items) == 15
    service.people.load()
    assert len(service.people.items) == 10
    assert service.has_more_people is True
    assert service.people.cursor is not None


def test_person_create_prepends_and_seeds_timeline(service, store):
    _seed_people(store, 3)
    service.people.load()
    h = service.add_hospital(hospital_data())
    p = service.add_person(person_data("Zed", "Zulu", hospital_id=h.id, grade="REGISTRAR"))
    assert service.people.items[0] is p
    assert len(p.timeline) == 1
    entry = p.timeline[0]
    assert (entry.hospital_id, entry.grade, entry.note, entry.end) == (h.id, "REGISTRAR", INITIAL_NOTE, None)
    assert store.get("people", p.id)["timeline"][0]["from"] == p.created_at


def test_unassigned_person_omits_hospital(service, store):
    p = service.add_person(person_data())
    assert "current_hospital_id" not in store.get("people", p.id)
    assert p.timeline[0].hospital_id == ""


def test_reassignment_appends_timeline(service, store):
    x = service.add_hospital(hospital_data("X"))
    y = service.add_hospital(hospital_data("Y"))
    p = service.add_person(person_data(hospital_id=x.id))
    updated = service.update_person(p.id, {"current_hospital_id": y.id})

    assert len(updated.timeline) == 2
    assert updated.timeline[0].end == updated.updated_at
    assert updated.timeline[1].start == updated.updated_at
    assert (updated.timeline[1].hospital_id, updated.timeline[1].note) == (y.id, UPDATED_NOTE)
    assert updated.open_entry is updated.timeline[1]
    stored = store.get("people", p.id)
    assert stored["current_hospital_id"] == y.id
    assert [e.get("to") for e in stored["timeline"]] == [updated.updated_at, None]
    assert service.people.find(p.id) is updated


def test_update_without_assignment_change_keeps_timeline(service, store):
    x = service.add_hospital(hospital_data("X"))
    p = service.add_person(person_data(hospital_id=x.id))
    updated = service.update_person(p.id, {"phone": "0771234567", "current_hospital_id": x.id})
    assert updated.timeline == p.timeline
    assert len(store.get("people", p.id)["timeline"]) == 1


def test_people_update_merges_in_place(service):
    a = service.add_person(person_data("A", "Alpha"))
    b = service.add_person(person_data("B", "Beta"))
    service.update_person(a.id, {"last_name": "Aardvark"})
    assert [p.id for p in service.people.items] == [b.id, a.id]


def test_update_can_clear_optional_field(service, store):
    p = service.add_person(person_data(phone="0771234567"))
    updated = service.update_person(p.id, {"phone": None})
    assert updated.phone is None
    assert "phone" not in store.get("people", p.id)


def test_update_person_not_loaded_yet(service, store):
    _seed_people(store, 12)
    service.people.load()
    last = store.read_page("people", "last_name", 20).records[-1]
    assert service.people.find(last["id"]) is None
    updated = service.update_person(last["id"], {"current_grade": "REGISTRAR"})
    assert updated.current_grade == "REGISTRAR"
    assert len(updated.timeline) == 1
    assert service.people.find(last["id"]) is None


def test_failed_update_leaves_local_state(service, monkeypatch):
    x = service.add_hospital(hospital_data("X"))
    p = service.add_person(person_data(hospital_id=x.id))
    before = copy.deepcopy(service.people.items)

    def boom(*a, **kw):
        raise PersistenceError("write rejected", "people", p.id)

    monkeypatch.setattr(service.store, "update", boom)
    with pytest.raises(PersistenceError):
        service.update_person(p.id, {"current_hospital_id": None, "first_name": "Changed"})
    assert service.people.items == before
    assert len(service.people.items[0].timeline) == 1
    assert service.people.items[0].timeline[0].end is None


def test_failed_create_and_delete_leave_local_state(service, monkeypatch):
    h = service.add_hospital(hospital_data("X"))

    def boom(*a, **kw):
        raise PersistenceError("offline", "hospitals")

    monkeypatch.setattr(service.store, "add", boom)
    monkeypatch.setattr(service.store, "delete", boom)
    with pytest.raises(PersistenceError):
        service.add_hospital(hospital_data("Y"))
    with pytest.raises(PersistenceError):
        service.delete_hospital(h.id)
    assert [x.name for x in service.hospitals.items] == ["X"]


def test_update_missing_record_raises(service):
    with pytest.raises(PersistenceError):
        service.update_hospital("nope", {"name": "X"})


def test_deleting_hospital_leaves_people_alone(service, store):
    h = service.add_hospital(hospital_data("Gone", allocation=2))
    other = service.add_hospital(hospital_data("Other", allocation=2))
    p = service.add_person(person_data(hospital_id=h.id))

    service.delete_hospital(h.id)

    assert store.get("hospitals", h.id) is None
    assert store.get("people", p.id)["current_hospital_id"] == h.id
    assert service.people.find(p.id) is p
    summary = service.coverage()
    assert [c.hospital.id for c in summary.hospitals] == [other.id]
    assert summary.current_assignments == 1
    assert dict((q.id, label) for q, label in service.people_with_hospitals())[p.id] == HOSPITAL_NOT_FOUND


def test_delete_person(service, store):
    p = service.add_person(person_data())
    service.delete_person(p.id)
    assert service.people.items == []
    assert store.get("people", p.id) is None


def test_subscribers_are_notified(service):
    seen = []
    unsubscribe = service.subscribe(lambda svc: seen.append(len(svc.hospitals.items)))
    service.add_hospital(hospital_data("A"))
    service.add_hospital(hospital_data("B"))
    unsubscribe()
    service.add_hospital(hospital_data("C"))
    assert seen == [1, 2]


def _overlapping(monkeypatch, store, name):
    """Make two threads meet inside store.<name> unless something serialises them."""
    barrier = threading.Barrier(2, timeout=0.5)
    original = getattr(store, name)

    def wrapped(*a, **kw):
        try:
            barrier.wait()
        except threading.BrokenBarrierError:
            pass
        return original(*a, **kw)

    monkeypatch.setattr(store, name, wrapped)


def _run_twice(target):
    threads = [threading.Thread(target=target) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()


def test_concurrent_load_more_fetches_each_page_once(service, store, monkeypatch):
    _seed_people(store, 25)
    service.people.load()
    _overlapping(monkeypatch, store, "read_page")

    _run_twice(service.load_more_people)

    names = [p.last_name for p in service.people.items]
    assert len(names) == 25
    assert len(set(names)) == 25
    assert service.has_more_people is False


def test_concurrent_creates_both_kept(service, store, monkeypatch):
    _overlapping(monkeypatch, store, "add")
    created = []

    def add():
        created.append(service.add_hospital(hospital_data(f"H{threading.get_ident()}")))

    _run_twice(add)

    assert len(service.hospitals.items) == 2
    assert {h.id for h in service.hospitals.items} == {h.id for h in created}
