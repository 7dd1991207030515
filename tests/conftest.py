from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from staffing.database import init_db, make_engine, make_session_factory
from staffing.service import StaffingDataService
from staffing.store import RecordStore


class StepClock:
    """Deterministic clock: one second later on every call."""

    def __init__(self):
        self.base = datetime(2025, 1, 1, tzinfo=timezone.utc)
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        return (self.base + timedelta(seconds=self.calls)).isoformat(timespec="milliseconds")


@pytest.fixture()
def clock():
    return StepClock()


@pytest.fixture()
def store(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'staffing.db'}")
    init_db(engine)
    yield RecordStore(make_session_factory(engine))
    engine.dispose()


@pytest.fixture()
def service(store, clock):
    svc = StaffingDataService(store, page_size=10, clock=clock)
    svc.refresh()
    return svc


def hospital_data(name="General Hospital", allocation=10, **extra):
    data = {
        "name": name,
        "province": "Western",
        "district": "Colombo",
        "type": "GENERAL_HOSPITAL",
        "allocation": allocation,
    }
    data.update(extra)
    return data


def person_data(first="Asha", last="Perera", hospital_id=None, grade="MO", **extra):
    data = {
        "first_name": first,
        "last_name": last,
        "slmc_number": f"S-{first}-{last}"[:20],
        "current_grade": grade,
        "anaesthesia_training_done": False,
    }
    if hospital_id is not None:
        data["current_hospital_id"] = hospital_id
    data.update(extra)
    return data
