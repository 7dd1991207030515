import pytest

from staffing.config import load_settings, max_allocation
from staffing.errors import InitializationError
from staffing.service import StaffingDataService


def test_missing_database_url_is_fatal(monkeypatch):
    monkeypatch.delenv("STAFFING_DATABASE_URL", raising=False)
    with pytest.raises(InitializationError):
        load_settings()
    with pytest.raises(InitializationError):
        StaffingDataService.from_settings()


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("STAFFING_DATABASE_URL", f"sqlite:///{tmp_path / 'x.db'}")
    monkeypatch.setenv("STAFFING_PEOPLE_PAGE_SIZE", "25")
    monkeypatch.setenv("STAFFING_LOG_LEVEL", "debug")
    monkeypatch.delenv("STAFFING_MAX_ALLOCATION", raising=False)
    s = load_settings()
    assert s.people_page_size == 25
    assert s.log_level == "DEBUG"
    assert max_allocation() == 100


def test_allocation_cap_override(monkeypatch):
    monkeypatch.setenv("STAFFING_MAX_ALLOCATION", "200")
    assert max_allocation() == 200
    monkeypatch.setenv("STAFFING_MAX_ALLOCATION", "lots")
    with pytest.raises(InitializationError):
        max_allocation()


def test_bad_page_size(monkeypatch):
    monkeypatch.setenv("STAFFING_DATABASE_URL", "sqlite://")
    monkeypatch.setenv("STAFFING_PEOPLE_PAGE_SIZE", "ten")
    with pytest.raises(InitializationError):
        load_settings()


def test_service_from_settings_creates_tables(monkeypatch, tmp_path):
    monkeypatch.setenv("STAFFING_DATABASE_URL", f"sqlite:///{tmp_path / 'x.db'}")
    monkeypatch.delenv("STAFFING_PEOPLE_PAGE_SIZE", raising=False)
    svc = StaffingDataService.from_settings()
    svc.refresh()
    assert svc.hospitals.items == []
    assert svc.people.page_size == 10
    assert svc.loading is False
