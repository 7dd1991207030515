from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ...models import Person
from ...schemas import PersonCreate, PersonUpdate
from ...search import hospital_label
from ...service import StaffingDataService
from ..deps import get_service
from ..schemas import PeoplePageOut, PersonOut, TimelineEntryOut

router = APIRouter()


def _get_person(service: StaffingDataService, person_id: str) -> Person:
    """Loaded copy first; people on pages not fetched yet come from the store."""
    p = service.people.find(person_id)
    if p:
        return p
    data = service.store.get("people", person_id)
    if not data:
        raise HTTPException(404, "Person not found")
    return Person.from_record(data)


def _out(service: StaffingDataService, person: Person) -> PersonOut:
    by_id = {h.id: h for h in service.hospitals.items}
    return PersonOut.from_person(person, hospital_label(person.current_hospital_id, by_id))


def _page(service: StaffingDataService, q: Optional[str] = None) -> PeoplePageOut:
    return PeoplePageOut(
        people=[PersonOut.from_person(p, label) for p, label in service.people_with_hospitals(q or "")],
        has_more=service.has_more_people,
        loading=service.people.loading,
    )


@router.get("/", response_model=PeoplePageOut)
def list_people(q: Optional[str] = None, service: StaffingDataService = Depends(get_service)):
    """Loaded people matching `q` (name, SLMC number, emails)."""
    return _page(service, q)


@router.post("/load-more", response_model=PeoplePageOut)
def load_more_people(q: Optional[str] = None, service: StaffingDataService = Depends(get_service)):
    service.load_more_people()
    return _page(service, q)


@router.get("/{person_id}", response_model=PersonOut)
def get_person(person_id: str, service: StaffingDataService = Depends(get_service)):
    return _out(service, _get_person(service, person_id))


@router.get("/{person_id}/timeline", response_model=list[TimelineEntryOut])
def get_timeline(person_id: str, service: StaffingDataService = Depends(get_service)):
    return [TimelineEntryOut.model_validate(e) for e in _get_person(service, person_id).timeline]


@router.post("/", response_model=PersonOut)
def create_person(data: PersonCreate, service: StaffingDataService = Depends(get_service)):
    p = service.add_person(data.model_dump(exclude_none=True))
    return _out(service, p)


@router.patch("/{person_id}", response_model=PersonOut)
def update_person(person_id: str, data: PersonUpdate, service: StaffingDataService = Depends(get_service)):
    _get_person(service, person_id)
    p = service.update_person(person_id, data.model_dump(exclude_unset=True))
    return _out(service, p)


@router.delete("/{person_id}")
def delete_person(person_id: str, service: StaffingDataService = Depends(get_service)):
    _get_person(service, person_id)
    service.delete_person(person_id)
    return {"ok": True}
