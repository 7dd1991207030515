from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ...coverage import hospital_coverage
from ...schemas import HospitalCreate, HospitalUpdate
from ...service import StaffingDataService
from ..deps import get_service
from ..schemas import HospitalOut, HospitalStatusOut

router = APIRouter()


def _get_hospital(service: StaffingDataService, hospital_id: str):
    h = service.hospitals.find(hospital_id)
    if not h:
        raise HTTPException(404, "Hospital not found")
    return h


@router.get("/", response_model=list[HospitalStatusOut])
def list_hospitals(q: Optional[str] = None, service: StaffingDataService = Depends(get_service)):
    """Hospitals matching `q` (name, province, district) with their staffing status."""
    rows = hospital_coverage(service.search_hospitals(q or ""), service.people.items)
    return [HospitalStatusOut.from_coverage(c) for c in rows]


@router.get("/{hospital_id}", response_model=HospitalOut)
def get_hospital(hospital_id: str, service: StaffingDataService = Depends(get_service)):
    return HospitalOut.model_validate(_get_hospital(service, hospital_id))


@router.post("/", response_model=HospitalOut)
def create_hospital(data: HospitalCreate, service: StaffingDataService = Depends(get_service)):
    h = service.add_hospital(data.model_dump(exclude_none=True))
    return HospitalOut.model_validate(h)


@router.patch("/{hospital_id}", response_model=HospitalOut)
def update_hospital(hospital_id: str, data: HospitalUpdate, service: StaffingDataService = Depends(get_service)):
    _get_hospital(service, hospital_id)
    h = service.update_hospital(hospital_id, data.model_dump(exclude_unset=True))
    return HospitalOut.model_validate(h)


@router.delete("/{hospital_id}")
def delete_hospital(hospital_id: str, service: StaffingDataService = Depends(get_service)):
    """Delete a hospital. People assigned to it keep the id and show as 'Hospital not found'."""
    _get_hospital(service, hospital_id)
    service.delete_hospital(hospital_id)
    return {"ok": True}
