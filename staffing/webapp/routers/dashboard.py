from fastapi import APIRouter, Depends

from ...coverage import hospital_coverage
from ...service import StaffingDataService
from ..deps import get_service
from ..schemas import DashboardOut, HospitalStatusOut

router = APIRouter()


@router.get("/", response_model=DashboardOut)
def get_dashboard(service: StaffingDataService = Depends(get_service)):
    """Totals and the first few hospitals, recomputed from the loaded data on every call."""
    return DashboardOut.from_summary(service.coverage(), loading=service.loading)


@router.get("/hospitals", response_model=list[HospitalStatusOut])
def get_hospital_statuses(status: str = None, service: StaffingDataService = Depends(get_service)):
    rows = hospital_coverage(service.hospitals.items, service.people.items)
    if status:
        rows = [c for c in rows if c.status == status]
    return [HospitalStatusOut.from_coverage(c) for c in rows]
