"""Pydantic response models for the API."""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..coverage import CoverageSummary, HospitalCoverage
from ..models import GRADE_INFO, Person, grade_level
from ..schemas import Location


class HospitalOut(BaseModel):
    id: str
    name: str
    province: str
    district: str
    type: str
    allocation: int
    notes: Optional[str] = None
    location: Optional[Location] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True


class HospitalStatusOut(HospitalOut):
    assigned_count: int
    percentage: float
    status: str  # full, good, warning, critical

    @classmethod
    def from_coverage(cls, c: HospitalCoverage) -> "HospitalStatusOut":
        base = HospitalOut.model_validate(c.hospital).model_dump()
        return cls(**base, assigned_count=c.assigned_count, percentage=c.percentage, status=c.status)


class TimelineEntryOut(BaseModel):
    start: str = Field(serialization_alias="from")
    end: Optional[str] = Field(default=None, serialization_alias="to")
    hospital_id: str
    grade: str
    note: Optional[str] = None

    class Config:
        from_attributes = True


class PersonOut(BaseModel):
    id: str
    first_name: str
    last_name: str
    slmc_number: str
    national_id: Optional[str] = None
    phone: Optional[str] = None
    phone2: Optional[str] = None
    personal_email: Optional[str] = None
    pgim_email: Optional[str] = None
    address: Optional[str] = None
    gender: Optional[str] = None
    current_hospital_id: Optional[str] = None
    current_grade: str
    grade_label: str = ""
    grade_level: int = 0
    anaesthesia_training_done: bool = False
    hospital_name: str = ""
    timeline: List[TimelineEntryOut] = []
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_person(cls, person: Person, hospital_name: str = "") -> "PersonOut":
        out = cls.model_validate(person)
        out.hospital_name = hospital_name
        out.grade_label = GRADE_INFO.get(person.current_grade, {}).get("label", person.current_grade)
        out.grade_level = grade_level(person.current_grade)
        return out


class PeoplePageOut(BaseModel):
    people: List[PersonOut]
    has_more: bool
    loading: bool = False


class DashboardOut(BaseModel):
    total_hospitals: int
    total_people: int
    total_allocations: int
    current_assignments: int
    vacancies: int
    critical_hospitals: int
    overall_staffing_ratio: float
    overall_percentage: int
    overall_band: str
    status_counts: Dict[str, int]
    top_hospitals: List[HospitalStatusOut]
    more_hospitals: int
    loading: bool = False

    @classmethod
    def from_summary(cls, s: CoverageSummary, loading: bool = False) -> "DashboardOut":
        return cls(
            total_hospitals=s.total_hospitals,
            total_people=s.total_people,
            total_allocations=s.total_allocations,
            current_assignments=s.current_assignments,
            vacancies=s.vacancies,
            critical_hospitals=s.critical_hospitals,
            overall_staffing_ratio=s.overall_staffing_ratio,
            overall_percentage=s.overall_percentage,
            overall_band=s.overall_band,
            status_counts=s.status_counts,
            top_hospitals=[HospitalStatusOut.from_coverage(c) for c in s.top_hospitals],
            more_hospitals=s.more_hospitals,
            loading=loading,
        )
