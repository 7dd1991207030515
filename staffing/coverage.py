"""
Staffing coverage: assigned-vs-allocated per hospital and across the system.
Pure functions over snapshots; nothing is cached, callers recompute on every read.
"""
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .models import Hospital, Person

FULL = "full"
GOOD = "good"
WARNING = "warning"
CRITICAL = "critical"

STATUSES = [FULL, GOOD, WARNING, CRITICAL]

DASHBOARD_TOP = 5  # hospitals listed on the dashboard card


@dataclass
class HospitalCoverage:
    hospital: Hospital
    assigned_count: int
    percentage: float
    status: str


@dataclass
class CoverageSummary:
    hospitals: List[HospitalCoverage]
    total_hospitals: int
    total_people: int
    total_allocations: int
    current_assignments: int
    vacancies: int              # not clamped: negative when over-assigned
    critical_hospitals: int
    overall_staffing_ratio: float
    status_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def overall_percentage(self) -> int:
        return round(self.overall_staffing_ratio * 100)

    @property
    def overall_band(self) -> str:
        return overall_band(self.overall_staffing_ratio)

    @property
    def top_hospitals(self) -> List[HospitalCoverage]:
        return self.hospitals[:DASHBOARD_TOP]

    @property
    def more_hospitals(self) -> int:
        return max(0, len(self.hospitals) - DASHBOARD_TOP)


def occupancy_percentage(assigned: int, allocation: int) -> float:
    if allocation > 0:
        return assigned / allocation * 100
    return 0.0


def classify(percentage: float) -> str:
    if percentage >= 100:
        return FULL
    if percentage >= 80:
        return GOOD
    if percentage >= 50:
        return WARNING
    return CRITICAL


def overall_band(ratio: float) -> str:
    """Colour band of the system-wide progress bar (no FULL level there)."""
    if ratio >= 0.8:
        return GOOD
    if ratio >= 0.6:
        return WARNING
    return CRITICAL


def assigned_counts(people: Iterable[Person]) -> Counter:
    """People per current hospital id, grouped once per call."""
    return Counter(p.current_hospital_id for p in people if p.current_hospital_id)


def hospital_coverage(hospitals: Iterable[Hospital], people: Iterable[Person]) -> List[HospitalCoverage]:
    counts = assigned_counts(people)
    out = []
    for h in hospitals:
        assigned = counts.get(h.id, 0)
        pct = occupancy_percentage(assigned, h.allocation)
        out.append(HospitalCoverage(hospital=h, assigned_count=assigned, percentage=pct, status=classify(pct)))
    return out


def compute_coverage(hospitals: List[Hospital], people: List[Person]) -> CoverageSummary:
    """
    Per-hospital and system-wide metrics for one (hospitals, people) snapshot.
    Assignments to hospitals that no longer exist still count towards
    current_assignments (and so reduce vacancies).
    """
    per_hospital = hospital_coverage(hospitals, people)
    total_alloc = sum(h.allocation for h in hospitals)
    assigned = sum(1 for p in people if p.is_assigned)
    status_counts = Counter(c.status for c in per_hospital)
    return CoverageSummary(
        hospitals=per_hospital,
        total_hospitals=len(hospitals),
        total_people=len(people),
        total_allocations=total_alloc,
        current_assignments=assigned,
        vacancies=total_alloc - assigned,
        critical_hospitals=status_counts.get(CRITICAL, 0),
        overall_staffing_ratio=assigned / total_alloc if total_alloc > 0 else 0.0,
        status_counts={s: status_counts.get(s, 0) for s in STATUSES},
    )
