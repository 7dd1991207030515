"""Table filtering and hospital name lookup for the people list."""
from typing import Dict, List, Optional

from .models import Hospital, Person

UNASSIGNED = "Unassigned"
HOSPITAL_NOT_FOUND = "Hospital not found"


def _matches(term: str, *values: Optional[str]) -> bool:
    return any(v and term in v.lower() for v in values)


def filter_hospitals(hospitals: List[Hospital], term: str = "") -> List[Hospital]:
    """Case-insensitive substring match on name, province or district."""
    term = (term or "").strip().lower()
    if not term:
        return list(hospitals)
    return [h for h in hospitals if _matches(term, h.name, h.province, h.district)]


def filter_people(people: List[Person], term: str = "") -> List[Person]:
    """Case-insensitive substring match on full name, SLMC number or either email."""
    term = (term or "").strip().lower()
    if not term:
        return list(people)
    return [
        p for p in people
        if _matches(term, p.full_name, p.slmc_number, p.personal_email, p.pgim_email)
    ]


def hospital_label(hospital_id: Optional[str], hospitals_by_id: Dict[str, Hospital]) -> str:
    """Display name for an assignment; dangling ids are expected after a hospital delete."""
    if not hospital_id:
        return UNASSIGNED
    h = hospitals_by_id.get(hospital_id)
    return h.name if h else HOSPITAL_NOT_FOUND
