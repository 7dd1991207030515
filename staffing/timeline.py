"""
Posting history maintenance.
A person's timeline is append-only; the single open entry mirrors the current assignment.
"""
from dataclasses import replace
from typing import Any, Dict, List, Optional

from .models import Person, TimelineEntry

INITIAL_NOTE = "Initial assignment"
UPDATED_NOTE = "Assignment updated"


def initial_timeline(hospital_id: Optional[str], grade: str, now: str) -> List[TimelineEntry]:
    return [TimelineEntry(start=now, hospital_id=hospital_id or "", grade=grade, note=INITIAL_NOTE)]


def assignment_changed(person: Person, changes: Dict[str, Any]) -> bool:
    """True if `changes` moves the person to another hospital or grade. Absent keys are unchanged."""
    if "current_hospital_id" in changes:
        if (changes["current_hospital_id"] or "") != (person.current_hospital_id or ""):
            return True
    if "current_grade" in changes and changes["current_grade"] is not None:
        if changes["current_grade"] != person.current_grade:
            return True
    return False


def reassign(person: Person, changes: Dict[str, Any], now: str) -> Optional[List[TimelineEntry]]:
    """
    Timeline to store alongside `changes`, or None when the assignment is unchanged.
    Every open entry is closed at `now` and one new open entry is appended.
    The person's own list is never modified.
    """
    if not assignment_changed(person, changes):
        return None
    hospital_id = changes.get("current_hospital_id", person.current_hospital_id)
    grade = changes.get("current_grade") or person.current_grade
    closed = [replace(e, end=now) if e.is_open else e for e in person.timeline]
    closed.append(TimelineEntry(start=now, hospital_id=hospital_id or "", grade=grade, note=UPDATED_NOTE))
    return closed
