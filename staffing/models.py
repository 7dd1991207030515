"""
Record types for the staffing console.
Field names follow the store columns; optional fields are None when unset.
"""

from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


GRADES = ["MO", "REGISTRAR", "SENIOR_REGISTRAR", "CONSULTANT"]  # ordered by seniority

GRADE_INFO = {
    "MO": {"label": "Medical Officer", "level": 1, "abbreviation": "MO"},
    "REGISTRAR": {"label": "Registrar", "level": 2, "abbreviation": "REG"},
    "SENIOR_REGISTRAR": {"label": "Senior Registrar", "level": 3, "abbreviation": "SR"},
    "CONSULTANT": {"label": "Consultant", "level": 4, "abbreviation": "CONS"},
}

GENDERS = ["MALE", "FEMALE"]

HOSPITAL_TYPES = [
    "BASE_HOSPITAL",
    "BOARD_MANAGED_HOSPITAL",
    "DISTRICT_GENERAL_HOSPITAL",
    "DIVISIONAL_HOSPITAL",
    "GENERAL_HOSPITAL",
    "MEDICAL_CLINIC",
    "MOH_OFFICE",
    "NATIONAL_HOSPITAL",
    "REGIONAL_HEALTH_SERVICES_OFFICE",
    "OTHER_HEALTH_INSTITUTION",
    "OTHER_HOSPITAL",
    "PRIMARY_MEDICAL_CARE_UNIT",
    "PROVINCIAL_GENERAL_HOSPITAL",
    "SPECIALIZED_HOSPITAL",
    "TEACHING_HOSPITAL",
]


def utcnow_iso() -> str:
    """Return the current UTC timestamp as ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


def grade_level(grade: str) -> int:
    return GRADE_INFO[grade]["level"]


def compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop None values, recursing into nested dicts. Lists are kept as-is."""
    out = {}
    for k, v in data.items():
        if v is None:
            continue
        if isinstance(v, dict):
            v = compact(v)
        out[k] = v
    return out


@dataclass
class TimelineEntry:
    """One hospital/grade posting. `to` is None while the posting is current."""
    start: str                  # ISO timestamp ("from" in the store)
    hospital_id: str            # "" when unassigned
    grade: str
    end: Optional[str] = None   # ISO timestamp ("to" in the store)
    note: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.end is None

    def to_record(self) -> Dict[str, Any]:
        return compact({
            "from": self.start,
            "to": self.end,
            "hospital_id": self.hospital_id,
            "grade": self.grade,
            "note": self.note,
        })

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "TimelineEntry":
        return cls(
            start=data["from"],
            end=data.get("to"),
            hospital_id=data.get("hospital_id", ""),
            grade=data["grade"],
            note=data.get("note"),
        )


@dataclass
class Hospital:
    name: str
    province: str
    district: str
    type: str
    allocation: int             # government-allocated positions
    id: Optional[str] = None
    notes: Optional[str] = None
    location: Optional[Dict[str, float]] = None  # {"lat": .., "lng": ..}
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        """Store representation: everything except the id, unset fields omitted."""
        data = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "id"}
        return compact(data)

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Hospital":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def merged(self, changes: Dict[str, Any]) -> "Hospital":
        return replace(self, **changes)


@dataclass
class Person:
    """Anaesthesiologist with the current assignment and the posting history."""
    first_name: str
    last_name: str
    slmc_number: str            # registration number, kept verbatim
    current_grade: str
    id: Optional[str] = None
    national_id: Optional[str] = None
    phone: Optional[str] = None
    phone2: Optional[str] = None
    personal_email: Optional[str] = None
    pgim_email: Optional[str] = None
    address: Optional[str] = None
    gender: Optional[str] = None
    current_hospital_id: Optional[str] = None  # None = unassigned
    anaesthesia_training_done: bool = False
    timeline: List[TimelineEntry] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_assigned(self) -> bool:
        return bool(self.current_hospital_id)

    @property
    def open_entry(self) -> Optional[TimelineEntry]:
        for entry in reversed(self.timeline):
            if entry.is_open:
                return entry
        return None

    def to_record(self) -> Dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self) if f.name not in ("id", "timeline")}
        data["timeline"] = [e.to_record() for e in self.timeline]
        return compact(data)

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Person":
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known and k != "timeline"}
        kwargs["timeline"] = [TimelineEntry.from_record(e) for e in data.get("timeline") or []]
        if kwargs.get("anaesthesia_training_done") is None:
            kwargs["anaesthesia_training_done"] = False
        return cls(**kwargs)

    def merged(self, changes: Dict[str, Any]) -> "Person":
        changes = dict(changes)
        if "timeline" in changes:
            changes["timeline"] = [
                e if isinstance(e, TimelineEntry) else TimelineEntry.from_record(e)
                for e in changes["timeline"]
            ]
        return replace(self, **changes)
