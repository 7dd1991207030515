"""
Pydantic input models: the validate-and-submit boundary in front of the repositories.
Creates pass `model_dump(exclude_none=True)` to the repositories, updates `model_dump(exclude_unset=True)`.
"""
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from .config import max_allocation

GradeName = Literal["MO", "REGISTRAR", "SENIOR_REGISTRAR", "CONSULTANT"]
GenderName = Literal["MALE", "FEMALE"]
HospitalTypeName = Literal[
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

_HOSPITAL_OPTIONAL = ("notes",)
_PERSON_OPTIONAL = (
    "national_id", "phone", "phone2", "personal_email", "pgim_email",
    "address", "gender", "current_hospital_id",
)


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _check_allocation(v):
    if v is not None and v > max_allocation():
        raise ValueError("Allocation seems too high")
    return v


def _reject_null_required(model: BaseModel, required: tuple) -> None:
    for name in required:
        if name in model.model_fields_set and getattr(model, name) is None:
            raise ValueError(f"{name} cannot be cleared")


class Location(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class HospitalCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    province: str = Field(min_length=1, max_length=100)
    district: str = Field(min_length=1, max_length=100)
    type: HospitalTypeName
    allocation: int = Field(ge=0)
    notes: Optional[str] = None
    location: Optional[Location] = None

    @field_validator(*_HOSPITAL_OPTIONAL, mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("allocation")
    @classmethod
    def allocation_cap(cls, v):
        return _check_allocation(v)


class HospitalUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    province: Optional[str] = Field(default=None, min_length=1, max_length=100)
    district: Optional[str] = Field(default=None, min_length=1, max_length=100)
    type: Optional[HospitalTypeName] = None
    allocation: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None
    location: Optional[Location] = None

    @field_validator(*_HOSPITAL_OPTIONAL, mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("allocation")
    @classmethod
    def allocation_cap(cls, v):
        return _check_allocation(v)

    @model_validator(mode="after")
    def required_stay_set(self):
        _reject_null_required(self, ("name", "province", "district", "type", "allocation"))
        return self


class PersonCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    slmc_number: str = Field(min_length=1, max_length=20)
    national_id: Optional[str] = Field(default=None, max_length=20)
    phone: Optional[str] = None
    phone2: Optional[str] = None
    personal_email: Optional[EmailStr] = None
    pgim_email: Optional[EmailStr] = None
    address: Optional[str] = Field(default=None, max_length=500)
    gender: Optional[GenderName] = None
    current_hospital_id: Optional[str] = None
    current_grade: GradeName = "MO"
    anaesthesia_training_done: bool = False

    @field_validator(*_PERSON_OPTIONAL, mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)


class PersonUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    slmc_number: Optional[str] = Field(default=None, min_length=1, max_length=20)
    national_id: Optional[str] = Field(default=None, max_length=20)
    phone: Optional[str] = None
    phone2: Optional[str] = None
    personal_email: Optional[EmailStr] = None
    pgim_email: Optional[EmailStr] = None
    address: Optional[str] = Field(default=None, max_length=500)
    gender: Optional[GenderName] = None
    current_hospital_id: Optional[str] = None
    current_grade: Optional[GradeName] = None
    anaesthesia_training_done: Optional[bool] = None

    @field_validator(*_PERSON_OPTIONAL, mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @model_validator(mode="after")
    def required_stay_set(self):
        _reject_null_required(
            self,
            ("first_name", "last_name", "slmc_number", "current_grade", "anaesthesia_training_done"),
        )
        return self
