"""Seed the store with a handful of hospitals and anaesthesiologists for local use."""
from .schemas import HospitalCreate, PersonCreate
from .service import StaffingDataService

# (name, province, district, type, allocation)
HOSPITALS = [
    ("National Hospital of Sri Lanka", "Western", "Colombo", "NATIONAL_HOSPITAL", 60),
    ("Teaching Hospital Kandy", "Central", "Kandy", "TEACHING_HOSPITAL", 40),
    ("Teaching Hospital Karapitiya", "Southern", "Galle", "TEACHING_HOSPITAL", 30),
    ("District General Hospital Matara", "Southern", "Matara", "DISTRICT_GENERAL_HOSPITAL", 12),
    ("Base Hospital Dambulla", "Central", "Matale", "BASE_HOSPITAL", 4),
    ("Provincial General Hospital Badulla", "Uva", "Badulla", "PROVINCIAL_GENERAL_HOSPITAL", 18),
]

# (first, last, slmc, grade, hospital name or None)
PEOPLE = [
    ("Nimal", "Perera", "12345", "CONSULTANT", "National Hospital of Sri Lanka"),
    ("Kumari", "Fernando", "23456", "SENIOR_REGISTRAR", "National Hospital of Sri Lanka"),
    ("Ruwan", "Jayasinghe", "34567", "REGISTRAR", "Teaching Hospital Kandy"),
    ("Dilani", "Wickramasinghe", "45678", "MO", "Teaching Hospital Karapitiya"),
    ("Saman", "Bandara", "56789", "MO", "Base Hospital Dambulla"),
    ("Anoma", "Silva", "67890", "CONSULTANT", "Base Hospital Dambulla"),
    ("Chaminda", "Herath", "78901", "REGISTRAR", None),
]


def seed(service: StaffingDataService) -> dict:
    """Add the sample records unless hospitals already exist. Returns counts added."""
    service.refresh()
    if service.hospitals.items:
        return {"hospitals": 0, "people": 0}
    ids = {}
    for name, province, district, htype, allocation in HOSPITALS:
        data = HospitalCreate(name=name, province=province, district=district, type=htype, allocation=allocation)
        ids[name] = service.add_hospital(data.model_dump(exclude_none=True)).id
    for first, last, slmc, grade, hospital in PEOPLE:
        data = PersonCreate(
            first_name=first,
            last_name=last,
            slmc_number=slmc,
            current_grade=grade,
            current_hospital_id=ids.get(hospital) if hospital else None,
            anaesthesia_training_done=grade != "MO",
        )
        service.add_person(data.model_dump(exclude_none=True))
    return {"hospitals": len(HOSPITALS), "people": len(PEOPLE)}
