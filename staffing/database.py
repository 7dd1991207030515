"""SQLAlchemy tables backing the record store."""
import uuid

from sqlalchemy import Boolean, Column, Integer, JSON, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def new_id() -> str:
    return uuid.uuid4().hex


class HospitalRow(Base):
    __tablename__ = "hospitals"
    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False, index=True)
    province = Column(String(100), nullable=False)
    district = Column(String(100), nullable=False)
    type = Column(String(50), nullable=False)
    allocation = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    location = Column(JSON, nullable=True)  # {"lat": 6.9, "lng": 79.8}
    created_at = Column(String(40))  # ISO 8601
    updated_at = Column(String(40))


class PersonRow(Base):
    __tablename__ = "people"
    id = Column(String(32), primary_key=True, default=new_id)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, index=True)
    slmc_number = Column(String(20), nullable=False)
    national_id = Column(String(20), nullable=True)
    phone = Column(String(50), nullable=True)
    phone2 = Column(String(50), nullable=True)
    personal_email = Column(String(200), nullable=True)
    pgim_email = Column(String(200), nullable=True)
    address = Column(Text, nullable=True)
    gender = Column(String(10), nullable=True)
    # Soft reference: hospitals can be deleted out from under a person.
    current_hospital_id = Column(String(32), nullable=True, index=True)
    current_grade = Column(String(20), nullable=False)
    anaesthesia_training_done = Column(Boolean, default=False)
    timeline = Column(JSON, default=list)  # [{"from", "to", "hospital_id", "grade", "note"}]
    created_at = Column(String(40))
    updated_at = Column(String(40))


def make_engine(database_url: str, echo: bool = False):
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args, echo=echo)


def make_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine) -> None:
    Base.metadata.create_all(bind=engine)
