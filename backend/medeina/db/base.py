from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from .session import Base


# ------------------- OWNERS -------------------
class OwnerRecord(Base):
    """Owner table, one row per NRIC."""

    __tablename__ = "owners"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    nric: Mapped[str] = mapped_column(String(9), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False)
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


# ------------------- PET PATIENTS -------------------
class PetPatientRecord(Base):
    """Pet patient table; (owner_nric, name_key) is unique."""

    __tablename__ = "pet_patients"
    __table_args__ = (
        UniqueConstraint("owner_nric", "name_key", name="uq_pet_patient_owner_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    owner_nric: Mapped[str] = mapped_column(
        String(9), ForeignKey("owners.nric"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # Case-folded name; pet names are unique per owner regardless of case
    name_key: Mapped[str] = mapped_column(String(100), nullable=False)
    species: Mapped[str] = mapped_column(String(50), nullable=False)
    breed: Mapped[str] = mapped_column(String(100), nullable=False)
    colour: Mapped[str] = mapped_column(String(50), nullable=False)
    blood_type: Mapped[str] = mapped_column(String(30), nullable=False)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


# ------------------- APPOINTMENTS -------------------
class AppointmentRecord(Base):
    """Appointment table; one appointment per date-time slot."""

    __tablename__ = "appointments"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    date_time: Mapped[datetime] = mapped_column(DateTime, unique=True, nullable=False)
    remark: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    owner_nric: Mapped[str] = mapped_column(
        String(9), ForeignKey("owners.nric"), nullable=False, index=True
    )
    pet_patient_name: Mapped[str] = mapped_column(String(100), nullable=False)

    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
