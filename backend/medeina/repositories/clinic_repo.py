"""Clinic repository implementation on SQLAlchemy.

Provides the Entity Store contract over the ``owners``, ``pet_patients``
and ``appointments`` tables. Duplicates are detected with a lookup before
insertion; a unique-constraint violation that slips past the lookup is
translated to the same duplicate error after rolling the session back.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from medeina.core.exceptions import (
    DuplicateAppointmentError,
    DuplicateOwnerError,
    DuplicatePetPatientError,
    RecordNotFoundError,
)
from medeina.db.base import AppointmentRecord, OwnerRecord, PetPatientRecord
from medeina.db.session import SessionLocal
from medeina.domain.entities import Appointment, Owner, PetPatient
from medeina.domain.interfaces import IClinicStore

logger = logging.getLogger(__name__)


class ClinicRepository(IClinicStore):
    """Repository for owner, pet patient and appointment persistence."""

    def __init__(self, db_session: Optional[Session] = None) -> None:
        self.db = db_session or SessionLocal()

    # Reads

    def get_owners(self) -> List[Owner]:
        records = self.db.query(OwnerRecord).order_by(OwnerRecord.id).all()
        return [self._owner_to_domain(r) for r in records]

    def get_pet_patients(self) -> List[PetPatient]:
        records = self.db.query(PetPatientRecord).order_by(PetPatientRecord.id).all()
        return [self._pet_patient_to_domain(r) for r in records]

    def get_appointments(self) -> List[Appointment]:
        records = (
            self.db.query(AppointmentRecord).order_by(AppointmentRecord.date_time).all()
        )
        return [self._appointment_to_domain(r) for r in records]

    def find_owner(self, nric: str) -> Optional[Owner]:
        record = self._owner_record(nric)
        return self._owner_to_domain(record) if record else None

    def find_pet_patient(self, owner_nric: str, name: str) -> Optional[PetPatient]:
        record = self._pet_patient_record(owner_nric, name)
        return self._pet_patient_to_domain(record) if record else None

    def has_appointment(self, appointment: Appointment) -> bool:
        by_id = self.db.get(AppointmentRecord, appointment.id)
        if by_id is not None:
            return True
        by_slot = (
            self.db.query(AppointmentRecord)
            .filter(AppointmentRecord.date_time == appointment.slot_key)
            .first()
        )
        return by_slot is not None

    # Writes

    def add_owner(self, owner: Owner) -> Owner:
        if self.has_owner(owner):
            raise DuplicateOwnerError(owner.nric)
        record = OwnerRecord(
            nric=owner.nric,
            name=owner.name,
            phone=owner.phone,
            email=owner.email,
            address=owner.address,
            tags=list(owner.tags),
        )
        self._commit_new(record, DuplicateOwnerError(owner.nric))
        logger.info(
            "Owner stored", extra={"context": {"nric": owner.nric, "row_id": record.id}}
        )
        return owner

    def add_pet_patient(self, pet_patient: PetPatient) -> PetPatient:
        if pet_patient.owner_nric is None:
            raise ValueError("Pet patient must reference an owner before it is stored")
        key = f"{pet_patient.owner_nric}/{pet_patient.name}"
        if self.has_pet_patient(pet_patient):
            raise DuplicatePetPatientError(key)
        record = PetPatientRecord(
            owner_nric=pet_patient.owner_nric,
            name=pet_patient.name,
            name_key=pet_patient.name.casefold(),
            species=pet_patient.species,
            breed=pet_patient.breed,
            colour=pet_patient.colour,
            blood_type=pet_patient.blood_type,
            tags=list(pet_patient.tags),
        )
        self._commit_new(record, DuplicatePetPatientError(key))
        logger.info("Pet patient stored", extra={"context": {"key": key}})
        return pet_patient

    def add_appointment(self, appointment: Appointment) -> Appointment:
        if appointment.owner_nric is None or appointment.pet_patient_name is None:
            raise ValueError("Appointment must reference an owner and a pet patient")
        if self.has_appointment(appointment):
            raise DuplicateAppointmentError(appointment.id)
        record = AppointmentRecord(
            id=appointment.id,
            date_time=appointment.date_time,
            remark=appointment.remark,
            tags=list(appointment.tags),
            owner_nric=appointment.owner_nric,
            pet_patient_name=appointment.pet_patient_name,
        )
        self._commit_new(record, DuplicateAppointmentError(appointment.id))
        logger.info(
            "Appointment stored", extra={"context": {"appointment_id": appointment.id}}
        )
        return appointment

    def remove_owner(self, nric: str) -> None:
        record = self._owner_record(nric)
        if not record:
            raise RecordNotFoundError("owner", nric)
        self.db.delete(record)
        self.db.commit()

    def remove_pet_patient(self, owner_nric: str, name: str) -> None:
        record = self._pet_patient_record(owner_nric, name)
        if not record:
            raise RecordNotFoundError("pet patient", f"{owner_nric}/{name}")
        self.db.delete(record)
        self.db.commit()

    def remove_appointment(self, appointment_id: str) -> None:
        record = self.db.get(AppointmentRecord, appointment_id)
        if not record:
            raise RecordNotFoundError("appointment", appointment_id)
        self.db.delete(record)
        self.db.commit()

    # Helpers

    def _commit_new(self, record, duplicate_error: Exception) -> None:
        self.db.add(record)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(
                f"Unique constraint rejected insert: {e.orig}",
                extra={"context": {"table": record.__tablename__}},
            )
            raise duplicate_error from e
        self.db.refresh(record)

    def _owner_record(self, nric: str) -> Optional[OwnerRecord]:
        return self.db.query(OwnerRecord).filter_by(nric=nric.strip().upper()).first()

    def _pet_patient_record(self, owner_nric: str, name: str) -> Optional[PetPatientRecord]:
        return (
            self.db.query(PetPatientRecord)
            .filter_by(owner_nric=owner_nric.strip().upper(), name_key=name.casefold())
            .first()
        )

    def _owner_to_domain(self, record: OwnerRecord) -> Owner:
        return Owner(
            name=record.name,
            phone=record.phone,
            email=record.email,
            address=record.address,
            nric=record.nric,
            tags=list(record.tags or []),
        )

    def _pet_patient_to_domain(self, record: PetPatientRecord) -> PetPatient:
        return PetPatient(
            name=record.name,
            species=record.species,
            breed=record.breed,
            colour=record.colour,
            blood_type=record.blood_type,
            tags=list(record.tags or []),
            owner_nric=record.owner_nric,
        )

    def _appointment_to_domain(self, record: AppointmentRecord) -> Appointment:
        return Appointment(
            id=record.id,
            date_time=record.date_time,
            remark=record.remark,
            tags=list(record.tags or []),
            owner_nric=record.owner_nric,
            pet_patient_name=record.pet_patient_name,
        )
