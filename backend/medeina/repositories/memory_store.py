"""In-memory clinic store.

Keeps owners, pet patients and appointments in insertion-ordered lists;
appointments are read back in date order, as the SQLAlchemy repository does.
Used by tests and by the ``memory`` store backend; behaves exactly like the
SQLAlchemy repository with respect to duplicate detection and removal.
"""

import logging
from typing import List, Optional

from medeina.core.exceptions import (
    DuplicateAppointmentError,
    DuplicateOwnerError,
    DuplicatePetPatientError,
    RecordNotFoundError,
)
from medeina.domain.entities import Appointment, Owner, PetPatient
from medeina.domain.interfaces import IClinicStore

logger = logging.getLogger(__name__)


class InMemoryClinicStore(IClinicStore):
    """Store holding every record in process memory."""

    def __init__(self) -> None:
        self._owners: List[Owner] = []
        self._pet_patients: List[PetPatient] = []
        self._appointments: List[Appointment] = []

    # Reads

    def get_owners(self) -> List[Owner]:
        return list(self._owners)

    def get_pet_patients(self) -> List[PetPatient]:
        return list(self._pet_patients)

    def get_appointments(self) -> List[Appointment]:
        return sorted(self._appointments, key=lambda a: a.date_time)

    def find_owner(self, nric: str) -> Optional[Owner]:
        key = nric.strip().upper()
        return next((o for o in self._owners if o.nric == key), None)

    def find_pet_patient(self, owner_nric: str, name: str) -> Optional[PetPatient]:
        key = (owner_nric.strip().upper(), name.casefold())
        return next((p for p in self._pet_patients if p.identity_key == key), None)

    # Writes

    def add_owner(self, owner: Owner) -> Owner:
        if self.has_owner(owner):
            raise DuplicateOwnerError(owner.nric)
        self._owners.append(owner)
        logger.debug(f"Stored owner {owner.nric}")
        return owner

    def add_pet_patient(self, pet_patient: PetPatient) -> PetPatient:
        if pet_patient.owner_nric is None:
            raise ValueError("Pet patient must reference an owner before it is stored")
        if self.has_pet_patient(pet_patient):
            raise DuplicatePetPatientError(f"{pet_patient.owner_nric}/{pet_patient.name}")
        self._pet_patients.append(pet_patient)
        logger.debug(f"Stored pet patient {pet_patient.owner_nric}/{pet_patient.name}")
        return pet_patient

    def add_appointment(self, appointment: Appointment) -> Appointment:
        if appointment.owner_nric is None or appointment.pet_patient_name is None:
            raise ValueError("Appointment must reference an owner and a pet patient")
        if self.has_appointment(appointment):
            raise DuplicateAppointmentError(appointment.id)
        self._appointments.append(appointment)
        logger.debug(f"Stored appointment {appointment.id}")
        return appointment

    def remove_owner(self, nric: str) -> None:
        owner = self.find_owner(nric)
        if owner is None:
            raise RecordNotFoundError("owner", nric)
        self._owners.remove(owner)

    def remove_pet_patient(self, owner_nric: str, name: str) -> None:
        pet_patient = self.find_pet_patient(owner_nric, name)
        if pet_patient is None:
            raise RecordNotFoundError("pet patient", f"{owner_nric}/{name}")
        self._pet_patients.remove(pet_patient)

    def remove_appointment(self, appointment_id: str) -> None:
        appointment = next(
            (a for a in self._appointments if a.id == appointment_id), None
        )
        if appointment is None:
            raise RecordNotFoundError("appointment", appointment_id)
        self._appointments.remove(appointment)
