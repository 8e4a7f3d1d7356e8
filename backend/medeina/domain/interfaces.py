"""
Abstract interfaces for clinic stores following Interface Segregation Principle.

These interfaces define the Entity Store contract without implementation
details, so services receive the store by injection and tests can swap in
mocks or the in-memory store.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import Appointment, Owner, PetPatient


class IClinicReader(ABC):
    """Interface for read-only store access used by reference resolution and search."""

    @abstractmethod
    def get_owners(self) -> List[Owner]:
        """Get all owners in insertion order."""
        pass

    @abstractmethod
    def get_pet_patients(self) -> List[PetPatient]:
        """Get all pet patients in insertion order."""
        pass

    @abstractmethod
    def get_appointments(self) -> List[Appointment]:
        """Get all appointments ordered by date and time."""
        pass

    @abstractmethod
    def find_owner(self, nric: str) -> Optional[Owner]:
        """Get the owner with the given NRIC, or None."""
        pass

    @abstractmethod
    def find_pet_patient(self, owner_nric: str, name: str) -> Optional[PetPatient]:
        """Get the pet patient named ``name`` under ``owner_nric``, or None."""
        pass

    def has_owner(self, owner: Owner) -> bool:
        return self.find_owner(owner.nric) is not None

    def has_pet_patient(self, pet_patient: PetPatient) -> bool:
        if pet_patient.owner_nric is None:
            return False
        return self.find_pet_patient(pet_patient.owner_nric, pet_patient.name) is not None

    def has_appointment(self, appointment: Appointment) -> bool:
        return any(
            existing.id == appointment.id or existing.slot_key == appointment.slot_key
            for existing in self.get_appointments()
        )


class IClinicWriter(ABC):
    """Interface for store writes."""

    @abstractmethod
    def add_owner(self, owner: Owner) -> Owner:
        """Insert an owner. Raises DuplicateOwnerError on NRIC collision."""
        pass

    @abstractmethod
    def add_pet_patient(self, pet_patient: PetPatient) -> PetPatient:
        """Insert a pet patient. Raises DuplicatePetPatientError on (NRIC, name) collision."""
        pass

    @abstractmethod
    def add_appointment(self, appointment: Appointment) -> Appointment:
        """Insert an appointment. Raises DuplicateAppointmentError on id or slot collision."""
        pass

    @abstractmethod
    def remove_owner(self, nric: str) -> None:
        """Remove an owner. Raises RecordNotFoundError if absent."""
        pass

    @abstractmethod
    def remove_pet_patient(self, owner_nric: str, name: str) -> None:
        """Remove a pet patient. Raises RecordNotFoundError if absent."""
        pass

    @abstractmethod
    def remove_appointment(self, appointment_id: str) -> None:
        """Remove an appointment. Raises RecordNotFoundError if absent."""
        pass


class IClinicStore(IClinicReader, IClinicWriter):
    """Complete store interface combining read/write operations."""

    pass
