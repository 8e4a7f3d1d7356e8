"""
Data Transfer Objects (DTOs) for commands.

The add command has four mutually exclusive modes. Each mode is its own
request type carrying only the fields it needs; ``AddRequest`` is the union
of the four.
"""

from dataclasses import dataclass, field
from typing import Any, List, Union

from medeina.domain.entities import Appointment, Owner, PetPatient


def _require(value: Any, name: str) -> None:
    if value is None:
        raise ValueError(f"{name} is required")


@dataclass(frozen=True)
class AddBundleRequest:
    """Mode A: new owner, new pet patient and new appointment together."""

    owner: Owner
    pet_patient: PetPatient
    appointment: Appointment

    def __post_init__(self):
        _require(self.owner, "owner")
        _require(self.pet_patient, "pet_patient")
        _require(self.appointment, "appointment")


@dataclass(frozen=True)
class AddAppointmentRequest:
    """Mode B: new appointment for an existing owner's existing pet patient."""

    appointment: Appointment
    owner_nric: str
    pet_patient_name: str

    def __post_init__(self):
        _require(self.appointment, "appointment")
        _require(self.owner_nric, "owner_nric")
        _require(self.pet_patient_name, "pet_patient_name")


@dataclass(frozen=True)
class AddPetPatientRequest:
    """Mode C: new pet patient under an existing owner."""

    pet_patient: PetPatient
    owner_nric: str

    def __post_init__(self):
        _require(self.pet_patient, "pet_patient")
        _require(self.owner_nric, "owner_nric")


@dataclass(frozen=True)
class AddOwnerRequest:
    """Mode D: new owner only."""

    owner: Owner

    def __post_init__(self):
        _require(self.owner, "owner")


AddRequest = Union[
    AddBundleRequest, AddAppointmentRequest, AddPetPatientRequest, AddOwnerRequest
]


@dataclass
class InsertedRecords:
    """Records written by one add, in insertion order."""

    owners: List[Owner] = field(default_factory=list)
    pet_patients: List[PetPatient] = field(default_factory=list)
    appointments: List[Appointment] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.owners or self.pet_patients or self.appointments)

    def counts(self) -> dict:
        return {
            "owners": len(self.owners),
            "pet_patients": len(self.pet_patients),
            "appointments": len(self.appointments),
        }


@dataclass
class AddOutcome:
    """Result of a successful add: the message and what was written."""

    feedback: str
    inserted: InsertedRecords


@dataclass
class CommandResult:
    """What every command returns to a front end."""

    feedback: str
    success: bool = True
    records: List[Any] = field(default_factory=list)
