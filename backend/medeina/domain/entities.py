"""
Domain entities - Pure business logic, no framework dependencies.

Cross-entity references are kept as identity keys (owner NRIC, pet patient
name), never as object links; resolving them is always a store lookup.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional, Tuple

from medeina.utils.text_utils import unique_preserving_order

DISPLAY_DATE_TIME_FORMAT = "%Y-%m-%d %H:%M"


def new_appointment_id() -> str:
    """System-assigned appointment identifier."""
    return uuid.uuid4().hex[:8]


def format_tags(tags: List[str]) -> str:
    return "".join(f"[{tag}]" for tag in tags)


@dataclass
class Owner:
    """Domain entity representing a pet owner, keyed by NRIC."""

    name: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    nric: str = ""
    tags: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate domain rules."""
        if not self.name:
            raise ValueError("Name is required")
        if not self.nric:
            raise ValueError("NRIC is required")
        self.nric = self.nric.strip().upper()
        self.tags = unique_preserving_order(self.tags or [])

    @property
    def identity_key(self) -> str:
        return self.nric

    @property
    def tag_string(self) -> str:
        """Tags joined by single spaces, used for keyword matching."""
        return " ".join(self.tags)

    def __str__(self) -> str:
        return (
            f"{self.name} Phone: {self.phone} Email: {self.email} "
            f"Address: {self.address} NRIC: {self.nric} Tags: {format_tags(self.tags)}"
        )


@dataclass
class PetPatient:
    """Domain entity for an animal patient, unique per (owner NRIC, name)."""

    name: str = ""
    species: str = ""
    breed: str = ""
    colour: str = ""
    blood_type: str = ""
    tags: List[str] = field(default_factory=list)
    owner_nric: Optional[str] = None

    def __post_init__(self):
        """Validate business rules."""
        if not self.name:
            raise ValueError("Pet patient name is required")
        if not self.species:
            raise ValueError("Species is required")
        if self.owner_nric is not None:
            self.owner_nric = self.owner_nric.strip().upper()
        self.tags = unique_preserving_order(self.tags or [])

    @property
    def identity_key(self) -> Tuple[Optional[str], str]:
        # Pet names are compared case-insensitively within one owner
        return (self.owner_nric, self.name.casefold())

    @property
    def tag_string(self) -> str:
        return " ".join(self.tags)

    def with_owner(self, owner_nric: str) -> "PetPatient":
        """Return a copy bound to the owner identified by ``owner_nric``."""
        return replace(self, owner_nric=owner_nric, tags=list(self.tags))

    def __str__(self) -> str:
        return (
            f"{self.name} Species: {self.species} Breed: {self.breed} "
            f"Colour: {self.colour} Blood type: {self.blood_type} "
            f"Owner NRIC: {self.owner_nric or '-'} Tags: {format_tags(self.tags)}"
        )


@dataclass
class Appointment:
    """Domain entity for a scheduled visit of one pet patient."""

    date_time: Optional[datetime] = None
    remark: str = ""
    tags: List[str] = field(default_factory=list)
    owner_nric: Optional[str] = None
    pet_patient_name: Optional[str] = None
    id: str = field(default_factory=new_appointment_id)

    def __post_init__(self):
        """Validate business rules."""
        if self.date_time is None:
            raise ValueError("Appointment date and time is required")
        if self.owner_nric is not None:
            self.owner_nric = self.owner_nric.strip().upper()
        self.tags = unique_preserving_order(self.tags or [])

    @property
    def identity_key(self) -> str:
        return self.id

    @property
    def slot_key(self) -> datetime:
        """Two appointments may not share the same date-time slot."""
        return self.date_time

    @property
    def tag_string(self) -> str:
        return " ".join(self.tags)

    def with_references(self, owner_nric: str, pet_patient_name: str) -> "Appointment":
        """Return a copy bound to the given owner and pet patient."""
        return replace(
            self,
            owner_nric=owner_nric,
            pet_patient_name=pet_patient_name,
            tags=list(self.tags),
        )

    def __str__(self) -> str:
        when = self.date_time.strftime(DISPLAY_DATE_TIME_FORMAT)
        return (
            f"Date: {when} Remark: {self.remark} Tags: {format_tags(self.tags)} "
            f"Owner NRIC: {self.owner_nric or '-'} "
            f"Pet Patient: {self.pet_patient_name or '-'}"
        )
