"""
Domain package - Pure business logic layer.

This package contains:
- entities.py: Owner, PetPatient and Appointment entities
- interfaces.py: Entity Store contracts
"""

from .entities import Appointment, Owner, PetPatient
from .interfaces import IClinicReader, IClinicStore, IClinicWriter

__all__ = [
    # Domain entities
    "Owner",
    "PetPatient",
    "Appointment",
    # Store interfaces
    "IClinicStore",
    "IClinicReader",
    "IClinicWriter",
]
