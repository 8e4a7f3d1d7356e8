"""
Schemas package - Data Transfer Objects.

This package contains the add request types and the result objects
returned by the services.
"""

from .dtos import (
    AddAppointmentRequest,
    AddBundleRequest,
    AddOutcome,
    AddOwnerRequest,
    AddPetPatientRequest,
    AddRequest,
    CommandResult,
    InsertedRecords,
)

__all__ = [
    "AddAppointmentRequest",
    "AddBundleRequest",
    "AddOutcome",
    "AddOwnerRequest",
    "AddPetPatientRequest",
    "AddRequest",
    "CommandResult",
    "InsertedRecords",
]
