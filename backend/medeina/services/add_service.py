"""
Add service: executes the four add modes against an injected store.

Every mode follows the same order of work:
1. resolve references (existing owner, existing pet patient)
2. bind references on the new records
3. check duplicates (owner, then pet patient, then appointment)
4. write, removing anything already written if a later write fails
5. format the confirmation and record the inverse in the undo log

Nothing is written before steps 1-3 succeed, so a failed add leaves the
store unchanged.
"""

import logging
from typing import Callable, Dict, List, Optional

from medeina.core import messages
from medeina.core.exceptions import (
    CommandError,
    DuplicateAppointmentError,
    DuplicateOwnerError,
    DuplicatePetPatientError,
    DuplicateRecordError,
    UnknownCommandVariantError,
    UnknownOwnerReferenceError,
    UnknownPetPatientReferenceError,
)
from medeina.domain.entities import Appointment, Owner, PetPatient
from medeina.domain.interfaces import IClinicStore
from medeina.schemas.dtos import (
    AddAppointmentRequest,
    AddBundleRequest,
    AddOutcome,
    AddOwnerRequest,
    AddPetPatientRequest,
    AddRequest,
    InsertedRecords,
)
from medeina.services.undo_service import UndoService

logger = logging.getLogger(__name__)

_DUPLICATE_MESSAGES = {
    DuplicateOwnerError: messages.MESSAGE_DUPLICATE_OWNER,
    DuplicatePetPatientError: messages.MESSAGE_DUPLICATE_PET_PATIENT,
    DuplicateAppointmentError: messages.MESSAGE_DUPLICATE_APPOINTMENT,
}


class AddService:
    """Application service for the add command.

    The store is injected; the optional undo service receives the inverse
    of every successful add.
    """

    def __init__(self, store: IClinicStore, undo_service: Optional[UndoService] = None):
        self.store = store
        self.undo_service = undo_service
        self._handlers: Dict[type, Callable[..., AddOutcome]] = {
            AddBundleRequest: self._add_bundle,
            AddAppointmentRequest: self._add_appointment,
            AddPetPatientRequest: self._add_pet_patient,
            AddOwnerRequest: self._add_owner,
        }

    def execute(self, request: AddRequest, command_text: str = "") -> AddOutcome:
        """Run the mode selected by the request type.

        Raises:
            CommandError: duplicate record (translated from the store error)
            UnknownOwnerReferenceError: owner NRIC not in the store
            UnknownPetPatientReferenceError: pet name not found under the owner
            UnknownCommandVariantError: request type is not one of the four modes
        """
        handler = self._handlers.get(type(request))
        if handler is None:
            raise UnknownCommandVariantError(
                f"Unsupported add request type: {type(request).__name__}"
            )

        try:
            outcome = handler(request)
        except DuplicateRecordError as e:
            logger.info(
                f"Add rejected: {e}",
                extra={"context": {"mode": type(request).__name__, "key": e.key}},
            )
            raise CommandError(_DUPLICATE_MESSAGES[type(e)]) from e

        if self.undo_service is not None:
            self.undo_service.record(command_text or outcome.feedback, outcome.inserted)

        logger.info(
            "Add completed",
            extra={
                "context": {
                    "mode": type(request).__name__,
                    **outcome.inserted.counts(),
                }
            },
        )
        return outcome

    # Modes

    def _add_bundle(self, request: AddBundleRequest) -> AddOutcome:
        owner = request.owner
        pet_patient = request.pet_patient.with_owner(owner.nric)
        appointment = request.appointment.with_references(owner.nric, pet_patient.name)

        self._check_duplicates(owner=owner, pet_patient=pet_patient, appointment=appointment)
        inserted = self._write(
            owners=[owner], pet_patients=[pet_patient], appointments=[appointment]
        )
        feedback = messages.MESSAGE_ADD_BUNDLE_SUCCESS.format(
            owner=owner, pet_patient=pet_patient, appointment=appointment
        )
        return AddOutcome(feedback=feedback, inserted=inserted)

    def _add_appointment(self, request: AddAppointmentRequest) -> AddOutcome:
        owner = self._resolve_owner(request.owner_nric)
        pet_patient = self._resolve_pet_patient(owner.nric, request.pet_patient_name)
        appointment = request.appointment.with_references(owner.nric, pet_patient.name)

        self._check_duplicates(appointment=appointment)
        inserted = self._write(appointments=[appointment])
        feedback = messages.MESSAGE_ADD_APPOINTMENT_SUCCESS.format(
            appointment=appointment, owner=owner
        )
        return AddOutcome(feedback=feedback, inserted=inserted)

    def _add_pet_patient(self, request: AddPetPatientRequest) -> AddOutcome:
        owner = self._resolve_owner(request.owner_nric)
        pet_patient = request.pet_patient.with_owner(owner.nric)

        self._check_duplicates(pet_patient=pet_patient)
        inserted = self._write(pet_patients=[pet_patient])
        feedback = messages.MESSAGE_ADD_PET_PATIENT_SUCCESS.format(
            pet_patient=pet_patient, owner=owner
        )
        return AddOutcome(feedback=feedback, inserted=inserted)

    def _add_owner(self, request: AddOwnerRequest) -> AddOutcome:
        owner = request.owner

        self._check_duplicates(owner=owner)
        inserted = self._write(owners=[owner])
        feedback = messages.MESSAGE_ADD_OWNER_SUCCESS.format(owner=owner)
        return AddOutcome(feedback=feedback, inserted=inserted)

    # Steps

    def _resolve_owner(self, nric: str) -> Owner:
        owner = self.store.find_owner(nric)
        if owner is None:
            raise UnknownOwnerReferenceError(messages.MESSAGE_INVALID_NRIC, nric)
        return owner

    def _resolve_pet_patient(self, owner_nric: str, name: str) -> PetPatient:
        pet_patient = self.store.find_pet_patient(owner_nric, name)
        if pet_patient is None:
            raise UnknownPetPatientReferenceError(
                messages.MESSAGE_INVALID_PET_PATIENT, owner_nric, name
            )
        return pet_patient

    def _check_duplicates(
        self,
        owner: Optional[Owner] = None,
        pet_patient: Optional[PetPatient] = None,
        appointment: Optional[Appointment] = None,
    ) -> None:
        # First failure wins: owner, then pet patient, then appointment
        if owner is not None and self.store.has_owner(owner):
            raise DuplicateOwnerError(owner.nric)
        if pet_patient is not None and self.store.has_pet_patient(pet_patient):
            raise DuplicatePetPatientError(f"{pet_patient.owner_nric}/{pet_patient.name}")
        if appointment is not None and self.store.has_appointment(appointment):
            raise DuplicateAppointmentError(appointment.id)

    def _write(
        self,
        owners: Optional[List[Owner]] = None,
        pet_patients: Optional[List[PetPatient]] = None,
        appointments: Optional[List[Appointment]] = None,
    ) -> InsertedRecords:
        inserted = InsertedRecords()
        try:
            for owner in owners or []:
                self.store.add_owner(owner)
                inserted.owners.append(owner)
            for pet_patient in pet_patients or []:
                self.store.add_pet_patient(pet_patient)
                inserted.pet_patients.append(pet_patient)
            for appointment in appointments or []:
                self.store.add_appointment(appointment)
                inserted.appointments.append(appointment)
        except DuplicateRecordError:
            self._roll_back(inserted)
            raise
        return inserted

    def _roll_back(self, inserted: InsertedRecords) -> None:
        if inserted.is_empty:
            return
        logger.warning(
            "Removing partially written add",
            extra={"context": inserted.counts()},
        )
        for appointment in reversed(inserted.appointments):
            self.store.remove_appointment(appointment.id)
        for pet_patient in reversed(inserted.pet_patients):
            self.store.remove_pet_patient(pet_patient.owner_nric, pet_patient.name)
        for owner in reversed(inserted.owners):
            self.store.remove_owner(owner.nric)
