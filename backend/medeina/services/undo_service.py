"""
Undo service for add commands.

Provides functionality to:
- Record the records written by each successful add
- Undo the latest add by removing exactly those records
- Redo an undone add by inserting them again
- List the undoable history
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from medeina.core import messages
from medeina.core.config import get_undo_history_limit
from medeina.core.exceptions import (
    DuplicateRecordError,
    NothingToRedoError,
    NothingToUndoError,
    RecordNotFoundError,
    StaleHistoryEntryError,
)
from medeina.domain.interfaces import IClinicStore
from medeina.schemas.dtos import InsertedRecords

logger = logging.getLogger(__name__)


@dataclass
class UndoEntry:
    entry_id: str
    command_text: str
    inserted: InsertedRecords
    created_at: datetime


class UndoService:
    """Service keeping the undo and redo stacks for one store."""

    def __init__(self, store: IClinicStore, history_limit: Optional[int] = None):
        self.store = store
        self.history_limit = history_limit or get_undo_history_limit()
        self._undo_stack: List[UndoEntry] = []
        self._redo_stack: List[UndoEntry] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def record(self, command_text: str, inserted: InsertedRecords) -> Optional[str]:
        """
        Record a completed add so it can be reverted later.

        Args:
            command_text: The command line that produced the records
            inserted: Records written by the command, in insertion order

        Returns:
            Entry ID, or None when nothing was inserted
        """
        if inserted.is_empty:
            return None

        entry = UndoEntry(
            entry_id=str(uuid.uuid4())[:8],
            command_text=command_text,
            inserted=inserted,
            created_at=datetime.now(),
        )
        self._undo_stack.append(entry)
        self._redo_stack.clear()

        overflow = len(self._undo_stack) - self.history_limit
        if overflow > 0:
            del self._undo_stack[:overflow]
            logger.debug(f"Dropped {overflow} oldest undo entries")

        logger.info(
            f"Recorded undo entry {entry.entry_id}",
            extra={"context": {"command": command_text, **inserted.counts()}},
        )
        return entry.entry_id

    def undo(self) -> UndoEntry:
        """
        Revert the most recent recorded add.

        Records are removed in reverse insertion order: appointments, then
        pet patients, then owners. Every record is checked before the first
        removal; an entry whose records are no longer all present is dropped
        and the store is left untouched.

        Raises:
            NothingToUndoError: if there is nothing to undo
            StaleHistoryEntryError: if the store no longer holds the entry's records
        """
        if not self._undo_stack:
            raise NothingToUndoError()

        entry = self._undo_stack[-1]
        missing = self._first_missing(entry.inserted)
        if missing is not None:
            raise self._stale(self._undo_stack, entry, f"{missing} no longer exists")

        removed = InsertedRecords()
        try:
            self._remove(entry.inserted, removed)
        except RecordNotFoundError as e:
            self._insert(removed, InsertedRecords())
            raise self._stale(self._undo_stack, entry, str(e)) from e

        self._undo_stack.pop()
        self._redo_stack.append(entry)
        logger.info(
            f"Undid entry {entry.entry_id}",
            extra={"context": {"command": entry.command_text}},
        )
        return entry

    def redo(self) -> UndoEntry:
        """
        Reapply the most recently undone add.

        Raises:
            NothingToRedoError: if there is nothing to redo
            StaleHistoryEntryError: if one of the entry's records exists again
        """
        if not self._redo_stack:
            raise NothingToRedoError()

        entry = self._redo_stack[-1]
        present = self._first_present(entry.inserted)
        if present is not None:
            raise self._stale(self._redo_stack, entry, f"{present} already exists")

        inserted = InsertedRecords()
        try:
            self._insert(entry.inserted, inserted)
        except DuplicateRecordError as e:
            self._remove(inserted, InsertedRecords())
            raise self._stale(self._redo_stack, entry, str(e)) from e

        self._redo_stack.pop()
        self._undo_stack.append(entry)
        logger.info(
            f"Redid entry {entry.entry_id}",
            extra={"context": {"command": entry.command_text}},
        )
        return entry

    def list_history(self) -> List[Dict[str, Any]]:
        """
        List undoable entries, newest first.

        Returns:
            List of entry summaries
        """
        return [
            {
                "entry_id": entry.entry_id,
                "command": entry.command_text,
                "created_at": entry.created_at.isoformat(),
                **entry.inserted.counts(),
            }
            for entry in reversed(self._undo_stack)
        ]

    def clear(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()

    # Steps

    def _first_missing(self, records: InsertedRecords) -> Optional[str]:
        appointment_ids = {a.id for a in self.store.get_appointments()}
        for appointment in records.appointments:
            if appointment.id not in appointment_ids:
                return f"Appointment {appointment.id}"
        for pet_patient in records.pet_patients:
            if self.store.find_pet_patient(pet_patient.owner_nric, pet_patient.name) is None:
                return f"Pet patient {pet_patient.owner_nric}/{pet_patient.name}"
        for owner in records.owners:
            if self.store.find_owner(owner.nric) is None:
                return f"Owner {owner.nric}"
        return None

    def _first_present(self, records: InsertedRecords) -> Optional[str]:
        for owner in records.owners:
            if self.store.has_owner(owner):
                return f"Owner {owner.nric}"
        for pet_patient in records.pet_patients:
            if self.store.has_pet_patient(pet_patient):
                return f"Pet patient {pet_patient.owner_nric}/{pet_patient.name}"
        for appointment in records.appointments:
            if self.store.has_appointment(appointment):
                return f"Appointment {appointment.id} or its time slot"
        return None

    def _remove(self, records: InsertedRecords, removed: InsertedRecords) -> None:
        for appointment in reversed(records.appointments):
            self.store.remove_appointment(appointment.id)
            removed.appointments.insert(0, appointment)
        for pet_patient in reversed(records.pet_patients):
            self.store.remove_pet_patient(pet_patient.owner_nric, pet_patient.name)
            removed.pet_patients.insert(0, pet_patient)
        for owner in reversed(records.owners):
            self.store.remove_owner(owner.nric)
            removed.owners.insert(0, owner)

    def _insert(self, records: InsertedRecords, inserted: InsertedRecords) -> None:
        for owner in records.owners:
            self.store.add_owner(owner)
            inserted.owners.append(owner)
        for pet_patient in records.pet_patients:
            self.store.add_pet_patient(pet_patient)
            inserted.pet_patients.append(pet_patient)
        for appointment in records.appointments:
            self.store.add_appointment(appointment)
            inserted.appointments.append(appointment)

    def _stale(
        self, stack: List[UndoEntry], entry: UndoEntry, reason: str
    ) -> StaleHistoryEntryError:
        stack.pop()
        template = (
            messages.MESSAGE_UNDO_STALE
            if stack is self._undo_stack
            else messages.MESSAGE_REDO_STALE
        )
        logger.warning(
            f"Dropped stale history entry {entry.entry_id}",
            extra={"context": {"command": entry.command_text, "reason": reason}},
        )
        return StaleHistoryEntryError(
            template.format(command=entry.command_text, reason=reason), entry.entry_id
        )
