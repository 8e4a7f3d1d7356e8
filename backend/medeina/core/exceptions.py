"""
Custom exceptions for Medeina.
Centralized error taxonomy shared by stores, parsers and services.
"""

from typing import Optional

from medeina.core.messages import MESSAGE_INVALID_COMMAND_FORMAT


class MedeinaError(Exception):
    """Base class for every error raised by the clinic core."""

    pass


class CommandError(MedeinaError):
    """
    User-facing failure of a command.
    The message is shown to the user as-is by the command boundary.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ---------------------------------------------------------------------------
# Store errors
# ---------------------------------------------------------------------------


class DuplicateRecordError(MedeinaError):
    """Raised by a store when an identity key is already taken."""

    kind = "record"

    def __init__(self, key: str):
        super().__init__(f"Duplicate {self.kind}: {key}")
        self.key = key


class DuplicateOwnerError(DuplicateRecordError):
    kind = "owner"


class DuplicatePetPatientError(DuplicateRecordError):
    kind = "pet patient"


class DuplicateAppointmentError(DuplicateRecordError):
    kind = "appointment"


class RecordNotFoundError(MedeinaError):
    """Raised by a store when asked to remove a record it does not hold."""

    def __init__(self, kind: str, key: str):
        super().__init__(f"No {kind} found for {key}")
        self.kind = kind
        self.key = key


# ---------------------------------------------------------------------------
# Reference resolution errors
# ---------------------------------------------------------------------------


class UnknownOwnerReferenceError(CommandError):
    def __init__(self, message: str, nric: str):
        super().__init__(message)
        self.nric = nric


class UnknownPetPatientReferenceError(CommandError):
    def __init__(self, message: str, nric: str, pet_patient_name: str):
        super().__init__(message)
        self.nric = nric
        self.pet_patient_name = pet_patient_name


# ---------------------------------------------------------------------------
# Parse errors
# ---------------------------------------------------------------------------


class ParseError(CommandError):
    """Raised when user input does not conform to the expected format."""

    pass


class InvalidFieldFormatError(ParseError):
    """A single raw token failed type-specific validation."""

    def __init__(self, field: str, value: str, constraint: str):
        super().__init__(f"Invalid {field} '{value}': {constraint}")
        self.field = field
        self.value = value
        self.constraint = constraint


class InvalidCommandFormatError(ParseError):
    """Command arguments are malformed; carries the usage to show."""

    def __init__(self, usage: str, message: Optional[str] = None):
        super().__init__(message or MESSAGE_INVALID_COMMAND_FORMAT.format(usage=usage))
        self.usage = usage


class InvalidSearchFormatError(InvalidCommandFormatError):
    """Search arguments hold no recognised prefix or a non-empty preamble."""

    pass


# ---------------------------------------------------------------------------
# Undo log errors
# ---------------------------------------------------------------------------


class NothingToUndoError(CommandError):
    def __init__(self):
        super().__init__("No more commands to undo!")


class NothingToRedoError(CommandError):
    def __init__(self):
        super().__init__("No more commands to redo!")


class StaleHistoryEntryError(CommandError):
    """
    An undo or redo entry no longer matches the store.
    The store is left as it was and the entry is discarded.
    """

    def __init__(self, message: str, entry_id: str):
        super().__init__(message)
        self.entry_id = entry_id


class UnknownCommandVariantError(MedeinaError):
    """
    An add request of an unsupported type reached the executor.
    This is a programming fault, never caused by user input.
    """

    pass
