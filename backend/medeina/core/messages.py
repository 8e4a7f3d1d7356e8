"""
User-facing message templates and command usage strings.

Kept in one place so the command parsers, the services and the tests all
agree on the exact wording.
"""

CLINIC_NAME = "Medeina"

MESSAGE_INVALID_COMMAND_FORMAT = "Invalid command format! \n{usage}"
MESSAGE_UNKNOWN_COMMAND = "Unknown command"

# ===========================
# add
# ===========================

ADD_COMMAND_WORD = "add"
ADD_COMMAND_ALIAS = "a"

MESSAGE_ADD_OWNER_USAGE = (
    "add -o : Adds an owner to Medeina. "
    "Parameters: n/NAME p/PHONE e/EMAIL a/ADDRESS nr/NRIC [t/TAG]...\n"
    "Example: add -o n/John Doe p/98765432 e/johnd@example.com "
    "a/311, Clementi Ave 2, #02-25 nr/S1234567Q t/friends t/owesMoney"
)

MESSAGE_ADD_PET_PATIENT_USAGE = (
    "add -p : Adds a pet patient under an owner. "
    "Parameters: n/NAME s/SPECIES b/BREED c/COLOUR bt/BLOOD_TYPE [t/TAG]... "
    "-o nr/OWNER_NRIC\n"
    "Example: add -p n/Jewel s/Cat b/Persian Ragdoll c/Calico bt/AB "
    "-o nr/S1234567Q"
)

MESSAGE_ADD_APPOINTMENT_USAGE = (
    "add -a : Adds an appointment for an existing pet patient. "
    "Parameters: d/YYYY-MM-DD HH:MM r/REMARK [t/TYPE OF APPOINTMENT]... "
    "-o nr/OWNER_NRIC -p n/PET_PATIENT_NAME\n"
    "Example: add -a d/2018-12-31 12:30 r/nil t/checkup t/vaccination "
    "-o nr/S1234567Q -p n/Jewel"
)

MESSAGE_ADD_USAGE = "\n".join(
    [
        MESSAGE_ADD_OWNER_USAGE,
        MESSAGE_ADD_PET_PATIENT_USAGE,
        MESSAGE_ADD_APPOINTMENT_USAGE,
        "add -o <owner> -p <pet patient> -a <appointment> : "
        "Adds a new owner, pet patient and appointment together.",
    ]
)

MESSAGE_ADD_OWNER_SUCCESS = "New owner added: {owner}"
MESSAGE_ADD_BUNDLE_SUCCESS = (
    "New owner added: {owner}\n"
    "New pet patient added: {pet_patient}\n"
    "New appointment made: {appointment}"
)
MESSAGE_ADD_APPOINTMENT_SUCCESS = "New appointment made: {appointment}\nunder owner: {owner}"
MESSAGE_ADD_PET_PATIENT_SUCCESS = "New pet patient added: {pet_patient}\nunder owner: {owner}"

MESSAGE_DUPLICATE_OWNER = "This owner already exists in Medeina."
MESSAGE_DUPLICATE_PET_PATIENT = "This pet patient already exists in Medeina."
MESSAGE_DUPLICATE_APPOINTMENT = "This particular appointment already exists in Medeina."
MESSAGE_INVALID_NRIC = (
    "The specified NRIC does not belong to anyone in Medeina. Please add a new owner."
)
MESSAGE_INVALID_PET_PATIENT = (
    "The specified pet cannot be found under the specified owner in Medeina. "
    "Please add a new pet patient."
)

# ===========================
# find
# ===========================

FIND_COMMAND_WORD = "find"
FIND_COMMAND_ALIAS = "f"

MESSAGE_FIND_USAGE = (
    "find -o : Finds owners whose fields contain any of the keywords. "
    "Parameters: [n/NAME...] [nr/NRIC...] [t/TAG...]\n"
    "find -p : Finds pet patients whose fields contain any of the keywords. "
    "Parameters: [n/NAME...] [s/SPECIES...] [b/BREED...] [c/COLOUR...] "
    "[bt/BLOOD_TYPE...] [t/TAG...]\n"
    "At least one parameter is required.\n"
    "Example: find -o n/alice bob t/friends"
)

MESSAGE_OWNERS_LISTED = "{count} owners listed!"
MESSAGE_PET_PATIENTS_LISTED = "{count} pet patients listed!"
MESSAGE_APPOINTMENTS_LISTED = "{count} appointments listed!"

# ===========================
# list / undo / redo / history / help
# ===========================

LIST_COMMAND_WORD = "list"
LIST_COMMAND_ALIAS = "l"
MESSAGE_LIST_USAGE = (
    "list : Lists all records. "
    "Parameters: [-o | -p | -a] to list only owners, pet patients or appointments"
)
MESSAGE_LIST_SUMMARY = (
    "Listed {owners} owners, {pet_patients} pet patients and "
    "{appointments} appointments"
)

UNDO_COMMAND_WORD = "undo"
UNDO_COMMAND_ALIAS = "u"
MESSAGE_UNDO_SUCCESS = "Undo success! Reverted: {command}"
MESSAGE_UNDO_STALE = "Cannot undo: {command}\n{reason}. The entry was dropped from the history."

REDO_COMMAND_WORD = "redo"
REDO_COMMAND_ALIAS = "r"
MESSAGE_REDO_SUCCESS = "Redo success! Reapplied: {command}"
MESSAGE_REDO_STALE = "Cannot redo: {command}\n{reason}. The entry was dropped from the redo history."

HISTORY_COMMAND_WORD = "history"
MESSAGE_HISTORY_EMPTY = "You have not yet entered any undoable commands."

HELP_COMMAND_WORD = "help"
HELP_COMMAND_ALIAS = "h"
MESSAGE_HELP = "\n\n".join(
    [
        MESSAGE_ADD_USAGE,
        MESSAGE_FIND_USAGE,
        MESSAGE_LIST_USAGE,
        "undo : Reverts the most recent add.",
        "redo : Reapplies the most recently undone add.",
        "history : Lists the undoable commands entered so far.",
    ]
)
