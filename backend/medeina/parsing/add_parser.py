"""
Parser for the add command.

The arguments are split into ``-o``, ``-p`` and ``-a`` segments. Which
segments are present, and whether the owner and pet segments hold a full
record or only a reference (``nr/`` for an owner, ``n/`` for a pet), decide
the request type:

    -o <owner>                                  AddOwnerRequest
    -p <pet patient> -o nr/NRIC                 AddPetPatientRequest
    -a <appointment> -o nr/NRIC -p n/PET_NAME   AddAppointmentRequest
    -o <owner> -p <pet patient> -a <appt>       AddBundleRequest
"""

import re
from typing import Dict

from medeina.core import messages
from medeina.core.exceptions import InvalidCommandFormatError
from medeina.core.validation import parse_field
from medeina.domain.entities import Appointment, Owner, PetPatient
from medeina.schemas.dtos import (
    AddAppointmentRequest,
    AddBundleRequest,
    AddOwnerRequest,
    AddPetPatientRequest,
    AddRequest,
)

from .syntax import (
    APPOINTMENT_PREFIXES,
    FLAG_APPOINTMENT,
    FLAG_OWNER,
    FLAG_PET_PATIENT,
    OWNER_PREFIXES,
    PET_PATIENT_PREFIXES,
    PREFIX_ADDRESS,
    PREFIX_BLOOD_TYPE,
    PREFIX_BREED,
    PREFIX_COLOUR,
    PREFIX_DATE,
    PREFIX_EMAIL,
    PREFIX_NAME,
    PREFIX_NRIC,
    PREFIX_PHONE,
    PREFIX_REMARK,
    PREFIX_SPECIES,
    PREFIX_TAG,
    Prefix,
)
from .tokenizer import ArgumentMultimap, are_prefixes_present, tokenize

_SEGMENT_PREFIXES = sorted(
    {prefix.text for prefix in OWNER_PREFIXES + PET_PATIENT_PREFIXES + APPOINTMENT_PREFIXES},
    key=len,
    reverse=True,
)
# A flag counts only when a field prefix or the end of input follows it
_FLAG_PATTERN = re.compile(
    r"(?:^|\s)-([opa])(?=\s*$|\s+(?:%s))"
    % "|".join(re.escape(text) for text in _SEGMENT_PREFIXES)
)


def split_segments(args: str) -> Dict[str, str]:
    """Split add arguments into flag -> segment text.

    Raises:
        InvalidCommandFormatError: text before the first flag, no flag at
            all, or a flag given twice
    """
    parts = _FLAG_PATTERN.split((args or "").strip())
    preamble, rest = parts[0], parts[1:]
    if preamble.strip() or not rest:
        raise InvalidCommandFormatError(messages.MESSAGE_ADD_USAGE)

    segments: Dict[str, str] = {}
    for flag, segment in zip(rest[::2], rest[1::2]):
        if flag in segments:
            raise InvalidCommandFormatError(messages.MESSAGE_ADD_USAGE)
        segments[flag] = segment.strip()
    return segments


def _is_reference(multimap: ArgumentMultimap, key_prefix: Prefix) -> bool:
    return not multimap.preamble and multimap.present_prefixes() == [key_prefix]


def _require(multimap: ArgumentMultimap, usage: str, *prefixes: Prefix) -> None:
    if multimap.preamble or not are_prefixes_present(multimap, *prefixes):
        raise InvalidCommandFormatError(usage)


def _tags(multimap: ArgumentMultimap) -> list:
    return [parse_field("tag", raw) for raw in multimap.get_all_values(PREFIX_TAG)]


def parse_owner(multimap: ArgumentMultimap) -> Owner:
    _require(
        multimap,
        messages.MESSAGE_ADD_OWNER_USAGE,
        PREFIX_NAME,
        PREFIX_PHONE,
        PREFIX_EMAIL,
        PREFIX_ADDRESS,
        PREFIX_NRIC,
    )
    return Owner(
        name=parse_field("name", multimap.get_value(PREFIX_NAME)),
        phone=parse_field("phone", multimap.get_value(PREFIX_PHONE)),
        email=parse_field("email", multimap.get_value(PREFIX_EMAIL)),
        address=parse_field("address", multimap.get_value(PREFIX_ADDRESS)),
        nric=parse_field("nric", multimap.get_value(PREFIX_NRIC)),
        tags=_tags(multimap),
    )


def parse_pet_patient(multimap: ArgumentMultimap) -> PetPatient:
    _require(
        multimap,
        messages.MESSAGE_ADD_PET_PATIENT_USAGE,
        PREFIX_NAME,
        PREFIX_SPECIES,
        PREFIX_BREED,
        PREFIX_COLOUR,
        PREFIX_BLOOD_TYPE,
    )
    return PetPatient(
        name=parse_field("pet_name", multimap.get_value(PREFIX_NAME)),
        species=parse_field("species", multimap.get_value(PREFIX_SPECIES)),
        breed=parse_field("breed", multimap.get_value(PREFIX_BREED)),
        colour=parse_field("colour", multimap.get_value(PREFIX_COLOUR)),
        blood_type=parse_field("blood_type", multimap.get_value(PREFIX_BLOOD_TYPE)),
        tags=_tags(multimap),
    )


def parse_appointment(multimap: ArgumentMultimap) -> Appointment:
    _require(multimap, messages.MESSAGE_ADD_APPOINTMENT_USAGE, PREFIX_DATE, PREFIX_REMARK)
    return Appointment(
        date_time=parse_field("date_time", multimap.get_value(PREFIX_DATE)),
        remark=parse_field("remark", multimap.get_value(PREFIX_REMARK)),
        tags=_tags(multimap),
    )


def parse_add_arguments(args: str) -> AddRequest:
    """Parse the arguments of an add command into one of the four requests.

    Raises:
        InvalidCommandFormatError: the segments match none of the four forms
            or a full record misses a required prefix
        InvalidFieldFormatError: a field value breaks its constraint
    """
    segments = split_segments(args)
    flags = set(segments)

    if flags == {FLAG_OWNER}:
        owner_map = tokenize(segments[FLAG_OWNER], *OWNER_PREFIXES)
        return AddOwnerRequest(owner=parse_owner(owner_map))

    if flags == {FLAG_OWNER, FLAG_PET_PATIENT}:
        owner_map = tokenize(segments[FLAG_OWNER], *OWNER_PREFIXES)
        if not _is_reference(owner_map, PREFIX_NRIC):
            raise InvalidCommandFormatError(messages.MESSAGE_ADD_PET_PATIENT_USAGE)
        pet_map = tokenize(segments[FLAG_PET_PATIENT], *PET_PATIENT_PREFIXES)
        return AddPetPatientRequest(
            pet_patient=parse_pet_patient(pet_map),
            owner_nric=parse_field("nric", owner_map.get_value(PREFIX_NRIC)),
        )

    if flags == {FLAG_OWNER, FLAG_PET_PATIENT, FLAG_APPOINTMENT}:
        owner_map = tokenize(segments[FLAG_OWNER], *OWNER_PREFIXES)
        pet_map = tokenize(segments[FLAG_PET_PATIENT], *PET_PATIENT_PREFIXES)
        appointment_map = tokenize(segments[FLAG_APPOINTMENT], *APPOINTMENT_PREFIXES)

        if _is_reference(owner_map, PREFIX_NRIC):
            if not _is_reference(pet_map, PREFIX_NAME):
                raise InvalidCommandFormatError(messages.MESSAGE_ADD_APPOINTMENT_USAGE)
            return AddAppointmentRequest(
                appointment=parse_appointment(appointment_map),
                owner_nric=parse_field("nric", owner_map.get_value(PREFIX_NRIC)),
                pet_patient_name=parse_field("pet_name", pet_map.get_value(PREFIX_NAME)),
            )

        return AddBundleRequest(
            owner=parse_owner(owner_map),
            pet_patient=parse_pet_patient(pet_map),
            appointment=parse_appointment(appointment_map),
        )

    raise InvalidCommandFormatError(messages.MESSAGE_ADD_USAGE)
