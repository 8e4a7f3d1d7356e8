"""
Field parsers for Medeina records.

Every raw token typed by the user goes through ``parse_field(kind, raw)``
before it becomes part of an entity or a search keyword. A parser either
returns the cleaned value or raises ``InvalidFieldFormatError`` naming the
field kind, the offending value and the constraint it broke.
"""

import logging
import re
from datetime import datetime
from typing import Any, Callable, Dict

from medeina.core.exceptions import InvalidFieldFormatError
from medeina.utils.text_utils import normalize_whitespace

logger = logging.getLogger(__name__)

DATE_TIME_FORMAT = "%Y-%m-%d %H:%M"

# Letters/digits of any script, no underscore
_ALNUM = r"[^\W_]"
# Letters of any script only
_ALPHA = r"[^\W\d_]"

_NAME_PATTERN = re.compile(rf"{_ALNUM}(?:{_ALNUM}| )*")
_ALPHA_PATTERN = re.compile(rf"{_ALPHA}(?:{_ALPHA}| )*")
_PHONE_PATTERN = re.compile(r"\d{3,}")
_EMAIL_PATTERN = re.compile(
    r"[\w!#$%&'*+/=?`{|}~^.-]+@[^\W_](?:[\w-]*[^\W_])?(?:\.[^\W_](?:[\w-]*[^\W_])?)*"
)
_NRIC_PATTERN = re.compile(r"[STFG]\d{7}[A-Z]")
_TAG_PATTERN = re.compile(rf"{_ALNUM}+")
_BLOOD_TYPE_PATTERN = re.compile(rf"{_ALNUM}[A-Za-z0-9+\-. ]*")

MESSAGE_NAME_CONSTRAINTS = (
    "Names should only contain alphanumeric characters and spaces, "
    "and it should not be blank"
)
MESSAGE_PHONE_CONSTRAINTS = "Phone numbers can only contain numbers, and should be at least 3 digits long"
MESSAGE_EMAIL_CONSTRAINTS = "Emails should be of the format local-part@domain"
MESSAGE_ADDRESS_CONSTRAINTS = "Addresses can take any values, and it should not be blank"
MESSAGE_NRIC_CONSTRAINTS = (
    "NRIC should start with S, T, F or G, followed by 7 digits and end with a letter"
)
MESSAGE_TAG_CONSTRAINTS = "Tags names should be alphanumeric"
MESSAGE_SPECIES_CONSTRAINTS = "Species can only contain alphabetic characters and spaces"
MESSAGE_BREED_CONSTRAINTS = "Breeds can only contain alphabetic characters and spaces"
MESSAGE_COLOUR_CONSTRAINTS = "Colours can only contain alphabetic characters and spaces"
MESSAGE_BLOOD_TYPE_CONSTRAINTS = (
    "Blood types should start with a letter or digit and may contain "
    "letters, digits, spaces and the characters + - ."
)
MESSAGE_DATE_TIME_CONSTRAINTS = "Date and time should be in the format YYYY-MM-DD HH:MM"


def _invalid(field: str, value: Any, constraint: str) -> InvalidFieldFormatError:
    logger.debug(f"Validation error for {field}: {value!r}")
    return InvalidFieldFormatError(field, str(value), constraint)


def _require_text(field: str, raw: Any) -> str:
    if raw is None:
        raise _invalid(field, "", "value is required")
    return normalize_whitespace(raw)


def parse_name(raw: str) -> str:
    value = _require_text("name", raw)
    if not _NAME_PATTERN.fullmatch(value):
        raise _invalid("name", raw, MESSAGE_NAME_CONSTRAINTS)
    return value


def parse_pet_name(raw: str) -> str:
    value = _require_text("pet_name", raw)
    if not _NAME_PATTERN.fullmatch(value):
        raise _invalid("pet_name", raw, MESSAGE_NAME_CONSTRAINTS)
    return value


def parse_phone(raw: str) -> str:
    value = _require_text("phone", raw)
    if not _PHONE_PATTERN.fullmatch(value):
        raise _invalid("phone", raw, MESSAGE_PHONE_CONSTRAINTS)
    return value


def parse_email(raw: str) -> str:
    value = _require_text("email", raw)
    if not _EMAIL_PATTERN.fullmatch(value):
        raise _invalid("email", raw, MESSAGE_EMAIL_CONSTRAINTS)
    return value


def parse_address(raw: str) -> str:
    value = _require_text("address", raw)
    if not value:
        raise _invalid("address", raw, MESSAGE_ADDRESS_CONSTRAINTS)
    return value


def parse_nric(raw: str) -> str:
    """NRIC ids are stored upper-cased."""
    value = _require_text("nric", raw).upper()
    if not _NRIC_PATTERN.fullmatch(value):
        raise _invalid("nric", raw, MESSAGE_NRIC_CONSTRAINTS)
    return value


def parse_tag(raw: str) -> str:
    value = _require_text("tag", raw)
    if not _TAG_PATTERN.fullmatch(value):
        raise _invalid("tag", raw, MESSAGE_TAG_CONSTRAINTS)
    return value


def parse_species(raw: str) -> str:
    value = _require_text("species", raw)
    if not _ALPHA_PATTERN.fullmatch(value):
        raise _invalid("species", raw, MESSAGE_SPECIES_CONSTRAINTS)
    return value


def parse_breed(raw: str) -> str:
    value = _require_text("breed", raw)
    if not _ALPHA_PATTERN.fullmatch(value):
        raise _invalid("breed", raw, MESSAGE_BREED_CONSTRAINTS)
    return value


def parse_colour(raw: str) -> str:
    value = _require_text("colour", raw)
    if not _ALPHA_PATTERN.fullmatch(value):
        raise _invalid("colour", raw, MESSAGE_COLOUR_CONSTRAINTS)
    return value


def parse_blood_type(raw: str) -> str:
    value = _require_text("blood_type", raw)
    if not _BLOOD_TYPE_PATTERN.fullmatch(value):
        raise _invalid("blood_type", raw, MESSAGE_BLOOD_TYPE_CONSTRAINTS)
    return value


def parse_date_time(raw: Any) -> datetime:
    """Accepts a datetime as-is or a 'YYYY-MM-DD HH:MM' string."""
    if isinstance(raw, datetime):
        return raw.replace(second=0, microsecond=0)
    value = _require_text("date_time", raw)
    try:
        return datetime.strptime(value, DATE_TIME_FORMAT)
    except ValueError:
        raise _invalid("date_time", raw, MESSAGE_DATE_TIME_CONSTRAINTS) from None


def parse_remark(raw: str) -> str:
    return _require_text("remark", raw)


FIELD_PARSERS: Dict[str, Callable[[Any], Any]] = {
    "name": parse_name,
    "pet_name": parse_pet_name,
    "phone": parse_phone,
    "email": parse_email,
    "address": parse_address,
    "nric": parse_nric,
    "tag": parse_tag,
    "species": parse_species,
    "breed": parse_breed,
    "colour": parse_colour,
    "blood_type": parse_blood_type,
    "date_time": parse_date_time,
    "remark": parse_remark,
}


def parse_field(kind: str, raw: Any) -> Any:
    """
    Validate and convert ``raw`` according to the field ``kind``.

    Raises:
        KeyError: if ``kind`` is not a known field kind
        InvalidFieldFormatError: if ``raw`` breaks the field's constraint
    """
    try:
        parser = FIELD_PARSERS[kind]
    except KeyError:
        raise KeyError(f"Unknown field kind: {kind}") from None
    return parser(raw)
