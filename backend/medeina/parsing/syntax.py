"""
Command-line syntax shared by the command parsers.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Prefix:
    """An argument prefix such as ``n/``."""

    text: str

    def __str__(self) -> str:
        return self.text


PREFIX_NAME = Prefix("n/")
PREFIX_PHONE = Prefix("p/")
PREFIX_EMAIL = Prefix("e/")
PREFIX_ADDRESS = Prefix("a/")
PREFIX_NRIC = Prefix("nr/")
PREFIX_TAG = Prefix("t/")
PREFIX_REMARK = Prefix("r/")
PREFIX_DATE = Prefix("d/")
PREFIX_SPECIES = Prefix("s/")
PREFIX_BREED = Prefix("b/")
PREFIX_COLOUR = Prefix("c/")
PREFIX_BLOOD_TYPE = Prefix("bt/")

OWNER_PREFIXES = (
    PREFIX_NAME,
    PREFIX_PHONE,
    PREFIX_EMAIL,
    PREFIX_ADDRESS,
    PREFIX_NRIC,
    PREFIX_TAG,
)
PET_PATIENT_PREFIXES = (
    PREFIX_NAME,
    PREFIX_SPECIES,
    PREFIX_BREED,
    PREFIX_COLOUR,
    PREFIX_BLOOD_TYPE,
    PREFIX_TAG,
)
APPOINTMENT_PREFIXES = (PREFIX_DATE, PREFIX_REMARK, PREFIX_TAG)

# Entity selectors: "-o" owner, "-p" pet patient, "-a" appointment
FLAG_OWNER = "o"
FLAG_PET_PATIENT = "p"
FLAG_APPOINTMENT = "a"
