"""
Search service for the find command.

Owner search and pet patient search share one predicate builder driven by a
list of searchable fields. Within a field the keywords are OR-combined, across
fields the per-field predicates are AND-combined. Building a predicate never
touches the store.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple, Union

from medeina.core import messages
from medeina.core.exceptions import InvalidSearchFormatError
from medeina.core.validation import parse_field
from medeina.domain.entities import Owner, PetPatient
from medeina.domain.interfaces import IClinicReader
from medeina.parsing.syntax import (
    FLAG_OWNER,
    FLAG_PET_PATIENT,
    PREFIX_BLOOD_TYPE,
    PREFIX_BREED,
    PREFIX_COLOUR,
    PREFIX_NAME,
    PREFIX_NRIC,
    PREFIX_SPECIES,
    PREFIX_TAG,
    Prefix,
)
from medeina.parsing.tokenizer import ArgumentMultimap, tokenize
from medeina.utils.text_utils import contains_word_ignore_case

logger = logging.getLogger(__name__)

Record = Union[Owner, PetPatient]


@dataclass(frozen=True)
class SearchField:
    """A searchable attribute: its prefix, parser kind and extractor."""

    prefix: Prefix
    kind: str
    extract: Callable[[Record], str]


OWNER_SEARCH_FIELDS: Tuple[SearchField, ...] = (
    SearchField(PREFIX_NAME, "name", lambda owner: owner.name),
    SearchField(PREFIX_NRIC, "nric", lambda owner: owner.nric),
    SearchField(PREFIX_TAG, "tag", lambda owner: owner.tag_string),
)

PET_PATIENT_SEARCH_FIELDS: Tuple[SearchField, ...] = (
    SearchField(PREFIX_NAME, "pet_name", lambda pet: pet.name),
    SearchField(PREFIX_SPECIES, "species", lambda pet: pet.species),
    SearchField(PREFIX_BREED, "breed", lambda pet: pet.breed),
    SearchField(PREFIX_COLOUR, "colour", lambda pet: pet.colour),
    SearchField(PREFIX_BLOOD_TYPE, "blood_type", lambda pet: pet.blood_type),
    SearchField(PREFIX_TAG, "tag", lambda pet: pet.tag_string),
)

TARGET_OWNERS = "owners"
TARGET_PET_PATIENTS = "pet_patients"

_FIELDS_BY_SELECTOR = {
    f"-{FLAG_OWNER}": (TARGET_OWNERS, OWNER_SEARCH_FIELDS),
    f"-{FLAG_PET_PATIENT}": (TARGET_PET_PATIENTS, PET_PATIENT_SEARCH_FIELDS),
}


@dataclass(frozen=True)
class KeywordsPredicate:
    """True when any keyword is a whole word of the field's value."""

    field: SearchField
    keywords: Tuple[str, ...]

    def __call__(self, record: Record) -> bool:
        value = self.field.extract(record) or ""
        return any(contains_word_ignore_case(value, keyword) for keyword in self.keywords)


@dataclass(frozen=True)
class AllOf:
    """True when every predicate holds."""

    predicates: Tuple[KeywordsPredicate, ...]

    def __call__(self, record: Record) -> bool:
        return all(predicate(record) for predicate in self.predicates)


@dataclass(frozen=True)
class SearchQuery:
    target: str
    predicate: AllOf


def build_predicate(fields: Sequence[SearchField], multimap: ArgumentMultimap) -> AllOf:
    """Compose the predicate for whichever ``fields`` are present.

    Every keyword is validated by the field's parser; the keyword itself,
    not the parsed value, is what gets matched.

    Raises:
        InvalidFieldFormatError: a keyword fails validation
    """
    predicates = []
    for search_field in fields:
        if not multimap.is_present(search_field.prefix):
            continue
        joined = " ".join(multimap.get_all_values(search_field.prefix))
        keywords = tuple(joined.split())
        for keyword in keywords:
            parse_field(search_field.kind, keyword)
        predicates.append(KeywordsPredicate(search_field, keywords))
    return AllOf(tuple(predicates))


class SearchService:
    """Parses find arguments and filters the store's records."""

    def parse(self, args: str) -> SearchQuery:
        """Parse ``-o ...`` or ``-p ...`` into a search query.

        Raises:
            InvalidSearchFormatError: missing or unknown selector, no
                recognised prefix, non-empty preamble or a prefix with no
                keywords
            InvalidFieldFormatError: a keyword fails validation
        """
        parts = (args or "").split(maxsplit=1)
        selector = parts[0] if parts else ""
        rest = parts[1] if len(parts) > 1 else ""
        if selector not in _FIELDS_BY_SELECTOR:
            raise InvalidSearchFormatError(messages.MESSAGE_FIND_USAGE)

        target, fields = _FIELDS_BY_SELECTOR[selector]
        multimap = tokenize(rest, *(f.prefix for f in fields))
        present = multimap.present_prefixes()
        if multimap.preamble or not present:
            raise InvalidSearchFormatError(messages.MESSAGE_FIND_USAGE)
        if any(not " ".join(multimap.get_all_values(p)).strip() for p in present):
            raise InvalidSearchFormatError(messages.MESSAGE_FIND_USAGE)

        return SearchQuery(target=target, predicate=build_predicate(fields, multimap))

    def search(self, args: str, store: IClinicReader) -> Tuple[str, List[Record]]:
        """Run a find command against ``store``.

        Returns:
            (target, matches) where target is ``"owners"`` or ``"pet_patients"``
        """
        query = self.parse(args)
        if query.target == TARGET_OWNERS:
            candidates: List[Record] = list(store.get_owners())
        else:
            candidates = list(store.get_pet_patients())

        matches = [record for record in candidates if query.predicate(record)]
        logger.debug(
            "Search completed",
            extra={
                "context": {
                    "target": query.target,
                    "fields": len(query.predicate.predicates),
                    "matches": len(matches),
                }
            },
        )
        return query.target, matches
