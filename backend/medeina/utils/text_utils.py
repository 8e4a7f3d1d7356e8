"""Utilities for text normalization and keyword matching.

Keep a single, testable place that defines how names are normalized and
how search keywords are matched, so stores, parsers and search agree.
"""

import unicodedata
from typing import Iterable, List, Optional


def normalize_whitespace(text: Optional[str]) -> str:
    """Trim, NFC-normalize and collapse inner whitespace to single spaces."""
    if not text:
        return ""
    n = unicodedata.normalize("NFC", str(text))
    return " ".join(n.split())


def contains_word_ignore_case(sentence: str, word: str) -> bool:
    """Return True if ``sentence`` contains ``word`` as a whole word.

    Matching is case-insensitive and a full word match is required:
        contains_word_ignore_case("ABc def", "abc") -> True
        contains_word_ignore_case("ABc def", "DEF") -> True
        contains_word_ignore_case("ABc def", "AB") -> False

    Raises:
        ValueError: if ``word`` is blank or holds more than one word
    """
    if sentence is None:
        raise ValueError("Sentence must not be None")
    prepared = (word or "").strip()
    if not prepared:
        raise ValueError("Word parameter cannot be empty")
    if len(prepared.split()) != 1:
        raise ValueError("Word parameter should be a single word")

    target = prepared.casefold()
    return any(candidate.casefold() == target for candidate in sentence.split())


def unique_preserving_order(values: Iterable[str]) -> List[str]:
    """Drop repeated values, keeping the first occurrence of each."""
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result
