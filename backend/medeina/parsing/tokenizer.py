"""
Prefix tokenizer.

Splits an argument string such as ``" n/Tan Wei t/friends t/vip"`` into a
map from prefix to the values that followed it. A prefix is only recognised
when it starts the string or follows whitespace, and only prefixes passed to
``tokenize`` are recognised; anything else is part of a value. Text before
the first recognised prefix is the preamble.
"""

import re
from typing import Dict, List, Optional

from .syntax import Prefix


class ArgumentMultimap:
    """Prefix -> values, in the order the values appeared."""

    def __init__(self, preamble: str = "") -> None:
        self.preamble = preamble
        self._values: Dict[Prefix, List[str]] = {}

    def put(self, prefix: Prefix, value: str) -> None:
        self._values.setdefault(prefix, []).append(value)

    def get_value(self, prefix: Prefix) -> Optional[str]:
        """Last value given for ``prefix``, or None if absent."""
        values = self._values.get(prefix)
        return values[-1] if values else None

    def get_all_values(self, prefix: Prefix) -> List[str]:
        return list(self._values.get(prefix, []))

    def is_present(self, prefix: Prefix) -> bool:
        return prefix in self._values

    def present_prefixes(self) -> List[Prefix]:
        return list(self._values)

    def __repr__(self) -> str:
        return f"ArgumentMultimap(preamble={self.preamble!r}, values={self._values!r})"


def tokenize(args: str, *prefixes: Prefix) -> ArgumentMultimap:
    """Tokenize ``args`` using only the given ``prefixes``."""
    text = f" {args or ''}"
    if not prefixes:
        return ArgumentMultimap(preamble=text.strip())

    # Longest first so "bt/" is tried before "t/" at the same position
    by_text = {p.text: p for p in prefixes}
    alternatives = "|".join(
        re.escape(p) for p in sorted(by_text, key=len, reverse=True)
    )
    pattern = re.compile(rf"(?<=\s)({alternatives})")

    matches = list(pattern.finditer(text))
    if not matches:
        return ArgumentMultimap(preamble=text.strip())

    multimap = ArgumentMultimap(preamble=text[: matches[0].start()].strip())
    for current, following in zip(matches, matches[1:] + [None]):
        end = following.start() if following is not None else len(text)
        multimap.put(by_text[current.group(1)], text[current.end() : end].strip())
    return multimap


def are_prefixes_present(multimap: ArgumentMultimap, *prefixes: Prefix) -> bool:
    """True if every one of ``prefixes`` has at least one value."""
    return all(multimap.is_present(p) for p in prefixes)
