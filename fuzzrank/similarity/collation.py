"""Locale-aware character equality used by the distance engine."""

from __future__ import annotations

import unicodedata
from functools import lru_cache
from typing import Protocol


class Collator(Protocol):
    """Protocol for character equality predicates.

    Any object with an ``equals`` method can stand in for raw code-point
    equality during the edit distance computation.
    """

    def equals(self, a: str, b: str) -> bool:
        """Return True if the two characters compare equal."""
        ...


@lru_cache(maxsize=4096)
def _base_form(char: str) -> str:
    decomposed = unicodedata.normalize("NFKD", char)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


class AccentInsensitiveCollator:
    """Base-letter comparison: accents and case are ignored."""

    def equals(self, a: str, b: str) -> bool:
        return a == b or _base_form(a) == _base_form(b)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
