"""Edit distance engine.

Insertions and deletions cost 1, substitutions cost ``subcost``. Python
strings index by code point, so characters outside the basic multilingual
plane count as a single unit.
"""

from __future__ import annotations

from typing import Optional

from rapidfuzz.distance import Levenshtein

from .collation import Collator


def levenshtein(
    seq_a: str,
    seq_b: str,
    subcost: int = 1,
    collator: Optional[Collator] = None,
) -> int:
    """Minimum-cost edit distance between two sequences.

    Args:
        seq_a: First sequence
        seq_b: Second sequence
        subcost: Substitution cost
        collator: Optional equality predicate replacing code-point equality

    Returns:
        Distance (0 and above)

    """
    if collator is None:
        return int(Levenshtein.distance(seq_a, seq_b, weights=(1, 1, subcost)))
    return _collated_levenshtein(seq_a, seq_b, subcost, collator)


def _collated_levenshtein(seq_a: str, seq_b: str, subcost: int, collator: Collator) -> int:
    """Two-row dynamic program; matches are decided by ``collator.equals``."""
    if not seq_a:
        return len(seq_b)
    if not seq_b:
        return len(seq_a)

    previous = list(range(len(seq_b) + 1))
    for i, char_a in enumerate(seq_a, start=1):
        current = [i]
        for j, char_b in enumerate(seq_b, start=1):
            cost = 0 if collator.equals(char_a, char_b) else subcost
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + cost,
                ),
            )
        previous = current
    return previous[-1]
