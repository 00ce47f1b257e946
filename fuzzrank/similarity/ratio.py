"""Ratio scoring: edit-distance ratio, block-match ratio and partial ratio.

These are the unvalidated internals; the public wrappers in ``scoring``
apply preprocessing first. Every function here still returns 0 for an empty
or non-string operand.
"""

from __future__ import annotations

import math
from difflib import SequenceMatcher
from typing import Any

from fuzzrank.normalize import normalize_unicode

from .distance import levenshtein
from .types import MatchingBlock, ScoreOptions

# Default substitution cost for the ratio family
RATIO_SUBCOST = 2

# Any window scoring above this counts as a perfect partial match
PARTIAL_PERFECT = 99.5


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return int(math.floor(value + 0.5))


def validate(text: Any) -> bool:
    """True for a non-empty ``str``."""
    return isinstance(text, str) and len(text) > 0


def matching_blocks(shorter: str, longer: str) -> list[MatchingBlock]:
    """Maximal common runs between two strings, ending with a zero-size block."""
    matcher = SequenceMatcher(None, shorter, longer)
    return [MatchingBlock(*block) for block in matcher.get_matching_blocks()]


def block_match_ratio(str1: str, str2: str) -> int:
    """2 * matched / total length, scaled to 0-100."""
    return round_half_up(100 * SequenceMatcher(None, str1, str2).ratio())


def _ratio(str1: Any, str2: Any, options: ScoreOptions) -> int:
    if not validate(str1) or not validate(str2):
        return 0
    if options.block_match:
        return block_match_ratio(str1, str2)

    form = options.normalization_form
    if form:
        str1 = normalize_unicode(str1, form, options.diagnostics)
        str2 = normalize_unicode(str2, form, options.diagnostics)

    lensum = len(str1) + len(str2)
    distance = levenshtein(
        str1,
        str2,
        options.resolved_subcost(RATIO_SUBCOST),
        options.get_collator(),
    )
    return round_half_up(100 * ((lensum - distance) / lensum))


def _partial_ratio(str1: Any, str2: Any, options: ScoreOptions) -> int:
    if not validate(str1) or not validate(str2):
        return 0
    if len(str1) <= len(str2):
        shorter, longer = str1, str2
    else:
        shorter, longer = str2, str1

    best = 0
    for block in matching_blocks(shorter, longer):
        long_start = max(0, block.b - block.a)
        window = longer[long_start : long_start + len(shorter)]
        score = _ratio(shorter, window, options)
        if score > PARTIAL_PERFECT:
            return 100
        best = max(best, score)
    return best
