"""Token strategies: word-order (sort) and word-membership (set) comparisons."""

from __future__ import annotations

from typing import Optional

from fuzzrank.normalize import process_and_sort, tokenize

from .ratio import _partial_ratio, _ratio
from .types import ScoreOptions


def token_sort(
    str1: str,
    str2: str,
    options: ScoreOptions,
    partial: bool = False,
    presorted: bool = False,
) -> int:
    """Score the two strings after putting their tokens in sorted order.

    Args:
        str1: First (processed) string
        str2: Second (processed) string
        options: Scoring options
        partial: Use partial ratio on the sorted forms
        presorted: Inputs are already token-sorted

    Returns:
        Score 0-100

    """
    if not presorted:
        str1 = process_and_sort(str1)
        str2 = process_and_sort(str2)
    ratio_func = _partial_ratio if partial else _ratio
    return ratio_func(str1, str2, options)


def token_set(
    str1: str,
    str2: str,
    options: ScoreOptions,
    partial: bool = False,
    tokens: Optional[tuple[list[str], list[str]]] = None,
) -> int:
    """Score shared-token core against each side's extra tokens.

    Builds ``sorted(intersection)`` and ``sorted(intersection) + sorted(diff)``
    for both sides and returns the best of the three pairings. With
    ``options.try_simple`` the raw strings are compared as a fourth pairing.
    Precomputed ``tokens`` skip tokenization of both inputs.
    """
    if tokens is None:
        tokens1, tokens2 = tokenize(str1), tokenize(str2)
    else:
        tokens1, tokens2 = tokens

    set1, set2 = set(tokens1), set(tokens2)
    intersection = [t for t in dict.fromkeys(tokens1) if t in set2]
    diff1to2 = [t for t in tokens1 if t not in set2]
    diff2to1 = [t for t in tokens2 if t not in set1]

    sorted_sect = " ".join(sorted(intersection))
    combined_1to2 = (sorted_sect + " " + " ".join(sorted(diff1to2))).strip()
    combined_2to1 = (sorted_sect + " " + " ".join(sorted(diff2to1))).strip()
    sorted_sect = sorted_sect.strip()

    ratio_func = _partial_ratio if partial else _ratio
    pairwise = [
        ratio_func(sorted_sect, combined_1to2, options),
        ratio_func(sorted_sect, combined_2to1, options),
        ratio_func(combined_1to2, combined_2to1, options),
    ]
    if options.try_simple:
        pairwise.append(ratio_func(str1, str2, options))
    return max(pairwise)
