"""Similarity module for fuzzrank.

This module provides the scoring engine: edit distance, ratio, partial
ratio, the token strategies and the weighted composite scorer.
"""

from .collation import AccentInsensitiveCollator, Collator
from .diagnostics import Diagnostics
from .distance import levenshtein
from .ratio import block_match_ratio, matching_blocks, round_half_up, validate
from .scoring import (
    QRatio,
    WRatio,
    distance,
    partial_ratio,
    partial_token_set_ratio,
    partial_token_sort_ratio,
    ratio,
    token_set_ratio,
    token_sort_ratio,
    wratio,
)
from .types import (
    ExtractResult,
    MatchingBlock,
    ScoreOptions,
    ScorerKind,
    resolve_options,
)

__all__ = [
    "AccentInsensitiveCollator",
    "Collator",
    "Diagnostics",
    "ExtractResult",
    "MatchingBlock",
    "QRatio",
    "ScoreOptions",
    "ScorerKind",
    "WRatio",
    "block_match_ratio",
    "distance",
    "levenshtein",
    "matching_blocks",
    "partial_ratio",
    "partial_token_set_ratio",
    "partial_token_sort_ratio",
    "ratio",
    "resolve_options",
    "round_half_up",
    "token_set_ratio",
    "token_sort_ratio",
    "validate",
    "wratio",
]
