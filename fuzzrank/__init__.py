"""fuzzrank: fuzzy string similarity scoring and ranking.

Scorers compare two strings and return 0-100; ``extract`` ranks a
collection of candidates against a query with any of them.
"""

from fuzzrank.extraction import (
    InvalidInput,
    PreparedChoice,
    Scorer,
    extract,
    extract_async,
    extract_one,
    iter_extract,
    prepare_choices,
    resolve_scorer,
    results_to_frame,
)
from fuzzrank.normalize import full_process, process_and_sort, tokenize
from fuzzrank.similarity import (
    AccentInsensitiveCollator,
    Collator,
    Diagnostics,
    ExtractResult,
    MatchingBlock,
    QRatio,
    ScoreOptions,
    ScorerKind,
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

__version__ = "1.0.0"

unique_tokens = tokenize

__all__ = [
    "AccentInsensitiveCollator",
    "Collator",
    "Diagnostics",
    "ExtractResult",
    "InvalidInput",
    "MatchingBlock",
    "PreparedChoice",
    "QRatio",
    "ScoreOptions",
    "Scorer",
    "ScorerKind",
    "WRatio",
    "distance",
    "extract",
    "extract_async",
    "extract_one",
    "full_process",
    "iter_extract",
    "partial_ratio",
    "partial_token_set_ratio",
    "partial_token_sort_ratio",
    "prepare_choices",
    "process_and_sort",
    "ratio",
    "resolve_scorer",
    "results_to_frame",
    "token_set_ratio",
    "token_sort_ratio",
    "tokenize",
    "unique_tokens",
    "wratio",
]
