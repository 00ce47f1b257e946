"""Public similarity scorers.

Every scorer takes ``(s1, s2, options=None, **overrides)``: ``options`` is a
ScoreOptions (or mapping of option names) and keyword overrides are applied
on top of it. Scorers preprocess with ``full_process`` when enabled and
return 0 when either side is empty afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

from fuzzrank.normalize import full_process

from .distance import levenshtein
from .ratio import _partial_ratio, _ratio, round_half_up, validate
from .token import token_set, token_sort
from .types import ScoreOptions, resolve_options

logger = logging.getLogger(__name__)

OptionsLike = Optional[Union[ScoreOptions, Mapping[str, Any]]]

# WRatio weighting
UNBASE_SCALE = 0.95
PARTIAL_SCALE = 0.90
LONG_PARTIAL_SCALE = 0.60
PARTIAL_MIN_LEN_RATIO = 1.5
LONG_LEN_RATIO = 8


def _preprocess(s1: Any, s2: Any, options: ScoreOptions) -> tuple[Any, Any]:
    if options.full_process:
        return full_process(s1, options.force_ascii), full_process(s2, options.force_ascii)
    return s1, s2


def distance(s1: Any, s2: Any, options: OptionsLike = None, **overrides: Any) -> int:
    """Levenshtein distance of the two strings (substitution cost 1 by default)."""
    opts = resolve_options(options, **overrides)
    s1, s2 = _preprocess(s1, s2, opts)
    if not isinstance(s1, str) or not isinstance(s2, str):
        raise TypeError("distance requires str operands when full_process is off")
    return levenshtein(s1, s2, opts.resolved_subcost(1), opts.get_collator())


def ratio(s1: Any, s2: Any, options: OptionsLike = None, **overrides: Any) -> int:
    """Levenshtein ratio of the two strings (0-100)."""
    opts = resolve_options(options, **overrides)
    s1, s2 = _preprocess(s1, s2, opts)
    if not validate(s1) or not validate(s2):
        return 0
    return _ratio(s1, s2, opts)


QRatio = ratio


def partial_ratio(s1: Any, s2: Any, options: OptionsLike = None, **overrides: Any) -> int:
    """Best ratio of the shorter string against same-length windows of the longer."""
    opts = resolve_options(options, **overrides)
    s1, s2 = _preprocess(s1, s2, opts)
    if not validate(s1) or not validate(s2):
        return 0
    return _partial_ratio(s1, s2, opts)


def token_sort_ratio(s1: Any, s2: Any, options: OptionsLike = None, **overrides: Any) -> int:
    """Ratio of the token-sorted forms."""
    opts = resolve_options(options, **overrides)
    s1, s2 = _preprocess(s1, s2, opts)
    if not validate(s1) or not validate(s2):
        return 0
    return token_sort(s1, s2, opts)


def partial_token_sort_ratio(
    s1: Any,
    s2: Any,
    options: OptionsLike = None,
    **overrides: Any,
) -> int:
    """Partial ratio of the token-sorted forms."""
    opts = resolve_options(options, **overrides)
    s1, s2 = _preprocess(s1, s2, opts)
    if not validate(s1) or not validate(s2):
        return 0
    return token_sort(s1, s2, opts, partial=True)


def token_set_ratio(s1: Any, s2: Any, options: OptionsLike = None, **overrides: Any) -> int:
    """Token set ratio; ``options.partial`` switches to the partial variant."""
    opts = resolve_options(options, **overrides)
    s1, s2 = _preprocess(s1, s2, opts)
    if not validate(s1) or not validate(s2):
        return 0
    return token_set(s1, s2, opts, partial=opts.partial)


def partial_token_set_ratio(
    s1: Any,
    s2: Any,
    options: OptionsLike = None,
    **overrides: Any,
) -> int:
    """Token set ratio using partial ratio for each pairing."""
    opts = resolve_options(options, **overrides)
    s1, s2 = _preprocess(s1, s2, opts)
    if not validate(s1) or not validate(s2):
        return 0
    return token_set(s1, s2, opts, partial=True)


def WRatio(s1: Any, s2: Any, options: OptionsLike = None, **overrides: Any) -> int:
    """Weighted ratio: best of several strategies, scaled by length difference.

    Strings within 1.5x of each other in length are compared with the full
    and token strategies only. Beyond that the partial strategies take over,
    discounted further once one string is more than 8x the other.

    Args:
        s1: First string
        s2: Second string
        options: Scoring options
        **overrides: Option overrides

    Returns:
        Score 0-100

    """
    opts = resolve_options(options, **overrides)
    s1, s2 = _preprocess(s1, s2, opts)
    opts = opts.replace(full_process=False)
    if not validate(s1) or not validate(s2):
        return 0

    base = _ratio(s1, s2, opts)
    len_ratio = max(len(s1), len(s2)) / min(len(s1), len(s2))

    if len_ratio < PARTIAL_MIN_LEN_RATIO:
        tsor = token_sort_ratio(s1, s2, opts) * UNBASE_SCALE
        tser = token_set_ratio(s1, s2, opts) * UNBASE_SCALE
        return round_half_up(max(base, tsor, tser))

    partial_scale = LONG_PARTIAL_SCALE if len_ratio > LONG_LEN_RATIO else PARTIAL_SCALE
    partial = _partial_ratio(s1, s2, opts) * partial_scale
    ptsor = partial_token_sort_ratio(s1, s2, opts) * UNBASE_SCALE * partial_scale
    ptser = partial_token_set_ratio(s1, s2, opts) * UNBASE_SCALE * partial_scale
    return round_half_up(max(base, partial, ptsor, ptser))


wratio = WRatio
