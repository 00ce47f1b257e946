"""Type definitions for similarity scoring and extraction.

This module provides the option bag shared by every scorer, the explicit
scorer enumeration used by the ranking pipeline, and the small record types
returned by the engine.
"""

from __future__ import annotations

import dataclasses
import logging
import numbers
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple, Optional, Union

from .collation import AccentInsensitiveCollator, Collator
from .diagnostics import Diagnostics

logger = logging.getLogger(__name__)

BLOCK_MATCH_ALGORITHMS = frozenset({"block-match", "difflib"})
RATIO_ALGORITHMS = frozenset({"default"}) | BLOCK_MATCH_ALGORITHMS

# Option names accepted from the YAML "scoring" and "extract" sections
SCORING_SETTING_KEYS = (
    "full_process",
    "force_ascii",
    "subcost",
    "use_collator",
    "astral",
    "normalize",
    "ratio_alg",
    "partial",
    "try_simple",
)
EXTRACT_SETTING_KEYS = ("cutoff", "limit", "unsorted")


class MatchingBlock(NamedTuple):
    """Maximal common run: offset in shorter, offset in longer, length."""

    a: int
    b: int
    size: int


class ExtractResult(NamedTuple):
    """One retained candidate from the ranking pipeline."""

    choice: Any
    score: float
    key: Any


class ScorerKind(str, Enum):
    """Builtin scorer identities recognised by the ranking pipeline."""

    RATIO = "ratio"
    PARTIAL_RATIO = "partial_ratio"
    TOKEN_SORT = "token_sort_ratio"
    PARTIAL_TOKEN_SORT = "partial_token_sort_ratio"
    TOKEN_SET = "token_set_ratio"
    PARTIAL_TOKEN_SET = "partial_token_set_ratio"
    WRATIO = "wratio"
    CUSTOM = "custom"

    @property
    def is_token_sort(self) -> bool:
        return self in (ScorerKind.TOKEN_SORT, ScorerKind.PARTIAL_TOKEN_SORT)

    @property
    def is_token_set(self) -> bool:
        return self in (ScorerKind.TOKEN_SET, ScorerKind.PARTIAL_TOKEN_SET)

    @property
    def is_partial(self) -> bool:
        return self in (
            ScorerKind.PARTIAL_RATIO,
            ScorerKind.PARTIAL_TOKEN_SORT,
            ScorerKind.PARTIAL_TOKEN_SET,
        )


@dataclass(frozen=True)
class ScoreOptions:
    """Per-call scoring configuration.

    ``subcost`` of None resolves to 1 for raw distance and 2 for the ratio
    family. ``normalize`` may be True (NFC) or a normalization form name and
    only applies in astral mode.
    """

    full_process: bool = True
    force_ascii: bool = True
    subcost: Optional[int] = None
    use_collator: bool = False
    collator: Optional[Collator] = field(default=None, compare=False)
    astral: bool = False
    normalize: Union[bool, str] = False
    ratio_alg: str = "default"
    partial: bool = False
    try_simple: bool = False
    cutoff: Optional[float] = None
    limit: Optional[int] = None
    unsorted: bool = False
    diagnostics: Optional[Diagnostics] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.ratio_alg not in RATIO_ALGORITHMS:
            raise ValueError(
                f"ratio_alg must be one of {sorted(RATIO_ALGORITHMS)}, got {self.ratio_alg!r}",
            )
        if self.subcost is not None:
            if isinstance(self.subcost, bool) or not isinstance(self.subcost, int):
                raise ValueError(f"subcost must be an int, got {self.subcost!r}")
            if self.subcost < 0:
                raise ValueError(f"subcost must be >= 0, got {self.subcost}")

    def replace(self, **changes: Any) -> ScoreOptions:
        """Return a copy with ``changes`` applied (unknown names raise TypeError)."""
        return dataclasses.replace(self, **changes)

    def resolved_subcost(self, default: int) -> int:
        return default if self.subcost is None else self.subcost

    @property
    def block_match(self) -> bool:
        return self.ratio_alg in BLOCK_MATCH_ALGORITHMS

    @property
    def normalization_form(self) -> Optional[str]:
        if not (self.astral and self.normalize):
            return None
        return "NFC" if self.normalize is True else str(self.normalize)

    @property
    def effective_cutoff(self) -> float:
        cutoff = self.cutoff
        if isinstance(cutoff, bool) or not isinstance(cutoff, numbers.Real):
            return -1
        return cutoff

    def get_collator(self) -> Optional[Collator]:
        if not self.use_collator:
            return None
        return self.collator if self.collator is not None else AccentInsensitiveCollator()

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any], **overrides: Any) -> ScoreOptions:
        """Build options from the ``scoring``/``extract`` settings sections."""
        values: dict[str, Any] = {}
        for section, keys in (
            ("scoring", SCORING_SETTING_KEYS),
            ("extract", EXTRACT_SETTING_KEYS),
        ):
            section_settings = settings.get(section) or {}
            for key, value in section_settings.items():
                if key in keys:
                    values[key] = value
                elif section == "scoring":
                    logger.warning(f"Ignoring unknown scoring setting: {key}")
        values.update(overrides)
        return cls(**values)


def resolve_options(
    options: Union[ScoreOptions, Mapping[str, Any], None] = None,
    **overrides: Any,
) -> ScoreOptions:
    """Coerce ``options`` into a ScoreOptions and apply keyword overrides."""
    if options is None:
        resolved = ScoreOptions()
    elif isinstance(options, ScoreOptions):
        resolved = options
    elif isinstance(options, Mapping):
        resolved = ScoreOptions(**options)
    else:
        raise TypeError(f"options must be ScoreOptions or a mapping, got {type(options).__name__}")
    return resolved.replace(**overrides) if overrides else resolved
