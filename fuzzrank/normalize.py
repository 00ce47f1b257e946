"""Text preprocessing for fuzzy scoring.

This module handles:
- Basic cleanup (lowercasing, non-alphanumeric collapsing, ASCII folding)
- Whitespace tokenization with first-seen de-duplication
- Canonical token ordering for the token-sort strategies
- Optional Unicode normalization of already processed text
"""

from __future__ import annotations

import logging
import re
import unicodedata
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from fuzzrank.similarity.diagnostics import Diagnostics

logger = logging.getLogger(__name__)

# Characters outside 7-bit ASCII are deleted (not spaced) when force_ascii is on
_NON_ASCII_RE = re.compile(r"[^\x00-\x7F]")

# Runs of anything that is not a letter or digit (underscore included)
_NON_ALNUM_RE = re.compile(r"[\W_]+")

NORMALIZATION_FORMS = frozenset({"NFC", "NFD", "NFKC", "NFKD"})


def full_process(text: Any, force_ascii: bool = True) -> str:
    """Clean a string before scoring.

    Args:
        text: Value to clean. Anything that is not a ``str`` becomes ``""``.
        force_ascii: Drop non-ASCII characters before collapsing

    Returns:
        Lowercased text with non-alphanumeric runs replaced by one space,
        stripped at both ends

    """
    if not isinstance(text, str):
        return ""
    if force_ascii:
        text = _NON_ASCII_RE.sub("", text)
    return _NON_ALNUM_RE.sub(" ", text).lower().strip()


def tokenize(text: Any) -> list[str]:
    """Split on whitespace and keep the first occurrence of each token."""
    if not isinstance(text, str):
        return []
    return list(dict.fromkeys(text.split()))


def process_and_sort(text: Any) -> str:
    """Join the whitespace tokens of ``text`` in sorted order.

    Duplicate tokens are kept, only their order changes.
    """
    if not isinstance(text, str):
        return ""
    return " ".join(sorted(text.split())).strip()


def normalize_unicode(
    text: str,
    form: str = "NFC",
    diagnostics: Optional[Diagnostics] = None,
) -> str:
    """Apply a Unicode normalization form to ``text``.

    An unknown form leaves the text untouched and raises a one-time advisory
    on the diagnostics sink instead of failing.
    """
    if form not in NORMALIZATION_FORMS:
        from fuzzrank.similarity.diagnostics import advise

        advise(
            diagnostics,
            "normalization_unsupported",
            f"Normalization form {form!r} not supported, comparing unnormalized text",
        )
        return text
    return unicodedata.normalize(form, text)
