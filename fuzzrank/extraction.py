"""Ranking pipeline: score every candidate against a query and keep the best.

The scan is always linear. ``extract`` runs it in one go, ``iter_extract``
streams retained results in scan order, and ``extract_async`` yields to the
asyncio event loop between chunks so other tasks can interleave.
"""

from __future__ import annotations

import asyncio
import heapq
import logging
import numbers
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

import pandas as pd

from fuzzrank.normalize import full_process, normalize_unicode, process_and_sort, tokenize
from fuzzrank.similarity.diagnostics import Diagnostics
from fuzzrank.similarity.ratio import validate
from fuzzrank.similarity.scoring import (
    OptionsLike,
    WRatio,
    partial_ratio,
    partial_token_set_ratio,
    partial_token_sort_ratio,
    ratio,
    token_set_ratio,
    token_sort_ratio,
)
from fuzzrank.similarity.token import token_set, token_sort
from fuzzrank.similarity.types import ExtractResult, ScoreOptions, ScorerKind, resolve_options

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 256

BUILTIN_SCORERS: dict[ScorerKind, Callable[..., int]] = {
    ScorerKind.RATIO: ratio,
    ScorerKind.PARTIAL_RATIO: partial_ratio,
    ScorerKind.TOKEN_SORT: token_sort_ratio,
    ScorerKind.PARTIAL_TOKEN_SORT: partial_token_sort_ratio,
    ScorerKind.TOKEN_SET: token_set_ratio,
    ScorerKind.PARTIAL_TOKEN_SET: partial_token_set_ratio,
    ScorerKind.WRATIO: WRatio,
}


class InvalidInput(ValueError):
    """Raised when extraction is called with unusable choices, processor or scorer."""


@dataclass(frozen=True)
class Scorer:
    """A scorer tagged with its kind; custom scorers carry their own callable."""

    kind: ScorerKind
    func: Callable[..., float]

    @classmethod
    def builtin(cls, kind: ScorerKind) -> Scorer:
        if kind is ScorerKind.CUSTOM:
            raise InvalidInput("Custom scorer requires a callable, use Scorer.custom()")
        return cls(kind, BUILTIN_SCORERS[kind])

    @classmethod
    def custom(cls, func: Callable[..., float]) -> Scorer:
        if not callable(func):
            raise InvalidInput("Invalid Scorer")
        return cls(ScorerKind.CUSTOM, func)

    @property
    def is_custom(self) -> bool:
        return self.kind is ScorerKind.CUSTOM


ScorerLike = Union[Scorer, ScorerKind, str, Callable[..., float], None]


@dataclass
class PreparedChoice:
    """A candidate with its processed, token-sorted and tokenized forms cached."""

    value: Any
    text: str
    proc_sorted: str
    tokens: list[str] = field(default_factory=list)


def resolve_scorer(scorer: ScorerLike) -> Scorer:
    """Map a scorer argument onto an explicit ``Scorer``.

    Plain callables are always treated as custom scorers, even if they happen
    to be one of the builtin scoring functions.
    """
    if scorer is None:
        return Scorer.builtin(ScorerKind.RATIO)
    if isinstance(scorer, Scorer):
        return scorer
    if isinstance(scorer, ScorerKind):
        return Scorer.builtin(scorer)
    if isinstance(scorer, str):
        try:
            kind = ScorerKind(scorer)
        except ValueError:
            raise InvalidInput(f"Invalid Scorer: unknown scorer name {scorer!r}") from None
        return Scorer.builtin(kind)
    if callable(scorer):
        return Scorer.custom(scorer)
    raise InvalidInput("Invalid Scorer")


def prepare_choices(
    choices: Iterable[Any],
    options: OptionsLike = None,
    processor: Optional[Callable[[Any], Any]] = None,
    **overrides: Any,
) -> list[PreparedChoice]:
    """Precompute processed forms so repeated extractions skip that work.

    The options must match the ones later passed to ``extract``.
    """
    opts = resolve_options(options, **overrides)
    if processor is not None and not callable(processor):
        raise InvalidInput("Invalid Processor")
    form = opts.normalization_form
    prepared = []
    for value in choices:
        text = processor(value) if processor else value
        if opts.full_process:
            text = full_process(text, opts.force_ascii)
        if not isinstance(text, str):
            text = ""
        if form:
            text = normalize_unicode(text, form, opts.diagnostics)
        prepared.append(
            PreparedChoice(
                value=value,
                text=text,
                proc_sorted=process_and_sort(text),
                tokens=tokenize(text),
            ),
        )
    return prepared


def _identity(value: Any) -> Any:
    return value


def _count_choices(choices: Any) -> int:
    if choices is None or isinstance(choices, (str, bytes)):
        raise InvalidInput("No choices")
    try:
        count = len(choices)
    except TypeError:
        raise InvalidInput("choices must be a sequence, mapping or pandas Series") from None
    if count == 0:
        raise InvalidInput("No choices")
    return count


def _iter_choices(choices: Any) -> Iterator[tuple[Any, Any]]:
    """Yield ``(key, value)``: index for sequences, key/label otherwise."""
    if isinstance(choices, (Mapping, pd.Series)):
        yield from choices.items()
    else:
        yield from enumerate(choices)


class _ExtractionPlan:
    """Per-call state: processed query, precomputed token forms and options."""

    def __init__(
        self,
        query: Any,
        scorer: Scorer,
        options: ScoreOptions,
        processor: Callable[[Any], Any],
        diagnostics: Diagnostics,
    ) -> None:
        self.scorer = scorer
        self.processor = processor
        self.diagnostics = diagnostics
        self.cutoff = options.effective_cutoff
        self.any_blank = False
        self._full_process = options.full_process
        self._force_ascii = options.force_ascii
        self._form: Optional[str] = None

        if scorer.is_custom:
            # custom scorers get raw query/choices and do their own normalization
            self.query = query
            self.options = options
        else:
            if options.full_process:
                query = full_process(query, options.force_ascii)
            form = options.normalization_form
            if form and isinstance(query, str):
                query = normalize_unicode(query, form, diagnostics)
                self._form = form
            self.query = query
            self.options = options.replace(full_process=False, normalize=False)
            if not validate(query):
                diagnostics.advise("empty_query", "Processed query is empty string")

        self.query_sorted: Optional[str] = None
        self.query_tokens: Optional[list[str]] = None
        if scorer.kind.is_token_sort:
            self.query_sorted = process_and_sort(self.query)
        elif scorer.kind.is_token_set:
            self.query_tokens = tokenize(self.query)

    def _process(self, value: Any) -> Any:
        text = self.processor(value)
        if self._full_process:
            text = full_process(text, self._force_ascii)
        if self._form and isinstance(text, str):
            text = normalize_unicode(text, self._form, self.diagnostics)
        return text

    def score(self, value: Any) -> tuple[Any, float]:
        """Return ``(original choice, score)`` for one candidate."""
        prepared = value if isinstance(value, PreparedChoice) else None
        original = prepared.value if prepared else value
        kind = self.scorer.kind

        if self.scorer.is_custom:
            return original, self.scorer.func(self.query, self.processor(original), self.options)

        if kind.is_token_sort:
            choice_sorted = (
                prepared.proc_sorted if prepared else process_and_sort(self._process(value))
            )
            if not choice_sorted:
                self.any_blank = True
            result = token_sort(
                self.query_sorted,
                choice_sorted,
                self.options,
                partial=kind is ScorerKind.PARTIAL_TOKEN_SORT,
                presorted=True,
            )
            return original, result

        text = prepared.text if prepared else self._process(value)
        if not validate(text):
            self.any_blank = True

        if kind.is_token_set:
            if not validate(self.query) or not validate(text):
                return original, 0
            choice_tokens = prepared.tokens if prepared else tokenize(text)
            result = token_set(
                self.query,
                text,
                self.options,
                partial=kind is ScorerKind.PARTIAL_TOKEN_SET or self.options.partial,
                tokens=(self.query_tokens, choice_tokens),
            )
            return original, result

        return original, self.scorer.func(self.query, text, self.options)

    def scan(self, items: Iterable[tuple[Any, Any]]) -> Iterator[ExtractResult]:
        for key, value in items:
            original, result = self.score(value)
            if result > self.cutoff:
                yield ExtractResult(original, result, key)

    def finish(self) -> None:
        if self.any_blank:
            self.diagnostics.advise(
                "empty_choices",
                "One or more choices were empty. (post-processing if applied)",
            )


def _plan(
    query: Any,
    choices: Any,
    options: OptionsLike,
    scorer: ScorerLike,
    processor: Optional[Callable[[Any], Any]],
    overrides: dict[str, Any],
) -> tuple[_ExtractionPlan, ScoreOptions, int]:
    opts = resolve_options(options, **overrides)
    count = _count_choices(choices)
    if opts.limit is not None and (
        isinstance(opts.limit, bool) or not isinstance(opts.limit, numbers.Integral)
    ):
        raise InvalidInput(f"limit must be an int, got {opts.limit!r}")
    if processor is not None and not callable(processor):
        raise InvalidInput("Invalid Processor")
    resolved = resolve_scorer(scorer)
    diagnostics = opts.diagnostics if opts.diagnostics is not None else Diagnostics()
    if scorer is None:
        diagnostics.advise("default_scorer", "Using default scorer 'ratio'", logging.INFO)
    plan = _ExtractionPlan(query, resolved, opts, processor or _identity, diagnostics)
    return plan, opts, count


def _score_key(result: ExtractResult) -> float:
    return result.score


def _rank(results: list[ExtractResult], options: ScoreOptions, count: int) -> list[ExtractResult]:
    """Order retained results.

    With a limit below the candidate count only the top ``limit`` entries are
    selected (heap selection, no full sort). Among equal scores the order of
    the returned entries is not part of the contract.
    """
    if options.unsorted:
        return results
    limit = options.limit
    if limit is not None and not isinstance(limit, bool) and 0 < limit < count:
        return heapq.nlargest(limit, results, key=_score_key)
    return sorted(results, key=_score_key, reverse=True)


def extract(
    query: Any,
    choices: Any,
    options: OptionsLike = None,
    *,
    scorer: ScorerLike = None,
    processor: Optional[Callable[[Any], Any]] = None,
    **overrides: Any,
) -> list[ExtractResult]:
    """Return the top scoring choices for ``query``.

    Args:
        query: The search term
        choices: Sequence of choices, mapping of ``{key: choice}`` or pandas Series
        options: Scoring options (cutoff, limit and unsorted included)
        scorer: ScorerKind, scorer name, Scorer or custom callable
            ``(query, choice, options) -> score``; defaults to ratio
        processor: Callable turning each choice into the string to score
        **overrides: Option overrides

    Returns:
        List of ``ExtractResult(choice, score, key)``

    Raises:
        InvalidInput: Empty choices, non-integer limit, non-callable processor
            or invalid scorer

    """
    plan, opts, count = _plan(query, choices, options, scorer, processor, overrides)
    results = list(plan.scan(_iter_choices(choices)))
    plan.finish()
    return _rank(results, opts, count)


def extract_one(
    query: Any,
    choices: Any,
    options: OptionsLike = None,
    *,
    scorer: ScorerLike = None,
    processor: Optional[Callable[[Any], Any]] = None,
    **overrides: Any,
) -> Optional[ExtractResult]:
    """Best single match, or None when nothing scores above the cutoff."""
    overrides.update(limit=1, unsorted=False)
    results = extract(query, choices, options, scorer=scorer, processor=processor, **overrides)
    return results[0] if results else None


def iter_extract(
    query: Any,
    choices: Any,
    options: OptionsLike = None,
    *,
    scorer: ScorerLike = None,
    processor: Optional[Callable[[Any], Any]] = None,
    **overrides: Any,
) -> Iterator[ExtractResult]:
    """Stream retained results in scan order.

    Arguments are validated immediately; scoring happens as the iterator is
    consumed, so the caller decides when to pause between candidates.
    """
    plan, _, _ = _plan(query, choices, options, scorer, processor, overrides)
    return _stream(plan, choices)


def _stream(plan: _ExtractionPlan, choices: Any) -> Iterator[ExtractResult]:
    yield from plan.scan(_iter_choices(choices))
    plan.finish()


async def _yield_control() -> None:
    await asyncio.sleep(0)


async def extract_async(
    query: Any,
    choices: Any,
    options: OptionsLike = None,
    *,
    scorer: ScorerLike = None,
    processor: Optional[Callable[[Any], Any]] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    **overrides: Any,
) -> list[ExtractResult]:
    """Cooperative ``extract``: same results, yielding to the event loop while scanning.

    Sequences and Series are scanned in chunks of ``chunk_size`` candidates;
    mappings yield after every entry.
    """
    if chunk_size < 1:
        raise InvalidInput(f"chunk_size must be >= 1, got {chunk_size}")
    plan, opts, count = _plan(query, choices, options, scorer, processor, overrides)
    step = 1 if isinstance(choices, Mapping) else chunk_size

    results: list[ExtractResult] = []
    for position, (key, value) in enumerate(_iter_choices(choices), start=1):
        original, result = plan.score(value)
        if result > plan.cutoff:
            results.append(ExtractResult(original, result, key))
        if position % step == 0 and position < count:
            await _yield_control()

    plan.finish()
    return _rank(results, opts, count)


def results_to_frame(results: Iterable[ExtractResult]) -> pd.DataFrame:
    """Tabulate extraction results with ``choice``, ``score`` and ``key`` columns."""
    return pd.DataFrame.from_records(list(results), columns=list(ExtractResult._fields))
