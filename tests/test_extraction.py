"""Tests for the ranking pipeline."""

import numpy as np
import pandas as pd
import pytest

from fuzzrank import (
    Diagnostics,
    ExtractResult,
    InvalidInput,
    PreparedChoice,
    ScoreOptions,
    Scorer,
    ScorerKind,
    extract,
    extract_one,
    iter_extract,
    prepare_choices,
    ratio,
    resolve_scorer,
    results_to_frame,
)
import fuzzrank.extraction as extraction

FRUITS = ["apple", "appel", "banana"]


class TestExtract:
    """Test scoring, filtering and ordering."""

    def test_default_ranking(self) -> None:
        assert extract("apple", FRUITS) == [
            ("apple", 100, 0),
            ("appel", 80, 1),
            ("banana", 18, 2),
        ]

    def test_results_are_named(self) -> None:
        best = extract("apple", FRUITS)[0]
        assert isinstance(best, ExtractResult)
        assert (best.choice, best.score, best.key) == ("apple", 100, 0)

    def test_cutoff_is_strict(self) -> None:
        assert [r.choice for r in extract("apple", FRUITS, cutoff=80)] == ["apple"]
        assert [r.choice for r in extract("apple", FRUITS, cutoff=50)] == ["apple", "appel"]

    def test_cutoff_zero_drops_zero_scores(self) -> None:
        choices = ["apple", "zzz"]
        assert len(extract("apple", choices)) == 2
        assert [r.choice for r in extract("apple", choices, cutoff=0)] == ["apple"]

    def test_limit(self) -> None:
        assert extract("apple", FRUITS, limit=1) == [("apple", 100, 0)]
        assert [r.choice for r in extract("apple", FRUITS, limit=2)] == ["apple", "appel"]

    def test_limit_zero_or_large_returns_all(self) -> None:
        assert len(extract("apple", FRUITS, limit=0)) == 3
        assert len(extract("apple", FRUITS, limit=10)) == 3

    def test_numpy_limit(self) -> None:
        assert extract("apple", FRUITS, limit=np.int64(1)) == [("apple", 100, 0)]

    @pytest.mark.parametrize("limit", [1.5, "2", True])
    def test_non_integer_limit_rejected(self, limit) -> None:
        with pytest.raises(InvalidInput, match="limit"):
            extract("apple", FRUITS, limit=limit)

    def test_numpy_cutoff_filters(self) -> None:
        """Thresholds taken from pandas/numpy data still apply."""
        results = extract("apple", FRUITS, cutoff=np.int64(50))
        assert [r.choice for r in results] == ["apple", "appel"]

    def test_unsorted_keeps_scan_order(self) -> None:
        choices = ["banana", "appel", "apple"]
        results = extract("apple", choices, unsorted=True, cutoff=50)
        assert results == [("appel", 80, 1), ("apple", 100, 2)]

    def test_equal_scores_keep_scan_order(self) -> None:
        results = extract("apple", ["apple", "Apple!"])
        assert [r.key for r in results] == [0, 1]

    def test_options_object(self) -> None:
        results = extract("apple", FRUITS, ScoreOptions(cutoff=50, limit=1))
        assert results == [("apple", 100, 0)]

    def test_mapping_choices_keyed(self) -> None:
        results = extract("apple", {"a": "appel", "b": "apple"})
        assert results == [("apple", 100, "b"), ("appel", 80, "a")]

    def test_series_choices_keyed_by_label(self) -> None:
        series = pd.Series(["appel", "apple"], index=["x", "y"])
        assert [r.key for r in extract("apple", series)] == ["y", "x"]

    def test_processor_returns_original_choice(self) -> None:
        records = [{"name": "Banana"}, {"name": "Apple"}]
        best = extract("apple", records, processor=lambda r: r["name"])[0]
        assert best.choice == {"name": "Apple"}
        assert best.key == 1

    def test_named_scorer(self) -> None:
        results = extract("new york mets", ["boston", "mets new york"], scorer="token_sort_ratio")
        assert results[0] == ("mets new york", 100, 1)

    def test_scorer_kind(self) -> None:
        results = extract("yankees", ["new york yankees"], scorer=ScorerKind.WRATIO)
        assert results[0].score == 90

    def test_token_set_scorer_with_partial_option(self) -> None:
        results = extract(
            "fuzzy wuzzy",
            ["fuzzy was a bear"],
            scorer=ScorerKind.TOKEN_SET,
            partial=True,
        )
        assert results[0].score == 100

    def test_custom_scorer_gets_raw_strings(self) -> None:
        seen = []

        def exact(query, choice, options):
            seen.append((query, choice))
            return 100 if query == choice else 0

        results = extract("Apple", ["apple", "Apple"], scorer=exact)
        assert results[0] == ("Apple", 100, 1)
        assert seen == [("Apple", "apple"), ("Apple", "Apple")]

    def test_builtin_function_as_callable_is_custom(self) -> None:
        """A builtin passed as a plain callable still scores correctly."""
        results = extract("apple", FRUITS, scorer=ratio)
        assert [r.score for r in results] == [100, 80, 18]

    @pytest.mark.parametrize("choices", [[], {}, None, "apple", pd.Series([], dtype=str)])
    def test_empty_or_invalid_choices(self, choices) -> None:
        with pytest.raises(InvalidInput):
            extract("apple", choices)

    def test_non_callable_processor(self) -> None:
        with pytest.raises(InvalidInput, match="Invalid Processor"):
            extract("apple", FRUITS, processor="name")

    @pytest.mark.parametrize("scorer", ["nope", 42, ScorerKind.CUSTOM])
    def test_invalid_scorer(self, scorer) -> None:
        with pytest.raises(InvalidInput):
            extract("apple", FRUITS, scorer=scorer)

    def test_invalid_input_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            extract("apple", [])


class TestExtractDiagnostics:
    """Advisories raised by the pipeline."""

    def test_default_scorer_advisory(self, diagnostics: Diagnostics) -> None:
        extract("apple", FRUITS, diagnostics=diagnostics)
        assert "default_scorer" in diagnostics

    def test_explicit_scorer_has_no_default_advisory(self, diagnostics: Diagnostics) -> None:
        extract("apple", FRUITS, scorer="ratio", diagnostics=diagnostics)
        assert "default_scorer" not in diagnostics

    def test_empty_query_scores_zero(self, diagnostics: Diagnostics) -> None:
        results = extract("!!!", FRUITS, scorer="ratio", diagnostics=diagnostics)
        assert [r.score for r in results] == [0, 0, 0]
        assert "empty_query" in diagnostics

    def test_empty_choice_advisory(self, diagnostics: Diagnostics) -> None:
        results = extract("apple", ["apple", "", "..."], scorer="ratio", diagnostics=diagnostics)
        assert [r.score for r in results] == [100, 0, 0]
        assert "empty_choices" in diagnostics

    def test_advisories_emitted_once_per_sink(self, diagnostics: Diagnostics) -> None:
        for _ in range(3):
            extract("apple", ["", ""], diagnostics=diagnostics)
        assert len(diagnostics) == 2


class TestPrecomputation:
    """Query forms are derived once per call, not once per candidate."""

    @staticmethod
    def _counting(monkeypatch, name: str) -> list:
        calls = []
        original = getattr(extraction, name)

        def wrapper(text):
            calls.append(text)
            return original(text)

        monkeypatch.setattr(extraction, name, wrapper)
        return calls

    def test_token_sort_query_sorted_once(self, monkeypatch) -> None:
        calls = self._counting(monkeypatch, "process_and_sort")
        extract("york new", ["new york", "york", "boston"], scorer="token_sort_ratio")
        assert len(calls) == 4
        assert calls[0] == "york new"

    def test_token_set_query_tokenized_once(self, monkeypatch) -> None:
        calls = self._counting(monkeypatch, "tokenize")
        extract("york new", ["new york", "york", "boston"], scorer="token_set_ratio")
        assert len(calls) == 4

    def test_prepared_choices_skip_choice_work(self, monkeypatch) -> None:
        prepared = prepare_choices(["new york", "york", "boston"])
        calls = self._counting(monkeypatch, "process_and_sort")
        results = extract("york new", prepared, scorer="token_sort_ratio")
        assert len(calls) == 1
        assert results[0] == ("new york", 100, 0)


class TestPreparedChoices:
    """Test prepare_choices."""

    def test_forms_cached(self) -> None:
        prepared = prepare_choices(["New York Mets!"])
        assert prepared == [
            PreparedChoice(
                value="New York Mets!",
                text="new york mets",
                proc_sorted="mets new york",
                tokens=["new", "york", "mets"],
            ),
        ]

    def test_processor_applied(self) -> None:
        prepared = prepare_choices([{"name": "Apple"}], processor=lambda r: r["name"])
        assert prepared[0].text == "apple"
        assert prepared[0].value == {"name": "Apple"}

    def test_results_unwrap_to_value(self) -> None:
        prepared = prepare_choices(["Apple Inc", "Banana"])
        best = extract("apple inc", prepared, scorer="ratio")[0]
        assert best.choice == "Apple Inc"
        assert best.score == 100

    def test_non_callable_processor(self) -> None:
        with pytest.raises(InvalidInput):
            prepare_choices(["a"], processor=3)


class TestExtractOne:
    def test_best_match(self) -> None:
        assert extract_one("apple", ["banana", "appel", "apple"]) == ("apple", 100, 2)

    def test_none_above_cutoff(self) -> None:
        assert extract_one("apple", ["zzz"], cutoff=50) is None


class TestIterExtract:
    """Streaming extraction."""

    def test_scan_order(self) -> None:
        results = list(iter_extract("apple", ["banana", "apple"]))
        assert results == [("banana", 18, 0), ("apple", 100, 1)]

    def test_validation_is_eager(self) -> None:
        with pytest.raises(InvalidInput):
            iter_extract("apple", [])

    def test_cutoff_applied(self) -> None:
        assert list(iter_extract("apple", FRUITS, cutoff=90)) == [("apple", 100, 0)]

    def test_empty_choice_advisory_after_exhaustion(self, diagnostics: Diagnostics) -> None:
        stream = iter_extract("apple", ["apple", ""], scorer="ratio", diagnostics=diagnostics)
        next(stream)
        assert "empty_choices" not in diagnostics
        list(stream)
        assert "empty_choices" in diagnostics


class TestResolveScorer:
    def test_none_is_ratio(self) -> None:
        assert resolve_scorer(None).kind is ScorerKind.RATIO

    def test_name(self) -> None:
        assert resolve_scorer("wratio").kind is ScorerKind.WRATIO

    def test_scorer_passthrough(self) -> None:
        scorer = Scorer.builtin(ScorerKind.PARTIAL_RATIO)
        assert resolve_scorer(scorer) is scorer

    def test_callable_is_custom(self) -> None:
        assert resolve_scorer(lambda q, c, o: 0).is_custom


class TestResultsToFrame:
    def test_columns(self) -> None:
        frame = results_to_frame(extract("apple", FRUITS))
        assert list(frame.columns) == ["choice", "score", "key"]
        assert frame["choice"].tolist() == ["apple", "appel", "banana"]

    def test_empty(self) -> None:
        frame = results_to_frame([])
        assert frame.empty
        assert list(frame.columns) == ["choice", "score", "key"]
