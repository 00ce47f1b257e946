"""Tests for cooperative (asyncio) extraction."""

import asyncio

import pandas as pd
import pytest

import fuzzrank.extraction as extraction
from fuzzrank import InvalidInput, extract, extract_async

FRUITS = ["apple", "appel", "banana", "grape", "pineapple"]


@pytest.fixture
def yield_counter(monkeypatch):
    """Count how often extraction hands control back to the event loop."""
    counter = {"yields": 0}

    async def counting_yield():
        counter["yields"] += 1
        await asyncio.sleep(0)

    monkeypatch.setattr(extraction, "_yield_control", counting_yield)
    return counter


class TestExtractAsync:
    def test_matches_sync_results(self) -> None:
        results = asyncio.run(extract_async("apple", FRUITS, chunk_size=2))
        assert results == extract("apple", FRUITS)

    def test_options_honoured(self) -> None:
        results = asyncio.run(extract_async("apple", FRUITS, cutoff=50, limit=1))
        assert results == [("apple", 100, 0)]

    def test_sequence_yields_between_chunks(self, yield_counter) -> None:
        asyncio.run(extract_async("apple", FRUITS, chunk_size=2))
        assert yield_counter["yields"] == 2

    def test_no_yield_after_last_chunk(self, yield_counter) -> None:
        asyncio.run(extract_async("apple", FRUITS[:4], chunk_size=2))
        assert yield_counter["yields"] == 1

    def test_mapping_yields_per_entry(self, yield_counter) -> None:
        choices = {"a": "apple", "b": "appel", "c": "banana"}
        results = asyncio.run(extract_async("apple", choices, chunk_size=100))
        assert yield_counter["yields"] == 2
        assert [r.key for r in results] == ["a", "b", "c"]

    def test_series_scanned_in_chunks(self, yield_counter) -> None:
        series = pd.Series(FRUITS, index=list("vwxyz"))
        results = asyncio.run(extract_async("apple", series, chunk_size=2))
        assert yield_counter["yields"] == 2
        assert results[0].key == "v"

    def test_other_tasks_interleave(self) -> None:
        async def run() -> list:
            events = []

            async def ticker() -> None:
                for _ in range(3):
                    events.append("tick")
                    await asyncio.sleep(0)

            async def extraction_task() -> None:
                await extract_async("apple", FRUITS * 4, chunk_size=1)
                events.append("done")

            await asyncio.gather(extraction_task(), ticker())
            return events

        events = asyncio.run(run())
        assert events.index("done") > events.index("tick")
        assert events.count("tick") == 3

    @pytest.mark.parametrize("chunk_size", [0, -5])
    def test_invalid_chunk_size(self, chunk_size: int) -> None:
        with pytest.raises(InvalidInput):
            asyncio.run(extract_async("apple", FRUITS, chunk_size=chunk_size))

    def test_empty_choices(self) -> None:
        with pytest.raises(InvalidInput):
            asyncio.run(extract_async("apple", []))
