from __future__ import annotations

import random

import numpy as np
import pytest
from hypothesis import settings

from fuzzrank import Diagnostics, ScoreOptions


# Configure pytest for non-strict xfail behavior
def pytest_configure(config: pytest.Config) -> None:
    config.option.xfail_strict = False
    config.addinivalue_line("markers", "hypothesis: property-based test")


# ---- Deterministic Testing Configuration ---------------------

DETERMINISTIC_SEED = 42


@pytest.fixture(autouse=True)
def set_deterministic_seed():
    """Set deterministic seed for all tests"""
    random.seed(DETERMINISTIC_SEED)
    np.random.seed(DETERMINISTIC_SEED)
    yield
    random.seed()
    np.random.seed()


# Hypothesis settings for all property-based tests
settings.register_profile(
    "deterministic",
    deadline=None,
    max_examples=200,
    derandomize=False,
    database=None,
)
settings.load_profile("deterministic")


# ---- Shared fixtures -----------------------------------------


@pytest.fixture
def raw_options() -> ScoreOptions:
    """Options that compare strings exactly as given."""
    return ScoreOptions(full_process=False)


@pytest.fixture
def diagnostics() -> Diagnostics:
    return Diagnostics()
