# tests/conftest.py
"""Shared test fixtures and helpers.

Fixtures:
- fixture_env: a fresh in-memory FixtureEnvironment, destroyed on teardown
- graph_data / graph_lookup: the passenger/employee/VIP dataset loaded into it

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from szoracle.core.lookup import RecordEntityLookup
from szoracle.fixtures.graph_data import GraphTestData
from szoracle.fixtures.loader import StandardFixtureLoader
from szoracle.testing.fixture_engine import FixtureEngine, FixtureEnvironment

# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Fixture engine
# =============================================================================


@pytest.fixture
def fixture_env() -> Iterator[FixtureEnvironment]:
    env = FixtureEnvironment()
    yield env
    env.destroy()


@pytest.fixture
def engine(fixture_env: FixtureEnvironment) -> FixtureEngine:
    return fixture_env.get_engine()


@pytest.fixture
def loader(fixture_env: FixtureEnvironment) -> StandardFixtureLoader:
    return StandardFixtureLoader(fixture_env, conflict_delay_seconds=0)


@pytest.fixture
def graph_data(loader: StandardFixtureLoader, tmp_path: Path) -> GraphTestData:
    """The graph dataset loaded into a fresh environment."""
    data = GraphTestData()
    data.load(loader, tmp_path)
    return data


@pytest.fixture
def graph_lookup(graph_data: GraphTestData) -> RecordEntityLookup:
    return graph_data.require_lookup()
