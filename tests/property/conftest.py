# tests/property/conftest.py
"""Shared Hypothesis strategies and fixtures for property-based tests.

Usage:
    from tests.property.conftest import record_keys_st, entity_ids

    @given(key=record_keys_st)
    def test_key_normalization(key: RecordKey) -> None:
        ...
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from hypothesis import strategies as st

from szoracle.contracts.errors import OracleAssertionError
from szoracle.contracts.records import RecordKey
from szoracle.core.lookup import RecordEntityLookup
from szoracle.fixtures.graph_data import GraphTestData
from szoracle.fixtures.loader import StandardFixtureLoader
from szoracle.testing.fixture_engine import FixtureEngine, FixtureEnvironment

# Signed 64-bit entity ids
entity_ids = st.integers(min_value=-(2**63), max_value=2**63 - 1)

# ASCII identifiers without surrounding whitespace; colons allowed in record ids
data_source_codes = st.from_regex(r"[A-Za-z0-9_-]{1,12}", fullmatch=True)
record_ids = st.from_regex(r"[A-Za-z0-9_.:-]{1,16}", fullmatch=True)

record_keys_st = st.builds(RecordKey, data_source_codes, record_ids)

# Small alphabets for combinatorial generation
variant_lists = st.lists(st.lists(st.integers(), min_size=0, max_size=4), min_size=0, max_size=4)

# Entity ids of the loaded graph dataset (twelve single-record entities)
graph_entities = st.integers(min_value=1, max_value=12)
degrees = st.integers(min_value=0, max_value=8)


@pytest.fixture(scope="module")
def loaded(tmp_path_factory: pytest.TempPathFactory) -> Iterator[tuple[FixtureEngine, RecordEntityLookup]]:
    """Graph dataset loaded once per module; Hypothesis examples share it read-only."""
    env = FixtureEnvironment()
    data = GraphTestData()
    lookup = data.load(StandardFixtureLoader(env, conflict_delay_seconds=0), tmp_path_factory.mktemp("graph"))
    yield env.get_engine(), lookup
    env.destroy()


def outcome(validate: Callable[[], object]) -> tuple[str, object]:
    """Run a validator; ("accepted", result) or ("rejected", message)."""
    try:
        return ("accepted", validate())
    except OracleAssertionError as exc:
        return ("rejected", str(exc))
