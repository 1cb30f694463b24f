"""In-memory engine, configuration registry and environment for running the oracle offline."""

from szoracle.testing.fixture_engine.config import (
    TEMPLATE_DATA_SOURCES,
    FixtureConfig,
    FixtureConfigManager,
    data_sources_of,
)
from szoracle.testing.fixture_engine.engine import FixtureEngine, identity_of, record_features
from szoracle.testing.fixture_engine.environment import FixtureEnvironment

__all__ = [
    "TEMPLATE_DATA_SOURCES",
    "FixtureConfig",
    "FixtureConfigManager",
    "FixtureEngine",
    "FixtureEnvironment",
    "data_sources_of",
    "identity_of",
    "record_features",
]
