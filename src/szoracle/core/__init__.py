# src/szoracle/core/__init__.py
"""Core infrastructure: Canonical keys, Lookup, Combinations, Configuration, Logging."""

from szoracle.core.canonical import (
    CANONICAL_VERSION,
    canonical_json,
    oriented,
    pair_key,
    pair_key_str,
    stable_hash,
)
from szoracle.core.combinations import (
    CircularIterator,
    boolean_variants,
    circular,
    generate_combinations,
)
from szoracle.core.config import OracleSettings, load_settings
from szoracle.core.logging import bound_case, configure_logging, get_logger
from szoracle.core.lookup import RecordEntityLookup

__all__ = [
    "CANONICAL_VERSION",
    "CircularIterator",
    "OracleSettings",
    "RecordEntityLookup",
    "boolean_variants",
    "canonical_json",
    "circular",
    "bound_case",
    "configure_logging",
    "generate_combinations",
    "get_logger",
    "load_settings",
    "oriented",
    "pair_key",
    "pair_key_str",
    "stable_hash",
]
