"""Shared contracts for cross-boundary data types.

Value types that cross subsystem boundaries are defined here. This package
is a LEAF: nothing in it imports from core, sdk, fixtures or oracle.

Import patterns:
    from szoracle.contracts import RecordKey, ExpectedPathSpec, Connected
"""

from szoracle.contracts.errors import FixtureError, OracleAssertionError
from szoracle.contracts.expectations import (
    Connected,
    Disconnected,
    ExpectedNetworkSpec,
    ExpectedPath,
    ExpectedPathSpec,
    OracleCase,
)
from szoracle.contracts.flags import (
    FlagSet,
    SzFlag,
    SzFlagUsageGroup,
    flags_to_string,
    to_bits,
)
from szoracle.contracts.records import (
    RecordKey,
    encode_entity_ids,
    encode_record_keys,
    record_keys,
)
from szoracle.contracts.types import (
    ConfigID,
    EntityID,
    ExportHandle,
    PairKey,
)

__all__ = [
    "ConfigID",
    "Connected",
    "Disconnected",
    "EntityID",
    "ExpectedNetworkSpec",
    "ExpectedPath",
    "ExpectedPathSpec",
    "ExportHandle",
    "FixtureError",
    "FlagSet",
    "OracleAssertionError",
    "OracleCase",
    "PairKey",
    "RecordKey",
    "SzFlag",
    "SzFlagUsageGroup",
    "encode_entity_ids",
    "encode_record_keys",
    "flags_to_string",
    "record_keys",
    "to_bits",
]
