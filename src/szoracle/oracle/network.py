# src/szoracle/oracle/network.py
"""Find-network result validation.

Paths are compared by canonical pair key, so the engine may report any
pair in either direction. A pair with no connecting path within the
degree limit is reported as an entry with an empty entity chain.
"""

from __future__ import annotations

from typing import Any

from szoracle.contracts.errors import OracleAssertionError
from szoracle.contracts.expectations import Connected, Disconnected, ExpectedNetworkSpec
from szoracle.contracts.flags import FlagSet
from szoracle.contracts.types import PairKey
from szoracle.core.canonical import oriented, pair_key
from szoracle.core.json_fields import (
    entity_detail_ids,
    int_list,
    optional_array,
    parse_json_object,
    require_array,
    require_int,
)
from szoracle.core.lookup import RecordEntityLookup
from szoracle.sdk.flags import SZ_FIND_NETWORK_INCLUDE_MATCHING_INFO, has_flag


def _actual_paths(document: dict[str, Any], description: str | None) -> dict[PairKey, list[int]]:
    paths = require_array(document, "ENTITY_PATHS", description=description)
    actual: dict[PairKey, list[int]] = {}
    for path in paths:
        if not isinstance(path, dict):
            raise OracleAssertionError("Entity path was null", description=description, context={"paths": paths})
        start = require_int(path, "START_ENTITY_ID", description=description)
        end = require_int(path, "END_ENTITY_ID", description=description)
        chain = int_list(require_array(path, "ENTITIES", description=description), what="ENTITIES", description=description)
        key = pair_key(start, end)
        if key in actual:
            raise OracleAssertionError(
                "Duplicate path reported for entity pair",
                description=description,
                context={"pair": key, "paths": paths},
            )
        actual[key] = oriented(start, end, chain)
    return actual


def _expected_paths(
    expected: ExpectedNetworkSpec,
    lookup: RecordEntityLookup,
    description: str | None,
) -> dict[PairKey, list[int]]:
    result: dict[PairKey, list[int]] = {}
    for path in expected.paths:
        keys = path.keys if isinstance(path, Connected) else (path.start_key, path.end_key)
        ids = lookup.entity_ids_of(keys)
        if any(entity_id is None for entity_id in ids):
            raise OracleAssertionError(
                "Expected path references a record that was not loaded",
                description=description,
                context={"path": [lookup.describe(key) for key in keys]},
            )
        start, end = ids[0], ids[-1]
        if pair_key(start, end) in result:
            raise ValueError(f"expected network lists entity pair {pair_key(start, end)} more than once")
        match path:
            case Connected():
                result[pair_key(start, end)] = oriented(start, end, list(ids))
            case Disconnected():
                result[pair_key(start, end)] = []
    return result


def _expected_entity_ids(expected: ExpectedNetworkSpec, lookup: RecordEntityLookup) -> set[int]:
    ids: set[int] = set()
    for path in expected.paths:
        keys = path.keys if isinstance(path, Connected) else (path.start_key, path.end_key)
        ids |= lookup.entity_id_set(keys)
    return ids | lookup.entity_id_set(expected.required_keys)


def validate_network(
    result: str,
    expected: ExpectedNetworkSpec,
    flags: FlagSet,
    lookup: RecordEntityLookup,
    *,
    description: str | None = None,
) -> dict[PairKey, list[int]]:
    """Validate a find-network result; return the oriented paths by pair key.

    Raises:
        OracleAssertionError: On the first violated expectation.
        ValueError: If two expected paths resolve to the same entity pair.
    """
    document = parse_json_object(result, what="find-network", description=description)
    actual = _actual_paths(document, description)

    if len(actual) != expected.path_count:
        raise OracleAssertionError(
            "Paths array has unexpected length",
            description=description,
            context={"expected": expected.path_count, "actual": len(actual)},
        )

    links = optional_array(document, "ENTITY_NETWORK_LINKS", description=description)
    requested = has_flag(flags, SZ_FIND_NETWORK_INCLUDE_MATCHING_INFO)
    if requested and links is None:
        raise OracleAssertionError("Entity network links missing or null", description=description)
    if not requested and links is not None:
        raise OracleAssertionError(
            "Entity network links present when not requested",
            description=description,
            context={"links": links},
        )

    details = require_array(document, "ENTITIES", description=description)
    detail_ids = entity_detail_ids(details, description=description)

    expected_by_key = _expected_paths(expected, lookup, description)
    for key, expected_chain in expected_by_key.items():
        if key not in actual:
            raise OracleAssertionError(
                "Expected path is missing from the network",
                description=description,
                context={"pair": key, "actual": sorted(actual)},
            )
        if actual[key] != expected_chain:
            raise OracleAssertionError(
                "Entity path is not as expected",
                description=description,
                context={"pair": key, "expected": expected_chain, "actual": actual[key]},
            )

    extras = sorted(set(actual) - set(expected_by_key))
    if extras:
        raise OracleAssertionError(
            "Unexpected paths in the network",
            description=description,
            context={"unexpected": extras},
        )

    required_ids = _expected_entity_ids(expected, lookup)
    min_count = len(required_ids)
    # No build-out means nothing beyond the path and required entities may appear
    max_count = min_count + (expected.build_out_max_entities if expected.build_out_degrees > 0 else 0)
    if len(detail_ids) < min_count:
        raise OracleAssertionError(
            f"Too few entity details: expected at least {min_count}, got {len(detail_ids)}",
            description=description,
        )
    if len(detail_ids) > max_count:
        raise OracleAssertionError(
            f"Too many entity details: expected at most {max_count}, got {len(detail_ids)}",
            description=description,
        )

    missing = sorted(required_ids - set(detail_ids))
    if missing:
        raise OracleAssertionError(
            "Network entities missing from entity details",
            description=description,
            context={"missing": missing, "details": sorted(detail_ids)},
        )

    return actual
