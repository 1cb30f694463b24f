# src/szoracle/oracle/path.py
"""Find-path result validation.

A find-path result is accepted only when ALL of these hold:
- exactly one path is reported, of the expected length
- it starts and ends at the requested entities, in the expected order
- strictly avoided entities are absent
- a required data source is contributed by some intermediate entity
- path links are present exactly when matching info was requested
- entity details cover exactly the path plus its endpoints
"""

from __future__ import annotations

from typing import Any

from szoracle.contracts.errors import OracleAssertionError
from szoracle.contracts.expectations import ExpectedPathSpec
from szoracle.contracts.flags import FlagSet
from szoracle.core.json_fields import (
    entity_detail_ids,
    int_list,
    optional_array,
    parse_json_object,
    require_array,
)
from szoracle.core.lookup import RecordEntityLookup
from szoracle.sdk.flags import SZ_FIND_PATH_INCLUDE_MATCHING_INFO, has_flag


def _single_path(result: dict[str, Any], description: str | None) -> list[int]:
    paths = require_array(result, "ENTITY_PATHS", description=description)
    if len(paths) != 1:
        raise OracleAssertionError(
            "Paths array has unexpected length",
            description=description,
            context={"expected": 1, "paths": paths},
        )
    path = paths[0]
    if not isinstance(path, dict):
        raise OracleAssertionError("Entity path was null", description=description, context={"paths": paths})
    return int_list(require_array(path, "ENTITIES", description=description), what="ENTITIES", description=description)


def _check_links(result: dict[str, Any], flags: FlagSet, description: str | None) -> None:
    links = optional_array(result, "ENTITY_PATH_LINKS", description=description)
    requested = has_flag(flags, SZ_FIND_PATH_INCLUDE_MATCHING_INFO)
    if requested and links is None:
        raise OracleAssertionError("Entity path links missing or null", description=description)
    if not requested and links is not None:
        raise OracleAssertionError(
            "Entity path links present when not requested",
            description=description,
            context={"links": links},
        )


def validate_path(
    result: str,
    expected: ExpectedPathSpec,
    flags: FlagSet,
    lookup: RecordEntityLookup,
    *,
    description: str | None = None,
) -> list[int]:
    """Validate a find-path result; return the entity chain on success.

    Raises:
        OracleAssertionError: On the first violated expectation.
    """
    document = parse_json_object(result, what="find-path", description=description)
    chain = _single_path(document, description)
    _check_links(document, flags, description)
    details = require_array(document, "ENTITIES", description=description)

    if len(chain) != expected.expected_length:
        raise OracleAssertionError(
            "Path is not of expected length",
            description=description,
            context={"expected": expected.expected_length, "path": chain},
        )

    start_id = lookup.entity_id_of(expected.start_key)
    end_id = lookup.entity_id_of(expected.end_key)
    if chain:
        if chain[0] != start_id:
            raise OracleAssertionError(
                "The starting entity ID in the path is not as expected",
                description=description,
                context={"expected": start_id, "path": chain},
            )
        if chain[-1] != end_id:
            raise OracleAssertionError(
                "The ending entity ID in the path is not as expected",
                description=description,
                context={"expected": end_id, "path": chain},
            )

    expected_ids = lookup.entity_ids_of(expected.expected_keys)
    if chain != expected_ids:
        raise OracleAssertionError(
            "Entity path is not as expected",
            description=description,
            context={
                "expected": [lookup.describe(key) for key in expected.expected_keys],
                "path": chain,
            },
        )

    if expected.avoid_strict and expected.avoid_keys:
        avoided = lookup.entity_id_set(expected.avoid_keys)
        present = [entity_id for entity_id in chain if entity_id in avoided]
        if present:
            raise OracleAssertionError(
                "Strictly avoided entity found in path",
                description=description,
                context={
                    "avoided": present,
                    "records": [sorted(str(key) for key in lookup.records_of(entity_id)) for entity_id in present],
                    "path": chain,
                },
            )

    if expected.required_sources:
        intermediates = [entity_id for entity_id in chain if entity_id not in (start_id, end_id)]
        if not any(lookup.data_sources_of(entity_id) & expected.required_sources for entity_id in intermediates):
            raise OracleAssertionError(
                "Entity path does not contain required data sources",
                description=description,
                context={"required": sorted(expected.required_sources), "path": chain},
            )

    path_ids = set(chain)
    path_ids.update(entity_id for entity_id in (start_id, end_id) if entity_id is not None)
    detail_ids = set(entity_detail_ids(details, description=description))
    if detail_ids != path_ids:
        raise OracleAssertionError(
            "Entity details do not match the path entities",
            description=description,
            context={
                "unexpected": sorted(detail_ids - path_ids),
                "missing": sorted(path_ids - detail_ids),
            },
        )

    return chain
