# src/szoracle/oracle/analysis.py
"""Why / how result validation."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from szoracle.contracts.errors import OracleAssertionError
from szoracle.contracts.flags import FlagSet
from szoracle.contracts.records import RecordKey
from szoracle.core.json_fields import (
    entity_detail_ids,
    parse_json_object,
    record_key_of,
    require_array,
    require_int,
    require_object,
)
from szoracle.core.lookup import RecordEntityLookup
from szoracle.sdk.flags import SZ_INCLUDE_FEATURE_SCORES, SZ_INCLUDE_MATCH_KEY_DETAILS, has_flag


def _single_why_result(document: dict[str, Any], description: str | None) -> tuple[dict[str, Any], set[int]]:
    results = require_array(document, "WHY_RESULTS", description=description)
    if len(results) != 1:
        raise OracleAssertionError(
            "The WHY_RESULTS array is not of the expected size",
            description=description,
            context={"expected": 1, "actual": len(results)},
        )
    why = results[0]
    if not isinstance(why, dict):
        raise OracleAssertionError("First WHY_RESULTS element was null", description=description)
    ids = {
        require_int(why, "ENTITY_ID", description=description),
        require_int(why, "ENTITY_ID_2", description=description),
    }
    return why, ids


def _check_details(document: dict[str, Any], expected_ids: set[int], description: str | None) -> None:
    details = require_array(document, "ENTITIES", description=description)
    if len(details) != len(expected_ids):
        raise OracleAssertionError(
            "Unexpected number of entities in entity details",
            description=description,
            context={"expected": len(expected_ids), "actual": len(details)},
        )
    detail_ids = set(entity_detail_ids(details, description=description))
    if detail_ids != expected_ids:
        raise OracleAssertionError(
            "Entity details are not the requested entities",
            description=description,
            context={"expected": sorted(expected_ids), "actual": sorted(detail_ids)},
        )


def validate_why_entities(
    result: str,
    entity_id_1: int,
    entity_id_2: int,
    *,
    description: str | None = None,
) -> None:
    document = parse_json_object(result, what="why-entities", description=description)
    _, why_ids = _single_why_result(document, description)
    for entity_id in (entity_id_1, entity_id_2):
        if entity_id not in why_ids:
            raise OracleAssertionError(
                "Requested entity ID not found in why result",
                description=description,
                context={"entity_id": entity_id, "why_ids": sorted(why_ids)},
            )
    _check_details(document, why_ids, description)


def _focus_record(why: dict[str, Any], key: str, description: str | None) -> RecordKey:
    focus = require_array(why, key, description=description)
    if len(focus) != 1 or not isinstance(focus[0], dict):
        raise OracleAssertionError(
            f"Size of {key} array not as expected",
            description=description,
            context={key: focus},
        )
    return record_key_of(focus[0], description=description)


def validate_why_records(
    result: str,
    key_1: RecordKey,
    key_2: RecordKey,
    lookup: RecordEntityLookup,
    *,
    description: str | None = None,
) -> None:
    document = parse_json_object(result, what="why-records", description=description)
    why, why_ids = _single_why_result(document, description)

    expected_ids = lookup.entity_id_set((key_1, key_2))
    if why_ids != expected_ids:
        raise OracleAssertionError(
            "The entity IDs in the why result were not as expected",
            description=description,
            context={"expected": sorted(expected_ids), "actual": sorted(why_ids)},
        )

    focus = {_focus_record(why, "FOCUS_RECORDS", description), _focus_record(why, "FOCUS_RECORDS_2", description)}
    if focus != {key_1, key_2}:
        raise OracleAssertionError(
            "Focus records not as expected",
            description=description,
            context={"expected": sorted(map(str, (key_1, key_2))), "actual": sorted(map(str, focus))},
        )

    _check_details(document, expected_ids, description)


def _check_step_match_info(steps: list[Any], flags: FlagSet, description: str | None) -> None:
    scores_requested = has_flag(flags, SZ_INCLUDE_FEATURE_SCORES)
    details_requested = has_flag(flags, SZ_INCLUDE_MATCH_KEY_DETAILS)
    if not (scores_requested or details_requested):
        return

    for step in steps:
        if not isinstance(step, dict):
            raise OracleAssertionError("Resolution step was null", description=description)
        match_info = require_object(step, "MATCH_INFO", description=description)
        for name, requested in (("FEATURE_SCORES", scores_requested), ("MATCH_KEY_DETAILS", details_requested)):
            present = isinstance(match_info.get(name), dict)
            if requested and not present:
                raise OracleAssertionError(
                    f"The {name} property is missing",
                    description=description,
                    context={"match_info": match_info},
                )
            if present and not requested:
                raise OracleAssertionError(
                    f"The {name} are present, despite flags",
                    description=description,
                    context={"match_info": match_info},
                )


def _objects(values: list[Any], description: str | None) -> list[dict[str, Any]]:
    if not all(isinstance(value, dict) for value in values):
        raise OracleAssertionError("Expected an array of objects", description=description, context={"values": values})
    return values


def how_record_keys(how: dict[str, Any], *, description: str | None = None) -> set[RecordKey]:
    """Every record in ``FINAL_STATE.VIRTUAL_ENTITIES[*].MEMBER_RECORDS[*].RECORDS``."""
    final_state = require_object(how, "FINAL_STATE", description=description)
    keys: set[RecordKey] = set()
    for virtual_entity in _objects(require_array(final_state, "VIRTUAL_ENTITIES", description=description), description):
        for member in _objects(require_array(virtual_entity, "MEMBER_RECORDS", description=description), description):
            for record in _objects(require_array(member, "RECORDS", description=description), description):
                keys.add(record_key_of(record, description=description))
    return keys


def validate_how_entity(
    result: str,
    flags: FlagSet,
    expected_keys: Iterable[RecordKey] | None = None,
    expected_count: int | None = None,
    *,
    description: str | None = None,
) -> set[RecordKey]:
    """Validate a how-entity result; return the records of its final state."""
    document = parse_json_object(result, what="how-entity", description=description)
    how = require_object(document, "HOW_RESULTS", description=description)
    steps = require_array(how, "RESOLUTION_STEPS", description=description)
    _check_step_match_info(steps, flags, description)

    actual = how_record_keys(how, description=description)
    expected = frozenset(expected_keys) if expected_keys is not None else None
    if expected is not None and actual != expected:
        raise OracleAssertionError(
            "The records were not as expected",
            description=description,
            context={"expected": sorted(map(str, expected)), "actual": sorted(map(str, actual))},
        )
    if expected_count is not None and len(actual) != expected_count:
        raise OracleAssertionError(
            "The number of records were not as expected",
            description=description,
            context={"expected": expected_count, "actual": len(actual)},
        )
    return actual
