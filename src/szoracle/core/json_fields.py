# src/szoracle/core/json_fields.py
"""Typed accessors over engine result JSON.

Engine output is external data: every accessor checks presence and type
and raises OracleAssertionError with the case description on mismatch,
rather than letting a KeyError or TypeError escape from deep inside a
validator.
"""

from __future__ import annotations

import json
from typing import Any

from szoracle.contracts.errors import OracleAssertionError
from szoracle.contracts.records import RecordKey


def parse_json_object(text: str, *, what: str, description: str | None = None) -> dict[str, Any]:
    """Parse engine output that must be a JSON object."""
    try:
        value = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise OracleAssertionError(
            f"Unable to parse {what} result as JSON: {exc}",
            description=description,
            context={"text": text},
        ) from exc
    if not isinstance(value, dict):
        raise OracleAssertionError(
            f"{what} result is not a JSON object",
            description=description,
            context={"text": text},
        )
    return value


def optional_array(obj: dict[str, Any], key: str, *, description: str | None = None) -> list[Any] | None:
    """Array under ``key``; None when the key is absent or null."""
    value = obj.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise OracleAssertionError(
            f"{key} is not an array",
            description=description,
            context={"value": value},
        )
    return value


def require_array(obj: dict[str, Any], key: str, *, description: str | None = None) -> list[Any]:
    value = optional_array(obj, key, description=description)
    if value is None:
        raise OracleAssertionError(f"{key} is missing or null", description=description, context={"object": obj})
    return value


def require_object(obj: dict[str, Any], key: str, *, description: str | None = None) -> dict[str, Any]:
    value = obj.get(key)
    if not isinstance(value, dict):
        raise OracleAssertionError(
            f"{key} is missing or not an object",
            description=description,
            context={"object": obj},
        )
    return value


def require_int(obj: dict[str, Any], key: str, *, description: str | None = None) -> int:
    value = obj.get(key)
    # bool is an int subclass; an engine id is never a boolean
    if not isinstance(value, int) or isinstance(value, bool):
        raise OracleAssertionError(
            f"{key} is missing, null or not an integer",
            description=description,
            context={"object": obj},
        )
    return value


def int_list(values: list[Any], *, what: str, description: str | None = None) -> list[int]:
    """Coerce an array of JSON numbers to ints, failing on any other element."""
    result: list[int] = []
    for value in values:
        if not isinstance(value, int) or isinstance(value, bool):
            raise OracleAssertionError(
                f"{what} contains a non-integer element",
                description=description,
                context={"values": values},
            )
        result.append(value)
    return result


def entity_detail_ids(entities: list[Any], *, description: str | None = None) -> list[int]:
    """Collect ``RESOLVED_ENTITY.ENTITY_ID`` from each entity-detail object."""
    ids: list[int] = []
    for entity in entities:
        if not isinstance(entity, dict):
            raise OracleAssertionError(
                "Entity detail is null or not an object",
                description=description,
                context={"entities": entities},
            )
        resolved = require_object(entity, "RESOLVED_ENTITY", description=description)
        ids.append(require_int(resolved, "ENTITY_ID", description=description))
    return ids


def record_key_of(obj: dict[str, Any], *, description: str | None = None) -> RecordKey:
    """Read ``DATA_SOURCE`` / ``RECORD_ID`` from a record object."""
    data_source = obj.get("DATA_SOURCE")
    record_id = obj.get("RECORD_ID")
    if not isinstance(data_source, str) or not isinstance(record_id, str):
        raise OracleAssertionError(
            "Record is missing DATA_SOURCE or RECORD_ID",
            description=description,
            context={"record": obj},
        )
    return RecordKey(data_source, record_id)
