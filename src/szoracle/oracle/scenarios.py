# src/szoracle/oracle/scenarios.py
"""Generated find-path and find-network cases over the graph dataset.

Flag sets are assigned round-robin so that, across the suite, every flag
combination is exercised against several different path shapes.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from szoracle.contracts.expectations import (
    Connected,
    Disconnected,
    ExpectedNetworkSpec,
    ExpectedPath,
    ExpectedPathSpec,
    OracleCase,
)
from szoracle.contracts.flags import FlagSet
from szoracle.contracts.records import RecordKey
from szoracle.core.combinations import circular
from szoracle.core.lookup import RecordEntityLookup
from szoracle.fixtures.graph_data import (
    EMPLOYEE_ABC567,
    EMPLOYEE_DEF890,
    EMPLOYEE_MNO345,
    EMPLOYEE_PQR678,
    EMPLOYEES,
    PASSENGER_ABC123,
    PASSENGER_DEF456,
    PASSENGER_GHI789,
    PASSENGER_JKL012,
    PASSENGERS,
    UNKNOWN_DATA_SOURCE,
    VIP_GHI123,
    VIP_JKL456,
    VIP_STU901,
    VIP_XYZ234,
    VIPS,
)
from szoracle.sdk.errors import SzNotFoundError, SzUnknownDataSourceError
from szoracle.sdk.flags import (
    SZ_ENTITY_INCLUDE_ENTITY_NAME,
    SZ_ENTITY_INCLUDE_RECORD_DATA,
    SZ_ENTITY_INCLUDE_RECORD_MATCHING_INFO,
    SZ_ENTITY_INCLUDE_RECORD_SUMMARY,
    SZ_FIND_NETWORK_ALL_FLAGS,
    SZ_FIND_NETWORK_DEFAULT_FLAGS,
    SZ_FIND_NETWORK_INCLUDE_MATCHING_INFO,
    SZ_FIND_PATH_ALL_FLAGS,
    SZ_FIND_PATH_DEFAULT_FLAGS,
    SZ_FIND_PATH_INCLUDE_MATCHING_INFO,
    SZ_FIND_PATH_STRICT_AVOID,
    SZ_NO_FLAGS,
    flags_with_default_avoid,
    flags_with_strict_avoid,
    has_flag,
)

FIND_PATH_FLAG_SET: tuple[FlagSet, ...] = (
    None,
    SZ_NO_FLAGS,
    SZ_FIND_PATH_DEFAULT_FLAGS,
    SZ_FIND_PATH_ALL_FLAGS,
    frozenset(
        {
            SZ_FIND_PATH_INCLUDE_MATCHING_INFO,
            SZ_ENTITY_INCLUDE_ENTITY_NAME,
            SZ_ENTITY_INCLUDE_RECORD_SUMMARY,
            SZ_ENTITY_INCLUDE_RECORD_DATA,
            SZ_ENTITY_INCLUDE_RECORD_MATCHING_INFO,
        }
    ),
    frozenset({SZ_ENTITY_INCLUDE_ENTITY_NAME}),
)

FIND_NETWORK_FLAG_SET: tuple[FlagSet, ...] = (
    None,
    SZ_NO_FLAGS,
    SZ_FIND_NETWORK_DEFAULT_FLAGS,
    SZ_FIND_NETWORK_ALL_FLAGS,
    frozenset(
        {
            SZ_FIND_NETWORK_INCLUDE_MATCHING_INFO,
            SZ_ENTITY_INCLUDE_ENTITY_NAME,
            SZ_ENTITY_INCLUDE_RECORD_SUMMARY,
            SZ_ENTITY_INCLUDE_RECORD_DATA,
            SZ_ENTITY_INCLUDE_RECORD_MATCHING_INFO,
        }
    ),
    frozenset({SZ_ENTITY_INCLUDE_ENTITY_NAME}),
)

UNKNOWN_SOURCE = SzUnknownDataSourceError
NOT_FOUND = SzNotFoundError

# Keys that name an unregistered data source or a record never loaded
UNKNOWN_ABC123 = RecordKey(UNKNOWN_DATA_SOURCE, "ABC123")
UNKNOWN_DEF890 = RecordKey(UNKNOWN_DATA_SOURCE, "DEF890")
UNKNOWN_JKL012 = RecordKey(UNKNOWN_DATA_SOURCE, "JKL012")
MISSING_XXX000 = RecordKey(PASSENGERS, "XXX000")

SHORT_PATH = (PASSENGER_ABC123, EMPLOYEE_MNO345, EMPLOYEE_DEF890, VIP_JKL456)
STRICT_DIVERSION = (
    PASSENGER_ABC123,
    PASSENGER_DEF456,
    PASSENGER_GHI789,
    PASSENGER_JKL012,
    VIP_XYZ234,
    VIP_JKL456,
)
SOURCE_DIVERSION = (
    PASSENGER_ABC123,
    EMPLOYEE_MNO345,
    EMPLOYEE_DEF890,
    VIP_JKL456,
    VIP_XYZ234,
    PASSENGER_JKL012,
)


def _id(lookup: RecordEntityLookup, key: RecordKey, fallback: int | None = None) -> int:
    entity_id = lookup.entity_id_of(key)
    if entity_id is None:
        if fallback is None:
            raise KeyError(f"record {key} was not loaded")
        return fallback
    return entity_id


def _path_case(
    lookup: RecordEntityLookup,
    description: str,
    start: RecordKey,
    end: RecordKey,
    max_degrees: int,
    flags: FlagSet,
    expected_keys: tuple[RecordKey, ...] = (),
    *,
    start_id: int | None = None,
    end_id: int | None = None,
    avoid: Iterable[RecordKey] | None = None,
    avoid_ids: Iterable[int] | None = None,
    required_sources: Iterable[str] | None = None,
    record_error: type[BaseException] | None = None,
    entity_error: type[BaseException] | None = None,
) -> OracleCase:
    avoid_keys = frozenset(avoid or ())
    inputs: dict[str, Any] = {
        "start_id": _id(lookup, start, start_id),
        "end_id": _id(lookup, end, end_id),
        "avoid_ids": frozenset(avoid_ids) if avoid_ids is not None else lookup.entity_id_set(avoid_keys) or None,
    }
    expected = ExpectedPathSpec(
        start_key=start,
        end_key=end,
        max_degrees=max_degrees,
        expected_length=len(expected_keys),
        expected_keys=expected_keys,
        avoid_keys=avoid_keys,
        avoid_strict=has_flag(flags, SZ_FIND_PATH_STRICT_AVOID),
        required_sources=frozenset(required_sources or ()),
    )
    return OracleCase(description, inputs, flags, expected, record_error, entity_error)


def path_cases(lookup: RecordEntityLookup) -> list[OracleCase]:
    """The find-path case matrix."""
    flag_sets = circular(FIND_PATH_FLAG_SET)

    return [
        _path_case(
            lookup,
            "Basic path find at 2 degrees",
            PASSENGER_ABC123,
            EMPLOYEE_DEF890,
            2,
            flag_sets.next(),
            (PASSENGER_ABC123, EMPLOYEE_MNO345, EMPLOYEE_DEF890),
        ),
        _path_case(
            lookup,
            "Basic path found at 3 degrees",
            PASSENGER_ABC123,
            VIP_JKL456,
            3,
            flag_sets.next(),
            SHORT_PATH,
        ),
        _path_case(
            lookup,
            "Path not found due to max degrees",
            PASSENGER_ABC123,
            VIP_JKL456,
            2,
            flag_sets.next(),
        ),
        _path_case(
            lookup,
            "Diverted path found with avoidance",
            PASSENGER_ABC123,
            VIP_JKL456,
            4,
            flags_with_default_avoid(flag_sets.next()),
            SHORT_PATH,
            avoid={EMPLOYEE_DEF890},
        ),
        _path_case(
            lookup,
            "No path found due to strict avoidance and max degrees",
            PASSENGER_ABC123,
            VIP_JKL456,
            3,
            flags_with_strict_avoid(flag_sets.next()),
            avoid={EMPLOYEE_DEF890},
        ),
        _path_case(
            lookup,
            "Diverted path at 5 degrees with strict avoidance",
            PASSENGER_ABC123,
            VIP_JKL456,
            10,
            flags_with_strict_avoid(flag_sets.next()),
            STRICT_DIVERSION,
            avoid={EMPLOYEE_DEF890},
        ),
        _path_case(
            lookup,
            "Diverted path at 5 degrees due to required EMPLOYEES source",
            PASSENGER_ABC123,
            PASSENGER_JKL012,
            10,
            flags_with_default_avoid(flag_sets.next()),
            SOURCE_DIVERSION,
            required_sources={EMPLOYEES},
        ),
        _path_case(
            lookup,
            "Diverted path at 5 degrees due to required VIP source",
            PASSENGER_ABC123,
            PASSENGER_JKL012,
            10,
            flags_with_default_avoid(flag_sets.next()),
            SOURCE_DIVERSION,
            required_sources={VIPS},
        ),
        _path_case(
            lookup,
            "Diverted path at 5 degrees due to 2 required sources",
            PASSENGER_ABC123,
            PASSENGER_JKL012,
            10,
            flags_with_default_avoid(flag_sets.next()),
            SOURCE_DIVERSION,
            required_sources={EMPLOYEES, VIPS},
        ),
        _path_case(
            lookup,
            "Diverted path with required sources and avoidance",
            PASSENGER_ABC123,
            PASSENGER_JKL012,
            10,
            flags_with_default_avoid(flag_sets.next()),
            SOURCE_DIVERSION,
            avoid={VIP_STU901},
            required_sources={EMPLOYEES, VIPS},
        ),
        _path_case(
            lookup,
            "Unknown required data source",
            PASSENGER_ABC123,
            EMPLOYEE_DEF890,
            10,
            flag_sets.next(),
            required_sources={UNKNOWN_DATA_SOURCE},
            record_error=UNKNOWN_SOURCE,
            entity_error=UNKNOWN_SOURCE,
        ),
        _path_case(
            lookup,
            "Unknown source for avoidance record",
            PASSENGER_ABC123,
            VIP_JKL456,
            4,
            flags_with_default_avoid(flag_sets.next()),
            SHORT_PATH,
            avoid={UNKNOWN_DEF890},
            avoid_ids={-300},
            record_error=UNKNOWN_SOURCE,
        ),
        _path_case(
            lookup,
            "Not found record ID for avoidance record",
            PASSENGER_ABC123,
            VIP_JKL456,
            4,
            flags_with_default_avoid(flag_sets.next()),
            SHORT_PATH,
            avoid={MISSING_XXX000},
            avoid_ids={300000000},
        ),
        _path_case(
            lookup,
            "Unknown start data source in find path via key",
            UNKNOWN_ABC123,
            PASSENGER_JKL012,
            10,
            flag_sets.next(),
            start_id=-100,
            record_error=UNKNOWN_SOURCE,
            entity_error=NOT_FOUND,
        ),
        _path_case(
            lookup,
            "Unknown end data source in find path via key",
            PASSENGER_ABC123,
            UNKNOWN_JKL012,
            10,
            flag_sets.next(),
            end_id=-200,
            record_error=UNKNOWN_SOURCE,
            entity_error=NOT_FOUND,
        ),
        _path_case(
            lookup,
            "Unknown start record ID in find path via key",
            MISSING_XXX000,
            PASSENGER_JKL012,
            10,
            flag_sets.next(),
            start_id=100000000,
            record_error=NOT_FOUND,
            entity_error=NOT_FOUND,
        ),
        _path_case(
            lookup,
            "Unknown end record ID in find path via key",
            PASSENGER_ABC123,
            MISSING_XXX000,
            10,
            flag_sets.next(),
            end_id=200000000,
            record_error=NOT_FOUND,
            entity_error=NOT_FOUND,
        ),
    ]


def _network_case(
    lookup: RecordEntityLookup,
    description: str,
    keys: tuple[RecordKey, ...],
    max_degrees: int,
    build_out_degrees: int,
    build_out_max_entities: int,
    flags: FlagSet,
    paths: tuple[ExpectedPath, ...] = (),
    entities: Iterable[RecordKey] = (),
    *,
    ids: tuple[int, ...] | None = None,
    record_error: type[BaseException] | None = None,
    entity_error: type[BaseException] | None = None,
) -> OracleCase:
    inputs: dict[str, Any] = {
        "keys": keys,
        "ids": ids if ids is not None else tuple(_id(lookup, key) for key in keys),
    }
    expected = ExpectedNetworkSpec(
        paths=paths,
        max_degrees=max_degrees,
        build_out_degrees=build_out_degrees,
        build_out_max_entities=build_out_max_entities,
        required_keys=frozenset(entities),
    )
    return OracleCase(description, inputs, flags, expected, record_error, entity_error)


def network_cases(lookup: RecordEntityLookup) -> list[OracleCase]:
    """The find-network case matrix."""
    flag_sets = circular(FIND_NETWORK_FLAG_SET)
    xyz234_id = _id(lookup, VIP_XYZ234)

    return [
        _network_case(
            lookup,
            "Single entity network",
            (PASSENGER_ABC123,),
            1,
            0,
            10,
            flag_sets.next(),
            entities={PASSENGER_ABC123},
        ),
        _network_case(
            lookup,
            "Single entity with one-degree build-out",
            (PASSENGER_ABC123,),
            1,
            1,
            1000,
            flag_sets.next(),
            entities={PASSENGER_ABC123, PASSENGER_DEF456, EMPLOYEE_MNO345},
        ),
        _network_case(
            lookup,
            "Two entities with no path",
            (PASSENGER_ABC123, VIP_JKL456),
            1,
            0,
            10,
            flag_sets.next(),
            (Disconnected(PASSENGER_ABC123, VIP_JKL456),),
            {PASSENGER_ABC123, VIP_JKL456},
        ),
        _network_case(
            lookup,
            "Two entities at three degrees",
            (PASSENGER_ABC123, VIP_JKL456),
            3,
            0,
            10,
            flag_sets.next(),
            (Connected(SHORT_PATH),),
            set(SHORT_PATH),
        ),
        _network_case(
            lookup,
            "Three entities at three degrees with no build-out",
            (PASSENGER_ABC123, EMPLOYEE_ABC567, VIP_JKL456),
            3,
            0,
            10,
            flag_sets.next(),
            (
                Connected(SHORT_PATH),
                Connected((PASSENGER_ABC123, PASSENGER_DEF456, EMPLOYEE_PQR678, EMPLOYEE_ABC567)),
                Disconnected(EMPLOYEE_ABC567, VIP_JKL456),
            ),
            {*SHORT_PATH, PASSENGER_DEF456, EMPLOYEE_PQR678, EMPLOYEE_ABC567},
        ),
        _network_case(
            lookup,
            "Three entities at zero degrees with single build-out",
            (EMPLOYEE_ABC567, VIP_GHI123, EMPLOYEE_MNO345),
            0,
            1,
            10,
            flag_sets.next(),
            (
                Disconnected(EMPLOYEE_ABC567, VIP_GHI123),
                Disconnected(EMPLOYEE_ABC567, EMPLOYEE_MNO345),
                Disconnected(VIP_GHI123, EMPLOYEE_MNO345),
            ),
            {
                EMPLOYEE_ABC567,
                VIP_GHI123,
                EMPLOYEE_MNO345,
                EMPLOYEE_PQR678,
                VIP_XYZ234,
                VIP_STU901,
                PASSENGER_ABC123,
                EMPLOYEE_DEF890,
            },
        ),
        _network_case(
            lookup,
            "Two entities at zero degrees with single build-out",
            (PASSENGER_ABC123, PASSENGER_DEF456),
            0,
            1,
            10,
            flag_sets.next(),
            (Disconnected(PASSENGER_ABC123, PASSENGER_DEF456),),
            {PASSENGER_ABC123, PASSENGER_DEF456, EMPLOYEE_MNO345, PASSENGER_GHI789, EMPLOYEE_PQR678},
        ),
        _network_case(
            lookup,
            "Unknown data source for network entity",
            (UNKNOWN_ABC123, VIP_XYZ234),
            3,
            0,
            10,
            flag_sets.next(),
            ids=(100000000, xyz234_id),
            record_error=UNKNOWN_SOURCE,
            entity_error=NOT_FOUND,
        ),
        _network_case(
            lookup,
            "Not-found record ID for network entity",
            (VIP_XYZ234, MISSING_XXX000),
            3,
            0,
            10,
            flag_sets.next(),
            ids=(xyz234_id, -100),
            record_error=NOT_FOUND,
            entity_error=NOT_FOUND,
        ),
    ]
