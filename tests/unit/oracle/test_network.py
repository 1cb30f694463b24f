# tests/unit/oracle/test_network.py
"""Tests for find-network result validation against hand-built results."""

from __future__ import annotations

import json
from typing import Any

import pytest

from szoracle.contracts.errors import OracleAssertionError
from szoracle.contracts.expectations import Connected, Disconnected, ExpectedNetworkSpec
from szoracle.contracts.records import RecordKey
from szoracle.core.lookup import RecordEntityLookup
from szoracle.oracle.network import validate_network
from szoracle.sdk.flags import SZ_FIND_NETWORK_INCLUDE_MATCHING_INFO

A = RecordKey("TEST", "A")
B = RecordKey("TEST", "B")
C = RecordKey("TEST", "C")
D = RecordKey("TEST", "D")
E = RecordKey("TEST", "E")

LOOKUP = RecordEntityLookup({A: 1, B: 2, C: 3, D: 4, E: 5})
LINKS = frozenset({SZ_FIND_NETWORK_INCLUDE_MATCHING_INFO})


def _result(paths: list[tuple[int, int, list[int]]], details: list[int], *, links: bool = False) -> str:
    document: dict[str, Any] = {
        "ENTITY_PATHS": [{"START_ENTITY_ID": s, "END_ENTITY_ID": e, "ENTITIES": chain} for s, e, chain in paths],
        "ENTITIES": [{"RESOLVED_ENTITY": {"ENTITY_ID": entity_id}} for entity_id in details],
    }
    if links:
        document["ENTITY_NETWORK_LINKS"] = []
    return json.dumps(document)


def _spec(*paths: Connected | Disconnected, build_out_degrees: int = 0, build_out_max: int = 10, **kwargs: Any) -> ExpectedNetworkSpec:
    return ExpectedNetworkSpec(
        paths=paths,
        max_degrees=3,
        build_out_degrees=build_out_degrees,
        build_out_max_entities=build_out_max,
        **kwargs,
    )


ONE_PATH = _spec(Connected((A, B, C)))


class TestAcceptedNetworks:
    def test_single_path(self) -> None:
        actual = validate_network(_result([(1, 3, [1, 2, 3])], [1, 2, 3]), ONE_PATH, None, LOOKUP)
        assert actual == {(1, 3): [1, 2, 3]}

    def test_reversed_direction(self) -> None:
        actual = validate_network(_result([(3, 1, [3, 2, 1])], [3, 2, 1]), ONE_PATH, None, LOOKUP)
        assert actual == {(1, 3): [1, 2, 3]}

    def test_expected_reversed_direction(self) -> None:
        spec = _spec(Connected((C, B, A)))
        assert validate_network(_result([(1, 3, [1, 2, 3])], [1, 2, 3]), spec, None, LOOKUP) == {(1, 3): [1, 2, 3]}

    def test_disconnected_pair(self) -> None:
        spec = _spec(Connected((A, B, C)), Disconnected(A, E), Disconnected(C, E))
        result = _result([(1, 3, [1, 2, 3]), (1, 5, []), (3, 5, [])], [1, 2, 3, 5])
        assert validate_network(result, spec, None, LOOKUP)[(1, 5)] == []

    def test_build_out_entities_within_cap(self) -> None:
        spec = _spec(Connected((A, B, C)), build_out_degrees=1, build_out_max=2)
        result = _result([(1, 3, [1, 2, 3])], [1, 2, 3, 4, 5])
        assert validate_network(result, spec, None, LOOKUP) == {(1, 3): [1, 2, 3]}

    def test_required_keys_present(self) -> None:
        spec = _spec(Connected((A, B)), required_keys=frozenset({D}))
        assert validate_network(_result([(1, 2, [1, 2])], [1, 2, 4]), spec, None, LOOKUP) == {(1, 2): [1, 2]}

    def test_links_when_requested(self) -> None:
        result = _result([(1, 3, [1, 2, 3])], [1, 2, 3], links=True)
        assert validate_network(result, ONE_PATH, LINKS, LOOKUP) == {(1, 3): [1, 2, 3]}


class TestRejectedNetworks:
    def test_path_count(self) -> None:
        result = _result([(1, 3, [1, 2, 3]), (1, 4, [])], [1, 2, 3, 4])
        with pytest.raises(OracleAssertionError, match="Paths array has unexpected length"):
            validate_network(result, ONE_PATH, None, LOOKUP)

    def test_duplicate_pair(self) -> None:
        spec = _spec(Connected((A, B, C)), Disconnected(A, E))
        result = _result([(1, 3, [1, 2, 3]), (3, 1, [3, 2, 1])], [1, 2, 3])
        with pytest.raises(OracleAssertionError, match="Duplicate path"):
            validate_network(result, spec, None, LOOKUP)

    def test_null_start_id(self) -> None:
        document = json.loads(_result([(1, 3, [1, 2, 3])], [1, 2, 3]))
        document["ENTITY_PATHS"][0]["START_ENTITY_ID"] = None
        with pytest.raises(OracleAssertionError, match="START_ENTITY_ID"):
            validate_network(json.dumps(document), ONE_PATH, None, LOOKUP)

    def test_links_missing(self) -> None:
        with pytest.raises(OracleAssertionError, match="links missing"):
            validate_network(_result([(1, 3, [1, 2, 3])], [1, 2, 3]), ONE_PATH, LINKS, LOOKUP)

    def test_links_unrequested(self) -> None:
        with pytest.raises(OracleAssertionError, match="links present when not requested"):
            validate_network(_result([(1, 3, [1, 2, 3])], [1, 2, 3], links=True), ONE_PATH, None, LOOKUP)

    def test_wrong_chain(self) -> None:
        with pytest.raises(OracleAssertionError, match="Entity path is not as expected"):
            validate_network(_result([(1, 3, [1, 4, 3])], [1, 3, 4]), ONE_PATH, None, LOOKUP)

    def test_expected_pair_missing(self) -> None:
        with pytest.raises(OracleAssertionError, match="missing from the network"):
            validate_network(_result([(1, 4, [1, 4])], [1, 4]), ONE_PATH, None, LOOKUP)

    def test_connected_where_disconnected_expected(self) -> None:
        spec = _spec(Disconnected(A, E))
        with pytest.raises(OracleAssertionError, match="Entity path is not as expected"):
            validate_network(_result([(1, 5, [1, 5])], [1, 5]), spec, None, LOOKUP)

    def test_unloaded_record_in_expectation(self) -> None:
        spec = _spec(Connected((A, RecordKey("TEST", "Z"))))
        with pytest.raises(OracleAssertionError, match="was not loaded"):
            validate_network(_result([(1, 2, [1, 2])], [1, 2]), spec, None, LOOKUP)

    def test_too_few_details(self) -> None:
        with pytest.raises(OracleAssertionError, match="Too few entity details"):
            validate_network(_result([(1, 3, [1, 2, 3])], [1, 3]), ONE_PATH, None, LOOKUP)

    def test_build_out_without_degrees(self) -> None:
        with pytest.raises(OracleAssertionError, match="Too many entity details: expected at most 3"):
            validate_network(_result([(1, 3, [1, 2, 3])], [1, 2, 3, 4]), ONE_PATH, None, LOOKUP)

    def test_build_out_over_cap(self) -> None:
        spec = _spec(Connected((A, B, C)), build_out_degrees=1, build_out_max=1)
        with pytest.raises(OracleAssertionError, match="Too many entity details: expected at most 4"):
            validate_network(_result([(1, 3, [1, 2, 3])], [1, 2, 3, 4, 5]), spec, None, LOOKUP)

    def test_required_entity_missing(self) -> None:
        spec = _spec(Connected((A, B, C)), build_out_degrees=1, build_out_max=2)
        with pytest.raises(OracleAssertionError, match="missing from entity details") as excinfo:
            validate_network(_result([(1, 3, [1, 2, 3])], [1, 3, 4, 5]), spec, None, LOOKUP)
        assert excinfo.value.context["missing"] == [2]

    def test_expected_pair_repeated_through_shared_entity(self) -> None:
        f = RecordKey("TEST", "F")
        lookup = RecordEntityLookup({A: 1, B: 2, C: 3, f: 3})
        spec = _spec(Connected((A, B, C)), Disconnected(A, f))
        with pytest.raises(ValueError, match="more than once"):
            validate_network(_result([(1, 3, [1, 2, 3]), (1, 2, [1, 2])], [1, 2, 3]), spec, None, lookup)
