# tests/unit/core/test_lookup.py
"""Tests for RecordEntityLookup."""

from __future__ import annotations

import pytest

from szoracle.contracts.records import RecordKey
from szoracle.core.lookup import RecordEntityLookup

A = RecordKey("PASSENGERS", "A")
B = RecordKey("PASSENGERS", "B")
C = RecordKey("EMPLOYEES", "C")


@pytest.fixture
def lookup() -> RecordEntityLookup:
    return RecordEntityLookup({A: 10, B: 10, C: 20})


class TestRecordEntityLookup:
    def test_none_mapping_rejected(self) -> None:
        with pytest.raises(TypeError):
            RecordEntityLookup(None)  # type: ignore[arg-type]

    def test_entity_id_of(self, lookup: RecordEntityLookup) -> None:
        assert lookup.entity_id_of(A) == 10
        assert lookup.entity_id_of(C) == 20

    def test_unknown_key_is_none(self, lookup: RecordEntityLookup) -> None:
        assert lookup.entity_id_of(RecordKey("VIPS", "X")) is None

    def test_records_of_merged_entity(self, lookup: RecordEntityLookup) -> None:
        assert lookup.records_of(10) == frozenset({A, B})

    def test_records_of_unknown_entity_is_empty(self, lookup: RecordEntityLookup) -> None:
        assert lookup.records_of(99) == frozenset()

    def test_entity_ids_of_preserves_order_and_unknowns(self, lookup: RecordEntityLookup) -> None:
        assert lookup.entity_ids_of([C, RecordKey("VIPS", "X"), A]) == [20, None, 10]
        assert lookup.entity_ids_of(None) == []

    def test_entity_id_set_skips_unknowns(self, lookup: RecordEntityLookup) -> None:
        assert lookup.entity_id_set([A, B, RecordKey("VIPS", "X")]) == {10}

    def test_data_sources_of(self, lookup: RecordEntityLookup) -> None:
        assert lookup.data_sources_of(20) == frozenset({"EMPLOYEES"})

    def test_insertion_order_preserved(self) -> None:
        lookup = RecordEntityLookup({C: 2, A: 1, B: 3})
        assert list(lookup) == [C, A, B]
        assert list(lookup.by_entity_id) == [2, 1, 3]

    def test_views_are_read_only(self, lookup: RecordEntityLookup) -> None:
        with pytest.raises(TypeError):
            lookup.by_record_key[A] = 1  # type: ignore[index]

    def test_source_mapping_mutation_does_not_leak(self) -> None:
        source = {A: 1}
        lookup = RecordEntityLookup(source)
        source[B] = 2
        assert B not in lookup
        assert len(lookup) == 1

    def test_describe(self, lookup: RecordEntityLookup) -> None:
        assert lookup.describe(A) == "PASSENGERS:A (10)"
