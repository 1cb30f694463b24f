# tests/unit/core/test_combinations.py
"""Tests for combinatorial parameter generation."""

from __future__ import annotations

import pytest

from szoracle.core.combinations import CircularIterator, boolean_variants, circular, generate_combinations


class TestGenerateCombinations:
    def test_last_dimension_varies_fastest(self) -> None:
        assert generate_combinations(["a", "b"], [1, 2, 3]) == [
            ["a", 1],
            ["a", 2],
            ["a", 3],
            ["b", 1],
            ["b", 2],
            ["b", 3],
        ]

    def test_three_dimensions(self) -> None:
        result = generate_combinations([0, 1], [0, 1], [0, 1])
        assert result == [[c // 4 % 2, c // 2 % 2, c % 2] for c in range(8)]

    def test_empty_dimension_yields_nothing(self) -> None:
        assert generate_combinations([1, 2], [], [3]) == []

    def test_no_dimensions_yields_single_empty_combination(self) -> None:
        assert generate_combinations() == [[]]

    def test_single_dimension(self) -> None:
        assert generate_combinations([None, True]) == [[None], [True]]


class TestCircular:
    def test_wraps_in_order(self) -> None:
        iterator = circular(["x", "y", "z"])
        assert [iterator.next() for _ in range(7)] == ["x", "y", "z", "x", "y", "z", "x"]

    def test_has_next_always_true(self) -> None:
        iterator = circular([1])
        for _ in range(3):
            assert iterator.has_next()
            iterator.next()
        assert iterator.has_next()

    def test_python_iteration_protocol(self) -> None:
        iterator = circular([1, 2])
        assert iter(iterator) is iterator
        assert [next(iterator) for _ in range(3)] == [1, 2, 1]

    def test_empty_sequence_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            circular([])

    def test_remove_unsupported(self) -> None:
        with pytest.raises(TypeError):
            circular([1]).remove()

    def test_caller_mutation_does_not_affect_rotation(self) -> None:
        items = [1, 2]
        iterator = CircularIterator(items)
        items.append(3)
        assert len(iterator) == 2
        assert [iterator.next() for _ in range(3)] == [1, 2, 1]

    def test_none_items_are_values(self) -> None:
        iterator = circular([None, 0])
        assert [iterator.next() for _ in range(4)] == [None, 0, None, 0]


class TestBooleanVariants:
    def test_two_slots_first_slot_fastest(self) -> None:
        assert boolean_variants(2) == [
            [True, True],
            [False, True],
            [True, False],
            [False, False],
        ]

    def test_include_null(self) -> None:
        result = boolean_variants(2, include_null=True)
        assert len(result) == 9
        assert result[0] == [None, None]
        assert result[1] == [True, None]
        assert result[3] == [None, True]

    def test_zero_slots(self) -> None:
        assert boolean_variants(0) == [[]]

    def test_all_distinct(self) -> None:
        result = boolean_variants(3, include_null=True)
        assert len({tuple(row) for row in result}) == 27

    def test_negative_count_rejected(self) -> None:
        with pytest.raises(ValueError):
            boolean_variants(-1)
