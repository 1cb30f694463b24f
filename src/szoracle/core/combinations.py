# src/szoracle/core/combinations.py
"""Combinatorial parameter generation for test-case matrices.

Three generators:
- generate_combinations: full Cartesian product in mixed-radix order
- circular: endless round-robin over a finite, non-empty sequence
- boolean_variants: every tuple over {True, False} or {None, True, False}

Mixed-radix ordering:
    For dimension i, interval_i is the product of the sizes of every
    dimension after i (1 for the last). Combination c takes
    variants[i][(c // interval_i) % len(variants[i])], so the last
    dimension varies fastest and dimension i's value has period
    interval_i * len(variants[i]).
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence


def _intervals(sizes: Sequence[int]) -> list[int]:
    intervals = [1] * len(sizes)
    for index in range(len(sizes) - 2, -1, -1):
        intervals[index] = intervals[index + 1] * sizes[index + 1]
    return intervals


def generate_combinations[T](*variants: Sequence[T]) -> list[list[T]]:
    """Return every combination choosing one value per dimension.

    Produces exactly ``prod(len(v) for v in variants)`` combinations, each
    exactly once; an empty dimension yields no combinations. With no
    dimensions at all, a single empty combination is produced.

    Example:
        generate_combinations(["a", "b"], [1, 2, 3])
        # [["a", 1], ["a", 2], ["a", 3], ["b", 1], ["b", 2], ["b", 3]]
    """
    sizes = [len(values) for values in variants]
    total = math.prod(sizes)
    intervals = _intervals(sizes)

    result: list[list[T]] = []
    for combo in range(total):
        result.append(
            [values[(combo // interval) % size] for values, interval, size in zip(variants, intervals, sizes, strict=True)]
        )
    return result


class CircularIterator[T]:
    """Endless iterator cycling through a fixed sequence by index.

    The sequence is copied on construction so later mutation of the caller's
    list cannot change the rotation. ``has_next()`` is always True.

    Raises:
        ValueError: If the sequence is empty.
    """

    __slots__ = ("_items", "_position")

    def __init__(self, items: Sequence[T]) -> None:
        if len(items) == 0:
            raise ValueError("circular iteration requires a non-empty sequence")
        self._items: tuple[T, ...] = tuple(items)
        self._position = 0

    def has_next(self) -> bool:
        return True

    def next(self) -> T:
        item = self._items[self._position]
        self._position = (self._position + 1) % len(self._items)
        return item

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        return self.next()

    def __len__(self) -> int:
        """Period of the rotation."""
        return len(self._items)

    def remove(self) -> None:
        raise TypeError("CircularIterator does not support removal")


def circular[T](items: Sequence[T]) -> CircularIterator[T]:
    """Round-robin over ``items`` forever; the k-th and (k + len)-th values are equal."""
    return CircularIterator(items)


def boolean_variants(param_count: int, include_null: bool = False) -> list[list[bool | None]]:
    """Return every tuple of ``param_count`` tri-state booleans.

    The alphabet is ``(True, False)``, or ``(None, True, False)`` when
    ``include_null``; ``len(alphabet) ** param_count`` tuples are produced.
    Unlike generate_combinations, the FIRST slot varies fastest.

    Raises:
        ValueError: If param_count is negative.
    """
    if param_count < 0:
        raise ValueError(f"param_count must be >= 0, got {param_count}")

    alphabet: tuple[bool | None, ...] = (None, True, False) if include_null else (True, False)
    base = len(alphabet)
    total = base**param_count

    result: list[list[bool | None]] = []
    for combo in range(total):
        result.append([alphabet[(combo // base**slot) % base] for slot in range(param_count)])
    return result
