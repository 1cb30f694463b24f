# src/szoracle/contracts/expectations.py
"""Expected results consumed by the path and network validators.

Leaf module: depends only on other contracts.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from szoracle.contracts.flags import FlagSet
from szoracle.contracts.records import RecordKey


def _frozen_keys(keys: Iterable[RecordKey] | None) -> frozenset[RecordKey]:
    return frozenset(keys) if keys else frozenset()


@dataclass(frozen=True, slots=True)
class ExpectedPathSpec:
    """Expectation for a single find-path call.

    ``expected_length == 0`` means no path is expected; in that case
    ``expected_keys`` must be empty.
    """

    start_key: RecordKey
    end_key: RecordKey
    max_degrees: int
    expected_length: int
    expected_keys: tuple[RecordKey, ...] = ()
    avoid_keys: frozenset[RecordKey] = field(default_factory=frozenset)
    avoid_strict: bool = False
    required_sources: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "expected_keys", tuple(self.expected_keys))
        object.__setattr__(self, "avoid_keys", _frozen_keys(self.avoid_keys))
        object.__setattr__(
            self,
            "required_sources",
            frozenset(code.strip().upper() for code in self.required_sources),
        )
        if self.max_degrees < 0:
            raise ValueError(f"max_degrees must be >= 0, got {self.max_degrees}")
        if self.expected_length < 0:
            raise ValueError(f"expected_length must be >= 0, got {self.expected_length}")
        if len(self.expected_keys) != self.expected_length:
            raise ValueError(
                f"expected_keys has {len(self.expected_keys)} entries but expected_length is {self.expected_length}"
            )


@dataclass(frozen=True, slots=True)
class Connected:
    """An expected path whose entities are the given records, in order."""

    keys: tuple[RecordKey, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple(self.keys))
        if len(self.keys) < 2:
            raise ValueError(f"a connected path needs at least two records, got {len(self.keys)}")

    @property
    def start_key(self) -> RecordKey:
        return self.keys[0]

    @property
    def end_key(self) -> RecordKey:
        return self.keys[-1]


@dataclass(frozen=True, slots=True)
class Disconnected:
    """An expected "no connecting path" entry between two requested records."""

    start_key: RecordKey
    end_key: RecordKey


type ExpectedPath = Connected | Disconnected


@dataclass(frozen=True, slots=True)
class ExpectedNetworkSpec:
    """Expectation for a single find-network call.

    Attributes:
        paths: Every pairwise path the result must contain, and nothing more
        max_degrees: Degree limit used for the call
        build_out_degrees: Build-out degrees used for the call
        build_out_max_entities: Cap on build-out entities used for the call
        required_keys: Records whose entities must appear among the entity details
    """

    paths: tuple[ExpectedPath, ...]
    max_degrees: int
    build_out_degrees: int
    build_out_max_entities: int
    required_keys: frozenset[RecordKey] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "paths", tuple(self.paths))
        object.__setattr__(self, "required_keys", _frozen_keys(self.required_keys))
        for name in ("max_degrees", "build_out_degrees", "build_out_max_entities"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        seen: set[frozenset[RecordKey]] = set()
        for path in self.paths:
            endpoints = frozenset((path.start_key, path.end_key))
            if endpoints in seen:
                raise ValueError(f"paths lists {path.start_key} - {path.end_key} more than once")
            seen.add(endpoints)

    @property
    def path_count(self) -> int:
        return len(self.paths)


@dataclass(frozen=True, slots=True)
class OracleCase:
    """One generated test case.

    ``record_error`` / ``entity_error`` name the exception type expected when
    the operation is invoked by record key or by entity id respectively;
    ``None`` means the call must succeed and its result is validated against
    ``expected``.
    """

    description: str
    inputs: dict[str, Any]
    flags: FlagSet
    expected: ExpectedPathSpec | ExpectedNetworkSpec
    record_error: type[BaseException] | None = None
    entity_error: type[BaseException] | None = None

    def error_for(self, by_entity_id: bool) -> type[BaseException] | None:
        return self.entity_error if by_entity_id else self.record_error

    def __str__(self) -> str:
        return self.description


