# src/szoracle/core/lookup.py
"""Bidirectional snapshot between record keys and the entities they resolve to."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from szoracle.contracts.records import RecordKey
from szoracle.contracts.types import EntityID


class RecordEntityLookup:
    """Immutable RecordKey -> entity id map plus its inverse.

    Built once after a fixture load has converged. Every record maps to
    exactly one entity; an entity may own several records when the engine
    merged them. Insertion order of the source mapping is preserved in both
    directions.

    Example:
        lookup = RecordEntityLookup({key_a: 1, key_b: 1, key_c: 2})
        lookup.entity_id_of(key_b)   # 1
        lookup.records_of(1)         # frozenset({key_a, key_b})
    """

    __slots__ = ("_by_entity_id", "_by_record_key")

    def __init__(self, records: Mapping[RecordKey, int]) -> None:
        if records is None:
            raise TypeError("records mapping is required")

        by_record: dict[RecordKey, EntityID] = {}
        grouped: dict[EntityID, list[RecordKey]] = {}
        for key, raw_id in records.items():
            entity_id = EntityID(raw_id)
            by_record[key] = entity_id
            grouped.setdefault(entity_id, []).append(key)

        self._by_record_key: Mapping[RecordKey, EntityID] = MappingProxyType(by_record)
        self._by_entity_id: Mapping[EntityID, frozenset[RecordKey]] = MappingProxyType(
            {entity_id: frozenset(keys) for entity_id, keys in grouped.items()}
        )

    @property
    def by_record_key(self) -> Mapping[RecordKey, EntityID]:
        return self._by_record_key

    @property
    def by_entity_id(self) -> Mapping[EntityID, frozenset[RecordKey]]:
        return self._by_entity_id

    def entity_id_of(self, key: RecordKey) -> EntityID | None:
        """Entity the record resolved to, or None if the record is unknown."""
        return self._by_record_key.get(key)

    def records_of(self, entity_id: int) -> frozenset[RecordKey]:
        """Records owned by the entity; empty if the entity is unknown."""
        return self._by_entity_id.get(EntityID(entity_id), frozenset())

    def entity_ids_of(self, keys: Iterable[RecordKey] | None) -> list[EntityID | None]:
        """Map keys to entity ids in order; unknown keys map to None."""
        if keys is None:
            return []
        return [self.entity_id_of(key) for key in keys]

    def entity_id_set(self, keys: Iterable[RecordKey] | None) -> set[EntityID]:
        """Distinct entity ids of the known keys."""
        return {entity_id for entity_id in self.entity_ids_of(keys) if entity_id is not None}

    def data_sources_of(self, entity_id: int) -> frozenset[str]:
        """Data source codes of the records owned by the entity."""
        return frozenset(key.data_source for key in self.records_of(entity_id))

    def describe(self, key: RecordKey) -> str:
        """``DS:ID (entity)`` rendering used in diagnostics."""
        return f"{key} ({self.entity_id_of(key)})"

    def __contains__(self, key: object) -> bool:
        return key in self._by_record_key

    def __iter__(self) -> Iterator[RecordKey]:
        return iter(self._by_record_key)

    def __len__(self) -> int:
        return len(self._by_record_key)

    def __repr__(self) -> str:
        return f"RecordEntityLookup(records={len(self._by_record_key)}, entities={len(self._by_entity_id)})"
