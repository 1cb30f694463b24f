# src/szoracle/contracts/records.py
"""Record identity: the stable, human-assigned key of a fixture record."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True, order=True)
class RecordKey:
    """Identifies a record by (data source code, record id).

    Both parts are whitespace-trimmed on construction and the data source
    code is upper-cased, so ``RecordKey("passengers ", "ABC123")`` equals
    ``RecordKey("PASSENGERS", "ABC123")``. Ordering is by data source code
    then record id.

    Raises:
        ValueError: If either part is empty or only whitespace.
    """

    data_source: str
    record_id: str

    def __post_init__(self) -> None:
        data_source = self.data_source.strip().upper() if self.data_source is not None else ""
        record_id = self.record_id.strip() if self.record_id is not None else ""
        if not data_source:
            raise ValueError(f"data source code must be non-empty, got {self.data_source!r}")
        if not record_id:
            raise ValueError(f"record id must be non-empty, got {self.record_id!r}")
        # frozen dataclass: normalize via object.__setattr__
        object.__setattr__(self, "data_source", data_source)
        object.__setattr__(self, "record_id", record_id)

    def __str__(self) -> str:
        return f"{self.data_source}:{self.record_id}"

    @classmethod
    def parse(cls, text: str) -> RecordKey:
        """Parse the ``DS:ID`` string form.

        Only the first colon separates the parts; record ids may contain colons.
        """
        data_source, sep, record_id = text.partition(":")
        if not sep:
            raise ValueError(f"record key must have the form DS:ID, got {text!r}")
        return cls(data_source, record_id)

    def to_json(self) -> dict[str, str]:
        """Render as the engine's ``{"DATA_SOURCE", "RECORD_ID"}`` object."""
        return {"DATA_SOURCE": self.data_source, "RECORD_ID": self.record_id}

    @classmethod
    def from_json(cls, obj: dict[str, Any]) -> RecordKey:
        return cls(obj["DATA_SOURCE"], obj["RECORD_ID"])


def record_keys(*pairs: tuple[str, str]) -> frozenset[RecordKey]:
    """Build an immutable set of keys from (data source, record id) pairs."""
    return frozenset(RecordKey(ds, rid) for ds, rid in pairs)


def encode_record_keys(keys: Iterable[RecordKey] | None) -> dict[str, list[dict[str, str]]] | None:
    """Encode keys as the engine's ``{"RECORDS": [...]}`` document.

    Keys are emitted in sorted order so the encoding is deterministic.
    """
    if keys is None:
        return None
    return {"RECORDS": [key.to_json() for key in sorted(keys)]}


def encode_entity_ids(ids: Iterable[int] | None) -> dict[str, list[dict[str, int]]] | None:
    """Encode entity ids as the engine's ``{"ENTITIES": [...]}`` document."""
    if ids is None:
        return None
    return {"ENTITIES": [{"ENTITY_ID": entity_id} for entity_id in sorted(ids)]}
