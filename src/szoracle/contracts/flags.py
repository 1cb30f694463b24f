# src/szoracle/contracts/flags.py
"""Flag and usage-group value types.

The table of concrete flags lives in szoracle/sdk/flags.yaml and is loaded
by szoracle.sdk.flags; this module only defines the shapes.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum


class SzFlagUsageGroup(StrEnum):
    """SDK operation families a flag may be passed to."""

    SZ_ADD_RECORD_FLAGS = "SZ_ADD_RECORD_FLAGS"
    SZ_DELETE_RECORD_FLAGS = "SZ_DELETE_RECORD_FLAGS"
    SZ_REEVALUATE_RECORD_FLAGS = "SZ_REEVALUATE_RECORD_FLAGS"
    SZ_REEVALUATE_ENTITY_FLAGS = "SZ_REEVALUATE_ENTITY_FLAGS"
    SZ_REDO_FLAGS = "SZ_REDO_FLAGS"
    SZ_RECORD_FLAGS = "SZ_RECORD_FLAGS"
    SZ_RECORD_PREVIEW_FLAGS = "SZ_RECORD_PREVIEW_FLAGS"
    SZ_ENTITY_FLAGS = "SZ_ENTITY_FLAGS"
    SZ_FIND_PATH_FLAGS = "SZ_FIND_PATH_FLAGS"
    SZ_FIND_NETWORK_FLAGS = "SZ_FIND_NETWORK_FLAGS"
    SZ_FIND_INTERESTING_ENTITIES_FLAGS = "SZ_FIND_INTERESTING_ENTITIES_FLAGS"
    SZ_SEARCH_FLAGS = "SZ_SEARCH_FLAGS"
    SZ_EXPORT_FLAGS = "SZ_EXPORT_FLAGS"
    SZ_WHY_RECORD_IN_ENTITY_FLAGS = "SZ_WHY_RECORD_IN_ENTITY_FLAGS"
    SZ_WHY_RECORDS_FLAGS = "SZ_WHY_RECORDS_FLAGS"
    SZ_WHY_ENTITIES_FLAGS = "SZ_WHY_ENTITIES_FLAGS"
    SZ_WHY_SEARCH_FLAGS = "SZ_WHY_SEARCH_FLAGS"
    SZ_HOW_FLAGS = "SZ_HOW_FLAGS"
    SZ_VIRTUAL_ENTITY_FLAGS = "SZ_VIRTUAL_ENTITY_FLAGS"


@dataclass(frozen=True, slots=True, order=True)
class SzFlag:
    """A single named flag bit.

    Two flags may share a bit (e.g. SZ_EXPORT_INCLUDE_MULTI_RECORD_ENTITIES
    and SZ_SEARCH_INCLUDE_RESOLVED); they remain distinct flags because they
    belong to different usage groups. Identity is the symbol.
    """

    symbol: str
    bit: int
    groups: frozenset[SzFlagUsageGroup]

    def __post_init__(self) -> None:
        if not 0 <= self.bit < 64:
            raise ValueError(f"flag {self.symbol} bit must be in [0, 64), got {self.bit}")

    @property
    def value(self) -> int:
        return 1 << self.bit

    def __str__(self) -> str:
        return self.symbol


type FlagSet = frozenset[SzFlag] | None
"""Flags for one call. ``None`` means "not specified" and is sent as zero."""


def to_bits(flags: Iterable[SzFlag] | None) -> int:
    """OR together the bits of a flag set; ``None`` is zero."""
    value = 0
    for flag in flags or ():
        value |= flag.value
    return value


def flags_to_string(flags: Iterable[SzFlag] | None) -> str:
    """Render a flag set deterministically for diagnostics."""
    if flags is None:
        return "None"
    names = sorted(flag.symbol for flag in flags)
    return "{ " + " | ".join(names) + " }" if names else "{ }"
