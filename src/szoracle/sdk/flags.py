# src/szoracle/sdk/flags.py
"""Declarative flag registry.

Flags, their bits, their usage groups and the named aggregate sets are
declared in flags.yaml next to this module. The table is loaded ONCE at
import into an immutable FlagRegistry; the module-level constants below
are plain frozensets / SzFlag values taken from it and are never mutated.

Cross-checking against engine-supplied metadata (szflags.json) is done
by check_flag_metadata() against the registry, not by introspecting
module attributes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml
from pydantic import BaseModel, Field

from szoracle.contracts.flags import FlagSet, SzFlag, SzFlagUsageGroup, to_bits

REGISTRY_PATH = Path(__file__).parent / "flags.yaml"

# Registry constants that engine metadata does not describe
METADATA_EXEMPT: frozenset[str] = frozenset({"SZ_REDO_DEFAULT_FLAGS", "SZ_WITH_INFO_FLAGS"})


class FlagRegistryError(ValueError):
    """Raised when the flag registry document is inconsistent."""

    pass


class _FlagEntry(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    bit: int = Field(ge=0, lt=64)
    groups: str


class _RegistryDocument(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    group_sets: dict[str, list[SzFlagUsageGroup]]
    flags: dict[str, _FlagEntry]
    aggregates: dict[str, list[str]] = Field(default_factory=dict)


class FlagRegistry:
    """Immutable name -> flag / aggregate table."""

    __slots__ = ("_aggregates", "_flags")

    def __init__(self, flags: Mapping[str, SzFlag], aggregates: Mapping[str, frozenset[SzFlag]]) -> None:
        overlap = set(flags) & set(aggregates)
        if overlap:
            raise FlagRegistryError(f"Names declared as both flag and aggregate: {sorted(overlap)}")
        self._flags: Mapping[str, SzFlag] = MappingProxyType(dict(flags))
        self._aggregates: Mapping[str, frozenset[SzFlag]] = MappingProxyType(dict(aggregates))

    @property
    def flags(self) -> Mapping[str, SzFlag]:
        return self._flags

    @property
    def aggregates(self) -> Mapping[str, frozenset[SzFlag]]:
        return self._aggregates

    def flag(self, symbol: str) -> SzFlag:
        try:
            return self._flags[symbol]
        except KeyError:
            raise FlagRegistryError(f"Unknown flag: {symbol}") from None

    def aggregate(self, symbol: str) -> frozenset[SzFlag]:
        try:
            return self._aggregates[symbol]
        except KeyError:
            raise FlagRegistryError(f"Unknown aggregate flag set: {symbol}") from None

    def in_group(self, group: SzFlagUsageGroup) -> frozenset[SzFlag]:
        """Every single-bit flag usable with the given operation family."""
        return frozenset(flag for flag in self._flags.values() if group in flag.groups)

    def value_of(self, symbol: str) -> int:
        if symbol in self._flags:
            return self._flags[symbol].value
        return to_bits(self.aggregate(symbol))

    def constants(self) -> dict[str, int]:
        """Every declared symbol (flags then aggregates) with its 64-bit value."""
        values = {symbol: flag.value for symbol, flag in self._flags.items()}
        values.update({symbol: to_bits(members) for symbol, members in self._aggregates.items()})
        return values

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._flags or symbol in self._aggregates

    def __len__(self) -> int:
        return len(self._flags) + len(self._aggregates)


def _build_registry(document: _RegistryDocument) -> FlagRegistry:
    flags: dict[str, SzFlag] = {}
    for symbol, entry in document.flags.items():
        if entry.groups not in document.group_sets:
            raise FlagRegistryError(f"Flag {symbol} references unknown group set {entry.groups!r}")
        flags[symbol] = SzFlag(symbol, entry.bit, frozenset(document.group_sets[entry.groups]))

    # Aggregates may reference flags or aggregates declared earlier in the document
    aggregates: dict[str, frozenset[SzFlag]] = {}
    for symbol, members in document.aggregates.items():
        resolved: set[SzFlag] = set()
        for member in members:
            if member in flags:
                resolved.add(flags[member])
            elif member in aggregates:
                resolved.update(aggregates[member])
            else:
                raise FlagRegistryError(f"Aggregate {symbol} references undeclared member {member!r}")
        aggregates[symbol] = frozenset(resolved)

    return FlagRegistry(flags, aggregates)


def load_registry(path: Path = REGISTRY_PATH) -> FlagRegistry:
    """Load and validate a flag registry YAML document.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the YAML is malformed.
        pydantic.ValidationError: If the document shape is invalid.
        FlagRegistryError: If references inside the document don't resolve.
    """
    with path.open() as f:
        loaded = yaml.safe_load(f)
    if not isinstance(loaded, dict):
        raise FlagRegistryError(f"Flag registry must be a YAML mapping, got {type(loaded).__name__}")
    return _build_registry(_RegistryDocument(**loaded))


REGISTRY: FlagRegistry = load_registry()

# =============================================================================
# Individual flags referenced by validators and scenarios
# =============================================================================

SZ_WITH_INFO = REGISTRY.flag("SZ_WITH_INFO")
SZ_FIND_PATH_STRICT_AVOID = REGISTRY.flag("SZ_FIND_PATH_STRICT_AVOID")
SZ_FIND_PATH_INCLUDE_MATCHING_INFO = REGISTRY.flag("SZ_FIND_PATH_INCLUDE_MATCHING_INFO")
SZ_FIND_NETWORK_INCLUDE_MATCHING_INFO = REGISTRY.flag("SZ_FIND_NETWORK_INCLUDE_MATCHING_INFO")
SZ_INCLUDE_FEATURE_SCORES = REGISTRY.flag("SZ_INCLUDE_FEATURE_SCORES")
SZ_INCLUDE_MATCH_KEY_DETAILS = REGISTRY.flag("SZ_INCLUDE_MATCH_KEY_DETAILS")
SZ_ENTITY_INCLUDE_ENTITY_NAME = REGISTRY.flag("SZ_ENTITY_INCLUDE_ENTITY_NAME")
SZ_ENTITY_INCLUDE_RECORD_SUMMARY = REGISTRY.flag("SZ_ENTITY_INCLUDE_RECORD_SUMMARY")
SZ_ENTITY_INCLUDE_RECORD_DATA = REGISTRY.flag("SZ_ENTITY_INCLUDE_RECORD_DATA")
SZ_ENTITY_INCLUDE_RECORD_MATCHING_INFO = REGISTRY.flag("SZ_ENTITY_INCLUDE_RECORD_MATCHING_INFO")

# =============================================================================
# Aggregate flag sets
# =============================================================================

SZ_NO_FLAGS = REGISTRY.aggregate("SZ_NO_FLAGS")
SZ_ENTITY_DEFAULT_FLAGS = REGISTRY.aggregate("SZ_ENTITY_DEFAULT_FLAGS")
SZ_FIND_PATH_DEFAULT_FLAGS = REGISTRY.aggregate("SZ_FIND_PATH_DEFAULT_FLAGS")
SZ_FIND_NETWORK_DEFAULT_FLAGS = REGISTRY.aggregate("SZ_FIND_NETWORK_DEFAULT_FLAGS")
SZ_WHY_ENTITIES_DEFAULT_FLAGS = REGISTRY.aggregate("SZ_WHY_ENTITIES_DEFAULT_FLAGS")
SZ_WHY_RECORDS_DEFAULT_FLAGS = REGISTRY.aggregate("SZ_WHY_RECORDS_DEFAULT_FLAGS")
SZ_HOW_ENTITY_DEFAULT_FLAGS = REGISTRY.aggregate("SZ_HOW_ENTITY_DEFAULT_FLAGS")
SZ_EXPORT_DEFAULT_FLAGS = REGISTRY.aggregate("SZ_EXPORT_DEFAULT_FLAGS")

SZ_FIND_PATH_ALL_FLAGS = REGISTRY.in_group(SzFlagUsageGroup.SZ_FIND_PATH_FLAGS)
SZ_FIND_NETWORK_ALL_FLAGS = REGISTRY.in_group(SzFlagUsageGroup.SZ_FIND_NETWORK_FLAGS)


# =============================================================================
# Flag-set arithmetic
# =============================================================================


def flags_with(base: FlagSet, *extra: SzFlag) -> FlagSet:
    """Return ``base`` plus ``extra``.

    ``None`` stays ``None`` only when nothing is added.
    """
    result = set(base) if base is not None else set()
    result.update(extra)
    if not result and base is None:
        return None
    return frozenset(result)


def flags_without(base: FlagSet, *removed: SzFlag) -> FlagSet:
    """Return ``base`` minus ``removed``; ``None`` stays ``None``."""
    if base is None:
        return None
    return frozenset(base - set(removed))


def flags_with_strict_avoid(base: FlagSet) -> FlagSet:
    return flags_with(base, SZ_FIND_PATH_STRICT_AVOID)


def flags_with_default_avoid(base: FlagSet) -> FlagSet:
    return flags_without(base, SZ_FIND_PATH_STRICT_AVOID)


def has_flag(flags: FlagSet, flag: SzFlag) -> bool:
    """Membership test where an unspecified flag set contains nothing."""
    return flags is not None and flag in flags


def flags_from_bits(value: int, group: SzFlagUsageGroup, registry: FlagRegistry = REGISTRY) -> frozenset[SzFlag]:
    """Decode a bitmask into the flags of one usage group whose bits are set."""
    return frozenset(flag for flag in registry.in_group(group) if value & flag.value)


# =============================================================================
# Metadata cross-check
# =============================================================================


class FlagMetadata(BaseModel):
    """One entry of engine-supplied flag metadata (szflags.json)."""

    model_config = {"frozen": True}

    symbol: str
    bits: list[int] = Field(default_factory=list)
    value: int
    definition: str | list[str] = ""
    groups: list[str] = Field(default_factory=list)
    flags: list[str] | None = None

    @property
    def is_aggregate(self) -> bool:
        """Aggregates list sub-flags, or are a single-group zero-valued default."""
        definitions = self.definition if isinstance(self.definition, list) else [self.definition]
        return self.flags is not None or (len(definitions) == 1 and self.value == 0 and len(self.groups) == 1)


class MismatchKind(StrEnum):
    """Ways a registry constant can disagree with engine metadata."""

    MISSING_FROM_REGISTRY = "missing_from_registry"
    MISSING_FROM_METADATA = "missing_from_metadata"
    VALUE = "value"
    GROUPS = "groups"


@dataclass(frozen=True, slots=True)
class FlagMismatch:
    symbol: str
    kind: MismatchKind
    detail: str

    def __str__(self) -> str:
        return f"{self.symbol}: {self.kind} ({self.detail})"


def parse_flag_metadata(entries: Iterable[dict[str, Any]]) -> dict[str, FlagMetadata]:
    """Validate raw metadata entries, keyed by symbol."""
    parsed = [FlagMetadata(**entry) for entry in entries]
    return {meta.symbol: meta for meta in parsed}


def check_flag_metadata(
    metadata: Mapping[str, FlagMetadata],
    registry: FlagRegistry = REGISTRY,
) -> list[FlagMismatch]:
    """Cross-validate the registry against engine metadata in both directions.

    Returns every mismatch found; an empty list means the two agree.
    """
    mismatches: list[FlagMismatch] = []
    constants = registry.constants()

    for symbol, meta in metadata.items():
        if symbol not in constants:
            mismatches.append(FlagMismatch(symbol, MismatchKind.MISSING_FROM_REGISTRY, f"value={meta.value:#x}"))
            continue
        if constants[symbol] != meta.value:
            mismatches.append(
                FlagMismatch(
                    symbol,
                    MismatchKind.VALUE,
                    f"registry={constants[symbol]:#x} metadata={meta.value:#x}",
                )
            )
        if symbol in registry.flags and not meta.is_aggregate:
            declared = {str(group) for group in registry.flags[symbol].groups}
            if declared != set(meta.groups):
                mismatches.append(
                    FlagMismatch(
                        symbol,
                        MismatchKind.GROUPS,
                        f"registry={sorted(declared)} metadata={sorted(meta.groups)}",
                    )
                )

    for symbol, value in constants.items():
        if symbol in METADATA_EXEMPT or symbol in metadata:
            continue
        mismatches.append(FlagMismatch(symbol, MismatchKind.MISSING_FROM_METADATA, f"value={value:#x}"))

    return mismatches
