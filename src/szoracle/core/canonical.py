# src/szoracle/core/canonical.py
"""
Canonical keys and canonical JSON for deterministic comparison.

Two concerns live here:
1. Pair keys: a direction-independent key for an unordered pair of entity
   ids, so that whichever endpoint the engine reports as "start" never
   affects how actual and expected paths are matched.
2. Canonical JSON: RFC 8785/JCS serialization (rfc8785 package) of oracle
   values, used for stable diagnostics and stable case ids.

NaN and Infinity are REJECTED by canonical_json, never silently converted.
"""

from __future__ import annotations

import hashlib
import math
from collections.abc import Set as AbstractSet
from typing import Any

import rfc8785

from szoracle.contracts.flags import SzFlag
from szoracle.contracts.records import RecordKey
from szoracle.contracts.types import PairKey

# Version string embedded in case ids so a change of algorithm is visible
CANONICAL_VERSION = "sha256-rfc8785-v1"


def pair_key(a: int, b: int) -> PairKey:
    """Return ``(min(a, b), max(a, b))``.

    ``pair_key(a, b) == pair_key(b, a)`` for every a, b; ties are broken
    by numeric order, never by argument order.
    """
    return (a, b) if a <= b else (b, a)


def pair_key_str(a: int, b: int) -> str:
    """String form ``"min:max"`` of :func:`pair_key`."""
    low, high = pair_key(a, b)
    return f"{low}:{high}"


def oriented(start: int, end: int, chain: list[int]) -> list[int]:
    """Return ``chain`` in canonical direction (smaller endpoint first).

    The chain is reversed when ``start`` is not the smaller of the two
    endpoints. A new list is always returned.
    """
    if min(start, end) != start:
        return list(reversed(chain))
    return list(chain)


def _normalize_value(obj: Any) -> Any:
    """Convert a single oracle value to a JSON-safe primitive.

    Raises:
        ValueError: If value is a non-finite float
    """
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            raise ValueError(f"Cannot canonicalize non-finite float: {obj}")
        return obj

    if obj is None or isinstance(obj, str | int | bool):
        return obj

    if isinstance(obj, RecordKey):
        return str(obj)

    if isinstance(obj, SzFlag):
        return obj.symbol

    if isinstance(obj, type):
        return obj.__name__

    return obj


def _normalize_for_canonical(data: Any) -> Any:
    """Recursively normalize a data structure for canonical JSON.

    Sets (including frozensets of flags or record keys) become sorted lists
    so that their serialization is independent of hash ordering.
    """
    if isinstance(data, dict):
        return {str(k): _normalize_for_canonical(v) for k, v in data.items()}
    if isinstance(data, list | tuple):
        return [_normalize_for_canonical(v) for v in data]
    if isinstance(data, AbstractSet):
        items = [_normalize_for_canonical(v) for v in data]
        return sorted(items, key=lambda item: rfc8785.dumps(item))
    return _normalize_value(data)


def canonical_json(obj: Any) -> str:
    """Produce canonical JSON (no whitespace, sorted keys).

    Raises:
        ValueError: If data contains NaN or Infinity
        TypeError: If data contains types that cannot be serialized
    """
    normalized = _normalize_for_canonical(obj)
    result: bytes = rfc8785.dumps(normalized)
    return result.decode("utf-8")


def stable_hash(obj: Any, version: str = CANONICAL_VERSION) -> str:
    """SHA-256 hex digest of the canonical JSON of ``obj``.

    Args:
        obj: Data structure to hash
        version: Algorithm version, mixed into the digest
    """
    canonical = canonical_json(obj)
    return hashlib.sha256(f"{version}\n{canonical}".encode()).hexdigest()
