# src/szoracle/contracts/types.py
"""Semantic type aliases for identifiers that cross module boundaries.

These are NewType aliases: zero runtime cost, but they let mypy catch
an entity id passed where a handle is expected.
"""

from typing import NewType

EntityID = NewType("EntityID", int)
"""Engine-assigned entity identifier. Only meaningful within one fixture load."""

ExportHandle = NewType("ExportHandle", int)
"""Opaque handle returned by the engine when an export is opened."""

ConfigID = NewType("ConfigID", int)
"""Registered configuration identifier. Zero means no default is set."""

type PairKey = tuple[int, int]
"""Direction-independent (min, max) key for an unordered entity pair."""
