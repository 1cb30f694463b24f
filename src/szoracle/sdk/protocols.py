# src/szoracle/sdk/protocols.py
"""Protocols describing the SDK surface the oracle drives.

These are structural types used for type checking; any engine binding
(native or in-memory) that provides these methods can be exercised by
the oracle. Every operation returns the engine's JSON text or raises an
SzError subclass from szoracle.sdk.errors.

Surfaces:
- SzEngine: record ingestion, entity/path/network retrieval, analysis,
  search, export, redo processing
- SzConfig / SzConfigManager: data-source registration and default
  configuration management
- SzEnvironment: owns the engine and config manager; may be destroyed
"""

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from szoracle.contracts.flags import FlagSet
from szoracle.contracts.records import RecordKey
from szoracle.contracts.types import ConfigID, ExportHandle


@runtime_checkable
class SzEngine(Protocol):
    """Entity-resolution engine operations.

    ``flags=None`` means "not specified" and is transmitted as zero.
    """

    # --- records -----------------------------------------------------------

    def add_record(self, key: RecordKey, definition: str, flags: FlagSet = None) -> str: ...

    def delete_record(self, key: RecordKey, flags: FlagSet = None) -> str: ...

    def get_record(self, key: RecordKey, flags: FlagSet = None) -> str: ...

    # --- entities ----------------------------------------------------------

    def get_entity_by_record(self, key: RecordKey, flags: FlagSet = None) -> str: ...

    def get_entity_by_id(self, entity_id: int, flags: FlagSet = None) -> str: ...

    # --- graph -------------------------------------------------------------

    def find_path_by_record(
        self,
        start: RecordKey,
        end: RecordKey,
        max_degrees: int,
        avoid: Iterable[RecordKey] | None = None,
        required_sources: Iterable[str] | None = None,
        flags: FlagSet = None,
    ) -> str: ...

    def find_path_by_entity(
        self,
        start: int,
        end: int,
        max_degrees: int,
        avoid: Iterable[int] | None = None,
        required_sources: Iterable[str] | None = None,
        flags: FlagSet = None,
    ) -> str: ...

    def find_network_by_record(
        self,
        keys: Iterable[RecordKey],
        max_degrees: int,
        build_out_degrees: int,
        build_out_max_entities: int,
        flags: FlagSet = None,
    ) -> str: ...

    def find_network_by_entity(
        self,
        entity_ids: Iterable[int],
        max_degrees: int,
        build_out_degrees: int,
        build_out_max_entities: int,
        flags: FlagSet = None,
    ) -> str: ...

    # --- analysis ----------------------------------------------------------

    def why_entities(self, entity_id_1: int, entity_id_2: int, flags: FlagSet = None) -> str: ...

    def why_records(self, key_1: RecordKey, key_2: RecordKey, flags: FlagSet = None) -> str: ...

    def how_entity(self, entity_id: int, flags: FlagSet = None) -> str: ...

    def search_by_attributes(
        self,
        attributes: str,
        flags: FlagSet = None,
        search_profile: str | None = None,
    ) -> str: ...

    # --- export ------------------------------------------------------------

    def export_json_entity_report(self, flags: FlagSet = None) -> ExportHandle: ...

    def fetch_next(self, handle: ExportHandle) -> str | None: ...

    def close_export_report(self, handle: ExportHandle) -> None: ...

    # --- redo --------------------------------------------------------------

    def count_redo_records(self) -> int: ...

    def get_redo_record(self) -> str | None: ...

    def process_redo_record(self, redo_record: str, flags: FlagSet = None) -> str: ...


@runtime_checkable
class SzConfig(Protocol):
    """A mutable, unregistered configuration document."""

    def register_data_source(self, data_source: str) -> str: ...

    def get_data_sources(self) -> list[str]: ...

    def export(self) -> str: ...


@runtime_checkable
class SzConfigManager(Protocol):
    """Registers configurations and manages the default configuration id."""

    def create_config(self, config_id: ConfigID | None = None) -> SzConfig: ...

    def register_config(self, definition: str, comment: str | None = None) -> ConfigID: ...

    def get_default_config_id(self) -> ConfigID: ...

    def set_default_config_id(self, config_id: ConfigID) -> None: ...

    def replace_default_config_id(self, current_id: ConfigID, new_id: ConfigID) -> None: ...


@runtime_checkable
class SzEnvironment(Protocol):
    """Owns one engine and one config manager for a session."""

    def get_engine(self) -> SzEngine: ...

    def get_config_manager(self) -> SzConfigManager: ...

    def reinitialize(self, config_id: ConfigID) -> None: ...

    def destroy(self) -> None: ...

    def is_destroyed(self) -> bool: ...
