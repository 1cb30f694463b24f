# src/szoracle/fixtures/loader.py
"""Fixture loading: register data sources, ingest record files, snapshot entities.

The loader is the only component that mutates the engine's repository.
After a load returns, every pending redo record has been processed so the
entity snapshot taken by get_entity_lookup() reflects a converged state.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, runtime_checkable

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from szoracle.contracts.errors import FixtureError
from szoracle.contracts.flags import FlagSet
from szoracle.contracts.records import RecordKey
from szoracle.contracts.types import ConfigID
from szoracle.core.json_fields import parse_json_object, require_int, require_object
from szoracle.core.logging import get_logger
from szoracle.core.lookup import RecordEntityLookup
from szoracle.fixtures.files import read_records
from szoracle.sdk.errors import SzReplaceConflictError
from szoracle.sdk.flags import SZ_NO_FLAGS
from szoracle.sdk.protocols import SzEngine, SzEnvironment

logger = get_logger(__name__)


@runtime_checkable
class FixtureLoader(Protocol):
    """Loads fixture data into a repository and reports how it resolved."""

    def configure_data_sources(self, *data_sources: str) -> None:
        """Ensure every data source is registered in the default configuration."""
        ...

    def load_records(
        self,
        data_source: str | None,
        path: Path,
        encoding: str | None = None,
    ) -> dict[RecordKey, str]:
        """Add every record in the file; return key -> record JSON in file order."""
        ...

    def load_and_get_entity(
        self,
        data_source: str,
        record_id: str,
        definition: str,
        flags: FlagSet = None,
    ) -> str:
        """Add one record and return the entity JSON it resolved to."""
        ...

    def get_entity_lookup(self, keys: Iterable[RecordKey]) -> RecordEntityLookup:
        """Snapshot the entity each record currently belongs to."""
        ...


def process_redos(engine: SzEngine) -> int:
    """Drain the redo queue; returns the number of redo records processed."""
    processed = 0
    while redo := engine.get_redo_record():
        engine.process_redo_record(redo)
        processed += 1
    return processed


class StandardFixtureLoader:
    """FixtureLoader over an SzEnvironment.

    Example:
        loader = StandardFixtureLoader(env)
        loader.configure_data_sources("PASSENGERS", "EMPLOYEES")
        records = loader.load_records("PASSENGERS", Path("passengers.csv"))
        lookup = loader.get_entity_lookup(records)
    """

    def __init__(
        self,
        env: SzEnvironment,
        *,
        max_config_attempts: int = 5,
        conflict_delay_seconds: float = 0.05,
    ) -> None:
        """Initialize the loader.

        Args:
            env: Environment supplying the engine and config manager
            max_config_attempts: Total attempts to swap the default
                configuration before a replace conflict is re-raised
            conflict_delay_seconds: Initial backoff between attempts
        """
        if max_config_attempts < 1:
            raise ValueError("max_config_attempts must be >= 1")
        self._env = env
        self._max_config_attempts = max_config_attempts
        self._conflict_delay_seconds = conflict_delay_seconds

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def configure_data_sources(self, *data_sources: str) -> None:
        """Register data sources, replacing the default configuration if needed.

        Another writer may swap the default configuration between our read
        and our replace; that surfaces as SzReplaceConflictError and the
        whole read-modify-register cycle is retried.

        Raises:
            ValueError: If no data source codes are given.
            SzReplaceConflictError: If every attempt conflicted.
        """
        if not data_sources:
            raise ValueError("at least one data source code is required")

        for attempt in Retrying(
            stop=stop_after_attempt(self._max_config_attempts),
            wait=wait_exponential_jitter(
                initial=self._conflict_delay_seconds,
                max=max(self._conflict_delay_seconds, 1.0),
                jitter=self._conflict_delay_seconds,
            ),
            retry=retry_if_exception_type(SzReplaceConflictError),
            reraise=True,
        ):
            with attempt:
                attempt_number = attempt.retry_state.attempt_number
                if attempt_number > 1:
                    logger.info("config_replace_retry", attempt=attempt_number)
                self._configure_once(data_sources)

    def _configure_once(self, data_sources: tuple[str, ...]) -> None:
        config_manager = self._env.get_config_manager()
        current_id = config_manager.get_default_config_id()
        config = config_manager.create_config(None if current_id == 0 else current_id)

        for code in data_sources:
            config.register_data_source(code)

        new_id = config_manager.register_config(config.export(), f"Data sources: {', '.join(data_sources)}")
        if new_id == current_id:
            # data sources were already registered
            logger.debug("config_unchanged", config_id=current_id, data_sources=list(data_sources))
            return

        if current_id == 0:
            config_manager.set_default_config_id(new_id)
        else:
            config_manager.replace_default_config_id(current_id, new_id)

        self._reinitialize(new_id)
        logger.info(
            "config_registered",
            config_id=new_id,
            previous_config_id=current_id,
            data_sources=list(data_sources),
        )

    def _reinitialize(self, config_id: ConfigID) -> None:
        try:
            self._env.reinitialize(config_id)
        except NotImplementedError:
            # Remote environments pick up the new default on their own
            logger.debug("reinitialize_unsupported", config_id=config_id)

    # -------------------------------------------------------------------------
    # Records
    # -------------------------------------------------------------------------

    def load_records(
        self,
        data_source: str | None,
        path: Path,
        encoding: str | None = None,
    ) -> dict[RecordKey, str]:
        """Add every record in ``path`` and drain the redo queue.

        Raises:
            FixtureError: If a record lacks DATA_SOURCE or RECORD_ID.
        """
        engine = self._env.get_engine()
        loaded: dict[RecordKey, str] = {}

        for record in read_records(path, data_source, encoding):
            definition = json.dumps(record)
            record_source = record.get("DATA_SOURCE")
            record_id = record.get("RECORD_ID")
            if not record_source or not record_id:
                raise FixtureError(
                    f"Missing required record fields: data_source={record_source!r}, "
                    f"record_id={record_id!r}, definition={definition}"
                )
            key = RecordKey(str(record_source), str(record_id))
            engine.add_record(key, definition)
            loaded[key] = definition

        redo_count = process_redos(engine)
        logger.info("records_loaded", path=str(path), count=len(loaded), redos=redo_count)
        return loaded

    def load_and_get_entity(
        self,
        data_source: str,
        record_id: str,
        definition: str,
        flags: FlagSet = None,
    ) -> str:
        engine = self._env.get_engine()
        key = RecordKey(data_source, record_id)
        engine.add_record(key, definition)
        process_redos(engine)
        return engine.get_entity_by_record(key, flags)

    def get_entity_lookup(self, keys: Iterable[RecordKey]) -> RecordEntityLookup:
        engine = self._env.get_engine()
        mapping: dict[RecordKey, int] = {}
        for key in keys:
            entity = parse_json_object(engine.get_entity_by_record(key, SZ_NO_FLAGS), what="get-entity")
            resolved = require_object(entity, "RESOLVED_ENTITY", description=str(key))
            mapping[key] = require_int(resolved, "ENTITY_ID", description=str(key))
        lookup = RecordEntityLookup(mapping)
        logger.debug("entity_lookup_built", lookup=repr(lookup))
        return lookup
