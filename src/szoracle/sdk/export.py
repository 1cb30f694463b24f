# src/szoracle/sdk/export.py
"""Scoped acquisition of engine export handles.

An export handle must be fetched from until exhausted and then closed
exactly once. export_report() ties the handle's lifetime to a ``with``
block so it is released on every exit path, including failures inside
the block. Closing a handle twice is an error at the engine level
(SzBadInputError), so the scope never does it.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from szoracle.contracts.flags import FlagSet
from szoracle.core.logging import get_logger
from szoracle.sdk.protocols import SzEngine

logger = get_logger(__name__)


def iter_export(engine: SzEngine, handle: int) -> Iterator[str]:
    """Yield rows until the engine reports exhaustion (None or empty text)."""
    while True:
        row = engine.fetch_next(handle)
        if not row:
            return
        yield row


@contextmanager
def export_report(engine: SzEngine, flags: FlagSet = None) -> Iterator[Iterator[str]]:
    """Open a JSON entity export and yield an iterator over its rows.

    Example:
        with export_report(engine, SZ_EXPORT_DEFAULT_FLAGS) as rows:
            entities = [json.loads(row) for row in rows]
    """
    handle = engine.export_json_entity_report(flags)
    logger.debug("export_opened", handle=handle)
    try:
        yield iter_export(engine, handle)
    finally:
        engine.close_export_report(handle)
        logger.debug("export_closed", handle=handle)
