# src/szoracle/core/logging.py
"""Logging setup for oracle runs.

structlog events and plain stdlib records share one processor chain and one
stdout handler, so a run emits a single stream in either console or JSON
form. Level and format come from OracleSettings; explicit arguments (the
CLI's --verbose / --json-logs) win over the settings.

While a case runs, the driver binds its suite, label and case id with
bound_case(), and every line logged inside the block carries them.
"""

from __future__ import annotations

import logging
import sys
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.stdlib import ProcessorFormatter

from szoracle.contracts.flags import SzFlag, flags_to_string
from szoracle.contracts.records import RecordKey

if TYPE_CHECKING:
    from szoracle.core.config import OracleSettings

# Chatty at DEBUG; clamped to WARNING or the root level, whichever is higher
_NOISY_LOGGERS: tuple[str, ...] = (
    "dynaconf",
    "hypothesis",
)


def _render_oracle_values(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Render record keys and flag sets as their diagnostic strings."""
    for key, value in event_dict.items():
        if isinstance(value, RecordKey):
            event_dict[key] = str(value)
        elif isinstance(value, frozenset) and value and all(isinstance(item, SzFlag) for item in value):
            event_dict[key] = flags_to_string(value)
        elif isinstance(value, tuple) and value and all(isinstance(item, RecordKey) for item in value):
            event_dict[key] = [str(item) for item in value]
    return event_dict


def _drop_formatter_bookkeeping(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    # ProcessorFormatter always sets both keys
    del event_dict["_record"]
    del event_dict["_from_structlog"]
    return event_dict


def _renderer_chain(json_output: bool) -> list[Any]:
    if json_output:
        return [
            _drop_formatter_bookkeeping,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    return [
        _drop_formatter_bookkeeping,
        structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
    ]


def configure_logging(
    settings: OracleSettings | None = None,
    *,
    json_output: bool | None = None,
    level: str | None = None,
) -> None:
    """Route structlog and stdlib logging to stdout.

    Args:
        settings: Run settings supplying log_level and json_logs
        json_output: Overrides settings.json_logs when not None
        level: Overrides settings.log_level when not None
    """
    if json_output is None:
        json_output = settings.json_logs if settings is not None else False
    if level is None:
        level = settings.log_level if settings is not None else "INFO"
    log_level = logging.getLevelNamesMapping()[level.upper()]

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        _render_oracle_values,
    ]

    structlog.configure(
        processors=[*shared_processors, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Tests reconfigure between runs
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ProcessorFormatter(processors=_renderer_chain(json_output), foreign_pre_chain=shared_processors))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(max(log_level, logging.WARNING))


def bound_case(*, suite: str, case: str, case_id: str) -> AbstractContextManager[None]:
    """Attach suite / case / case_id to every event logged inside the block."""
    return structlog.contextvars.bound_contextvars(suite=suite, case=case, case_id=case_id)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
