# src/szoracle/core/config.py
"""Oracle run configuration.

Settings are validated by a frozen Pydantic model and loaded through
Dynaconf, which layers (highest precedence first):
1. Environment variables (SZORACLE_*)
2. An optional YAML settings file
3. Defaults from the Pydantic schema
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

# Dynaconf bookkeeping keys that must not reach the Pydantic model
_INTERNAL_KEYS = frozenset({"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"})


class OracleSettings(BaseModel):
    """Top-level oracle configuration. Frozen after construction."""

    model_config = {"frozen": True}

    fast_fail: bool = Field(
        default=False,
        description="Terminate the whole run on the first failed case",
    )
    fast_fail_grace_seconds: float = Field(
        default=5.0,
        ge=0,
        description="Delay before terminating on fast-fail, so logs can flush",
    )
    progress_interval_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Minimum time between progress log lines",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level",
    )
    json_logs: bool = Field(default=False, description="Emit structured JSON logs")
    fixture_dir: Path | None = Field(
        default=None,
        description="Directory for generated fixture files (temporary directory when unset)",
    )


def load_settings(config_path: Path | None = None) -> OracleSettings:
    """Load settings from an optional YAML file with environment overrides.

    Environment variable format: SZORACLE_FAST_FAIL=true.

    Args:
        config_path: Path to YAML configuration file, or None for env/defaults only

    Returns:
        Validated OracleSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config_path is given but doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="SZORACLE",
        settings_files=[str(config_path)] if config_path is not None else [],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; Pydantic fields are lowercase
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in _INTERNAL_KEYS}
    return OracleSettings(**raw_config)
