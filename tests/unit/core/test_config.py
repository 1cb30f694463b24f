# tests/unit/core/test_config.py
"""Tests for OracleSettings and load_settings (Dynaconf + Pydantic)."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from szoracle.core.config import OracleSettings, load_settings


class TestOracleSettings:
    def test_defaults(self) -> None:
        settings = OracleSettings()
        assert settings.fast_fail is False
        assert settings.fast_fail_grace_seconds == 5.0
        assert settings.progress_interval_seconds == 30.0
        assert settings.log_level == "INFO"
        assert settings.fixture_dir is None

    def test_frozen(self) -> None:
        settings = OracleSettings()
        with pytest.raises(ValidationError):
            settings.fast_fail = True  # type: ignore[misc]

    def test_progress_interval_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            OracleSettings(progress_interval_seconds=0)

    def test_negative_grace_rejected(self) -> None:
        with pytest.raises(ValidationError):
            OracleSettings(fast_fail_grace_seconds=-1)

    def test_unknown_log_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            OracleSettings(log_level="TRACE")  # type: ignore[arg-type]


class TestLoadSettings:
    def test_no_file_gives_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SZORACLE_FAST_FAIL", raising=False)
        assert load_settings() == OracleSettings()

    def test_yaml_file(self, tmp_path: Path) -> None:
        config = tmp_path / "oracle.yaml"
        config.write_text("fast_fail: true\nprogress_interval_seconds: 2.5\n")
        settings = load_settings(config)
        assert settings.fast_fail is True
        assert settings.progress_interval_seconds == 2.5

    def test_environment_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config = tmp_path / "oracle.yaml"
        config.write_text("fast_fail: false\n")
        monkeypatch.setenv("SZORACLE_FAST_FAIL", "true")
        assert load_settings(config).fast_fail is True

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "missing.yaml")

    def test_invalid_value_raises_validation_error(self, tmp_path: Path) -> None:
        config = tmp_path / "oracle.yaml"
        config.write_text("progress_interval_seconds: -3\n")
        with pytest.raises(ValidationError):
            load_settings(config)
