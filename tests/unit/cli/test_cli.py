# tests/unit/cli/test_cli.py
"""Tests for the szoracle command line."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from szoracle import __version__
from szoracle.cli import app
from szoracle.contracts.flags import to_bits
from szoracle.sdk.flags import REGISTRY

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """The CLI callback replaces root handlers; put them back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def _registry_metadata() -> list[dict[str, object]]:
    entries: list[dict[str, object]] = []
    for symbol, flag in REGISTRY.flags.items():
        entries.append({"symbol": symbol, "value": flag.value, "groups": sorted(str(g) for g in flag.groups)})
    for symbol, members in REGISTRY.aggregates.items():
        entries.append({"symbol": symbol, "value": to_bits(members), "flags": sorted(f.symbol for f in members)})
    return entries


class TestVersion:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"szoracle version {__version__}" in result.output

    def test_no_args_shows_help(self) -> None:
        result = runner.invoke(app, [])
        assert "graph-suite" in result.output


class TestFlagsCommand:
    def test_console_listing(self) -> None:
        result = runner.invoke(app, ["--no-dotenv", "flags"])
        assert result.exit_code == 0
        assert "SZ_WITH_INFO" in result.output
        assert "0x4000000000000000" in result.output

    def test_json_group_listing(self) -> None:
        result = runner.invoke(app, ["--no-dotenv", "flags", "--group", "SZ_FIND_PATH_FLAGS", "--format", "json"])
        assert result.exit_code == 0
        assert '"SZ_FIND_PATH_STRICT_AVOID": 33554432' in result.output
        assert "SZ_FIND_NETWORK_INCLUDE_MATCHING_INFO" not in result.output

    def test_unknown_group(self) -> None:
        result = runner.invoke(app, ["--no-dotenv", "flags", "--group", "SZ_NOPE"])
        assert result.exit_code != 0


class TestCheckFlagsCommand:
    def test_matching_metadata(self, tmp_path: Path) -> None:
        metadata = tmp_path / "szflags.json"
        metadata.write_text(json.dumps({"flags": _registry_metadata()}))
        result = runner.invoke(app, ["--no-dotenv", "check-flags", str(metadata)])
        assert result.exit_code == 0, result.output
        assert "Flag registry matches metadata" in result.output

    def test_mismatch_exits_nonzero(self, tmp_path: Path) -> None:
        entries = [e for e in _registry_metadata() if e["symbol"] != "SZ_WITH_INFO"]
        metadata = tmp_path / "szflags.json"
        metadata.write_text(json.dumps(entries))
        result = runner.invoke(app, ["--no-dotenv", "check-flags", str(metadata)])
        assert result.exit_code == 1
        assert "SZ_WITH_INFO" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["--no-dotenv", "check-flags", str(tmp_path / "absent.json")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_invalid_json(self, tmp_path: Path) -> None:
        metadata = tmp_path / "szflags.json"
        metadata.write_text("{nope")
        result = runner.invoke(app, ["--no-dotenv", "check-flags", str(metadata)])
        assert result.exit_code == 1
        assert "JSON syntax error" in result.output

    def test_not_a_list(self, tmp_path: Path) -> None:
        metadata = tmp_path / "szflags.json"
        metadata.write_text(json.dumps({"flags": 3}))
        result = runner.invoke(app, ["--no-dotenv", "check-flags", str(metadata)])
        assert result.exit_code == 1
        assert "does not contain a list" in result.output

    def test_invalid_entry(self, tmp_path: Path) -> None:
        metadata = tmp_path / "szflags.json"
        metadata.write_text(json.dumps([{"symbol": "SZ_WITH_INFO"}]))
        result = runner.invoke(app, ["--no-dotenv", "check-flags", str(metadata)])
        assert result.exit_code == 1
        assert "Invalid flag metadata" in result.output


class TestGraphSuiteCommand:
    def test_suite_passes_against_fixture_engine(self, tmp_path: Path) -> None:
        config = tmp_path / "oracle.yaml"
        config.write_text(f"fixture_dir: {tmp_path}\n")
        result = runner.invoke(app, ["--no-dotenv", "graph-suite", "--config", str(config)])
        assert result.exit_code == 0, result.output
        assert "Complete: 52 (succeeded) / 0 (failed)" in result.output

    def test_settings_file_switches_to_json_logs(self, tmp_path: Path) -> None:
        config = tmp_path / "oracle.yaml"
        config.write_text(f"fixture_dir: {tmp_path}\njson_logs: true\n")
        result = runner.invoke(app, ["--no-dotenv", "graph-suite", "--config", str(config)])
        assert result.exit_code == 0, result.output

        events = [json.loads(line) for line in result.output.splitlines() if line.startswith("{")]
        complete = [event for event in events if event["event"] == "oracle_complete"]
        assert complete
        assert complete[-1]["suite"] == "graph-suite"
        assert complete[-1]["succeeded"] == 52

    def test_log_level_from_environment(self, tmp_path: Path) -> None:
        config = tmp_path / "oracle.yaml"
        config.write_text(f"fixture_dir: {tmp_path}\n")
        result = runner.invoke(
            app,
            ["--no-dotenv", "graph-suite", "--config", str(config)],
            env={"SZORACLE_LOG_LEVEL": "WARNING"},
        )
        assert result.exit_code == 0, result.output
        assert logging.getLogger().level == logging.WARNING
        assert "oracle_complete" not in result.output

    def test_verbose_flag_wins_over_settings(self, tmp_path: Path) -> None:
        config = tmp_path / "oracle.yaml"
        config.write_text(f"fixture_dir: {tmp_path}\nlog_level: ERROR\n")
        result = runner.invoke(app, ["--no-dotenv", "--verbose", "graph-suite", "--config", str(config)])
        assert result.exit_code == 0, result.output
        assert logging.getLogger().level == logging.DEBUG

    def test_missing_config(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["--no-dotenv", "graph-suite", "--config", str(tmp_path / "absent.yaml")])
        assert result.exit_code == 1
        assert "Settings file not found" in result.output

    def test_invalid_config(self, tmp_path: Path) -> None:
        config = tmp_path / "oracle.yaml"
        config.write_text("progress_interval_seconds: 0\n")
        result = runner.invoke(app, ["--no-dotenv", "graph-suite", "--config", str(config)])
        assert result.exit_code == 1
        assert "progress_interval_seconds" in result.output

    def test_explicit_env_file_must_exist(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["--env-file", str(tmp_path / ".env"), "flags"])
        assert result.exit_code == 1
        assert ".env file not found" in result.output
