# src/szoracle/cli.py
"""szoracle Command Line Interface.

Entry point for the szoracle CLI tool.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import typer
from pydantic import ValidationError

from szoracle import __version__
from szoracle.contracts.flags import SzFlagUsageGroup
from szoracle.core.config import OracleSettings, load_settings

__all__ = [
    "app",
]


@dataclass(frozen=True, slots=True)
class _LogOverrides:
    """Logging choices made on the command line; None defers to OracleSettings."""

    level: str | None = None
    json_output: bool | None = None


app = typer.Typer(
    name="szoracle",
    help="szoracle: Test oracle for entity-resolution SDKs.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"szoracle version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from .env file.

    Args:
        env_file: Explicit path to .env file. If None, searches for .env
                 in current directory and parent directories.

    Returns:
        True if .env was found and loaded, False otherwise.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(
                f"Error: .env file not found: {env_file}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
        exists=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """szoracle: Test oracle for entity-resolution SDKs."""
    # Logging must be configured before any subcommand runs; commands that
    # load OracleSettings reconfigure it with these flags as overrides
    from szoracle.core.logging import configure_logging

    ctx.obj = _LogOverrides(level="DEBUG" if verbose else None, json_output=True if json_logs else None)
    configure_logging(json_output=json_logs, level=ctx.obj.level)

    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho(
            "Warning: --env-file ignored because --no-dotenv is set.",
            fg=typer.colors.YELLOW,
            err=True,
        )


@app.command()
def flags(
    group: SzFlagUsageGroup | None = typer.Option(
        None,
        "--group",
        "-g",
        help="Only list single-bit flags usable with this operation family.",
    ),
    output_format: Literal["console", "json"] = typer.Option(
        "console",
        "--format",
        "-f",
        help="Output format: 'console' (human-readable) or 'json' (structured JSON).",
    ),
) -> None:
    """List the flag registry with each symbol's 64-bit value."""
    from szoracle.sdk.flags import REGISTRY

    if group is None:
        constants = REGISTRY.constants()
    else:
        constants = {flag.symbol: flag.value for flag in sorted(REGISTRY.in_group(group), key=lambda f: f.bit)}

    if output_format == "json":
        typer.echo(json.dumps(constants, indent=2))
        return

    width = max((len(symbol) for symbol in constants), default=0)
    for symbol, value in constants.items():
        typer.echo(f"{symbol:<{width}}  {value:#018x}")


@app.command("check-flags")
def check_flags(
    metadata_path: Path = typer.Argument(
        ...,
        help="Engine flag metadata (szflags.json): a list of entries or an object with a 'flags' list.",
    ),
) -> None:
    """Cross-check the flag registry against engine-supplied flag metadata."""
    from szoracle.sdk.flags import check_flag_metadata, parse_flag_metadata

    try:
        with metadata_path.open() as f:
            document = json.load(f)
    except FileNotFoundError:
        typer.echo(f"Error: Metadata file not found: {metadata_path}", err=True)
        raise typer.Exit(1) from None
    except json.JSONDecodeError as e:
        typer.echo(f"JSON syntax error in {metadata_path}: {e}", err=True)
        raise typer.Exit(1) from None

    entries = document.get("flags") if isinstance(document, dict) else document
    if not isinstance(entries, list):
        typer.echo(f"Error: {metadata_path} does not contain a list of flag entries", err=True)
        raise typer.Exit(1)

    try:
        metadata = parse_flag_metadata(entries)
    except (ValidationError, TypeError) as e:
        typer.echo(f"Invalid flag metadata: {e}", err=True)
        raise typer.Exit(1) from None

    mismatches = check_flag_metadata(metadata)
    if not mismatches:
        typer.echo(f"Flag registry matches metadata ({len(metadata)} symbols).")
        return

    typer.echo(f"{len(mismatches)} mismatch(es):", err=True)
    for mismatch in mismatches:
        typer.echo(f"  - {mismatch}", err=True)
    raise typer.Exit(1)


def _load_oracle_settings(config: Path | None, fast_fail: bool) -> OracleSettings:
    try:
        settings = load_settings(config)
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {config}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None

    if fast_fail:
        settings = settings.model_copy(update={"fast_fail": True})
    return settings


@app.command("graph-suite")
def graph_suite(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to oracle settings YAML file.",
    ),
    fast_fail: bool = typer.Option(
        False,
        "--fast-fail",
        help="Terminate the run on the first failed case.",
    ),
) -> None:
    """Run the find-path and find-network scenario suite against the fixture engine."""
    from szoracle.core.logging import configure_logging
    from szoracle.fixtures import GraphTestData, StandardFixtureLoader
    from szoracle.oracle import OracleDriver, network_cases, path_cases
    from szoracle.testing.fixture_engine import FixtureEnvironment

    settings = _load_oracle_settings(config, fast_fail)
    overrides = ctx.obj if isinstance(ctx.obj, _LogOverrides) else _LogOverrides()
    configure_logging(settings, json_output=overrides.json_output, level=overrides.level)

    env = FixtureEnvironment()
    try:
        data = GraphTestData()
        lookup = data.load(StandardFixtureLoader(env), settings.fixture_dir)

        driver = OracleDriver(env.get_engine(), lookup, settings, name="graph-suite")
        report = driver.run_suite(path_cases(lookup), network_cases(lookup))
        counts = driver.finish()
    finally:
        env.destroy()

    typer.echo(f"Complete: {counts}")
    if not report.ok:
        for failure in report.failures:
            mode = "by entity id" if failure.by_entity_id else "by record key"
            typer.echo(f"  FAILED [{failure.case_id}] {failure.description} ({mode}): {failure.error}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
