"""Command line interface entry point."""

from __future__ import annotations

import logging
import signal
import sys
import threading
from contextlib import closing
from pathlib import Path

import click

from schema_type_sync.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from schema_type_sync.definition_building import build_all_artifacts, render_artifacts_json
from schema_type_sync.schema_management import SchemaParseError, parse_schema
from schema_type_sync.sync_service import (
    SyncRunError,
    SyncRunRequest,
    create_sync_service,
    execute_sync_run,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="schema-type-sync")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Logging verbosity",
)
def cli(log_level: str) -> None:
    """Schema-driven type definition synchronizer."""
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(log_level.upper())


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="translate")
@click.option(
    "--schema",
    "schema_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to a JSON Schema file",
)
@click.option(
    "--name",
    "schema_name",
    required=False,
    help="Type name used when the schema has no title (defaults to the file stem)",
)
def translate(schema_path: str, schema_name: str | None) -> None:
    """Print the type definitions generated for one schema file."""
    path = Path(schema_path)
    try:
        raw_text = path.read_text(encoding="utf-8")
        schema = parse_schema(schema_name or path.stem, raw_text)
    except (OSError, SchemaParseError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(render_artifacts_json(build_all_artifacts(schema)))


@cli.command(name="sync")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON configuration file",
)
@click.option(
    "--report",
    "report_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional path of a sync report workbook to write",
)
def sync(config_path: str, report_path: str | None) -> None:
    """Apply every cached schema to the type registry once."""
    try:
        outcome = execute_sync_run(
            SyncRunRequest(config_path=config_path, report_path=report_path)
        )
    except SyncRunError as exc:
        raise CliError(str(exc)) from exc
    click.echo(f"synced {outcome.synced}/{outcome.total}")
    if outcome.report_path is not None:
        click.echo(str(outcome.report_path))


@cli.command(name="serve")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON configuration file",
)
def serve(config_path: str) -> None:
    """Run the schema feed listener and periodic reconciliation until interrupted."""
    try:
        configuration = load_configuration(config_path)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc

    service, registry = create_sync_service(configuration)
    with closing(registry):
        service.startup()
        try:
            _wait_for_shutdown()
        finally:
            service.shutdown()
    click.echo(
        f"stopped: {service.cached_schema_count} schemas cached, "
        f"{service.registered_type_count} types registered"
    )


def _wait_for_shutdown() -> None:
    stop_requested = threading.Event()

    def _request_stop(_signum, _frame) -> None:
        stop_requested.set()

    previous = signal.signal(signal.SIGTERM, _request_stop)
    try:
        while not stop_requested.wait(1.0):
            pass
    except KeyboardInterrupt:
        pass
    finally:
        signal.signal(signal.SIGTERM, previous)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
