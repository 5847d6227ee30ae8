"""CLI interface for the build event logger."""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Annotated

import structlog
import typer

from buildlog import __version__
from buildlog.adapter import JsonFileLogger
from buildlog.config import LoggerSettings
from buildlog.exceptions import ConfigError, IOFailure
from buildlog.filters import FilterPolicy
from buildlog.records import RecordFormat
from buildlog.source import EventBus, read_events

# Configure structlog for CLI output
structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
)

logger = structlog.get_logger()

app = typer.Typer(
    name="buildlog",
    help="Record build event streams as JSON",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"buildlog version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """buildlog - JSON file logger for build events."""
    pass


@app.command()
def replay(
    events: Annotated[
        Path,
        typer.Argument(
            help="JSONL file with one build event per line",
            exists=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
    parameters: Annotated[
        str,
        typer.Option(
            "--logger",
            "-l",
            help="Logger parameter string (the JSON log file path)",
        ),
    ] = "",
    verbosity: Annotated[
        str | None,
        typer.Option(
            "--verbosity",
            "-v",
            help="quiet, minimal, normal or detailed (q/m/n/d)",
        ),
    ] = None,
    policy: Annotated[
        FilterPolicy | None,
        typer.Option(
            "--policy",
            "-p",
            help="Admission policy (verbosity, all, lifecycle)",
        ),
    ] = None,
    record_format: Annotated[
        RecordFormat | None,
        typer.Option(
            "--format",
            "-f",
            help="Element shape (keyed, bundle)",
        ),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a YAML settings file",
            exists=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
) -> None:
    """Replay a recorded event stream through the JSON file logger."""
    log = logger.bind(command="replay")

    try:
        settings = LoggerSettings.load(config) if config else LoggerSettings()
        overrides: dict[str, object] = {}
        if verbosity is not None:
            overrides["verbosity"] = verbosity
        if policy is not None:
            overrides["policy"] = policy
        if record_format is not None:
            overrides["record_format"] = record_format
        if overrides:
            settings = LoggerSettings.model_validate(
                {**settings.model_dump(), **overrides}
            )
    except (ConfigError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    bus = EventBus()
    build_logger = JsonFileLogger(parameters, settings=settings)
    try:
        build_logger.initialize(bus)
        for event in read_events(events):
            bus.emit(event)
    except (ConfigError, IOFailure) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    finally:
        build_logger.shutdown()

    log.info(
        "Replay finished",
        received=build_logger.events_received,
        admitted=build_logger.events_admitted,
        dropped=build_logger.events_dropped,
    )
    typer.echo(f"Log: {build_logger.log_file}")
    typer.echo(
        f"Events: {build_logger.events_received} received, "
        f"{build_logger.events_admitted} written, "
        f"{build_logger.events_dropped} dropped"
    )


def _element_kind(element: object) -> str:
    if isinstance(element, dict):
        if "EventType" in element:
            return str(element["EventType"])
        if len(element) == 1:
            return str(next(iter(element)))
    return "unknown"


@app.command()
def inspect(
    log_file: Annotated[
        Path,
        typer.Argument(
            help="JSON log written by the logger",
            exists=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
) -> None:
    """Count the events in a JSON log by kind."""
    try:
        data = json.loads(log_file.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        typer.echo(f"Error: {log_file} is not valid JSON: {e}", err=True)
        raise typer.Exit(1) from e

    if not isinstance(data, list):
        typer.echo(f"Error: {log_file} does not hold a JSON array", err=True)
        raise typer.Exit(1)

    counts = Counter(_element_kind(element) for element in data)
    typer.echo(f"Total: {len(data)}")
    for kind, count in sorted(counts.items()):
        typer.echo(f"  {kind}: {count}")


if __name__ == "__main__":
    app()
