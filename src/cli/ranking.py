"""CLI commands for ranking life values."""

import json
import logging
import sys
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import NoReturn

import click
import structlog

from src.catalog.constants import COMPONENT_CLI
from src.catalog.error_hints import format_validation_error
from src.catalog.loader import CatalogLoader, CatalogValidationError
from src.catalog.schemas import CatalogConfig
from src.navigation.keymap import parse_key_spec
from src.observability.logging import (
    bind_session_context,
    clear_session_context,
    configure_logging,
    level_from_name,
)
from src.ranking.engine import RankingEngine
from src.session.session import RankingSession
from src.settings.app import AppSettings, get_settings
from src.status.models import ActionOutcome
from src.store.errors import SnapshotStoreError
from src.store.snapshot import SnapshotRepository
from src.store.store import SqliteKeyValueStore


logger = structlog.get_logger()

FOCUS_PREFIX = "focus:"
DRAG_PREFIX = "drag:"


def _fail(message: str) -> NoReturn:
    """Print a one-line error and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _echo_validation_errors(loader: CatalogLoader) -> None:
    """Print each catalog validation error with its hint."""
    for error in loader.validation_errors:
        formatted = format_validation_error(
            location=error["loc"],
            message=error["msg"],
            error_type=error.get("type", "unknown"),
            include_hint=True,
        )
        click.echo(f"  - {formatted}", err=True)


def _load_catalog(settings: AppSettings) -> CatalogConfig:
    """Load the configured catalog, exiting on failure."""
    loader = CatalogLoader(expected_size=settings.catalog_size)
    try:
        return loader.load(settings.catalog_path)
    except CatalogValidationError as e:
        click.echo(f"Error: catalog {e.file_path} is invalid", err=True)
        _echo_validation_errors(loader)
        sys.exit(1)


@contextmanager
def _open_session(settings: AppSettings) -> Generator[RankingSession]:
    """Open a session over the configured catalog and state database.

    Args:
        settings: Effective settings.

    Yields:
        A session with the stored ranking restored.
    """
    catalog = _load_catalog(settings)
    session_id = str(uuid.uuid4())
    bind_session_context(session_id)

    store = SqliteKeyValueStore(settings.state_path, session_id=session_id)
    try:
        store.connect()
    except SnapshotStoreError as e:
        clear_session_context()
        _fail(str(e))

    try:
        yield RankingSession(
            engine=RankingEngine(catalog),
            repository=SnapshotRepository(store, key=settings.storage_key),
            session_id=session_id,
        )
    finally:
        store.close()
        clear_session_context()


def _report(session: RankingSession, outcome: ActionOutcome) -> None:
    """Print an action outcome, exiting with status 1 on failure."""
    if not outcome.success:
        _fail(outcome.message)
    click.echo(outcome.message)
    if not session.persistence_ok:
        click.echo("Warning: the ranking could not be saved", err=True)


@click.group()
@click.version_option(version="0.1.0")
@click.option(
    "--state",
    "state_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to SQLite state database.",
)
@click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to a catalog YAML file (default: packaged catalog).",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="Use JSON format for logs.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    state_path: Path | None,
    catalog_path: Path | None,
    json_logs: bool | None,
    verbose: bool,
) -> None:
    """Rank life values from most to least important."""
    settings = get_settings()
    overrides: dict[str, object] = {}
    if state_path is not None:
        overrides["state_path"] = state_path
    if catalog_path is not None:
        overrides["catalog_path"] = catalog_path
    if json_logs is not None:
        overrides["log_json"] = json_logs
    if overrides:
        settings = settings.model_copy(update=overrides)

    level = logging.DEBUG if verbose else level_from_name(settings.log_level)
    configure_logging(level=level, json_format=settings.log_json)
    logger.debug(
        "cli_started",
        component=COMPONENT_CLI,
        command=ctx.invoked_subcommand,
        state_path=str(settings.state_path),
        catalog_path=str(settings.catalog_path),
    )
    ctx.obj = settings


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_obj
def show(settings: AppSettings, as_json: bool) -> None:
    """Show the ranking, the unranked pool and progress."""
    with _open_session(settings) as session:
        if as_json:
            output = {
                "ranking": [
                    {"position": value.position, "id": value.id, "name": value.name}
                    for value in session.ranking
                ],
                "unranked": [{"id": value.id, "name": value.name} for value in session.unranked],
                "progress": {
                    "sorted_count": session.progress.sorted_count,
                    "total_count": session.progress.total_count,
                },
                "last_updated": session.state.last_updated.isoformat(),
            }
            click.echo(json.dumps(output, indent=2))
            return

        click.echo(f"Ranking ({session.progress}):")
        if not session.ranking:
            click.echo(f"  {session.last_outcome.message}")
        for value in session.ranking:
            click.echo(f"  {value.position:>2}. {value.name}")
        click.echo("")
        click.echo(f"Unranked ({len(session.unranked)}):")
        for value in session.unranked:
            click.echo(f"  - {value.name}")


@cli.command()
@click.argument("name")
@click.pass_obj
def promote(settings: AppSettings, name: str) -> None:
    """Append the value NAME to the end of the ranking."""
    with _open_session(settings) as session:
        _report(session, session.promote(name))


@cli.command()
@click.argument("name")
@click.pass_obj
def demote(settings: AppSettings, name: str) -> None:
    """Return the value NAME to the unranked pool."""
    with _open_session(settings) as session:
        _report(session, session.demote(name))


@cli.command()
@click.argument("from_position", type=click.IntRange(min=1))
@click.argument("to_position", type=click.IntRange(min=1))
@click.pass_obj
def move(settings: AppSettings, from_position: int, to_position: int) -> None:
    """Move the value at FROM_POSITION to TO_POSITION (1-based)."""
    with _open_session(settings) as session:
        _report(session, session.move(from_position - 1, to_position - 1))


@cli.command()
@click.pass_obj
def reset(settings: AppSettings) -> None:
    """Clear the ranking."""
    with _open_session(settings) as session:
        _report(session, session.reset())


@cli.command("export")
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Target CSV file (default: dated file in the export directory).",
)
@click.pass_obj
def export_command(settings: AppSettings, output_path: Path | None) -> None:
    """Export the ranking to a CSV file."""
    with _open_session(settings) as session:
        _report(session, session.export_csv(path=output_path, directory=settings.export_dir))


@cli.command("import")
@click.argument("csv_path", type=click.Path(path_type=Path))
@click.pass_obj
def import_command(settings: AppSettings, csv_path: Path) -> None:
    """Replace the ranking with one read from CSV_PATH."""
    with _open_session(settings) as session:
        _report(session, session.import_csv(csv_path))


@cli.command()
@click.argument("key_specs", nargs=-1, required=True)
@click.pass_obj
def keys(settings: AppSettings, key_specs: tuple[str, ...]) -> None:
    """Replay input events against the ranking.

    Each KEY_SPEC is a key name with an optional ``shift+`` prefix
    (``ArrowDown``, ``shift+ArrowUp``, ``Delete``), ``focus:N`` to focus the
    Nth ranked value (zero-based), or ``drag:FROM:TO`` for a drag gesture.
    """
    with _open_session(settings) as session:
        for spec in key_specs:
            if spec.startswith(FOCUS_PREFIX):
                session.focus(_parse_index(spec, spec[len(FOCUS_PREFIX) :]))
            elif spec.startswith(DRAG_PREFIX):
                source, _, target = spec[len(DRAG_PREFIX) :].partition(":")
                session.drag_start(_parse_index(spec, source))
                session.drag_over()
                session.drop(_parse_index(spec, target))
                session.drag_end()
            elif not session.handle_key(parse_key_spec(spec)):
                logger.debug("key_ignored", component=COMPONENT_CLI, key=spec)

        click.echo(session.last_outcome.message)
        focused = session.focused_index
        click.echo(f"Focus: {'none' if focused is None else focused}")
        if not session.persistence_ok:
            click.echo("Warning: the ranking could not be saved", err=True)


def _parse_index(spec: str, raw: str) -> int:
    """Parse a zero-based index embedded in a key spec."""
    try:
        return int(raw)
    except ValueError:
        _fail(f"invalid key spec {spec!r}")


@cli.command("validate-catalog")
@click.pass_obj
def validate_catalog(settings: AppSettings) -> None:
    """Validate the catalog file without touching the ranking."""
    loader = CatalogLoader(expected_size=settings.catalog_size)
    try:
        catalog = loader.load(settings.catalog_path)
    except CatalogValidationError:
        click.echo("Catalog validation failed:", err=True)
        if loader.failed_stage is not None:
            click.echo(f"  Failed in stage: {loader.failed_stage.name}", err=True)
        _echo_validation_errors(loader)
        sys.exit(1)

    click.echo("Catalog is valid!")
    click.echo(f"  Values: {len(catalog.values)}")
    click.echo(f"  Checksum: {loader.file_checksum}")


if __name__ == "__main__":
    cli()
