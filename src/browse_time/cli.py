"""Command-line interface for browse-time."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

import typer

from .config import EngineSettings
from .errors import InvalidArgument, StoreError
from .filters import resolve_window
from .models import Heartbeat
from .paths import get_store_path
from .store import HeartbeatStore

app = typer.Typer(help="Browsing time statistics from recorded heartbeats.")

logger = logging.getLogger(__name__)

STORE_OPTION = typer.Option(
    None,
    "--store",
    path_type=Path,
    help="Location of the heartbeat JSON document.",
)
WINDOW_OPTION = typer.Option(
    "today",
    "--window",
    "-w",
    help="Which heartbeats to include: today, week or all.",
)
TIMEOUT_OPTION = typer.Option(
    15.0,
    "--timeout",
    min=0.0,
    help="Largest gap in minutes between heartbeats of the same session.",
)


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _settings(
    timeout_minutes: float,
    interaction_minutes: Optional[float] = None,
    top_limit: Optional[int] = None,
) -> EngineSettings:
    try:
        return EngineSettings.from_minutes(
            timeout_minutes, interaction_minutes=interaction_minutes, top_limit=top_limit
        )
    except InvalidArgument as exc:
        raise typer.BadParameter(str(exc)) from exc


def _load(store_path: Optional[Path], window: str) -> list[Heartbeat]:
    try:
        window_filter = resolve_window(window)
    except InvalidArgument as exc:
        raise typer.BadParameter(str(exc), param_hint="--window") from exc
    store = HeartbeatStore(store_path or get_store_path())
    try:
        return store.get_heartbeats(window_filter)
    except StoreError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def top(
    store_path: Optional[Path] = STORE_OPTION,
    window: str = WINDOW_OPTION,
    timeout_minutes: float = TIMEOUT_OPTION,
    limit: int = typer.Option(10, "--limit", "-n", min=0, help="Number of origins to show."),
) -> None:
    """Print the origins with the most active time."""
    from .reporting import SummaryPrinter

    settings = _settings(timeout_minutes, top_limit=limit)
    heartbeats = _load(store_path, window)
    SummaryPrinter(heartbeats, settings.timeout_ms).print_top("origin", settings.top_limit)


@app.command("aggregate")
def aggregate_command(
    group_by: str = typer.Argument("origin", help="Heartbeat field to group by."),
    store_path: Optional[Path] = STORE_OPTION,
    window: str = WINDOW_OPTION,
    timeout_minutes: float = TIMEOUT_OPTION,
    limit: int = typer.Option(10, "--limit", "-n", min=0, help="Number of groups to show."),
) -> None:
    """Print total active time grouped by any heartbeat field."""
    from .reporting import SummaryPrinter

    settings = _settings(timeout_minutes, top_limit=limit)
    heartbeats = _load(store_path, window)
    printer = SummaryPrinter(heartbeats, settings.timeout_ms)
    try:
        printer.print_top(group_by, settings.top_limit, title=f"Top by {group_by}")
    except InvalidArgument as exc:
        raise typer.BadParameter(str(exc), param_hint="GROUP_BY") from exc


@app.command()
def durations(
    origin: Optional[str] = typer.Option(
        None, "--origin", help="Only rebuild sessions for this origin."
    ),
    store_path: Optional[Path] = STORE_OPTION,
    window: str = WINDOW_OPTION,
    timeout_minutes: float = TIMEOUT_OPTION,
) -> None:
    """Print the reconstructed activity spans."""
    from .reporting import SummaryPrinter

    settings = _settings(timeout_minutes)
    heartbeats = _load(store_path, window)
    if origin is not None:
        heartbeats = [heartbeat for heartbeat in heartbeats if heartbeat.origin == origin]
    SummaryPrinter(heartbeats, settings.timeout_ms).print_durations()


@app.command()
def record(
    url: str = typer.Argument(..., help="Address of the page the event happened on."),
    event: str = typer.Option("load", "--event", "-e", help="Event that triggered the heartbeat."),
    title: str = typer.Option("", "--title", help="Document title of the page."),
    store_path: Optional[Path] = STORE_OPTION,
    interaction_minutes: float = typer.Option(
        2.0,
        "--interaction-interval",
        min=0.0,
        help="Minutes between recorded interaction events on an unchanged page.",
    ),
) -> None:
    """Append a heartbeat unless an interaction was recorded too recently."""
    settings = _settings(15.0, interaction_minutes=interaction_minutes)
    store = HeartbeatStore(store_path or get_store_path())
    try:
        heartbeat = store.record_event(
            event,
            url,
            title,
            int(time.time() * 1000),
            min_interval_ms=settings.interaction_interval_ms,
        )
    except InvalidArgument as exc:
        raise typer.BadParameter(str(exc), param_hint="URL") from exc
    except StoreError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    if heartbeat is None:
        typer.echo("Skipped: interaction recorded recently on this page.")
        return
    logger.info("Recorded %s heartbeat for %s%s", heartbeat.type, heartbeat.origin, heartbeat.path)
    typer.echo(f"Recorded {heartbeat.type} at {heartbeat.origin}{heartbeat.path}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the API."),
    port: int = typer.Option(
        8766, "--port", min=1, max=65535, help="TCP port for the API."
    ),
    store_path: Optional[Path] = STORE_OPTION,
    timeout_minutes: float = TIMEOUT_OPTION,
) -> None:
    """Serve the statistics API."""
    from .server_runner import run_api

    run_api(
        host=host,
        port=port,
        store_path=store_path or get_store_path(),
        settings=_settings(timeout_minutes),
    )
