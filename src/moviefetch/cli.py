"""
MovieFetch Typer CLI Application

Command line front end for the search orchestrator. Results are printed as
Rich tables once the paging loop has settled.
"""

from __future__ import annotations

import threading
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from moviefetch import __version__
from moviefetch.config import Settings, load_settings
from moviefetch.services.search_orchestrator import SearchOrchestrator
from moviefetch.shared.constants import CLIDefaults, CLIHelp
from moviefetch.shared.errors import MovieFetchError
from moviefetch.shared.logging import setup_structured_logger
from moviefetch.shared.models import DetailRecord, Summary

console = Console()


class ConsoleNotifier:
    """SearchNotifier that prints errors and records outcomes for the CLI."""

    def __init__(self, output: Console) -> None:
        self.output = output
        self.errors: list[str] = []
        self.no_results_seen = False
        self.poster_count = 0
        self.detail: DetailRecord | None = None
        self._lock = threading.Lock()
        self._detail_done = threading.Event()

    def results_updated(self) -> None:
        pass

    def no_results(self) -> None:
        self.no_results_seen = True

    def poster_available(self, external_id: str, data: bytes) -> None:
        with self._lock:
            self.poster_count += 1

    def detail_available(self, external_id: str, record: DetailRecord) -> None:
        self.detail = record
        self._detail_done.set()

    def detail_unavailable(self, external_id: str) -> None:
        self._detail_done.set()

    def error(self, message: str) -> None:
        with self._lock:
            self.errors.append(message)
        self.output.print(f"[bold red]{message}[/bold red]")

    def error_dismissed(self) -> None:
        pass

    def wait_for_detail(self, timeout: float | None = None) -> bool:
        return self._detail_done.wait(timeout)


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=__version__))
        raise typer.Exit


app = typer.Typer(
    name=CLIDefaults.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help=CLIHelp.LOG_LEVEL_HELP,
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help=CLIHelp.CONFIG_HELP,
        dir_okay=False,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Load settings and configure logging for every command."""
    try:
        settings = load_settings(config)
    except MovieFetchError as e:
        console.print(f"[bold red]{e.message}[/bold red]")
        raise typer.Exit(1) from e

    level = log_level or settings.logging.level
    try:
        setup_structured_logger(level=level, log_file=settings.logging.file)
    except AttributeError as e:
        console.print(f"[bold red]Unknown log level: {level}[/bold red]")
        raise typer.Exit(1) from e

    ctx.obj = settings


@app.command("search")
def search_command(
    ctx: typer.Context,
    title: str = typer.Argument(..., help=CLIHelp.TITLE_ARG_HELP),
    wait: float | None = typer.Option(
        None,
        "--wait",
        min=0,
        help=CLIHelp.SEARCH_WAIT_HELP,
    ),
) -> None:
    """
    Search movies by title and list the results.

    Pages are fetched until the service reports no more results, the page
    limit is reached or the wait time runs out.

    Examples:
        moviefetch search "the dark knight"

        moviefetch search batman --wait 30
    """
    settings: Settings = ctx.obj
    if wait is None:
        wait = settings.paging.total_backoff() + CLIDefaults.SEARCH_WAIT_MARGIN

    notifier = ConsoleNotifier(console)
    orchestrator = SearchOrchestrator(settings, notifier)

    try:
        orchestrator.start_search(title)
        if not orchestrator.wait_until_settled(wait):
            console.print("[yellow]Stopped waiting for more results.[/yellow]")
        results = [orchestrator.result_at(index) for index in range(orchestrator.result_count())]
    finally:
        orchestrator.shutdown()

    if notifier.errors:
        raise typer.Exit(1)

    movies = [movie for movie in results if movie is not None]
    if not movies:
        console.print("No movies found.")
        return

    console.print(_results_table(title, movies))


@app.command("detail")
def detail_command(
    ctx: typer.Context,
    external_id: str = typer.Argument(..., help=CLIHelp.EXTERNAL_ID_ARG_HELP),
    wait: float = typer.Option(
        CLIDefaults.DETAIL_WAIT,
        "--wait",
        min=0,
        help=CLIHelp.WAIT_HELP,
    ),
) -> None:
    """Show full details for one movie by its IMDb id."""
    settings: Settings = ctx.obj
    notifier = ConsoleNotifier(console)
    orchestrator = SearchOrchestrator(settings, notifier)

    try:
        record = orchestrator.detail_for(external_id)
        if record is None and notifier.wait_for_detail(wait):
            record = notifier.detail
    finally:
        orchestrator.shutdown()

    if record is None:
        console.print(f"[bold red]Details for {external_id} are unavailable.[/bold red]")
        raise typer.Exit(1)

    console.print(_detail_table(external_id, record))


def _results_table(title: str, movies: list[Summary]) -> Table:
    table = Table(title=f"Results for {title!r} ({len(movies)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Year")
    table.add_column("Type")
    table.add_column("IMDb id", style="cyan")

    for index, movie in enumerate(movies, start=1):
        table.add_row(
            str(index),
            movie.title,
            movie.year or "",
            movie.type or "",
            movie.external_id or "",
        )
    return table


def _detail_table(external_id: str, record: DetailRecord) -> Table:
    table = Table(title=f"{record.title} ({external_id})", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    fields = record.model_dump(exclude={"title"})
    for name, value in fields.items():
        if value is not None:
            table.add_row(name.replace("_", " ").title(), value)
    return table


if __name__ == "__main__":
    app()
