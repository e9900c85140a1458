"""Command-line interface for dailybread.

Maintenance and job entry point: cache cleanup, offline downloads and quick
lookups. Built with Typer for commands and Rich for output.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table

from .api import BibleAPIClient, BibleAPIError, NetworkMonitor, StaticNetwork
from .bible import KJV_BIBLE_ID, BibleLibrary
from .config import get_config
from .db import KeyValueStore, get_db
from .verses import VerseRecommender

T = TypeVar("T")

app = typer.Typer(
    name="dailybread",
    help="Offline-first Bible content cache and maintenance jobs.",
    no_args_is_help=True,
)

console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def build_library(offline: bool = False) -> BibleLibrary:
    """Wire a library to the configured database and API."""
    config = get_config()
    network = StaticNetwork(online=False) if offline else NetworkMonitor()
    client = BibleAPIClient.from_config(config, network=network)
    store = KeyValueStore(get_db(str(config.db_path)))
    return BibleLibrary(client, store, config)


def run_with_library(
    job: Callable[[BibleLibrary], Awaitable[T]],
    offline: bool = False,
) -> T:
    """Run an async job against a fresh library, then flush and close it."""

    async def _run() -> T:
        library = build_library(offline)
        try:
            return await job(library)
        finally:
            await library.close()
            await library.client.close()

    return asyncio.run(_run())


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Offline-first Bible content cache and maintenance jobs."""
    configure_logging(verbose)


# ============================================================================
# Maintenance Commands
# ============================================================================


@app.command()
def cleanup() -> None:
    """Purge expired passages and stale offline data."""

    async def _job(library: BibleLibrary):
        return library.clear_old_cache()

    result = run_with_library(_job, offline=True)

    table = Table(title="Cache Cleanup", show_header=True, header_style="bold magenta")
    table.add_column("Data", style="cyan")
    table.add_column("Removed", justify="right")
    table.add_row("Cached passages", str(result.passages_removed))
    table.add_row("Offline books", str(result.books_removed))
    table.add_row("Offline chapters", str(result.chapters_removed))
    table.add_row("Offline passages", str(result.snapshots_removed))
    table.add_row("Recent chapters", str(result.recent_trimmed))
    console.print(table)
    print_success(f"Removed {result.total} entries")


@app.command()
def stats() -> None:
    """Show offline storage and reading statistics."""

    async def _job(library: BibleLibrary):
        return library.offline_stats(), library.overall_reading_progress()

    offline, progress = run_with_library(_job, offline=True)

    table = Table(title="Offline Storage", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Books", str(offline.total_books))
    table.add_row("Chapters", str(offline.total_chapters))
    table.add_row("Cached passages", str(offline.total_passages))
    table.add_row("Storage size", f"{offline.storage_size / 1024:.1f} KB")
    table.add_row(
        "Reading progress",
        f"{progress.completed}/{progress.total} chapters ({progress.percentage}%)",
    )
    console.print(table)


@app.command()
def download(
    book: str = typer.Argument(..., help="Book ID, e.g. JHN"),
    bible: str = typer.Option(KJV_BIBLE_ID, "--bible", "-b", help="Bible translation ID"),
) -> None:
    """Download every chapter of a book for offline reading."""
    if not get_config().has_bible_api_config():
        print_warning("BIBLE_API_KEY is not set; downloads will likely fail")

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task(f"Downloading {book.upper()}", total=1.0)

        async def _job(library: BibleLibrary):
            return await library.download_book_for_offline(
                book,
                bible,
                on_progress=lambda fraction: progress.update(task, completed=fraction),
            )

        try:
            result = run_with_library(_job)
        except ValueError as e:
            print_error(str(e))
            raise typer.Exit(1)

    if result.complete:
        print_success(f"Downloaded {result.downloaded} chapters of {book.upper()}")
    else:
        print_warning(f"Downloaded {result.downloaded} of {result.total} chapters")
        if result.downloaded == 0:
            raise typer.Exit(1)


# ============================================================================
# Lookup Commands
# ============================================================================


@app.command()
def read(
    passage: str = typer.Argument(..., help="Passage ID, e.g. JHN-3"),
    bible: str = typer.Option(KJV_BIBLE_ID, "--bible", "-b", help="Bible translation ID"),
    offline: bool = typer.Option(False, "--offline", help="Only use locally stored data"),
) -> None:
    """Print a chapter, from cache when possible."""

    async def _job(library: BibleLibrary):
        return await library.get_passage(bible, passage)

    try:
        result = run_with_library(_job, offline=offline)
    except (BibleAPIError, ValueError) as e:
        print_error(getattr(e, "message", str(e)))
        raise typer.Exit(1)

    console.print(Panel(result.content, title=result.reference, subtitle=result.source.value))


@app.command()
def votd() -> None:
    """Print the verse of the day."""
    verse = BibleLibrary.verse_of_the_day()
    console.print(Panel(verse.text, title="Verse of the Day", subtitle=verse.reference))


@app.command()
def verses(
    mood: str = typer.Argument(..., help="How you feel, e.g. anxious"),
    intensity: int = typer.Option(5, "--intensity", "-i", min=1, max=10, help="Mood intensity 1-10"),
    count: int = typer.Option(3, "--count", "-c", min=1, help="Number of verses"),
    category: Optional[str] = typer.Option(None, "--category", help="Pick by category instead"),
) -> None:
    """Recommend verses for a mood."""
    recommender = VerseRecommender()
    if category:
        results = recommender.by_category(category, count)
    else:
        results = recommender.recommend(mood, intensity, count)

    if not results:
        print_info("No matching verses found.")
        return

    table = Table(title=f"Verses for '{category or mood}'", show_header=True, header_style="bold magenta")
    table.add_column("Reference", style="cyan", no_wrap=True)
    table.add_column("Category", style="green")
    table.add_column("Score", justify="right")
    table.add_column("Text", max_width=60)
    for rec in results:
        table.add_row(
            rec.verse.reference,
            rec.verse.category,
            f"{rec.relevance_score:.1f}",
            rec.verse.text,
        )
    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"dailybread version {__version__}")


if __name__ == "__main__":
    app()
