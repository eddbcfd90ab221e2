"""Rich-based display functions for Gmail Digest."""

from __future__ import annotations

import logging
from datetime import timedelta

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Route log records to stderr through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def create_progress(description: str) -> Progress:
    """Create a transient Rich Progress bar on stderr."""
    return Progress(
        SpinnerColumn(),
        TextColumn(f"[bold blue]{description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=err_console,
        transient=True,
    )


def print_plain(text: str) -> None:
    """Print mail data verbatim: no markup, emoji codes, highlighting or hard wraps."""
    console.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True)


def print_status(message: str) -> None:
    console.print(f"[dim]{escape(message)}[/dim]", emoji=False, highlight=False, soft_wrap=True)


def print_auth_url(url: str, redirect_uri: str) -> None:
    """Show the authorization URL the user has to open."""
    console.print("[bold]Go to the following link in your browser:[/bold]")
    print_plain(url)
    console.print(
        f"[bold]Redirect URL:[/bold] {escape(redirect_uri)}", emoji=False, highlight=False, soft_wrap=True
    )


def display_subjects(subjects: list[str]) -> None:
    """Print one subject per line, in the order given."""
    for subject in subjects:
        print_plain(subject)


def display_report(text: str) -> None:
    if text:
        print_plain(text)
    else:
        console.print("[yellow]No messages found.[/yellow]")


def format_validity(remaining: timedelta) -> str:
    """Format a duration rounded to the nearest second, e.g. ``0:59:12``."""
    seconds = round(remaining.total_seconds())
    return str(timedelta(seconds=seconds))


def display_token_validity(remaining: timedelta) -> None:
    console.print(f"Token valid for: {format_validity(remaining)}", highlight=False)
