"""CLI entry point for Gmail Digest."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape

from .auth import TokenProvider
from .config import credentials_path_from_env, load_client_config
from .constants import TOKEN_PATH
from .digest import list_todays_subjects, recent_non_subscription_report
from .display import (
    console,
    display_report,
    display_subjects,
    display_token_validity,
    setup_logging,
)
from .errors import GmailDigestError
from .gmail_client import build_service, get_profile_email
from .report import render_report
from .token_store import TokenStore


def _connect(token_file: Path):
    """Return (Gmail service, remaining token validity)."""
    client_config = load_client_config(credentials_path_from_env())
    provider = TokenProvider(client_config, store=TokenStore(token_file))
    credentials, remaining = provider.get_valid_token()
    return build_service(credentials), remaining


def _run(ctx: click.Context, action) -> None:
    """Run an action, turning library errors into a clean CLI failure."""
    try:
        service, remaining = _connect(ctx.obj["token_file"])
        action(service)
    except GmailDigestError as e:
        raise click.ClickException(str(e)) from e
    display_token_validity(remaining)


@click.group()
@click.version_option(version="0.1.0", prog_name="gmail-digest")
@click.option(
    "--token-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=TOKEN_PATH,
    show_default=True,
    help="Where the OAuth token is stored.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging on stderr.")
@click.pass_context
def cli(ctx: click.Context, token_file: Path, verbose: bool) -> None:
    """Gmail Digest - summaries of your Gmail inbox on the console."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["token_file"] = token_file


@cli.command()
@click.pass_context
def today(ctx: click.Context) -> None:
    """List the subjects of messages received today."""
    _run(ctx, lambda service: display_subjects(list_todays_subjects(service)))


@cli.command()
@click.pass_context
def recent(ctx: click.Context) -> None:
    """Group the last 30 days of non-subscription mail by domain and sender."""
    _run(ctx, lambda service: display_report(render_report(recent_non_subscription_report(service))))


@cli.command()
@click.pass_context
def auth(ctx: click.Context) -> None:
    """Authorize access to Gmail and show the authenticated account."""

    def _show_profile(service) -> None:
        console.print(f"Authenticated as [bold]{escape(get_profile_email(service))}[/bold]", emoji=False)

    _run(ctx, _show_profile)
