"""CLI entry point for watch2vault."""

import asyncio
import signal
import sys

import click

from .config import Config, load_config
from .exceptions import ConfigError
from .log import configure_logging
from .models import SyncRun
from .scheduler import SyncScheduler
from .sync import run_sync

_common_options = [
    click.option(
        "--feed-url",
        type=str,
        default=None,
        help="Watchlist RSS feed URL (default: WATCHLIST_FEED_URL env var)",
    ),
    click.option(
        "--folder",
        "folder_path",
        type=str,
        default=None,
        help="Folder inside the vault that receives the notes (default: WATCHLIST_FOLDER env var)",
    ),
    click.option(
        "--vault-path",
        type=click.Path(file_okay=False),
        default=None,
        help="Path to Obsidian vault (default: ./vault_output or OBSIDIAN_VAULT_PATH env var)",
    ),
    click.option(
        "--max-pages",
        type=int,
        default=None,
        help="Maximum feed pages to follow per run (default: 100)",
    ),
    click.option(
        "--timeout",
        type=float,
        default=None,
        help="Per-page request timeout in seconds (default: 30)",
    ),
    click.option(
        "--verbose", "-v",
        is_flag=True,
        default=False,
        help="Enable verbose output",
    ),
]


def common_options(func):
    for option in reversed(_common_options):
        func = option(func)
    return func


def _load(**overrides) -> Config:
    try:
        config = load_config(**overrides)
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)

    configure_logging(config.log_level, config.log_format)

    if not config.is_configured:
        click.echo(
            "Configuration error: both a feed URL and a vault folder must be set.",
            err=True,
        )
        sys.exit(2)

    if config.verbose:
        click.echo(f"Feed URL: {config.feed_url}")
        click.echo(f"Vault path: {config.vault_path}")
        click.echo(f"Folder: {config.folder_path}")
    return config


def _summarize(run: SyncRun) -> None:
    click.echo(
        f"Synced {len(run.entries)} entries from {run.pages} page(s); "
        f"wrote {run.notes_written} notes."
    )
    for error in run.errors:
        click.echo(f"  Error: {error}", err=True)


@click.group()
def main():
    """Sync a media watchlist RSS feed into an Obsidian vault."""


@main.command()
@common_options
def sync(feed_url, folder_path, vault_path, max_pages, timeout, verbose):
    """Run one sync now.

    Example: watch2vault sync --feed-url https://rss.plex.tv/... --folder plex
    """
    config = _load(
        feed_url=feed_url,
        folder_path=folder_path,
        vault_path=vault_path,
        max_pages=max_pages,
        timeout=timeout,
        verbose=verbose,
    )

    run = asyncio.run(run_sync(config))
    _summarize(run)

    if run.errors:
        sys.exit(1)
    click.echo("Done!")


@main.command()
@common_options
@click.option(
    "--interval",
    type=float,
    default=None,
    help="Seconds between syncs (default: 3600 or WATCHLIST_SYNC_INTERVAL env var)",
)
def watch(feed_url, folder_path, vault_path, max_pages, timeout, verbose, interval):
    """Sync now, then keep syncing on a fixed interval.

    Send SIGUSR1 to the process to trigger an extra sync. Stop with Ctrl-C.
    """
    config = _load(
        feed_url=feed_url,
        folder_path=folder_path,
        vault_path=vault_path,
        sync_interval=interval,
        max_pages=max_pages,
        timeout=timeout,
        verbose=verbose,
    )

    click.echo(f"Watching {config.feed_url} every {config.sync_interval:g}s")
    try:
        asyncio.run(_serve(config))
    except KeyboardInterrupt:
        click.echo("\nStopped.")


async def _serve(config: Config) -> None:
    scheduler = SyncScheduler(lambda: config, interval=config.sync_interval)
    loop = asyncio.get_running_loop()
    if hasattr(signal, "SIGUSR1"):
        loop.add_signal_handler(signal.SIGUSR1, scheduler.trigger)

    scheduler.start()
    try:
        await asyncio.Event().wait()
    finally:
        await scheduler.stop()
