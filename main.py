#!/usr/bin/env python3
"""
SiteFeed - Syndicated Feed Loader
=================================

Command line entry point for syncing the feed and inspecting the results.

Usage:
    python main.py --help                       # Show all commands
    python main.py check-config                 # Show effective configuration
    python main.py sync [--url URL]             # Sync once and list the records
    python main.py render-rss [--output FILE]   # Sync, then write the site's RSS
"""

import sys
import asyncio
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from sitefeed.config.settings import get_settings
from sitefeed.delivery.rss_renderer import render_rss
from sitefeed.processing.synchronizer import FeedSynchronizer, SyncReport
from sitefeed.storage.record_store import RecordStore
from sitefeed.utils.logging import configure_application_logging
from sitefeed.utils.exceptions import SiteFeedError, get_user_friendly_message

console = Console()


def _setup_logging(debug: bool) -> None:
    settings = get_settings()
    configure_application_logging(
        log_level="DEBUG" if debug else settings.get_effective_log_level(),
        log_file=settings.logging.file_path,
        enable_console=settings.logging.console_logging,
        structured_logging=settings.logging.structured_logging,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count,
    )


def _run_sync(url: Optional[str]) -> tuple[RecordStore, SyncReport]:
    store = RecordStore()
    synchronizer = FeedSynchronizer(store=store)
    report = asyncio.run(synchronizer.sync(url))
    return store, report


@click.group(invoke_without_command=True)
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.pass_context
def cli(ctx, debug):
    """SiteFeed - syndicated RSS loader for a personal site."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
def check_config():
    """Show the effective configuration."""
    console.print("[bold blue]🔧 Checking SiteFeed Configuration[/bold blue]")

    try:
        settings = get_settings()
    except SiteFeedError as e:
        console.print(f"[bold red]❌ {get_user_friendly_message(e)}[/bold red]")
        sys.exit(1)

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Feed URL", settings.feed.url or "[red]not set[/red]")
    table.add_row("Keep stale on empty", str(settings.feed.keep_stale_on_empty_result))
    table.add_row("Request timeout", str(settings.feed.request_timeout or "transport default"))
    table.add_row("Site", f"{settings.site.title} ({settings.site.url})")
    table.add_row("Log level", settings.get_effective_log_level())
    table.add_row("Log file", settings.logging.file_path or "-")

    console.print(table)

    if not settings.feed.url:
        console.print("[yellow]Set SITEFEED_FEED__URL or pass --url to sync[/yellow]")


@cli.command()
@click.option('--url', default=None, help='Feed URL (default: SITEFEED_FEED__URL)')
@click.pass_context
def sync(ctx, url):
    """Sync the feed once and list the stored records."""
    try:
        _setup_logging(ctx.obj.get('debug', False))
        store, report = _run_sync(url)
    except SiteFeedError as e:
        console.print(f"[bold red]❌ {get_user_friendly_message(e)}[/bold red]")
        sys.exit(1)

    if not report.success:
        console.print(f"[bold red]❌ Sync failed: {report.error}[/bold red]")
        sys.exit(1)

    table = Table(title=f"Posts from {report.feed_url}")
    table.add_column("Slug", style="cyan")
    table.add_column("Published", style="green")
    table.add_column("Title")

    for record in store.list_all():
        table.add_row(record.id, record.published_at.strftime("%Y-%m-%d"), record.title)

    console.print(table)
    console.print(
        f"[bold green]✅ {report.records_written} posts stored, "
        f"{report.total_skipped} skipped in {report.duration_seconds:.2f}s[/bold green]"
    )


@cli.command(name="render-rss")
@click.option('--url', default=None, help='Feed URL (default: SITEFEED_FEED__URL)')
@click.option('--output', '-o', type=click.Path(dir_okay=False), default=None,
              help='Write to this file instead of stdout')
@click.pass_context
def render_rss_cmd(ctx, url, output):
    """Sync the feed, then render the site's RSS document."""
    try:
        _setup_logging(ctx.obj.get('debug', False))
        store, report = _run_sync(url)
    except SiteFeedError as e:
        console.print(f"[bold red]❌ {get_user_friendly_message(e)}[/bold red]")
        sys.exit(1)

    if not report.success:
        console.print(f"[bold red]❌ Sync failed: {report.error}[/bold red]")
        sys.exit(1)

    document = render_rss(store.list_all())

    if output:
        Path(output).write_text(document, encoding='utf-8')
        console.print(f"[bold green]✅ Wrote {len(store)} items to {output}[/bold green]")
    else:
        click.echo(document)


if __name__ == "__main__":
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 SiteFeed interrupted by user[/yellow]")
        sys.exit(130)
