"""CLI handling for cloudclip.

This module provides the command-line interface for cloudclip, handling
argument parsing via click, .env loading, logging configuration, and
dispatching to daemon or viewer mode based on user-specified options.

Usage:
    cloudclip --daemon --socket PATH [--supabase-url URL] [--supabase-key KEY] [--verbose]
    cloudclip --view --socket PATH [--select N] [--verbose]
"""

import asyncio
import sys

import click

from cloudclip.config import (
    KEY_ENVVAR,
    URL_ENVVAR,
    StoreConfig,
    load_env_file,
    load_store_config,
)
from cloudclip.constants import POLL_INTERVAL, TABLE_NAME
from cloudclip.main_logging import configure_logging


@click.command()
@click.option(
    "--daemon",
    is_flag=True,
    help="Sync the clipboard and serve history",
)
@click.option(
    "--view",
    is_flag=True,
    help="Show history from a running daemon",
)
@click.option(
    "--socket",
    required=True,
    type=click.Path(),
    help="Unix domain socket path for the history channel",
)
@click.option(
    "--supabase-url",
    envvar=URL_ENVVAR,
    default=None,
    help=f"Store endpoint URL [env: {URL_ENVVAR}]",
)
@click.option(
    "--supabase-key",
    envvar=KEY_ENVVAR,
    default=None,
    help=f"Store access key [env: {KEY_ENVVAR}]",
)
@click.option(
    "--table",
    default=TABLE_NAME,
    show_default=True,
    help="Remote table holding clipboard entries",
)
@click.option(
    "--interval",
    type=click.FloatRange(min=0.1),
    default=POLL_INTERVAL,
    show_default=True,
    help="Seconds between clipboard and store polls",
)
@click.option(
    "--select",
    type=click.IntRange(min=0),
    default=None,
    help="With --view, copy history entry N (0 is newest) and exit",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable DEBUG-level logging",
)
def main(
    daemon: bool,
    view: bool,
    socket: str,
    supabase_url: str | None,
    supabase_key: str | None,
    table: str,
    interval: float,
    select: int | None,
    verbose: bool,
) -> None:
    """Sync the clipboard across devices through a hosted table."""
    if daemon and view:
        raise click.UsageError("Options --daemon and --view are mutually exclusive")
    if not daemon and not view:
        raise click.UsageError("Either --daemon or --view must be specified")
    if select is not None and not view:
        raise click.UsageError("--select can only be used with --view")

    configure_logging(verbose)

    if daemon:
        config = load_store_config(supabase_url, supabase_key, table)
        _run_daemon_with_cleanup(socket, config, interval)
    else:
        _run_view(socket, select)


def _run_daemon_with_cleanup(
    socket: str, config: StoreConfig | None, interval: float
) -> None:
    """Run daemon mode with socket cleanup on exit.

    Args:
        socket: Path to the Unix domain socket.
        config: Store settings, or None to run without syncing.
        interval: Seconds between ticks of each loop.
    """
    from cloudclip.daemon import run_daemon
    from cloudclip.server_socket import SocketPathError, cleanup_socket, prepare_socket_path

    # Checked before cleanup is armed: an active daemon's socket must survive
    try:
        prepare_socket_path(socket)
    except SocketPathError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    try:
        asyncio.run(run_daemon(socket, config, interval))
    finally:
        cleanup_socket(socket)


def _run_view(socket: str, select: int | None) -> None:
    """Run viewer mode, either following history or selecting one entry.

    Args:
        socket: Path to the Unix domain socket.
        select: Entry index to copy, or None to follow pushes.
    """
    from cloudclip.protocol import ProtocolError
    from cloudclip.viewer import run_select, run_viewer

    try:
        if select is None:
            asyncio.run(run_viewer(socket))
        else:
            text = asyncio.run(run_select(socket, select))
            click.echo(f"Copied {len(text)} characters", err=True)
    except (ProtocolError, ConnectionError, IndexError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def cli() -> None:
    """Console script entry point: load .env, then run the command."""
    load_env_file()
    main()
