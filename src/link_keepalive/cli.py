"""Command-line interface for link-keepalive."""

import argparse
import asyncio
import sys
from typing import Optional, List
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from link_keepalive import __version__
from link_keepalive.config import load_config, create_default_config
from link_keepalive.exceptions import (
    ConfigurationError, KeepAliveError, NoSuccessfulVerificationsError
)
from link_keepalive.runner import KeepAliveRunner
from link_keepalive.utils import format_bytes, setup_logging

console = Console()


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog='link-keepalive',
        description='Keep expiring file-hosting download links active with partial downloads',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=str,
        help='Path to configuration file (default: keepalive_config.py in current dir)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Run command
    run_parser = subparsers.add_parser(
        'run',
        help='Probe every configured URL and download a sample from each link'
    )
    run_parser.add_argument(
        '--max-retries',
        type=int,
        help='Attempts per page before giving up (default: 3)'
    )
    run_parser.add_argument(
        '--timeout',
        type=int,
        help='Page load timeout in milliseconds (default: 60000)'
    )
    run_parser.add_argument(
        '--wait-time',
        type=int,
        help='Wait after each download click in milliseconds (default: 5000)'
    )
    run_parser.add_argument(
        '--bytes',
        type=int,
        dest='download_bytes',
        help='Bytes to download from each link (default: 1048576)'
    )
    run_parser.add_argument(
        '--headed',
        action='store_true',
        help='Show the browser window'
    )
    run_parser.add_argument(
        '--heuristics',
        type=str,
        help='JSON file with probe selectors and link patterns'
    )
    run_parser.add_argument(
        '--log-file',
        type=str,
        help='Also write log records to this file'
    )

    # Check command
    subparsers.add_parser(
        'check',
        help='Validate the configuration and list targets without network access'
    )

    # Config command
    config_parser = subparsers.add_parser(
        'config',
        help='Manage configuration settings'
    )
    config_subparsers = config_parser.add_subparsers(dest='config_action')

    config_subparsers.add_parser(
        'show',
        help='Show current configuration'
    )

    config_init_parser = config_subparsers.add_parser(
        'init',
        help='Initialize default configuration file'
    )
    config_init_parser.add_argument(
        '--path',
        type=str,
        default='./keepalive_config.py',
        help='Path for configuration file (default: ./keepalive_config.py)'
    )

    return parser


def handle_run(args) -> int:
    """Handle the run command."""
    config = load_config(args.config)
    config.update(
        max_retries=args.max_retries,
        page_timeout=args.timeout,
        wait_time=args.wait_time,
        download_bytes=args.download_bytes,
        headless=False if args.headed else None,
        verbose=True if args.verbose else None,
        heuristics_path=args.heuristics,
        log_file=args.log_file
    )
    settings = config.keepalive

    setup_logging('DEBUG' if settings.verbose else 'INFO', settings.log_file)

    runner = KeepAliveRunner(settings, heuristics=config.heuristics())

    try:
        stats = asyncio.run(runner.run())
    except NoSuccessfulVerificationsError as e:
        console.print(f"[red]✗ Process failed:[/red] {escape(str(e))}")
        return 1

    console.print(
        f"[green]✓ Process completed successfully[/green] "
        f"({stats.successful_verifications}/{stats.total_verifications} links, "
        f"{format_bytes(stats.bytes_transferred)})"
    )
    return 0


def handle_check(args) -> int:
    """Handle the check command."""
    setup_logging('DEBUG' if args.verbose else 'INFO')
    config = load_config(args.config)
    targets = config.targets()
    heuristics = config.heuristics()

    table = Table(title="Keep-alive Targets")
    table.add_column("#", style="cyan")
    table.add_column("URL", style="blue")

    for index, url in enumerate(targets, start=1):
        table.add_row(str(index), escape(url))

    console.print(table)
    console.print(f"Heuristics version: {heuristics.version}")
    console.print(f"[green]✓[/green] Configuration is valid ({len(targets)} targets)")
    return 0


def handle_config(args) -> int:
    """Handle the config command."""
    if args.config_action == 'init':
        create_default_config(args.path)
        console.print(f"[green]✓[/green] Created configuration file at {args.path}")
        return 0

    config = load_config(args.config)

    if args.config_action == 'show':
        console.print("[bold]Current Configuration:[/bold]")
        for key, value in config.to_dict().items():
            console.print(f"\n[cyan]{key}:[/cyan]")
            for k, v in value.items():
                console.print(f"  {k}: {escape(str(v))}")
        return 0

    console.print("[yellow]Specify a config action: show or init[/yellow]")
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == 'run':
            return handle_run(args)
        elif args.command == 'check':
            return handle_check(args)
        elif args.command == 'config':
            return handle_config(args)
        else:
            parser.print_help()
            return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 130
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        return 1
    except KeepAliveError as e:
        console.print(f"[red]Process failed: {escape(str(e))}[/red]")
        return 1
    except Exception as e:
        console.print(f"[red]Unexpected error: {escape(str(e))}[/red]")
        if args.verbose:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
