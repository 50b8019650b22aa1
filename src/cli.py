"""
c7-mirror CLI

Command-line interface for mirroring the Context7 catalog.

Usage:
    # Full export: readme.md + data/<project>.txt
    python -m src export

    # Slower pacing, cap payloads at each project's own token total
    python -m src export --delay 30 --token-cap project

    # Regenerate readme.md only
    python -m src report

    # Show the sorted catalog
    python -m src list
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

import config as settings
from utils.exceptions import C7MirrorError
from utils.logging_config import setup_logging

console = Console()


def _build_export_config(args: argparse.Namespace):
    from .export import ExportConfig

    overrides = {
        "base_url": args.base_url,
        "delay_seconds": getattr(args, "delay", None),
        "token_cap": getattr(args, "token_cap", None),
        "report_path": Path(args.report) if args.report else None,
        "data_dir": Path(args.data_dir) if args.data_dir else None,
        "banner_image": args.banner,
        "timeout_seconds": args.timeout,
    }
    if args.config:
        return ExportConfig.from_yaml(Path(args.config), **overrides)
    return ExportConfig.from_env(**overrides)


async def cmd_export(args: argparse.Namespace) -> int:
    """Run a full export."""
    from .export import run_export

    config = _build_export_config(args)
    console.print(f"[cyan]Exporting catalog from {config.base_url}[/cyan]")
    console.print(
        f"[dim]Delay: {config.delay_seconds:g}s | Token cap: {config.token_cap.value} "
        f"| Report: {config.report_path} | Data: {config.data_dir}[/dim]"
    )

    summary = await run_export(config)

    console.print(
        f"[green]Exported {summary.files_written} project(s), "
        f"{summary.bytes_written:,} bytes in {summary.duration_seconds:.1f}s[/green]"
    )
    console.print(f"[green]Report saved to {summary.report_path}[/green]")
    return 0


async def cmd_report(args: argparse.Namespace) -> int:
    """Regenerate the README report without exporting payloads."""
    from .export import write_report_only

    config = _build_export_config(args)
    report_path = await write_report_only(config)
    console.print(f"[green]Report saved to {report_path}[/green]")
    return 0


async def cmd_list(args: argparse.Namespace) -> int:
    """Print the sorted catalog."""
    from .catalog import CatalogClient, sort_by_title
    from .reporting.readme_renderer import format_count, state_icon

    config = _build_export_config(args)
    async with CatalogClient(config.base_url, timeout=config.timeout_seconds) as client:
        projects = sort_by_title(await client.fetch_projects())

    if args.json:
        print(json.dumps([p.to_dict() for p in projects], indent=2))
        return 0

    table = Table(title=f"Context7 Catalog ({len(projects)} projects)")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Project", style="blue")
    table.add_column("Tokens", style="green", justify="right")
    table.add_column("Snippets", style="yellow", justify="right")
    table.add_column("Updated", style="dim")
    table.add_column("State")

    for index, p in enumerate(projects, start=1):
        table.add_row(
            str(index),
            p.title,
            p.project,
            format_count(p.version.total_tokens),
            format_count(p.version.total_snippets),
            p.version.last_update or "-",
            f"{state_icon(p.version.state)} {p.version.state.value}",
        )

    console.print(table)
    return 0


def _add_source_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", "-c", help="Path to config YAML")
    parser.add_argument("--base-url", help="Context7 API root")
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    parser.add_argument("--report", help="README report path")
    parser.add_argument("--data-dir", help="Payload output directory")
    parser.add_argument("--banner", help="Image URL prepended to the report")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="c7-mirror",
        description="Mirror the Context7 catalog to a README and llm.txt files",
    )
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Log level")
    parser.add_argument("--log-dir", default=str(settings.LOG_DIR), help="Log file directory")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # export
    export_parser = subparsers.add_parser("export", help="Write the report and all payloads")
    _add_source_options(export_parser)
    export_parser.add_argument(
        "--delay", type=float, help="Seconds to wait before each payload request"
    )
    export_parser.add_argument(
        "--token-cap",
        choices=["unbounded", "project"],
        help="Payload size cap: unbounded sentinel or the project's own token total",
    )

    # report
    report_parser = subparsers.add_parser("report", help="Write the README report only")
    _add_source_options(report_parser)

    # list
    list_parser = subparsers.add_parser("list", help="Show the sorted catalog")
    _add_source_options(list_parser)
    list_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    setup_logging(level=args.log_level, log_dir=Path(args.log_dir))

    commands = {
        "export": cmd_export,
        "report": cmd_report,
        "list": cmd_list,
    }

    try:
        return asyncio.run(commands[args.command](args))
    except C7MirrorError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
