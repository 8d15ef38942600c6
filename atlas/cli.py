"""Project Atlas command line.

Usage::

    atlas aggregate --config config/projects.json --output data/projects
    atlas aggregate --source github
    atlas export --data-dir data/projects --output data/all-projects-summary.md
    atlas insights --data-dir data/projects
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from rich.table import Table

from atlas.aggregator import load_index, run_aggregation
from atlas.config import Config, ConfigError
from atlas.insights import Insights, calculate_insights
from atlas.reporter import ExportGenerator
from atlas.utils import console, print_error, print_success


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_aggregate(config: Config, args: argparse.Namespace) -> int:
    if args.config:
        config.config_path = Path(args.config)
    if args.output:
        config.data_dir = Path(args.output)
    if args.base_dir:
        config.base_dir = Path(args.base_dir)
    if args.source:
        config.source = args.source

    try:
        result = asyncio.run(run_aggregation(config))
    except ConfigError as exc:
        print_error(str(exc))
        return 1
    return 0 if result.success and result.projects else 1


def _cmd_export(config: Config, args: argparse.Namespace) -> int:
    if args.data_dir:
        config.data_dir = Path(args.data_dir)
    if args.output:
        config.export_path = Path(args.output)
    try:
        asyncio.run(ExportGenerator().generate(config))
    except FileNotFoundError as exc:
        print_error(str(exc))
        return 1
    return 0


def print_insights(insights: Insights) -> None:
    """Pretty-print every insight list and the aggregation."""
    tables: list[tuple[str, list[str], list[list[str]]]] = [
        (
            "Drift (active, stale > 20 days)",
            ["Project", "Status", "Days since update"],
            [[d.name, d.status, str(d.days_since_update)] for d in insights.drift],
        ),
        (
            "Quick Wins",
            ["Project", "Incomplete", "Completion"],
            [[q.name, str(q.incomplete_count), f"{q.completion_percentage}%"]
             for q in insights.quick_wins],
        ),
        (
            "High Risk",
            ["Project", "Bugs", "Completion", "Work items"],
            [[h.name, str(h.bug_count), f"{h.completion_percentage}%", str(h.total_work_items)]
             for h in insights.high_risk],
        ),
        (
            "Release Ready",
            ["Project", "Completion", "Bugs", "Work items"],
            [[r.name, f"{r.completion_percentage}%", str(r.bug_count), str(r.total_work_items)]
             for r in insights.release_ready],
        ),
    ]

    for title, columns, rows in tables:
        table = Table(title=title, show_header=True, header_style="bold cyan")
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*row)
        console.print(table)
        console.print()

    totals = insights.aggregation
    console.print(
        f"[bold]{totals.total_projects}[/bold] project(s), "
        f"{totals.total_work_items} work item(s): "
        f"{totals.completed_work_items} completed, {totals.incomplete_work_items} open"
    )
    console.print(
        "By status: "
        + ", ".join(f"{k}={v}" for k, v in totals.by_status.model_dump().items())
    )


def _cmd_insights(config: Config, args: argparse.Namespace) -> int:
    if args.data_dir:
        config.data_dir = Path(args.data_dir)
    try:
        summaries = load_index(config.index_path)
    except FileNotFoundError as exc:
        print_error(str(exc))
        return 1

    insights = calculate_insights(summaries)
    if args.json:
        console.print_json(data=insights.to_json_dict())
    else:
        print_insights(insights)
    return 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="atlas",
        description="Project Atlas -- cross-project analytics from markdown project documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  atlas aggregate --config config/projects.json\n"
            "  atlas aggregate --source github -o data/projects\n"
            "  atlas export\n"
            "  atlas insights --json\n"
        ),
    )
    sub = parser.add_subparsers(dest="command", required=True)

    aggregate = sub.add_parser("aggregate", help="Parse every configured project document")
    aggregate.add_argument("--config", "-c", default=None, help="Projects config JSON file")
    aggregate.add_argument("--output", "-o", default=None, help="Output data directory")
    aggregate.add_argument("--base-dir", default=None, help="Root for local document paths")
    aggregate.add_argument(
        "--source", choices=["local", "github"], default=None,
        help="Where documents are read from (default: local)",
    )

    export = sub.add_parser("export", help="Export all projects to one markdown file")
    export.add_argument("--data-dir", "-d", default=None, help="Aggregated data directory")
    export.add_argument("--output", "-o", default=None, help="Markdown output path")

    insights = sub.add_parser("insights", help="Show project-health insights")
    insights.add_argument("--data-dir", "-d", default=None, help="Aggregated data directory")
    insights.add_argument("--json", action="store_true", help="Print insights as JSON")

    return parser


_COMMANDS = {
    "aggregate": _cmd_aggregate,
    "export": _cmd_export,
    "insights": _cmd_insights,
}


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for ``atlas`` / ``python -m atlas.cli``."""
    args = build_parser().parse_args(argv)
    config = Config.from_env()

    status = _COMMANDS[args.command](config, args)
    if status != 0:
        console.print("[bold red]Command failed.[/bold red]")
        sys.exit(status)
    print_success("Done.")


if __name__ == "__main__":
    main()
