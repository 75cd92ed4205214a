"""
Sadhana scoring CLI.

Usage:
    # List effective batches (built-ins plus saved overrides)
    python -m sadhana_scoring batches

    # Score every entry in a file against its batch
    python -m sadhana_scoring score entries.json --batch nakula

    # Weekly stats for the week containing an anchor date
    python -m sadhana_scoring week entries.json --batch nakula --anchor 2024-03-13

    # Switch the global scoring mode
    python -m sadhana_scoring set-mode weekly

    # Save an override for one batch
    python -m sadhana_scoring set-batch nakula nakula.json

Entry files hold a JSON list of entries (camelCase or snake_case keys), or
an object with an "entries" list.
"""

import argparse
import datetime as dt
import json
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import get_log_level
from .constants import SCORE_CATEGORIES
from .models import SadhanaEntry
from .scorers.criteria_registry import canonical_batch_key
from .scorers.daily_score import calculate_daily_score
from .scorers.weekly_aggregator import aggregate_week
from .services.config_store import JsonFileConfigStore, ScoringConfigProvider
from .services.criteria_resolver import batch_key_for, list_batches, resolve_criteria
from .utils.date_utils import filter_entries_for_week, start_of_week
from .utils.logger import ScoringLogger

console = Console()


def _label(category: str) -> str:
    """"sleep_time_score" -> "Sleep Time"."""
    return category.removesuffix("_score").replace("_", " ").title()


def load_entries(path: str) -> list[SadhanaEntry]:
    """Read entries from a JSON file.

    Raises:
        FileNotFoundError, json.JSONDecodeError, pydantic.ValidationError
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("entries", [])
    return [SadhanaEntry.model_validate(item) for item in data]


def _parse_date(value: str) -> dt.date:
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD")


def cmd_batches(args: argparse.Namespace, provider: ScoringConfigProvider) -> int:
    """List effective batches."""
    overridden = {canonical_batch_key(name) for name in provider.get_overrides()}
    table = Table(title="Batches")
    table.add_column("Batch")
    table.add_column("Reading", justify="right")
    table.add_column("Hearing", justify="right")
    table.add_column("Service", justify="right")
    table.add_column("Shloka", justify="right")
    table.add_column("Body / Soul", justify="right")
    table.add_column("Source")
    for key, criteria in list_batches(provider).items():
        table.add_row(
            f"{key} ({criteria.name})" if criteria.name else key,
            str(criteria.reading_minimum),
            str(criteria.hearing_minimum),
            str(criteria.service_minimum),
            str(criteria.shloka_minimum),
            f"{criteria.total_body_score} / {criteria.total_soul_score}",
            "override" if key in overridden else "built-in",
        )
    console.print(table)
    return 0


def cmd_score(args: argparse.Namespace, provider: ScoringConfigProvider) -> int:
    """Score entries one day at a time."""
    entries = load_entries(args.entries)
    if args.date:
        entries = [e for e in entries if e.date == args.date]
    if not entries:
        console.print("[yellow]No entries to score[/yellow]")
        return 0

    criteria = resolve_criteria(args.batch, provider)
    table = Table(title=f"Daily scores - {batch_key_for(args.batch, provider)}")
    table.add_column("Date")
    for category in SCORE_CATEGORIES:
        table.add_column(_label(category), justify="right")
    table.add_column("Total", justify="right", style="bold")

    for entry in entries:
        result = calculate_daily_score(entry, criteria)
        table.add_row(
            entry.date.isoformat(),
            *(f"{getattr(result.breakdown, c):g}" for c in SCORE_CATEGORIES),
            f"{result.total_score:g}",
        )
    console.print(table)
    return 0


def cmd_week(args: argparse.Namespace, provider: ScoringConfigProvider) -> int:
    """Aggregate the anchor's week."""
    entries = filter_entries_for_week(load_entries(args.entries), args.anchor)
    stats = aggregate_week(entries, args.batch, provider, weekly_mode=args.weekly_mode)

    if args.json:
        payload = stats.to_json_dict()
        payload.pop("entries", None)
        print(json.dumps(payload, indent=2))
        return 0

    week_start = start_of_week(args.anchor)
    mode = "weekly-consolidated" if stats.weekly_mode else "per-entry"
    console.print(
        f"[bold]Week of {week_start.isoformat()}[/bold] "
        f"({stats.entry_count} entries, {mode} mode, batch {batch_key_for(args.batch, provider)})"
    )

    days = Table(title="Daily scores")
    days.add_column("Day")
    days.add_column("Score", justify="right")
    for point in stats.daily_scores:
        days.add_row(point.day, f"{point.score:g}")
    console.print(days)

    summary = Table(title="Weekly summary")
    summary.add_column("Metric")
    summary.add_column("Value", justify="right")
    for category in SCORE_CATEGORIES:
        summary.add_row(_label(category), f"{getattr(stats.breakdown, category):g}")
    summary.add_row("Body score", f"{stats.body_score:g}")
    summary.add_row("Soul score", f"{stats.soul_score:g}")
    summary.add_row("Total score", f"{stats.total_score:g}")
    summary.add_row("Average score", f"{stats.average_score:g}")
    summary.add_row("Reading (total / avg min)", f"{stats.total_reading_minutes:g} / {stats.average_reading_minutes}")
    summary.add_row("Hearing (total / avg min)", f"{stats.total_hearing_minutes:g} / {stats.average_hearing_minutes}")
    summary.add_row("Chanting (total / avg rounds)", f"{stats.total_chanting_rounds:g} / {stats.average_chanting_rounds:g}")
    summary.add_row("Average wake-up hour", f"{stats.average_wake_up_hour:g}")
    summary.add_row("Mangala arati", f"{stats.mangala_arati_attendance:g}%")
    summary.add_row("Morning program", f"{stats.morning_program_attendance:g}%")
    summary.add_row("Diet maintained", f"{stats.diet_maintained:g}%")
    console.print(summary)
    return 0


def cmd_set_mode(args: argparse.Namespace, provider: ScoringConfigProvider) -> int:
    provider.set_weekly_scoring(args.mode == "weekly")
    console.print(f"[green]Scoring mode set to {args.mode}[/green]")
    return 0


def cmd_set_batch(args: argparse.Namespace, provider: ScoringConfigProvider) -> int:
    with open(args.criteria, encoding="utf-8") as f:
        data = json.load(f)
    provider.set_override(args.name, data)
    console.print(f"[green]Saved override for batch {args.name.lower()}[/green]")
    return 0


COMMANDS = {
    "batches": cmd_batches,
    "score": cmd_score,
    "week": cmd_week,
    "set-mode": cmd_set_mode,
    "set-batch": cmd_set_batch,
}


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sadhana-scoring",
        description="Score daily sadhana entries and aggregate weekly progress",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--store", help="Path to the JSON configuration store (default: SADHANA_CONFIG_STORE)")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("batches", help="List effective batch criteria")

    score_parser = subparsers.add_parser("score", help="Daily score for each entry")
    score_parser.add_argument("entries", help="Path to entries JSON")
    score_parser.add_argument("--batch", help="Batch name (default batch if omitted)")
    score_parser.add_argument("--date", type=_parse_date, help="Only score this day (YYYY-MM-DD)")

    week_parser = subparsers.add_parser("week", help="Weekly stats for one week")
    week_parser.add_argument("entries", help="Path to entries JSON")
    week_parser.add_argument("--batch", help="Batch name (default batch if omitted)")
    week_parser.add_argument("--anchor", type=_parse_date, required=True, help="Any date in the week (YYYY-MM-DD)")
    mode_group = week_parser.add_mutually_exclusive_group()
    mode_group.add_argument("--weekly-mode", dest="weekly_mode", action="store_const", const=True, default=None)
    mode_group.add_argument("--per-entry-mode", dest="weekly_mode", action="store_const", const=False)
    week_parser.add_argument("--json", action="store_true", help="Print stats as JSON")

    mode_parser = subparsers.add_parser("set-mode", help="Persist the scoring mode")
    mode_parser.add_argument("mode", choices=["weekly", "per-entry"])

    batch_parser = subparsers.add_parser("set-batch", help="Persist one batch override")
    batch_parser.add_argument("name", help="Batch name")
    batch_parser.add_argument("criteria", help="Path to criteria JSON")

    return parser


def main(argv=None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    log = ScoringLogger(log_level=args.log_level or get_log_level())
    provider = ScoringConfigProvider(JsonFileConfigStore(Path(args.store) if args.store else None))

    try:
        return handler(args, provider)
    except FileNotFoundError as e:
        log.error("File not found", exception=e)
        console.print(f"[red]Error: file not found: {escape(str(e.filename))}[/red]")
        return 1
    except json.JSONDecodeError as e:
        log.error("Invalid JSON input", exception=e)
        console.print(f"[red]Error: invalid JSON: {escape(str(e))}[/red]")
        return 1
    except (ValidationError, ValueError) as e:
        log.error("Invalid input", exception=e)
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
