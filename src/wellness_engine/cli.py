"""CLI entry point for wellness-engine."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from .achievements import describe
from .config import Config
from .formatter import format_reflection, format_report
from .journal import build_snapshot, delete_entry, log_entry, open_store
from .models import InsufficientData, InvalidEntryError
from .progression import points_by_reason
from .store import JournalStore


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(message)s",
        level=level,
        stream=sys.stderr,
    )


def _print_insufficient(what: str, result: InsufficientData) -> None:
    print(f"Not enough data for {what} yet: {result.reason}")


def _handle_log(args: argparse.Namespace, config: Config, store: JournalStore) -> int:
    """Handle log command."""
    payload = {
        "mood": args.mood,
        "intensity": args.intensity,
        "note": args.note,
        "activities": args.activity,
        "tags": args.tag,
        "custom_label": args.label,
        "timestamp": args.at,
    }
    try:
        result = log_entry(store, payload, time.monotonic(), config)
    except InvalidEntryError as e:
        print(f"Invalid entry: {e}")
        return 1

    award = result.award
    print(f"Logged {result.entry.mood.label} ({result.entry.id})")
    if award.debounced:
        print("No points awarded (too soon after the previous award)")
    else:
        print(f"+{award.points_awarded} points, total {award.ledger.total_points}")
    if award.leveled_up:
        print(f"Level up! You are now level {award.ledger.level}")
    for badge in result.newly_unlocked:
        print(f"Badge unlocked: {badge.name} - {badge.description}")
    return 0


def _handle_delete(args: argparse.Namespace, config: Config, store: JournalStore) -> int:
    """Handle delete command."""
    if delete_entry(store, args.entry_id):
        print(f"Deleted {args.entry_id}")
        return 0
    print(f"No entry with id {args.entry_id}")
    return 1


def _handle_list(args: argparse.Namespace, config: Config, store: JournalStore) -> int:
    """Handle list command."""
    entries = store.entries()
    if args.limit:
        entries = entries[-args.limit:]
    if not entries:
        print("No entries yet")
        return 0
    for e in entries:
        extras = []
        if e.activities:
            extras.append(", ".join(sorted(e.activities)))
        if e.note:
            extras.append(e.note if len(e.note) <= 60 else e.note[:57] + "...")
        suffix = f"  {' | '.join(extras)}" if extras else ""
        label = e.custom_label or e.mood.label
        when = e.timestamp.isoformat(timespec="minutes")
        print(f"{when}  {e.id[:8]}  {label} ({e.intensity}){suffix}")
    return 0


def _handle_streak(args: argparse.Namespace, config: Config, store: JournalStore) -> int:
    """Handle streak command."""
    snapshot = build_snapshot(store, None, config)
    print(f"Current streak: {snapshot.streak.current_streak} day(s)")
    print(f"Longest streak: {snapshot.streak.longest_streak} day(s)")
    return 0


def _handle_progress(args: argparse.Namespace, config: Config, store: JournalStore) -> int:
    """Handle progress command."""
    ledger = store.ledger()
    print(f"Level {ledger.level}: {ledger.total_points} points")
    print(
        f"{ledger.points_to_next_level} points to level {ledger.level + 1} "
        f"({ledger.level_progress:.0%} of this level)"
    )
    if args.history:
        for reason, points in points_by_reason(ledger).items():
            print(f"  {reason}: {points}")
    return 0


def _handle_badges(args: argparse.Namespace, config: Config, store: JournalStore) -> int:
    """Handle badges command."""
    badges = describe(store.unlocked())
    if not badges:
        print("No badges unlocked yet")
        return 0
    for badge in badges:
        print(f"{badge.name} [{badge.category}]: {badge.description}")
    return 0


def _handle_patterns(args: argparse.Namespace, config: Config, store: JournalStore) -> int:
    """Handle patterns command."""
    report = build_snapshot(store, None, config).patterns
    if isinstance(report, InsufficientData):
        _print_insufficient("pattern analysis", report)
        return 0
    print(f"Analyzed {report.noted_entries} noted entries")
    for t in report.themes:
        print(f"  {t.theme}: {t.match_count}")
    for c in report.activity_correlations:
        print(f"  {c.activity}: {c.positive_ratio:.0%} positive ({c.occurrences} entries)")
    return 0


def _handle_forecast(args: argparse.Namespace, config: Config, store: JournalStore) -> int:
    """Handle forecast command."""
    fc = build_snapshot(store, None, config).forecast
    if isinstance(fc, InsufficientData):
        _print_insufficient("a forecast", fc)
        return 0
    print(f"Predicted mood: {fc.predicted.label} ({fc.confidence:.0%} confidence)")
    return 0


def _handle_reflect(args: argparse.Namespace, config: Config, store: JournalStore) -> int:
    """Handle reflect command."""
    snapshot = build_snapshot(store, None, config)
    if args.report:
        text = format_report(snapshot)
    else:
        reflection = snapshot.reflection
        if isinstance(reflection, InsufficientData):
            _print_insufficient("a weekly reflection", reflection)
            return 0
        text = format_reflection(reflection, snapshot.local_day)

    if args.output:
        output = Path(args.output).expanduser()
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        print(f"Wrote {output}")
    else:
        print(text)
    return 0


_HANDLERS = {
    "log": _handle_log,
    "delete": _handle_delete,
    "list": _handle_list,
    "streak": _handle_streak,
    "progress": _handle_progress,
    "badges": _handle_badges,
    "patterns": _handle_patterns,
    "forecast": _handle_forecast,
    "reflect": _handle_reflect,
}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="wellness",
        description="Mood journal with streaks, points, badges and weekly insights",
    )
    parser.add_argument("--store", type=str, help="Override journal file path")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    subparsers = parser.add_subparsers(dest="command")

    # log subcommand
    log_parser = subparsers.add_parser("log", help="Log a mood entry")
    log_parser.add_argument(
        "--mood", type=str, required=True,
        help="Mood category: terrible, bad, okay, good, great (or 1-5)"
    )
    log_parser.add_argument("--intensity", type=int, default=5, help="Intensity 1-10 (default: 5)")
    log_parser.add_argument("--note", type=str, default="", help="Free-text note")
    log_parser.add_argument(
        "--activity", action="append", default=[],
        help="Activity from the configured vocabulary (repeatable)"
    )
    log_parser.add_argument("--tag", action="append", default=[], help="Tag (repeatable, max 5)")
    log_parser.add_argument("--label", type=str, default="", help="Custom mood label")
    log_parser.add_argument(
        "--at", type=str, default=None,
        help="Entry time (ISO 8601, default: now)"
    )

    # delete subcommand
    delete_parser = subparsers.add_parser("delete", help="Delete an entry")
    delete_parser.add_argument("entry_id", help="Entry id")

    # list subcommand
    list_parser = subparsers.add_parser("list", help="List entries")
    list_parser.add_argument(
        "--limit", type=int, default=0,
        help="Show only the most recent N entries (0 = all)"
    )

    subparsers.add_parser("streak", help="Show current and longest streak")

    progress_parser = subparsers.add_parser("progress", help="Show points and level")
    progress_parser.add_argument(
        "--history", action="store_true", help="Break points down by reason"
    )

    subparsers.add_parser("badges", help="Show unlocked badges")
    subparsers.add_parser("patterns", help="Show note themes and mood-boosting activities")
    subparsers.add_parser("forecast", help="Predict tomorrow's mood")

    # reflect subcommand
    reflect_parser = subparsers.add_parser("reflect", help="Weekly reflection as Markdown")
    reflect_parser.add_argument("--output", type=str, help="Write Markdown to this file")
    reflect_parser.add_argument(
        "--report", action="store_true",
        help="Full insights report instead of the weekly reflection"
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    _setup_logging(args.verbose)

    overrides = {}
    if args.store:
        overrides["store_file"] = args.store
    if args.verbose:
        overrides["verbose"] = True

    config = Config.load(overrides)
    store = open_store(config)
    return _HANDLERS[args.command](args, config, store)


if __name__ == "__main__":
    sys.exit(main())
