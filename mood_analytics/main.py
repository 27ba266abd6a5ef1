"""
Mood Analytics: weekly summaries, monthly insights and behavioral patterns.

This module is the command-line entry point:
1. `report`: fetches a user's entries (MongoDB or a JSON file), runs the
   analytics engine and logs the summary (or prints the report as JSON)
2. `log`: appends one mood-log entry to the store

Supports execution modes:
- Normal: entries read from / written to MongoDB (MONGODB_URI)
- From file: analytics over a local JSON export, no database needed
- Dry run: `log` validates and prints the entry without saving it
"""

import argparse
import json
import logging
import sys
from datetime import datetime, tzinfo
from typing import List, Optional

from dotenv import load_dotenv

from mood_analytics.adapters.repositories import json_file
from mood_analytics.adapters.repositories import mongo as mongo_client
from mood_analytics.config import Settings
from mood_analytics.core.analyzer import AnalyticsConfig
from mood_analytics.core.engine import MoodAnalyticsEngine, log_report
from mood_analytics.core.models import MOOD_VALUES, MoodLogEntry
from mood_analytics.core.timeframes import analysis_window_start
from mood_analytics.utils.logger import setup_logger

logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 10


# ============================================================================
# ARGUMENT PARSING
# ============================================================================

def _score(value: str) -> int:
    """argparse type for productivity / energy (1-10)."""
    try:
        score = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise argparse.ArgumentTypeError(f"must be between {MIN_SCORE} and {MAX_SCORE}, got {score}")
    return score


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        description="Mood Analytics: weekly summaries, monthly insights and patterns",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py report --user alice                   # Analytics from MongoDB
  python run.py report --from-file moods.json --json  # Offline, JSON output
  python run.py report --user alice --now 2025-03-14T20:00:00+01:00
  python run.py log --user alice --mood happy --productivity 8 --energy 6
        """
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    report = sub.add_parser("report", help="Compute weekly, monthly and pattern analytics")
    report.add_argument("--user", help="User id whose entries are analyzed")
    report.add_argument("--now", help="Reference instant (ISO 8601), defaults to current time")
    report.add_argument("--from-file", dest="from_file", help="Read entries from a JSON file instead of MongoDB")
    report.add_argument("--json", action="store_true", help="Print the report as JSON on stdout")

    log = sub.add_parser("log", help="Append a mood-log entry")
    log.add_argument("--user", required=True, help="User id owning the entry")
    log.add_argument("--mood", required=True, choices=sorted(MOOD_VALUES, key=MOOD_VALUES.get))
    log.add_argument("--productivity", required=True, type=_score, help="Productivity 1-10")
    log.add_argument("--energy", required=True, type=_score, help="Energy 1-10")
    log.add_argument("--notes", default="", help="Free-text notes")
    log.add_argument("--time", help="Entry time (ISO 8601), defaults to current time")
    log.add_argument("--dry-run", action="store_true", help="Validate and print, do not save")

    args = parser.parse_args(argv)
    if args.command == "report" and not (args.user or args.from_file):
        parser.error("report requires --user or --from-file")
    return args


# ============================================================================
# TIME
# ============================================================================

def resolve_now(value: Optional[str], tz: tzinfo) -> datetime:
    """
    Parses an ISO instant, or reads the clock when `value` is empty.

    Naive input is taken in the configured timezone; aware input is
    converted to it so local days resolve consistently.

    Raises:
        ValueError: If `value` is not ISO 8601.
    """
    if not value:
        return datetime.now(tz)
    dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


# ============================================================================
# COMMANDS
# ============================================================================

def fetch_entries(args: argparse.Namespace, settings: Settings, now: datetime) -> List[MoodLogEntry]:
    """
    Loads the entries covering every analysis window.

    Raises:
        EntryFileError: If the JSON file cannot be loaded.
        MongoDBConnectionError / MongoDBOperationError: On database failures.
    """
    if args.from_file:
        entries = json_file.load_entries(args.from_file)
        if args.user:
            entries = [e for e in entries if e.user_id in (None, args.user)]
        return entries

    since = analysis_window_start(now, AnalyticsConfig.STREAK_LOOKBACK_DAYS)
    collection = mongo_client.get_entries_collection(settings)
    return mongo_client.get_entries(collection, args.user, since, now)


def cmd_report(args: argparse.Namespace, settings: Settings) -> int:
    tz = settings.get_timezone()
    now = resolve_now(args.now, tz)
    logger.info(f"Timestamp: {now.isoformat(timespec='seconds')}, Source: {args.from_file or 'mongodb'}")

    logger.info(">>> STEP 1: Fetching entries...")
    try:
        entries = fetch_entries(args, settings, now)
    except (json_file.EntryFileError,
            mongo_client.MongoDBConnectionError,
            mongo_client.MongoDBOperationError) as fetch_error:
        logger.error(f"Entry fetch failed: {fetch_error}")
        return 1

    logger.info(">>> STEP 2: Computing analytics...")
    report = MoodAnalyticsEngine().analyze(entries, now)

    if args.json:
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        log_report(report, logger)
    return 0


def cmd_log(args: argparse.Namespace, settings: Settings) -> int:
    tz = settings.get_timezone()
    entry = MoodLogEntry(
        timestamp=resolve_now(args.time, tz),
        mood_category=args.mood,
        productivity=args.productivity,
        energy=args.energy,
        notes=args.notes,
        user_id=args.user,
    )

    if args.dry_run:
        logger.info(f"Dry run: would save {entry.to_dict()}")
        return 0

    try:
        collection = mongo_client.get_entries_collection(settings)
        mongo_client.save_entry(collection, entry, args.user)
    except (mongo_client.MongoDBConnectionError, mongo_client.MongoDBOperationError) as save_error:
        logger.error(f"Failed to save mood log: {save_error}")
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function."""
    load_dotenv()
    args = parse_arguments(argv)
    settings = Settings.from_env()

    setup_logger(
        "mood_analytics",
        log_dir=settings.log_dir,
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        if args.command == "report":
            return cmd_report(args, settings)
        return cmd_log(args, settings)
    except ValueError as config_error:
        # Bad timezone or bad --now / --time value
        logger.error(f"Invalid input: {config_error}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
