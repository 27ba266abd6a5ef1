"""
Time-window helpers for mood analytics.

All "local" resolution happens in the timezone of the reference instant
(`now`) passed in by the caller; nothing in here reads the wall clock
except `ensure_aware`, which only borrows the system timezone for naive input.
"""

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Iterable, List, Tuple


# ============================================================================
# CONSTANTS
# ============================================================================

# Canonical day-of-week order (0 = Sunday .. 6 = Saturday)
DAY_KEYS: Tuple[str, ...] = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
WEEKEND_KEYS: Tuple[str, ...] = ("Sat", "Sun")


# ============================================================================
# LOCALIZATION
# ============================================================================

def ensure_aware(now: datetime) -> datetime:
    """Returns `now` as an aware datetime (naive input is taken as system local time)."""
    if now.tzinfo is None:
        return now.astimezone()
    return now


def to_local(ts: datetime, tz: tzinfo) -> datetime:
    """
    Converts a timestamp into the analysis timezone.

    Naive timestamps are assumed to already be expressed in `tz`.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=tz)
    return ts.astimezone(tz)


def to_instant(ts: datetime, tz: tzinfo) -> datetime:
    """
    UTC instant of a timestamp (naive input taken in `tz`).

    Aware datetimes sharing one tzinfo compare by wall time and ignore
    `fold`, so ordering across a DST fall-back needs UTC.
    """
    return to_local(ts, tz).astimezone(timezone.utc)


def day_index(dt: datetime) -> int:
    """Day-of-week index with Sunday = 0."""
    # datetime.weekday() is Monday = 0
    return (dt.weekday() + 1) % 7


def day_key(dt: datetime) -> str:
    return DAY_KEYS[day_index(dt)]


def is_weekend(dt: datetime) -> bool:
    return day_key(dt) in WEEKEND_KEYS


# ============================================================================
# WINDOWS
# ============================================================================

def _midnight(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0, fold=0)


def start_of_week(now: datetime) -> datetime:
    """Local midnight of the most recent Sunday (today if `now` is a Sunday)."""
    now = ensure_aware(now)
    return _midnight(now) - timedelta(days=day_index(now))


def start_of_month(now: datetime) -> datetime:
    """Local midnight of the first calendar day of `now`'s month."""
    now = ensure_aware(now)
    return _midnight(now).replace(day=1)


def days_in_month(now: datetime) -> int:
    first = start_of_month(now)
    # Day 28 + 4 days always lands in the following month
    next_month = (first.replace(day=28) + timedelta(days=4)).replace(day=1)
    return (next_month - first).days


def analysis_window_start(now: datetime, lookback_days: int = 0) -> datetime:
    """
    Earliest instant the caller must fetch so every analysis window is covered.

    The week may start in the previous month, so the lower bound is the
    earliest of week start, month start and the optional lookback.
    """
    now = ensure_aware(now)
    candidates = [start_of_week(now), start_of_month(now)]
    if lookback_days > 0:
        candidates.append(_midnight(now) - timedelta(days=lookback_days))
    return min(candidates)


def in_window(entries: Iterable[Any], start: datetime, end: datetime) -> List[Any]:
    """Entries whose localized timestamp falls in [start, end] (tz taken from `end`)."""
    tz = end.tzinfo
    lower, upper = to_instant(start, tz), to_instant(end, tz)
    return [e for e in entries if lower <= to_instant(e.timestamp, tz) <= upper]


def up_to(entries: Iterable[Any], end: datetime) -> List[Any]:
    """Entries not later than `end`."""
    tz = end.tzinfo
    upper = to_instant(end, tz)
    return [e for e in entries if to_instant(e.timestamp, tz) <= upper]
