"""
Computation stages of the mood analytics engine.

Stages (all pure functions of their input):
- WeeklyAggregator: day-of-week bins with mean mood / productivity / energy
- MonthlyInsightCalculator: mood mode, month averages, best day of the week
- PatternDetector: fixed heuristic rules (morning bias, weekday productivity bias)

Divisions are always guarded by a count check; degenerate input degrades
to the "N/A" / 0 sentinels instead of raising.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from fractions import Fraction
from typing import Dict, Iterable, List, Optional, Sequence

from .models import (
    NO_DATA,
    DaySummary,
    MonthlyInsight,
    MoodLogEntry,
    PatternFinding,
    WeeklySummary,
    format_mood_label,
    format_out_of_ten,
    mean_rounded,
)
from .timeframes import DAY_KEYS, day_key, ensure_aware, is_weekend, start_of_week, to_local

logger = logging.getLogger(__name__)


# ============================================================================
# CONFIGURATION - HEURISTIC THRESHOLDS & LABELS
# ============================================================================

class AnalyticsConfig:
    """Centralized configuration for the pattern heuristics."""

    # MORNING WINDOW (local hours, [start, end))
    MORNING_START_HOUR: int = 6
    MORNING_END_HOUR: int = 12

    # Minimum share of entries that must be morning entries for Rule 1
    MORNING_MIN_SHARE: Fraction = Fraction(1, 3)

    # A partition "wins" when its mean exceeds the baseline by 10%
    BIAS_THRESHOLD: float = 1.1

    # Fixed confidence labels (not statistically derived)
    MORNING_CONFIDENCE: str = "80%"
    WEEKDAY_CONFIDENCE: str = "75%"

    # DASHBOARD
    RECENT_ENTRIES_LIMIT: int = 3
    STREAK_LOOKBACK_DAYS: int = 60


MORNING_PERSON_TITLE = "Morning Person"
MORNING_PERSON_DESCRIPTION = "Your mood tends to be noticeably better in the morning hours"

WEEKDAY_WARRIOR_TITLE = "Weekday Warrior"
WEEKDAY_WARRIOR_DESCRIPTION = "You are consistently more productive on weekdays than on weekends"

NOT_ENOUGH_DATA = PatternFinding(
    title="Not Enough Data",
    description="Keep logging your mood daily to discover patterns",
    confidence=NO_DATA,
)


# ============================================================================
# WEEKLY AGGREGATOR
# ============================================================================

@dataclass
class _WeeklyBucket:
    """Running sums for one day-of-week bin. Exists only during aggregation."""
    mood_total: int = 0
    mood_count: int = 0
    productivity_total: int = 0
    energy_total: int = 0
    count: int = 0

    def add(self, entry: MoodLogEntry) -> None:
        self.count += 1
        self.productivity_total += entry.productivity
        self.energy_total += entry.energy
        value = entry.mood_value
        # Unknown categories carry no mood value
        if value is not None:
            self.mood_total += value
            self.mood_count += 1

    def summarize(self, day: str) -> DaySummary:
        if self.count == 0:
            return DaySummary(day=day)
        return DaySummary(
            day=day,
            mood=mean_rounded(self.mood_total, self.mood_count),
            productivity=mean_rounded(self.productivity_total, self.count),
            energy=mean_rounded(self.energy_total, self.count),
            has_data=True,
            entry_count=self.count,
            mood_count=self.mood_count,
        )


class WeeklyAggregator:
    """Buckets entries into Sun..Sat bins and averages each bin."""

    @staticmethod
    def aggregate(entries: Iterable[MoodLogEntry], now: datetime) -> WeeklySummary:
        """
        Aggregates entries (already filtered to the desired window) per day of week.

        The day of an entry is resolved from its own timestamp, localized to
        `now`'s timezone; `now` also fixes the reported week start.

        Args:
            entries: Mood-log entries for the window.
            now: Reference instant.

        Returns:
            WeeklySummary with all seven days present.
        """
        now = ensure_aware(now)
        buckets: Dict[str, _WeeklyBucket] = {key: _WeeklyBucket() for key in DAY_KEYS}

        for entry in entries:
            local_ts = to_local(entry.timestamp, now.tzinfo)
            buckets[day_key(local_ts)].add(entry)

        days = {key: buckets[key].summarize(key) for key in DAY_KEYS}
        return WeeklySummary(week_start=start_of_week(now), days=days)


# ============================================================================
# MONTHLY INSIGHT CALCULATOR
# ============================================================================

class MonthlyInsightCalculator:
    """Month-to-date mood mode, averages and best weekday."""

    @staticmethod
    def most_common_category(entries: Sequence[MoodLogEntry]) -> Optional[str]:
        """
        Mode of the mood categories.

        Ties go to the category encountered first in iteration order: a
        later category only wins with a strictly higher count.
        """
        counts: Dict[str, int] = {}
        for entry in entries:
            counts[entry.mood_category] = counts.get(entry.mood_category, 0) + 1

        best: Optional[str] = None
        best_count = 0
        # dicts keep first-insertion order
        for category, count in counts.items():
            if count > best_count:
                best, best_count = category, count
        return best

    @staticmethod
    def best_day(weekly: WeeklySummary) -> Optional[str]:
        """Day with the highest mood mean among days with mood data; ties go to the earliest in Sun..Sat."""
        best: Optional[DaySummary] = None
        for day in weekly:
            # Days holding only unknown categories have no mood mean to rank
            if not day.has_data or day.mood_count == 0:
                continue
            if best is None or day.mood > best.mood:
                best = day
        return best.day if best else None

    def calculate(self, entries: Sequence[MoodLogEntry], weekly: WeeklySummary) -> MonthlyInsight:
        """
        Builds the monthly insight card.

        Args:
            entries: Month-to-date entries.
            weekly: Current week's summary (used for best day only).

        Returns:
            MonthlyInsight, all "N/A" when `entries` is empty.
        """
        if not entries:
            return MonthlyInsight()

        count = len(entries)
        productivity = mean_rounded(sum(e.productivity for e in entries), count)
        energy = mean_rounded(sum(e.energy for e in entries), count)

        category = self.most_common_category(entries)
        best_day = self.best_day(weekly)

        return MonthlyInsight(
            most_common_mood=format_mood_label(category) if category is not None else NO_DATA,
            average_productivity=format_out_of_ten(productivity),
            average_energy=format_out_of_ten(energy),
            best_day=best_day or NO_DATA,
        )


# ============================================================================
# PATTERN DETECTOR
# ============================================================================

def _mean(values: List[int]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


class PatternDetector:
    """Applies fixed threshold rules, in declaration order."""

    @staticmethod
    def morning_bias(entries: Sequence[MoodLogEntry], tz: tzinfo) -> Optional[PatternFinding]:
        """
        Rule 1: mood is higher in the morning ([6, 12) local).

        Fires when morning entries are more than a third of all mood-valued
        entries and their mean mood beats the overall mean by 10%.
        """
        all_moods: List[int] = []
        morning_moods: List[int] = []

        for entry in entries:
            value = entry.mood_value
            if value is None:
                continue
            all_moods.append(value)
            hour = to_local(entry.timestamp, tz).hour
            if AnalyticsConfig.MORNING_START_HOUR <= hour < AnalyticsConfig.MORNING_END_HOUR:
                morning_moods.append(value)

        if len(morning_moods) <= len(all_moods) * AnalyticsConfig.MORNING_MIN_SHARE:
            return None

        morning_mean = _mean(morning_moods)
        overall_mean = _mean(all_moods)
        if morning_mean is None or overall_mean is None:
            return None

        if morning_mean > overall_mean * AnalyticsConfig.BIAS_THRESHOLD:
            logger.debug(f"Morning bias: {morning_mean:.2f} vs {overall_mean:.2f}")
            return PatternFinding(
                title=MORNING_PERSON_TITLE,
                description=MORNING_PERSON_DESCRIPTION,
                confidence=AnalyticsConfig.MORNING_CONFIDENCE,
            )
        return None

    @staticmethod
    def weekday_productivity_bias(entries: Sequence[MoodLogEntry], tz: tzinfo) -> Optional[PatternFinding]:
        """Rule 2: productivity is higher Mon-Fri than on Sat/Sun (both sides need data)."""
        weekday: List[int] = []
        weekend: List[int] = []

        for entry in entries:
            if is_weekend(to_local(entry.timestamp, tz)):
                weekend.append(entry.productivity)
            else:
                weekday.append(entry.productivity)

        weekday_mean = _mean(weekday)
        weekend_mean = _mean(weekend)
        if weekday_mean is None or weekend_mean is None:
            return None

        if weekday_mean > weekend_mean * AnalyticsConfig.BIAS_THRESHOLD:
            logger.debug(f"Weekday productivity bias: {weekday_mean:.2f} vs {weekend_mean:.2f}")
            return PatternFinding(
                title=WEEKDAY_WARRIOR_TITLE,
                description=WEEKDAY_WARRIOR_DESCRIPTION,
                confidence=AnalyticsConfig.WEEKDAY_CONFIDENCE,
            )
        return None

    def detect(self, entries: Sequence[MoodLogEntry], now: datetime) -> List[PatternFinding]:
        """
        Runs every rule against the month-to-date entries.

        Returns:
            Findings in rule order, or the single "not enough data" finding.
        """
        tz = ensure_aware(now).tzinfo
        rules = (self.morning_bias, self.weekday_productivity_bias)

        findings = []
        for rule in rules:
            finding = rule(entries, tz)
            if finding is not None:
                findings.append(finding)

        return findings or [NOT_ENOUGH_DATA]
