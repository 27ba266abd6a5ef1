"""
Dashboard statistics: logging streak, weekly average, monthly goal, recent entries.
"""

import logging
from datetime import date, datetime, timedelta
from typing import List, Sequence, Set

from .analyzer import AnalyticsConfig
from .models import (
    NO_DATA,
    DashboardStats,
    MoodLogEntry,
    RecentEntry,
    emoji_for,
    format_out_of_ten,
    mean_rounded,
)
from .timeframes import days_in_month, ensure_aware, in_window, start_of_month, start_of_week, to_instant, to_local, up_to

logger = logging.getLogger(__name__)


class DashboardCalculator:
    """Computes the summary cards shown above the mood logger."""

    @staticmethod
    def _logged_dates(entries: Sequence[MoodLogEntry], now: datetime) -> Set[date]:
        return {to_local(e.timestamp, now.tzinfo).date() for e in entries}

    @classmethod
    def current_streak(cls, entries: Sequence[MoodLogEntry], now: datetime) -> int:
        """
        Consecutive local days with at least one entry, ending today.

        A day without an entry yet today does not break the streak: counting
        then starts from yesterday.
        """
        now = ensure_aware(now)
        logged = cls._logged_dates(up_to(entries, now), now)

        cursor = now.date()
        if cursor not in logged:
            cursor -= timedelta(days=1)

        streak = 0
        while cursor in logged:
            streak += 1
            cursor -= timedelta(days=1)
        return streak

    @staticmethod
    def weekly_average(week_entries: Sequence[MoodLogEntry]) -> str:
        """Mean productivity over the week window, as 'x.x/10'."""
        if not week_entries:
            return NO_DATA
        total = sum(e.productivity for e in week_entries)
        return format_out_of_ten(mean_rounded(total, len(week_entries)))

    @classmethod
    def monthly_goal(cls, month_entries: Sequence[MoodLogEntry], now: datetime) -> str:
        """Distinct days logged this month over the number of days in the month."""
        now = ensure_aware(now)
        return f"{len(cls._logged_dates(month_entries, now))}/{days_in_month(now)}"

    @staticmethod
    def _relative_label(day: date, today: date) -> str:
        delta = (today - day).days
        if delta <= 0:
            return "Today"
        if delta == 1:
            return "Yesterday"
        return f"{delta} days ago"

    @classmethod
    def recent_entries(cls, entries: Sequence[MoodLogEntry], now: datetime,
                       limit: int = AnalyticsConfig.RECENT_ENTRIES_LIMIT) -> List[RecentEntry]:
        """Newest entries first, labelled relative to `now`'s local date."""
        now = ensure_aware(now)
        today = now.date()
        newest_first = sorted(
            entries,
            key=lambda e: to_instant(e.timestamp, now.tzinfo),
            reverse=True,
        )

        recent = []
        for entry in newest_first[:limit]:
            local_ts = to_local(entry.timestamp, now.tzinfo)
            recent.append(RecentEntry(
                label=cls._relative_label(local_ts.date(), today),
                emoji=emoji_for(entry.mood_category),
                mood=entry.mood_category,
                productivity=entry.productivity,
                energy=entry.energy,
            ))
        return recent

    def calculate(self, entries: Sequence[MoodLogEntry], now: datetime) -> DashboardStats:
        """
        Builds all dashboard cards from one entry collection.

        Args:
            entries: Entries up to `now`; the wider the lookback, the longer
                the streak that can be observed.
            now: Reference instant.
        """
        now = ensure_aware(now)
        week_entries = in_window(entries, start_of_week(now), now)
        month_entries = in_window(entries, start_of_month(now), now)

        stats = DashboardStats(
            current_streak_days=self.current_streak(entries, now),
            weekly_average=self.weekly_average(week_entries),
            monthly_goal=self.monthly_goal(month_entries, now),
            recent_entries=self.recent_entries(up_to(entries, now), now),
        )
        logger.debug(f"Dashboard: streak={stats.current_streak_days}, goal={stats.monthly_goal}")
        return stats
