"""
Mood analytics engine: runs every computation stage over one entry collection.
"""

import logging
from datetime import datetime
from typing import Iterable

from .analyzer import MonthlyInsightCalculator, PatternDetector, WeeklyAggregator
from .dashboard import DashboardCalculator
from .models import AnalyticsReport, MoodLogEntry
from .timeframes import ensure_aware, in_window, start_of_month, start_of_week, up_to

logger = logging.getLogger(__name__)


class MoodAnalyticsEngine:
    """Orchestrates the weekly, monthly, pattern and dashboard stages."""

    def __init__(self):
        self.weekly_aggregator = WeeklyAggregator()
        self.monthly_calculator = MonthlyInsightCalculator()
        self.pattern_detector = PatternDetector()
        self.dashboard_calculator = DashboardCalculator()

    def analyze(self, entries: Iterable[MoodLogEntry], now: datetime) -> AnalyticsReport:
        """
        Computes the full analytics report.

        `entries` may be a superset of the analysis windows (e.g. everything
        since `analysis_window_start(now)`); each stage receives only its
        own window. Entries later than `now` are ignored.

        Args:
            entries: Mood-log entries of a single user.
            now: Reference instant; local time is resolved in its timezone.

        Returns:
            AnalyticsReport with weekly, monthly, pattern and dashboard results.
        """
        now = ensure_aware(now)
        relevant = up_to(list(entries), now)

        week_entries = in_window(relevant, start_of_week(now), now)
        month_entries = in_window(relevant, start_of_month(now), now)
        logger.debug(
            f"Analyzing {len(relevant)} entries "
            f"(week: {len(week_entries)}, month: {len(month_entries)})"
        )

        weekly = self.weekly_aggregator.aggregate(week_entries, now)
        monthly = self.monthly_calculator.calculate(month_entries, weekly)
        patterns = self.pattern_detector.detect(month_entries, now)
        dashboard = self.dashboard_calculator.calculate(relevant, now)

        return AnalyticsReport(
            generated_at=now,
            weekly=weekly,
            monthly=monthly,
            patterns=patterns,
            dashboard=dashboard,
        )


def format_report(report: AnalyticsReport) -> str:
    """Plain-text summary of a report."""
    week_line = " | ".join(
        f"{day.day} {day.mood:.1f}" if day.has_data else f"{day.day} -"
        for day in report.weekly
    )
    pattern_lines = "\n".join(
        f"  - {finding.title} ({finding.confidence}): {finding.description}"
        for finding in report.patterns
    )
    monthly = report.monthly
    dashboard = report.dashboard

    return f"""
MOOD ANALYTICS SUMMARY:
=======================
[WEEK]      {week_line}
[MONTH]     Mood: {monthly.most_common_mood} | Productivity: {monthly.average_productivity} | Energy: {monthly.average_energy}
[BEST DAY]  {monthly.best_day}
[STREAK]    {dashboard.current_streak_days} days | Goal: {dashboard.monthly_goal} | Weekly avg: {dashboard.weekly_average}
[PATTERNS]
{pattern_lines}
"""


def log_report(report: AnalyticsReport, _logger: logging.Logger) -> None:
    """Helper to log a report summary."""
    _logger.info("[MOOD_ANALYTICS] Analysis complete")
    if report.patterns:
        _logger.info(f"[MOOD_ANALYTICS] Top pattern: {report.patterns[0].title}")
    _logger.info(f"[MOOD_ANALYTICS] Summary:\n{format_report(report)}")
