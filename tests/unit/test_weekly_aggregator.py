from datetime import datetime, timezone

from mood_analytics.core.analyzer import WeeklyAggregator
from mood_analytics.core.models import MoodLogEntry
from mood_analytics.core.timeframes import DAY_KEYS, start_of_week


class TestWeeklyAggregator:
    """Test suite for day-of-week bucketing and means."""

    def setup_method(self):
        self.aggregator = WeeklyAggregator()

    # ========================================================================
    # 1. SHAPE
    # ========================================================================

    def test_empty_input_has_seven_empty_days(self, now):
        weekly = self.aggregator.aggregate([], now)

        assert weekly.keys() == list(DAY_KEYS)
        assert len(weekly) == 7
        for day in weekly:
            assert day.has_data is False
            assert day.mood == 0
            assert day.productivity == 0
            assert day.energy == 0
            assert day.entry_count == 0

    def test_single_day_still_has_seven_keys(self, now, make_entry):
        weekly = self.aggregator.aggregate([make_entry(12)], now)
        assert [day.day for day in weekly] == list(DAY_KEYS)
        assert weekly["Wed"].has_data is True

    def test_week_start_follows_now(self, now):
        weekly = self.aggregator.aggregate([], now)
        assert weekly.week_start == start_of_week(now)

    # ========================================================================
    # 2. MEANS
    # ========================================================================

    def test_monday_two_entries(self, now, make_entry):
        """Mon mood 4 and 2 -> mean 3.0; every other day stays empty."""
        entries = [
            make_entry(10, mood="happy", productivity=8, energy=6),
            make_entry(10, hour=18, mood="angry", productivity=4, energy=4),
        ]
        weekly = self.aggregator.aggregate(entries, now)

        monday = weekly["Mon"]
        assert monday.has_data is True
        assert monday.mood == 3.0
        assert monday.productivity == 6.0
        assert monday.energy == 5.0
        assert monday.entry_count == 2

        for key in DAY_KEYS:
            if key != "Mon":
                assert weekly[key].has_data is False
                assert weekly[key].mood == 0

    def test_means_round_half_up(self, now, make_entry):
        entries = [make_entry(11, productivity=p) for p in (1, 2, 3, 3)]
        weekly = self.aggregator.aggregate(entries, now)
        assert weekly["Tue"].productivity == 2.3

    def test_input_order_does_not_matter(self, now, make_entry):
        entries = [
            make_entry(9, mood="sad", productivity=2),
            make_entry(13, mood="excited", productivity=9),
            make_entry(9, hour=20, mood="calm", productivity=7),
        ]
        forward = self.aggregator.aggregate(entries, now)
        backward = self.aggregator.aggregate(list(reversed(entries)), now)
        assert forward == backward

    # ========================================================================
    # 3. DAY RESOLUTION
    # ========================================================================

    def test_day_comes_from_entry_timestamp_in_local_time(self, now):
        # Monday 23:30 UTC is already Tuesday 00:30 at UTC+1
        entry = MoodLogEntry(
            timestamp=datetime(2025, 3, 10, 23, 30, tzinfo=timezone.utc),
            mood_category="calm", productivity=5, energy=5,
        )
        weekly = self.aggregator.aggregate([entry], now)
        assert weekly["Tue"].has_data is True
        assert weekly["Mon"].has_data is False

    # ========================================================================
    # 4. UNKNOWN CATEGORIES
    # ========================================================================

    def test_unknown_category_counts_but_not_in_mood_mean(self, now, make_entry):
        entries = [
            make_entry(12, mood="bored", productivity=6, energy=2),
            make_entry(12, mood="calm", productivity=8, energy=4),
        ]
        wednesday = self.aggregator.aggregate(entries, now)["Wed"]
        assert wednesday.mood == 3.0
        assert wednesday.productivity == 7.0
        assert wednesday.energy == 3.0
        assert wednesday.entry_count == 2
        assert wednesday.mood_count == 1

    def test_only_unknown_categories_keeps_zero_mood(self, now, make_entry):
        thursday = self.aggregator.aggregate([make_entry(13, mood="bored")], now)["Thu"]
        assert thursday.has_data is True
        assert thursday.mood == 0
        assert thursday.mood_count == 0

    def test_to_dict_lists_days_in_order(self, now, make_entry):
        data = self.aggregator.aggregate([make_entry(10)], now).to_dict()
        assert [d["day"] for d in data["days"]] == list(DAY_KEYS)
        assert data["days"][1]["has_data"] is True
        assert data["week_start"] == "2025-03-09T00:00:00+01:00"
