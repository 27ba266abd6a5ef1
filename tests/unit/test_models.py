"""Tests for lookup tables, rounding and entry parsing."""

from datetime import datetime, timedelta, timezone

import pytest

from mood_analytics.core.models import (
    MOOD_VALUES,
    MoodCategory,
    MoodLogEntry,
    emoji_for,
    format_mood_label,
    format_out_of_ten,
    mean_rounded,
    mood_value_for,
)

# ---- lookup tables ----


def test_mood_values_cover_every_category():
    assert {c.value for c in MoodCategory} == set(MOOD_VALUES)
    assert sorted(MOOD_VALUES.values()) == [1, 2, 3, 4, 5]


def test_mood_value_order():
    assert mood_value_for("sad") == 1
    assert mood_value_for("angry") == 2
    assert mood_value_for("calm") == 3
    assert mood_value_for("happy") == 4
    assert mood_value_for("excited") == 5


def test_unknown_category_has_no_value_or_emoji():
    assert mood_value_for("bored") is None
    assert emoji_for("bored") == ""


def test_format_mood_label_known():
    assert format_mood_label("happy") == "Happy 😊"
    assert format_mood_label("excited") == "Excited 🤩"


def test_format_mood_label_unknown_passes_through():
    assert format_mood_label("bored") == "Bored"
    assert format_mood_label("mixed Feelings") == "Mixed Feelings"


# ---- rounding ----


def test_mean_rounded_half_away_from_zero():
    assert mean_rounded(9, 4) == 2.3    # 2.25
    assert mean_rounded(13, 3) == 4.3   # 4.333...
    assert mean_rounded(6, 4) == 1.5


def test_mean_rounded_zero_count_is_sentinel():
    assert mean_rounded(0, 0) == 0.0


def test_format_out_of_ten():
    assert format_out_of_ten(7.0) == "7.0/10"
    assert format_out_of_ten(6.3) == "6.3/10"


# ---- MoodLogEntry ----


def test_entry_mood_value_derived_from_category():
    entry = MoodLogEntry(timestamp=datetime(2025, 3, 10, tzinfo=timezone.utc),
                         mood_category="calm", productivity=5, energy=5)
    assert entry.mood_value == 3


def test_from_mapping_iso_string():
    entry = MoodLogEntry.from_mapping({
        "timestamp": "2025-03-10T08:30:00Z",
        "mood": "happy",
        "productivity": 8,
        "energy": 6,
        "notes": "good sleep",
        "user_id": "alice",
    })
    assert entry.timestamp == datetime(2025, 3, 10, 8, 30, tzinfo=timezone.utc)
    assert entry.mood_category == "happy"
    assert entry.productivity == 8
    assert entry.notes == "good sleep"
    assert entry.user_id == "alice"


def test_from_mapping_datetime_and_defaults():
    ts = datetime(2025, 3, 10, 8, 30, tzinfo=timezone(timedelta(hours=1)))
    entry = MoodLogEntry.from_mapping({"timestamp": ts, "mood": "sad", "productivity": 3.0, "energy": "4"})
    assert entry.timestamp == ts
    assert entry.productivity == 3
    assert entry.energy == 4
    assert entry.notes == ""
    assert entry.user_id is None


def test_from_mapping_missing_field():
    with pytest.raises(KeyError):
        MoodLogEntry.from_mapping({"timestamp": "2025-03-10T08:30:00", "mood": "sad", "energy": 4})


def test_from_mapping_bad_timestamp():
    with pytest.raises(ValueError):
        MoodLogEntry.from_mapping({"timestamp": "yesterday", "mood": "sad", "productivity": 3, "energy": 4})


def test_from_mapping_rejects_fractional_score():
    with pytest.raises(ValueError):
        MoodLogEntry.from_mapping({"timestamp": "2025-03-10T08:30:00", "mood": "sad", "productivity": 3.5, "energy": 4})


def test_to_dict_includes_mood_value():
    entry = MoodLogEntry(timestamp=datetime(2025, 3, 10, tzinfo=timezone.utc),
                         mood_category="excited", productivity=9, energy=9)
    data = entry.to_dict()
    assert data["mood"] == "excited"
    assert data["mood_value"] == 5
    assert data["timestamp"] == "2025-03-10T00:00:00+00:00"


def test_from_mapping_rejects_blank_category():
    with pytest.raises(ValueError):
        MoodLogEntry.from_mapping({"timestamp": "2025-03-10T08:30:00", "mood": "   ", "productivity": 3, "energy": 4})


def test_format_mood_label_blank_is_na():
    assert format_mood_label("") == "N/A"
    assert format_mood_label("  ") == "N/A"
