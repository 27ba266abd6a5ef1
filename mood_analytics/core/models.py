"""
Data model for the mood analytics engine.

Raw input is a collection of immutable `MoodLogEntry` records; everything
else in here is a derived, per-request result handed to the presentation
layer (each exposes `to_dict()`).
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional

from .timeframes import DAY_KEYS


# ============================================================================
# MOOD CATEGORIES & LOOKUP TABLES
# ============================================================================

class MoodCategory(Enum):
    """Closed set of mood labels a user can log."""
    SAD = "sad"
    ANGRY = "angry"
    CALM = "calm"
    HAPPY = "happy"
    EXCITED = "excited"


# Single source of truth for category -> numeric mood value (1..5)
MOOD_VALUES: Dict[str, int] = {
    MoodCategory.SAD.value: 1,
    MoodCategory.ANGRY.value: 2,
    MoodCategory.CALM.value: 3,
    MoodCategory.HAPPY.value: 4,
    MoodCategory.EXCITED.value: 5,
}

MOOD_EMOJIS: Dict[str, str] = {
    MoodCategory.HAPPY.value: "😊",
    MoodCategory.SAD.value: "😢",
    MoodCategory.ANGRY.value: "😠",
    MoodCategory.CALM.value: "😌",
    MoodCategory.EXCITED.value: "🤩",
}

NO_DATA = "N/A"


def mood_value_for(category: str) -> Optional[int]:
    """Numeric value of a category, None for labels outside the fixed set."""
    return MOOD_VALUES.get(category)


def emoji_for(category: str) -> str:
    return MOOD_EMOJIS.get(category, "")


def format_mood_label(category: str) -> str:
    """'happy' -> 'Happy 😊'. Unknown categories keep their text and get no emoji."""
    if not category.strip():
        return NO_DATA
    capitalized = category[:1].upper() + category[1:]
    return f"{capitalized} {emoji_for(category)}".rstrip()


# ============================================================================
# NUMERIC HELPERS
# ============================================================================

def mean_rounded(total: int, count: int, places: int = 1) -> float:
    """
    sum / count rounded half away from zero.

    Callers must guard `count > 0`; a zero count returns the 0 sentinel.
    """
    if count <= 0:
        return 0.0
    quantum = Decimal(1).scaleb(-places)
    value = (Decimal(total) / Decimal(count)).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(value)


def format_out_of_ten(value: float) -> str:
    return f"{value:.1f}/10"


# ============================================================================
# RAW INPUT
# ============================================================================

@dataclass(frozen=True)
class MoodLogEntry:
    """One timestamped self-report. Owned by the entry store, never mutated here."""
    timestamp: datetime
    mood_category: str
    productivity: int
    energy: int
    notes: str = ""
    user_id: Optional[str] = None

    @property
    def mood_value(self) -> Optional[int]:
        return mood_value_for(self.mood_category)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "MoodLogEntry":
        """
        Builds an entry from a stored document or JSON object.

        Accepts `timestamp` as a datetime or an ISO 8601 string ('Z' allowed).

        Raises:
            KeyError: If a required field is missing.
            ValueError: If the timestamp or a score cannot be parsed, or the
                mood category is blank.
            TypeError: If a field has an unusable type.
        """
        raw_ts = data["timestamp"]
        if isinstance(raw_ts, datetime):
            ts = raw_ts
        elif isinstance(raw_ts, str):
            ts = datetime.fromisoformat(raw_ts.strip().replace("Z", "+00:00"))
        else:
            raise TypeError(f"Unsupported timestamp type: {type(raw_ts).__name__}")

        mood = data["mood"]
        if not isinstance(mood, str):
            raise TypeError(f"Mood category must be a string, got {type(mood).__name__}")
        if not mood.strip():
            raise ValueError("Mood category is empty")

        user_id = data.get("user_id")
        return cls(
            timestamp=ts,
            mood_category=mood.strip(),
            productivity=_as_int(data["productivity"], "productivity"),
            energy=_as_int(data["energy"], "energy"),
            notes=str(data.get("notes") or ""),
            user_id=str(user_id) if user_id is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "mood": self.mood_category,
            "mood_value": self.mood_value,
            "productivity": self.productivity,
            "energy": self.energy,
            "notes": self.notes,
            "user_id": self.user_id,
        }


def _as_int(value: Any, name: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise TypeError(f"{name} must be an integer, got bool")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{name} must be an integer, got {value}")
        return int(value)
    return int(value)


# ============================================================================
# DERIVED RESULTS
# ============================================================================

@dataclass(frozen=True)
class DaySummary:
    """
    Means for one day-of-week bin.

    `has_data` disambiguates the 0 sentinel; `mood_count` counts only
    entries with a known category.
    """
    day: str
    mood: float = 0.0
    productivity: float = 0.0
    energy: float = 0.0
    has_data: bool = False
    entry_count: int = 0
    mood_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day": self.day,
            "mood": self.mood,
            "productivity": self.productivity,
            "energy": self.energy,
            "has_data": self.has_data,
            "entry_count": self.entry_count,
            "mood_count": self.mood_count,
        }


@dataclass(frozen=True)
class WeeklySummary:
    """All seven day bins, iterated in canonical Sun..Sat order."""
    week_start: datetime
    days: Dict[str, DaySummary]

    def __getitem__(self, key: str) -> DaySummary:
        return self.days[key]

    def __iter__(self) -> Iterator[DaySummary]:
        return (self.days[key] for key in DAY_KEYS)

    def __len__(self) -> int:
        return len(self.days)

    def keys(self) -> List[str]:
        return [key for key in DAY_KEYS if key in self.days]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "week_start": self.week_start.isoformat(),
            "days": [day.to_dict() for day in self],
        }


@dataclass(frozen=True)
class MonthlyInsight:
    most_common_mood: str = NO_DATA
    average_productivity: str = NO_DATA
    average_energy: str = NO_DATA
    best_day: str = NO_DATA

    def to_dict(self) -> Dict[str, str]:
        return {
            "most_common_mood": self.most_common_mood,
            "average_productivity": self.average_productivity,
            "average_energy": self.average_energy,
            "best_day": self.best_day,
        }


@dataclass(frozen=True)
class PatternFinding:
    title: str
    description: str
    confidence: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "title": self.title,
            "description": self.description,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class RecentEntry:
    label: str          # "Today", "Yesterday", "3 days ago"
    emoji: str
    mood: str
    productivity: int
    energy: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "emoji": self.emoji,
            "mood": self.mood,
            "productivity": self.productivity,
            "energy": self.energy,
        }


@dataclass(frozen=True)
class DashboardStats:
    current_streak_days: int = 0
    weekly_average: str = NO_DATA
    monthly_goal: str = "0/0"
    recent_entries: List[RecentEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_streak_days": self.current_streak_days,
            "weekly_average": self.weekly_average,
            "monthly_goal": self.monthly_goal,
            "recent_entries": [entry.to_dict() for entry in self.recent_entries],
        }


@dataclass(frozen=True)
class AnalyticsReport:
    generated_at: datetime
    weekly: WeeklySummary
    monthly: MonthlyInsight
    patterns: List[PatternFinding]
    dashboard: DashboardStats

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generated_at": self.generated_at.isoformat(),
            "weekly": self.weekly.to_dict(),
            "monthly": self.monthly.to_dict(),
            "patterns": [finding.to_dict() for finding in self.patterns],
            "dashboard": self.dashboard.to_dict(),
        }
