import pytest
import os
import sys
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

# Add project root to Python Path so modules can be imported
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mood_analytics.core.models import MoodLogEntry

# ============================================================================
# 1. TIME FIXTURES
# ============================================================================

# Fixed UTC+1 zone keeps day boundaries deterministic without tz database
TZ = timezone(timedelta(hours=1))


@pytest.fixture
def tz():
    return TZ


@pytest.fixture
def now():
    """Saturday 2025-03-15 21:00 (+01:00). Week starts Sun 03-09, month on Sat 03-01."""
    return datetime(2025, 3, 15, 21, 0, tzinfo=TZ)


# ============================================================================
# 2. ENTRY FIXTURES
# ============================================================================

@pytest.fixture
def make_entry():
    """Factory for entries on a March 2025 day, local to TZ."""
    def _make(day: int, hour: int = 9, mood: str = "happy",
              productivity: int = 5, energy: int = 5, month: int = 3,
              minute: int = 0) -> MoodLogEntry:
        return MoodLogEntry(
            timestamp=datetime(2025, month, day, hour, minute, tzinfo=TZ),
            mood_category=mood,
            productivity=productivity,
            energy=energy,
        )
    return _make


@pytest.fixture(autouse=True)
def mock_env_vars():
    """Strips database / analytics settings from the environment for all tests."""
    with patch.dict(os.environ):
        for key in list(os.environ):
            if key.startswith(("MONGODB_", "MOOD_ANALYTICS_")):
                del os.environ[key]
        yield
