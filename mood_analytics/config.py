"""
Runtime settings read from the environment (a .env file is loaded by main).

Variables:
- MONGODB_URI: connection string for the entry store
- MONGODB_DATABASE: database name (default "mood_tracker")
- MOOD_ANALYTICS_TIMEZONE: IANA zone for local-time resolution (default: system local)
- MOOD_ANALYTICS_LOG_DIR: directory for the log file (default: console only)
"""

import os
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_DATABASE_NAME = "mood_tracker"


@dataclass
class Settings:
    """Encapsulates environment-driven configuration."""
    mongodb_uri: Optional[str] = None
    database_name: str = DEFAULT_DATABASE_NAME
    timezone_name: Optional[str] = None
    log_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            mongodb_uri=os.environ.get("MONGODB_URI") or None,
            database_name=os.environ.get("MONGODB_DATABASE") or DEFAULT_DATABASE_NAME,
            timezone_name=os.environ.get("MOOD_ANALYTICS_TIMEZONE") or None,
            log_dir=os.environ.get("MOOD_ANALYTICS_LOG_DIR") or None,
        )

    def get_timezone(self) -> tzinfo:
        """
        Resolves the analysis timezone.

        Raises:
            ValueError: If MOOD_ANALYTICS_TIMEZONE names an unknown zone.
        """
        if not self.timezone_name:
            return datetime.now().astimezone().tzinfo
        try:
            return ZoneInfo(self.timezone_name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone {self.timezone_name!r}") from e
