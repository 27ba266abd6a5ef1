"""
Offline entry source: mood-log entries from a JSON file.

Expected shape: a list of objects, or {"entries": [...]}, each object with
`timestamp` (ISO 8601), `mood`, `productivity`, `energy` and optional `notes`.
Used by `report --from-file` so analytics can run without a database.
"""

import json
import logging
from pathlib import Path
from typing import List, Union

from mood_analytics.core.models import MoodLogEntry

logger = logging.getLogger(__name__)


class EntryFileError(Exception):
    """Raised when the entry file is missing or not valid JSON."""
    pass


def load_entries(path: Union[str, Path]) -> List[MoodLogEntry]:
    """
    Loads entries from a JSON file.

    Malformed items are skipped with a warning, like malformed documents in
    the database store.

    Raises:
        EntryFileError: If the file is missing, unreadable or not a JSON list.
    """
    path = Path(path).expanduser()

    try:
        txt = path.read_text(encoding="utf-8")
    except OSError as e:
        raise EntryFileError(f"Cannot read entry file {path}: {e}") from e

    try:
        data = json.loads(txt) if txt.strip() else []
    except json.JSONDecodeError as e:
        raise EntryFileError(f"Invalid JSON in {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("entries", [])
    if not isinstance(data, list):
        raise EntryFileError(f"Expected a list of entries in {path}")

    entries: List[MoodLogEntry] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            logger.warning(f"Skipping entry #{index}: not an object")
            continue
        try:
            entries.append(MoodLogEntry.from_mapping(item))
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Skipping entry #{index}: {e!r}")

    logger.info(f"[OK] Loaded {len(entries)} entries from {path}")
    return entries
