"""
MongoDB entry store for mood-log entries.

This module provides database operations for:
- Appending mood-log entries (the log is append-only, never upserted)
- Retrieving a user's entries within a timestamp range
- Converting between stored documents and MoodLogEntry records
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pymongo
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import OperationFailure, PyMongoError, ServerSelectionTimeoutError
import certifi

from mood_analytics.config import Settings
from mood_analytics.core.models import MoodLogEntry

logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

ENTRIES_COLLECTION_NAME = "mood_logs"
CONNECTION_TIMEOUT_MS = 10000


# ============================================================================
# EXCEPTIONS
# ============================================================================

class MongoDBConnectionError(Exception):
    """Raised when MongoDB connection fails."""
    pass


class MongoDBOperationError(Exception):
    """Raised when database operations fail."""
    pass


# ============================================================================
# DATABASE CONNECTION
# ============================================================================

class DatabaseConfig:
    """Encapsulates MongoDB connection configuration."""

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize database configuration.

        Args:
            settings: Runtime settings (defaults to the environment)

        Raises:
            ValueError: If MONGODB_URI is not configured
        """
        settings = settings or Settings.from_env()
        self.uri = settings.mongodb_uri
        self.database_name = settings.database_name
        if not self.uri:
            raise ValueError("MONGODB_URI environment variable not set")

    def get_client(self) -> MongoClient:
        """
        Creates a MongoDB client with secure TLS configuration.

        Returns:
            Connected MongoClient instance.

        Raises:
            MongoDBConnectionError: If connection fails.
        """
        try:
            client = MongoClient(
                self.uri,
                tlsCAFile=certifi.where(),
                tz_aware=True,
                serverSelectionTimeoutMS=CONNECTION_TIMEOUT_MS,
                connectTimeoutMS=CONNECTION_TIMEOUT_MS
            )
            # Verify connection
            client.admin.command('ping')
            logger.info("[OK] MongoDB connected successfully")
            return client

        except ServerSelectionTimeoutError:
            logger.error("MongoDB connection timeout")
            raise MongoDBConnectionError("Connection timeout") from None
        except OperationFailure as e:
            logger.error(f"MongoDB authentication failed: {e}")
            raise MongoDBConnectionError(f"Authentication failed: {e}") from None
        except PyMongoError as e:
            logger.error(f"MongoDB connection failed: {e}")
            raise MongoDBConnectionError(str(e)) from e


class DatabaseConnection:
    """Singleton connection manager for MongoDB."""

    _instance: Optional['DatabaseConnection'] = None
    _client: Optional[MongoClient] = None
    _database_name: Optional[str] = None

    def __new__(cls) -> 'DatabaseConnection':
        """Singleton pattern: single instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def get_client(self, settings: Optional[Settings] = None) -> MongoClient:
        """
        Gets or creates MongoDB client.

        Raises:
            MongoDBConnectionError: If connection fails.
        """
        if self._client is None:
            try:
                config = DatabaseConfig(settings)
            except ValueError as e:
                logger.error(str(e))
                raise MongoDBConnectionError(str(e)) from e
            self._client = config.get_client()
            self._database_name = config.database_name

        return self._client

    def get_database(self, settings: Optional[Settings] = None) -> Database:
        """
        Gets database instance.

        Raises:
            MongoDBConnectionError: If connection fails.
        """
        client = self.get_client(settings)
        return client[self._database_name]

    def close(self) -> None:
        """Closes database connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._database_name = None
            logger.info("MongoDB connection closed")


# ============================================================================
# DOCUMENT MAPPING
# ============================================================================

def _as_utc(ts: datetime) -> datetime:
    # BSON datetimes are UTC; naive values coming back are UTC too
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def entry_to_document(entry: MoodLogEntry, user_id: str) -> Dict[str, Any]:
    """Serializes an entry for storage (timestamp stored as UTC)."""
    return {
        "user_id": user_id,
        "timestamp": _as_utc(entry.timestamp),
        "mood": entry.mood_category,
        "mood_value": entry.mood_value,
        "productivity": entry.productivity,
        "energy": entry.energy,
        "notes": entry.notes,
        "created_at": datetime.now(timezone.utc),
    }


def document_to_entry(doc: Dict[str, Any]) -> Optional[MoodLogEntry]:
    """
    Parses a stored document. Malformed documents are skipped (None) with a warning.
    """
    try:
        entry = MoodLogEntry.from_mapping(doc)
    except (KeyError, ValueError, TypeError) as e:
        logger.warning(f"Skipping malformed mood log {doc.get('_id')}: {e!r}")
        return None

    if entry.timestamp.tzinfo is None:
        # Stored values are UTC even when the client is not tz-aware
        entry = replace(entry, timestamp=_as_utc(entry.timestamp))
    return entry


# ============================================================================
# ENTRY MANAGEMENT
# ============================================================================

class MoodLogManager:
    """Manages mood-log storage and retrieval."""

    @staticmethod
    def ensure_indexes(collection: Collection) -> None:
        """Creates the (user_id, timestamp) index used by range queries."""
        try:
            collection.create_index(
                [("user_id", pymongo.ASCENDING), ("timestamp", pymongo.ASCENDING)],
                name="user_timestamp"
            )
        except PyMongoError as e:
            logger.warning(f"Index creation failed: {e}")

    @staticmethod
    def save_entry(collection: Collection,
                   entry: MoodLogEntry,
                   user_id: str) -> Any:
        """
        Appends one entry.

        Args:
            collection: MongoDB collection.
            entry: Entry to store.
            user_id: Owner of the entry.

        Returns:
            Inserted document id.

        Raises:
            MongoDBOperationError: If insert fails.
        """
        try:
            result = collection.insert_one(entry_to_document(entry, user_id))
            logger.info(f"[OK] Mood log saved for {user_id} @ {entry.timestamp.isoformat()}")
            return result.inserted_id
        except PyMongoError as e:
            logger.error(f"Failed to save mood log: {e}")
            raise MongoDBOperationError(f"Save failed: {e}") from e

    @staticmethod
    def get_entries(collection: Collection,
                    user_id: str,
                    since: datetime,
                    until: Optional[datetime] = None) -> List[MoodLogEntry]:
        """
        Retrieves all entries of a user with since <= timestamp (<= until).

        Args:
            collection: MongoDB collection.
            user_id: Owner of the entries.
            since: Inclusive lower bound (aware datetime).
            until: Optional inclusive upper bound.

        Returns:
            Parsed entries, in no particular order.

        Raises:
            MongoDBOperationError: If the query fails.
        """
        time_filter: Dict[str, datetime] = {"$gte": _as_utc(since)}
        if until is not None:
            time_filter["$lte"] = _as_utc(until)

        query = {"user_id": user_id, "timestamp": time_filter}

        try:
            documents = list(collection.find(query))
        except PyMongoError as e:
            logger.error(f"Failed to retrieve mood logs for {user_id}: {e}")
            raise MongoDBOperationError(f"Retrieval failed: {e}") from e

        entries = [entry for entry in map(document_to_entry, documents) if entry is not None]
        skipped = len(documents) - len(entries)

        logger.info(f"[OK] Retrieved {len(entries)} mood logs for {user_id}"
                    + (f" ({skipped} skipped)" if skipped else ""))
        return entries


# ============================================================================
# PUBLIC API
# ============================================================================

def get_database(settings: Optional[Settings] = None) -> Database:
    """
    Gets database instance.
    This is the main entry point for database access.

    Raises:
        MongoDBConnectionError: If connection fails.
    """
    try:
        conn = DatabaseConnection()
        return conn.get_database(settings)
    except MongoDBConnectionError as e:
        logger.error(f"Database connection failed: {e}")
        raise


def get_entries_collection(settings: Optional[Settings] = None) -> Collection:
    """Returns the mood-log collection, with its range-query index in place."""
    collection = get_database(settings)[ENTRIES_COLLECTION_NAME]
    MoodLogManager.ensure_indexes(collection)
    return collection


def save_entry(collection: Collection,
               entry: MoodLogEntry,
               user_id: str) -> Any:
    """
    Appends a mood-log entry.

    Raises:
        MongoDBOperationError: If save fails.
    """
    return MoodLogManager.save_entry(collection, entry, user_id)


def get_entries(collection: Collection,
                user_id: str,
                since: datetime,
                until: Optional[datetime] = None) -> List[MoodLogEntry]:
    """
    Retrieves a user's entries in [since, until].

    Raises:
        MongoDBOperationError: If the query fails.
    """
    return MoodLogManager.get_entries(collection, user_id, since, until)
