"""SQLite cache for resolved metadata."""

import sqlite3
import time
from pathlib import Path
from typing import Optional

from loguru import logger

from stasher.config.settings import SENTINEL_VALUE
from stasher.models.media import MediaType, NormalizedKey, ResolvedMetadata


def _from_sentinel(value: int) -> Optional[int]:
    """Map the storage sentinel back to None."""
    return None if value == SENTINEL_VALUE else value


class MetadataCache:
    """
    SQLite-based cache of resolved metadata.

    Rows are addressed by the full NormalizedKey (title text, type, season,
    episode). Season and episode are stored as SENTINEL_VALUE when absent,
    so the lookup key stays total and movie rows never collide with series
    rows of the same title.

    Attributes:
        db_path: Path to the SQLite database file.
        conn: Active database connection, or None if closed.
    """

    def __init__(self, db_path: Path = Path("cache.db")) -> None:
        """
        Initialize the cache database.

        Args:
            db_path: Path to the SQLite database file. Created if not exists.
        """
        self.db_path = db_path
        self.conn: Optional[sqlite3.Connection] = None
        self._connect()

    def _connect(self) -> None:
        """Establish database connection and create tables."""
        try:
            if str(self.db_path) != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(str(self.db_path))
            self.create_tables()
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Database connection error: {e}")
            self.conn = None

    def create_tables(self) -> None:
        """Create the cache table if it doesn't exist."""
        if not self.conn:
            return

        try:
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS metadata_cache (
                    lookup_key TEXT NOT NULL,
                    type TEXT NOT NULL,
                    season INTEGER NOT NULL,
                    episode INTEGER NOT NULL,
                    title TEXT NOT NULL,
                    year INTEGER,
                    synopsis TEXT,
                    cast_list TEXT,
                    content_rating TEXT,
                    rating INTEGER,
                    poster_url TEXT,
                    episode_title TEXT,
                    timestamp INTEGER,
                    UNIQUE (lookup_key, type, season, episode)
                )
            """)
            self.conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Error creating tables: {e}")

    def get(self, key: NormalizedKey) -> Optional[ResolvedMetadata]:
        """
        Retrieve the cached record for a key.

        Args:
            key: Exact lookup key.

        Returns:
            Cached ResolvedMetadata, or None on a miss or database error.
        """
        if not self.conn:
            return None

        try:
            row = self.conn.execute(
                "SELECT title, year, synopsis, cast_list, content_rating, rating, "
                "poster_url, episode_title, type, season, episode "
                "FROM metadata_cache "
                "WHERE lookup_key = ? AND type = ? AND season = ? AND episode = ?",
                (key.title, key.media_type.value, key.season, key.episode)
            ).fetchone()
        except sqlite3.Error as e:
            logger.warning(f"Error retrieving metadata cache: {e}")
            return None

        if row is None:
            return None

        try:
            media_type = MediaType.from_label(row[8])
        except ValueError as e:
            logger.warning(f"Ignoring cache row for '{key.title}': {e}")
            return None

        return ResolvedMetadata(
            title=row[0],
            media_type=media_type,
            year=row[1],
            synopsis=row[2],
            cast=row[3],
            content_rating=row[4],
            rating=row[5],
            poster_url=row[6],
            episode_title=row[7],
            season=_from_sentinel(row[9]),
            episode=_from_sentinel(row[10]),
            lookup_key=key.title,
        )

    def contains(self, key: NormalizedKey) -> bool:
        """Check if a row exists for a key."""
        if not self.conn:
            return False

        try:
            row = self.conn.execute(
                "SELECT 1 FROM metadata_cache "
                "WHERE lookup_key = ? AND type = ? AND season = ? AND episode = ?",
                (key.title, key.media_type.value, key.season, key.episode)
            ).fetchone()
        except sqlite3.Error as e:
            logger.warning(f"Error checking metadata cache: {e}")
            return False
        return row is not None

    def put(self, key: NormalizedKey, metadata: ResolvedMetadata) -> None:
        """
        Store a record under a key, replacing any existing row.

        Args:
            key: Lookup key the record answers.
            metadata: Record to store.
        """
        if not self.conn:
            return

        try:
            self.conn.execute(
                "INSERT OR REPLACE INTO metadata_cache "
                "(lookup_key, type, season, episode, title, year, synopsis, cast_list, "
                "content_rating, rating, poster_url, episode_title, timestamp) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    key.title,
                    key.media_type.value,
                    key.season,
                    key.episode,
                    metadata.title,
                    metadata.year,
                    metadata.synopsis,
                    metadata.cast,
                    metadata.content_rating,
                    metadata.rating,
                    metadata.poster_url,
                    metadata.episode_title,
                    int(time.time()),
                )
            )
            self.conn.commit()
        except sqlite3.Error as e:
            logger.warning(f"Error saving metadata cache: {e}")

    def count(self) -> int:
        """Return the number of cached rows."""
        if not self.conn:
            return 0
        try:
            return self.conn.execute("SELECT COUNT(*) FROM metadata_cache").fetchone()[0]
        except sqlite3.Error as e:
            logger.warning(f"Error counting metadata cache: {e}")
            return 0

    def close(self) -> None:
        """Close the database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    def __enter__(self) -> "MetadataCache":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit, closes the connection."""
        self.close()
