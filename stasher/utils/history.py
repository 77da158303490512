"""Move history stored in SQLite."""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import List

from loguru import logger

from stasher.models.media import MoveHistoryRecord

_COLUMNS = "id, original_file_name, new_file_name, source_path, destination_path, moved_at"


def _row_to_record(row: tuple) -> MoveHistoryRecord:
    return MoveHistoryRecord(
        id=row[0],
        original_file_name=row[1],
        new_file_name=row[2],
        source_path=row[3],
        destination_path=row[4],
        moved_at=datetime.fromisoformat(row[5]),
    )


class HistoryStore:
    """
    Append-only log of completed moves.

    Every call opens its own connection; failures are logged and reported
    through the return value so a history problem never blocks a move.

    Attributes:
        db_path: Path to the SQLite database file.
    """

    def __init__(self, db_path: Path) -> None:
        """
        Initialize the store and create its table.

        Args:
            db_path: Path to the SQLite database file. Created if not exists.
        """
        self.db_path = db_path
        self.create_table()

    def create_table(self) -> bool:
        """Create the history table if it doesn't exist."""
        try:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            with sqlite3.connect(str(self.db_path)) as conn:
                conn.execute('''CREATE TABLE IF NOT EXISTS move_history
                                (id INTEGER PRIMARY KEY AUTOINCREMENT,
                                 original_file_name TEXT NOT NULL,
                                 new_file_name TEXT NOT NULL,
                                 source_path TEXT NOT NULL,
                                 destination_path TEXT NOT NULL,
                                 moved_at TEXT NOT NULL)''')
                conn.commit()
            return True
        except (sqlite3.Error, OSError) as e:
            logger.warning(f"SQLite error creating history table in {self.db_path}: {e}")
            return False

    def record(self, record: MoveHistoryRecord) -> bool:
        """
        Append a move to the history.

        Args:
            record: Completed move; its id is filled in on success.

        Returns:
            True if the record was stored.
        """
        try:
            with sqlite3.connect(str(self.db_path)) as conn:
                cursor = conn.execute(
                    'INSERT INTO move_history (original_file_name, new_file_name, '
                    'source_path, destination_path, moved_at) VALUES (?, ?, ?, ?, ?)',
                    (
                        record.original_file_name,
                        record.new_file_name,
                        record.source_path,
                        record.destination_path,
                        record.moved_at.isoformat(),
                    )
                )
                conn.commit()
                record.id = cursor.lastrowid
            return True
        except sqlite3.Error as e:
            logger.warning(f"SQLite error recording history in {self.db_path}: {e}")
            return False

    def list_all(self) -> List[MoveHistoryRecord]:
        """Return every record, most recent first."""
        try:
            with sqlite3.connect(str(self.db_path)) as conn:
                rows = conn.execute(
                    f'SELECT {_COLUMNS} FROM move_history ORDER BY moved_at DESC, id DESC'
                ).fetchall()
        except sqlite3.Error as e:
            logger.warning(f"SQLite error reading history from {self.db_path}: {e}")
            return []
        return [_row_to_record(row) for row in rows]

    def search(self, text: str) -> List[MoveHistoryRecord]:
        """
        Find records whose original or new file name contains some text.

        Args:
            text: Case-insensitive search text.

        Returns:
            Matching records, most recent first.
        """
        pattern = f"%{text}%"
        try:
            with sqlite3.connect(str(self.db_path)) as conn:
                rows = conn.execute(
                    f'SELECT {_COLUMNS} FROM move_history '
                    'WHERE original_file_name LIKE ? OR new_file_name LIKE ? '
                    'ORDER BY moved_at DESC, id DESC',
                    (pattern, pattern)
                ).fetchall()
        except sqlite3.Error as e:
            logger.warning(f"SQLite error searching history in {self.db_path}: {e}")
            return []
        return [_row_to_record(row) for row in rows]

    def delete(self, record_id: int) -> bool:
        """
        Delete one record.

        Returns:
            True if a record was deleted.
        """
        try:
            with sqlite3.connect(str(self.db_path)) as conn:
                cursor = conn.execute('DELETE FROM move_history WHERE id = ?', (record_id,))
                conn.commit()
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.warning(f"SQLite error deleting history record {record_id}: {e}")
            return False

    def clear(self) -> int:
        """
        Delete every record.

        Returns:
            Number of records deleted.
        """
        try:
            with sqlite3.connect(str(self.db_path)) as conn:
                cursor = conn.execute('DELETE FROM move_history')
                conn.commit()
                return cursor.rowcount
        except sqlite3.Error as e:
            logger.warning(f"SQLite error clearing history in {self.db_path}: {e}")
            return 0
