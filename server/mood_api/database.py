"""SQLite-backed sheet store for mood data.

Each logical sheet is an ordered set of text rows keyed by a 1-based row
number, mirroring a spreadsheet tab. Row 1 holds the header once provisioned.
"""
import json
import logging
import sqlite3
from contextlib import contextmanager
from typing import Generator, List, Optional, Sequence

from mood_analytics.errors import SchemaError, StoreUnavailable
from mood_analytics.store import AppendResult, Row

from .config import Settings, get_settings

log = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS sheets (
    name TEXT PRIMARY KEY
);
CREATE TABLE IF NOT EXISTS sheet_rows (
    sheet TEXT NOT NULL,
    row_number INTEGER NOT NULL,
    cells TEXT NOT NULL,
    PRIMARY KEY (sheet, row_number)
);
"""


def _to_cells(row: Sequence[object]) -> str:
    cells = []
    for value in row:
        if value is None:
            cells.append("")
        elif isinstance(value, bool):
            cells.append("TRUE" if value else "FALSE")
        else:
            cells.append(str(value))
    return json.dumps(cells)


class SheetStore:
    """
    Sheet store persisted in a single SQLite file.

    Every call opens its own connection, bounded by `timeout` seconds of
    waiting on locks held by other writers. Writes take the write lock up
    front (BEGIN IMMEDIATE) so row numbering and header provisioning are
    atomic across processes.
    """

    def __init__(self, db_path: str, timeout: float = 5.0):
        self.db_path = db_path
        self.timeout = timeout

    @contextmanager
    def _connect(self, write: bool = False) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(
                self.db_path,
                timeout=self.timeout,
                isolation_level=None,
                check_same_thread=False,
            )
            conn.executescript(SCHEMA)
        except sqlite3.Error as e:
            log.error(f"[STORE] Cannot open {self.db_path}: {e}")
            raise StoreUnavailable(f"Sheet store unavailable: {e}") from e

        conn.row_factory = sqlite3.Row
        try:
            if write:
                conn.execute("BEGIN IMMEDIATE")
            yield conn
            if conn.in_transaction:
                conn.commit()
        except sqlite3.Error as e:
            if conn.in_transaction:
                conn.rollback()
            log.error(f"[STORE] Database error on {self.db_path}: {e}")
            raise StoreUnavailable(f"Sheet store unavailable: {e}") from e
        except Exception:
            if conn.in_transaction:
                conn.rollback()
            raise
        finally:
            conn.close()

    @staticmethod
    def _require_sheet(conn: sqlite3.Connection, table: str) -> None:
        cursor = conn.execute("SELECT 1 FROM sheets WHERE name = ?", (table,))
        if cursor.fetchone() is None:
            raise SchemaError(f"Sheet '{table}' does not exist")

    def append(self, table: str, row: Sequence[object]) -> AppendResult:
        """Append a row after the last row of a sheet."""
        with self._connect(write=True) as conn:
            self._require_sheet(conn, table)
            cursor = conn.execute(
                "SELECT COALESCE(MAX(row_number), 0) + 1 AS next_row FROM sheet_rows WHERE sheet = ?",
                (table,),
            )
            row_number = cursor.fetchone()["next_row"]
            conn.execute(
                "INSERT INTO sheet_rows (sheet, row_number, cells) VALUES (?, ?, ?)",
                (table, row_number, _to_cells(row)),
            )
        return AppendResult(sheet=table, row_number=row_number)

    def read(
        self,
        table: str,
        first_row: Optional[int] = None,
        last_row: Optional[int] = None,
    ) -> List[Row]:
        """Read rows of a sheet in row order, header included."""
        query = "SELECT cells FROM sheet_rows WHERE sheet = ?"
        params: list = [table]
        if first_row is not None:
            query += " AND row_number >= ?"
            params.append(first_row)
        if last_row is not None:
            query += " AND row_number <= ?"
            params.append(last_row)
        query += " ORDER BY row_number"

        with self._connect() as conn:
            self._require_sheet(conn, table)
            rows = conn.execute(query, params).fetchall()
        return [json.loads(r["cells"]) for r in rows]

    def update(self, table: str, row_number: int, row: Sequence[object]) -> None:
        """Overwrite one row, creating it if absent."""
        if row_number < 1:
            raise ValueError(f"Row numbers start at 1, got {row_number}")
        with self._connect(write=True) as conn:
            self._require_sheet(conn, table)
            conn.execute(
                "INSERT OR REPLACE INTO sheet_rows (sheet, row_number, cells) VALUES (?, ?, ?)",
                (table, row_number, _to_cells(row)),
            )

    def ensure_table(self, table: str) -> bool:
        """Create a sheet if absent. Returns True when it was created."""
        with self._connect(write=True) as conn:
            cursor = conn.execute("INSERT OR IGNORE INTO sheets (name) VALUES (?)", (table,))
            created = cursor.rowcount == 1
        if created:
            log.info(f"[STORE] Created sheet {table}")
        return created

    def ensure_headers(self, table: str, columns: Sequence[str]) -> bool:
        """Write the header row unless row 1 is already taken."""
        with self._connect(write=True) as conn:
            self._require_sheet(conn, table)
            cursor = conn.execute(
                "INSERT OR IGNORE INTO sheet_rows (sheet, row_number, cells) VALUES (?, 1, ?)",
                (table, _to_cells(columns)),
            )
            return cursor.rowcount == 1

    def clear(self, table: str) -> None:
        """Remove every row of a sheet, header included."""
        with self._connect(write=True) as conn:
            self._require_sheet(conn, table)
            conn.execute("DELETE FROM sheet_rows WHERE sheet = ?", (table,))


def create_store(settings: Optional[Settings] = None) -> SheetStore:
    settings = settings or get_settings()
    return SheetStore(settings.store_db_path, timeout=settings.store_timeout_seconds)
