"""
History Repository.

Reads mood entries back out of the sheet store, turning raw text rows into
typed MoodEntry objects, and appends new entries (plus their audit copy).
Rows that cannot be parsed are logged and skipped so that analytics stay
available over the rest of the history.
"""

import logging
import math
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Sequence

from .errors import MalformedRow, StoreUnavailable
from .models import MoodEntry, MoodSeries
from .store import AppendResult, Row, Store

logger = logging.getLogger(__name__)

DEFAULT_MOOD_SHEET = "MoodData"
DEFAULT_RAW_SHEET = "RawData"

MOOD_COLUMNS = [
    "Date",
    "Mood",
    "Notes",
    "Activities",
    "Sleep Hours",
    "Stress Level",
    "Energy",
    "Anxiety",
    "Irritability",
]
RAW_COLUMNS = ["Timestamp"] + MOOD_COLUMNS + ["Source Sheet"]

# Header name (case-insensitive) -> MoodEntry attribute
COLUMN_FIELDS = {
    "timestamp": "submitted_at",
    "date": "date",
    "mood": "mood",
    "notes": "notes",
    "activities": "activities",
    "sleep hours": "sleep_hours",
    "stress level": "stress_level",
    "energy": "energy",
    "anxiety": "anxiety",
    "irritability": "irritability",
}

NUMERIC_FIELDS = ("sleep_hours", "stress_level", "energy", "anxiety", "irritability")

ACTIVITY_SEPARATOR = ", "


def format_cell(value) -> str:
    """Format a value the way it is written into a sheet cell."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def entry_to_row(entry: MoodEntry) -> List[str]:
    """Cells of a MoodData row, in MOOD_COLUMNS order."""
    return [
        entry.date.isoformat(),
        format_cell(entry.mood),
        entry.notes or "",
        ACTIVITY_SEPARATOR.join(entry.activities),
        format_cell(entry.sleep_hours),
        format_cell(entry.stress_level),
        format_cell(entry.energy),
        format_cell(entry.anxiety),
        format_cell(entry.irritability),
    ]


def parse_date(text: str) -> date:
    """Parse a stored date; full ISO timestamps are truncated to their date."""
    text = text.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()


def _is_header(row: Row) -> bool:
    names = {cell.strip().lower() for cell in row}
    return "date" in names and "mood" in names


def _column_map(header: Optional[Row]) -> Dict[str, int]:
    """Map MoodEntry attributes to column indexes."""
    columns = header if header is not None else MOOD_COLUMNS
    mapping = {}
    for index, name in enumerate(columns):
        attr = COLUMN_FIELDS.get(name.strip().lower())
        if attr and attr not in mapping:
            mapping[attr] = index
    return mapping


class HistoryRepository:
    """
    Fetches and appends mood entries in a sheet store.

    The repository holds no state besides its collaborators, so one instance
    can serve concurrent requests.
    """

    def __init__(
        self,
        store: Store,
        mood_sheet: str = DEFAULT_MOOD_SHEET,
        raw_sheet: str = DEFAULT_RAW_SHEET,
    ):
        self.store = store
        self.mood_sheet = mood_sheet
        self.raw_sheet = raw_sheet

    def provision(self) -> None:
        """Create the data and audit sheets with their headers if absent."""
        for sheet, columns in ((self.mood_sheet, MOOD_COLUMNS), (self.raw_sheet, RAW_COLUMNS)):
            self.store.ensure_table(sheet)
            if self.store.ensure_headers(sheet, columns):
                logger.info(f"[HISTORY] Created headers for sheet {sheet}")

    def fetch_history(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
        sheet_name: Optional[str] = None,
    ) -> MoodSeries:
        """
        Return the entries of a sheet in chronological order.

        Args:
            start: Earliest date to include (inclusive)
            end: Latest date to include (inclusive)
            sheet_name: Sheet to read, defaults to the mood data sheet

        Raises:
            StoreUnavailable: The store could not be reached
            SchemaError: The sheet does not exist
        """
        sheet = sheet_name or self.mood_sheet
        rows = self.store.read(sheet)

        header = None
        first_data_index = 0
        if rows and _is_header(rows[0]):
            header = rows[0]
            first_data_index = 1
        columns = _column_map(header)

        entries = []
        skipped = 0
        for index in range(first_data_index, len(rows)):
            row = rows[index]
            if not any(cell.strip() for cell in row):
                continue
            try:
                entry = self._parse_row(row, index + 1, columns)
            except MalformedRow as exc:
                skipped += 1
                logger.warning(f"[HISTORY] Skipping row in {sheet}: {exc} {exc.row}")
                continue

            if start is not None and entry.date < start:
                continue
            if end is not None and entry.date > end:
                continue
            entries.append(entry)

        entries.sort(key=lambda e: e.date)
        logger.debug(
            f"[HISTORY] Loaded {len(entries)} entries from {sheet} "
            f"(start={start}, end={end}, skipped={skipped})"
        )
        return entries

    def append_entry(self, entry: MoodEntry, sheet_name: Optional[str] = None) -> AppendResult:
        """Append one entry to a data sheet, creating its header first if needed."""
        sheet = sheet_name or self.mood_sheet
        try:
            self.store.ensure_table(sheet)
            self.store.ensure_headers(sheet, MOOD_COLUMNS)
        except StoreUnavailable as e:
            # The append below reports the outage if it persists
            logger.warning(f"[HISTORY] Could not provision headers for {sheet}: {e}")

        result = self.store.append(sheet, entry_to_row(entry))
        logger.info(f"[HISTORY] Appended entry for {entry.date} to {sheet} row {result.row_number}")
        return result

    def log_raw_entry(
        self,
        entry: MoodEntry,
        source_sheet: str,
        submitted_at: Optional[datetime] = None,
    ) -> AppendResult:
        """Append an audit copy of an entry, stamped with its submission time."""
        stamp = submitted_at or entry.submitted_at or datetime.now(timezone.utc)
        self.store.ensure_table(self.raw_sheet)
        self.store.ensure_headers(self.raw_sheet, RAW_COLUMNS)
        row = [stamp.isoformat()] + entry_to_row(entry) + [source_sheet]
        return self.store.append(self.raw_sheet, row)

    def _parse_row(self, row: Row, row_number: int, columns: Dict[str, int]) -> MoodEntry:
        """Convert one stored row into a MoodEntry or raise MalformedRow."""

        def cell(attr: str, strip: bool = True) -> str:
            index = columns.get(attr)
            if index is None or index >= len(row):
                return ""
            return row[index].strip() if strip else row[index]

        def number(attr: str) -> Optional[float]:
            text = cell(attr)
            if not text:
                return None
            try:
                value = float(text)
            except ValueError:
                raise MalformedRow(row_number, row, f"{attr} is not numeric: {text!r}")
            if not math.isfinite(value):
                raise MalformedRow(row_number, row, f"{attr} is not finite: {text!r}")
            return value

        date_text = cell("date")
        if not date_text:
            raise MalformedRow(row_number, row, "missing date")
        try:
            entry_date = parse_date(date_text)
        except ValueError:
            raise MalformedRow(row_number, row, f"unparseable date {date_text!r}")

        mood = number("mood")
        if mood is None:
            raise MalformedRow(row_number, row, "missing mood")

        submitted_at = None
        stamp = cell("submitted_at")
        if stamp:
            try:
                submitted_at = datetime.fromisoformat(stamp.replace("Z", "+00:00"))
            except ValueError:
                logger.debug(f"[HISTORY] Ignoring unparseable timestamp {stamp!r} in row {row_number}")

        activities_text = cell("activities")
        activities = [a.strip() for a in activities_text.split(",") if a.strip()]

        return MoodEntry(
            date=entry_date,
            mood=mood,
            notes=cell("notes", strip=False),
            activities=activities,
            submitted_at=submitted_at,
            row_number=row_number,
            **{attr: number(attr) for attr in NUMERIC_FIELDS},
        )
