"""
Pytest fixtures for Mood Tracker tests.
"""
import sys
from datetime import date, timedelta
from pathlib import Path

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient

# Ensure src/ is on sys.path so tests can import mood_analytics.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Load environment variables
load_dotenv()

from mood_analytics.errors import StoreUnavailable  # noqa: E402
from mood_analytics.models import MoodEntry  # noqa: E402
from server.mood_api.config import Settings  # noqa: E402
from server.mood_api.database import SheetStore  # noqa: E402
from server.mood_api.main import create_app  # noqa: E402


START = date(2024, 3, 1)


def make_entry(mood, day=0, **signals) -> MoodEntry:
    """Entry on START + day with the given mood and optional signals."""
    return MoodEntry(date=START + timedelta(days=day), mood=mood, **signals)


def make_series(moods, **last_signals) -> list:
    """One entry per consecutive day; signals apply to the last entry only."""
    series = [make_entry(m, day=i) for i, m in enumerate(moods)]
    if series and last_signals:
        series[-1] = make_entry(moods[-1], day=len(moods) - 1, **last_signals)
    return series


class FlakyStore:
    """
    Store wrapper that fails selected operations.

    `failing` holds (operation, sheet) pairs; a sheet of None fails the
    operation on every sheet.
    """

    def __init__(self, store, failing=()):
        self.store = store
        self.failing = set(failing)

    def _check(self, operation, table):
        if (operation, table) in self.failing or (operation, None) in self.failing:
            raise StoreUnavailable(f"{operation} on {table} failed")

    def append(self, table, row):
        self._check("append", table)
        return self.store.append(table, row)

    def read(self, table, first_row=None, last_row=None):
        self._check("read", table)
        return self.store.read(table, first_row, last_row)

    def update(self, table, row_number, row):
        self._check("update", table)
        return self.store.update(table, row_number, row)

    def ensure_table(self, table):
        self._check("ensure_table", table)
        return self.store.ensure_table(table)

    def ensure_headers(self, table, columns):
        self._check("ensure_headers", table)
        return self.store.ensure_headers(table, columns)

    def clear(self, table):
        self._check("clear", table)
        return self.store.clear(table)


@pytest.fixture
def settings(tmp_path):
    """Settings pointing the store at a temporary directory."""
    return Settings(data_path=str(tmp_path))


@pytest.fixture
def store(settings):
    """Empty SQLite sheet store in a temporary file."""
    return SheetStore(settings.store_db_path, timeout=1.0)


@pytest.fixture
def unavailable_store(tmp_path):
    """Store whose database file cannot be opened."""
    return SheetStore(str(tmp_path / "missing" / "mood.db"), timeout=0.1)


@pytest.fixture
def app(settings, store):
    """Application with provisioned sheets (ASGITransport skips lifespan)."""
    app = create_app(settings=settings, store=store)
    app.state.mood_service.provision()
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def unavailable_client(settings, unavailable_store):
    """Client for an application whose store is down."""
    app = create_app(settings=settings, store=unavailable_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
