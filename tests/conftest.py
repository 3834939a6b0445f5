"""
Shared test fixtures.

Provides a chainable mock Supabase client that applies eq/order/limit/update
to in-memory rows.
"""

import os
import sys
from pathlib import Path

# Add project directory to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

# Settings are read at import time
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import pytest
from unittest.mock import patch
from typing import Generator, Optional

from tests.factories import MappingFactory


# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data if data is not None else []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """Mock Supabase query builder with chainable methods."""

    def __init__(self, table: "MockSupabaseTable"):
        self._table = table
        self._filters: list[tuple[str, object]] = []
        self._order: Optional[tuple[str, bool]] = None
        self._limit: Optional[int] = None
        self._update: Optional[dict] = None

    def select(self, *args, **kwargs):
        return self

    def update(self, data: dict):
        self._update = data
        return self

    def eq(self, column, value):
        self._filters.append((column, value))
        return self

    def order(self, column, desc: bool = False, **kwargs):
        self._order = (column, desc)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _matches(self, row: dict) -> bool:
        return all(row.get(column) == value for column, value in self._filters)

    def execute(self) -> MockSupabaseResponse:
        self._table.calls.append(self)
        if self._table.error is not None:
            raise self._table.error

        if self._update is not None:
            updated = []
            for row in self._table.rows:
                if self._matches(row):
                    row.update(self._update)
                    updated.append(dict(row))
            return MockSupabaseResponse(data=updated)

        if self._table.ignore_query:
            rows = [dict(row) for row in self._table.rows]
            return MockSupabaseResponse(data=rows)

        rows = [dict(row) for row in self._table.rows if self._matches(row)]
        if self._order:
            column, desc = self._order
            rows.sort(
                key=lambda r: (r.get(column) is not None, r.get(column) or ""),
                reverse=desc
            )
        if self._limit is not None:
            rows = rows[:self._limit]
        return MockSupabaseResponse(data=rows)


class MockSupabaseTable:
    """Mock Supabase table backed by a list of row dicts."""

    def __init__(self, rows: list = None):
        self.rows = rows if rows is not None else []
        self.error: Optional[Exception] = None
        self.ignore_query = False
        self.calls: list[MockSupabaseQuery] = []

    def select(self, *args, **kwargs):
        return MockSupabaseQuery(self).select(*args, **kwargs)

    def update(self, data):
        return MockSupabaseQuery(self).update(data)


class MockSupabaseClient:
    """Mock Supabase client."""

    def __init__(self):
        self._tables: dict[str, MockSupabaseTable] = {}

    def set_table_data(self, table_name: str, data: list, ignore_query: bool = False):
        """Configure rows for a table; ignore_query returns them raw."""
        table = MockSupabaseTable([dict(row) for row in data])
        table.ignore_query = ignore_query
        self._tables[table_name] = table
        return table

    def fail_with(self, table_name: str, error: Exception):
        """Make every query on table_name raise error."""
        self.table(table_name).error = error

    def table(self, name: str) -> MockSupabaseTable:
        if name not in self._tables:
            self._tables[name] = MockSupabaseTable()
        return self._tables[name]


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("mapping_history", [
                MappingFactory.row(original_filename="leads.csv")
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the shared client and store singleton with the mock.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("mapping_history", [...])
    """
    import services.mapping_store as mapping_store_module

    mapping_store_module._store = None
    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        with patch("config.get_supabase_client", return_value=mock_supabase):
            yield mock_supabase
    mapping_store_module._store = None


@pytest.fixture
def sample_mapping_rows() -> list:
    """Three active rows, oldest first, plus one soft-deleted row."""
    return [
        MappingFactory.row(
            id="map-1",
            original_filename="contacts.csv",
            created_at="2025-01-01T09:00:00+00:00",
        ),
        MappingFactory.row(
            id="map-2",
            original_filename="leads.csv",
            created_at="2025-02-01T09:00:00+00:00",
        ),
        MappingFactory.row(
            id="map-3",
            original_filename="orders.csv",
            created_at="2025-03-01T09:00:00+00:00",
        ),
        MappingFactory.row(
            id="map-deleted",
            original_filename="old.csv",
            created_at="2025-04-01T09:00:00+00:00",
            is_deleted=True,
        ),
    ]


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client_with_mock_db(mock_db):
    """
    Create FastAPI test client backed by the mock client.

    Usage:
        def test_endpoint(test_client_with_mock_db, mock_supabase):
            mock_supabase.set_table_data("mapping_history", [...])
            response = test_client_with_mock_db.get("/api/mappings")
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
