"""Pytest configuration and fixtures for lookupcolumn.

Provides an in-memory counting data source for cache tests and an
httpx client against create_app() with an injected cache.
"""

import threading
from collections.abc import Hashable, Iterator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from lookupcolumn.application.services.lookup_cache import LookupCache
from lookupcolumn.core.config import get_settings
from lookupcolumn.main import create_app

PERMISSION_TYPES = [(1, "Administrator"), (2, "User"), (3, "Reader")]


class FakeLookupSource:
    """In-memory ILookupDataSource recording every query_all_pairs call."""

    def __init__(
        self,
        tables: dict[str, dict[str, Any]] | None = None,
        query_delay: threading.Event | None = None,
    ) -> None:
        # table -> {"primary_keys": [...], "columns": [...], "rows": [(id, name), ...]}
        self.tables = tables or {}
        self.queries: list[tuple[str, str, str]] = []
        self.fail_next_query = False
        self.query_delay = query_delay
        self.query_started = threading.Event()
        self._lock = threading.Lock()

    def add_table(
        self,
        table: str,
        rows: list[tuple[Hashable, Any]],
        primary_keys: list[str] | None = None,
        columns: list[str] | None = None,
    ) -> None:
        self.tables[table] = {
            "primary_keys": primary_keys if primary_keys is not None else ["id"],
            "columns": columns or ["id", "name"],
            "rows": rows,
        }

    def schema_has_table(self, table: str) -> bool:
        return table in self.tables

    def table_has_column(self, table: str, column: str) -> bool:
        return column in self.tables[table]["columns"]

    def primary_key_columns(self, table: str) -> list[str]:
        return list(self.tables[table]["primary_keys"])

    def query_all_pairs(
        self, table: str, primary_key_column: str, field_name: str
    ) -> Iterator[tuple[Hashable, Any]]:
        with self._lock:
            self.queries.append((table, primary_key_column, field_name))
            if self.fail_next_query:
                self.fail_next_query = False
                raise ConnectionError("database unavailable")
        rows = list(self.tables[table]["rows"])
        self.query_started.set()
        if self.query_delay is not None:
            self.query_delay.wait(timeout=5)
        return iter(rows)

    def query_count(self, table: str) -> int:
        return sum(1 for q in self.queries if q[0] == table)


@pytest.fixture
def lookup_source() -> FakeLookupSource:
    """Data source with PermissionType (1 Administrator, 2 User, 3 Reader), Status and Country."""
    source = FakeLookupSource()
    source.add_table("PermissionType", list(PERMISSION_TYPES))
    source.add_table("Status", [(10, "active"), (20, "archived")], columns=["id", "name", "label"])
    source.add_table(
        "Country", [("FR", "France"), ("DE", "Germany")], primary_keys=["code"], columns=["code", "name"]
    )
    return source


@pytest.fixture
def cache(lookup_source: FakeLookupSource) -> LookupCache:
    """Fresh LookupCache per test over the fake data source."""
    return LookupCache(lookup_source)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Reload settings per test so monkeypatched env vars apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
async def client(cache: LookupCache) -> AsyncClient:
    """Async HTTP client against an app serving the test cache (ASGI)."""
    transport = ASGITransport(app=create_app(lookup_cache=cache))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
