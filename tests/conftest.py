"""
Pytest configuration and shared fixtures for LinkVault tests.

Provides an in-memory table reader standing in for the Airtable API,
sample table payloads and ready-made schema/store/service fixtures.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from linkvault.core.schema import TableSchema
from linkvault.services.cache_store import CacheStore
from linkvault.services.sqlite_cache_db import SQLiteKeyValueStore
from linkvault.services.table_cache_service import TableCacheService


class FakeTableReader:
    """Table reader serving canned payloads.

    Attributes:
        tables: Table name to raw record payloads
        calls: Number of ``fetch_all`` calls per table
        failures: Table name to the exception its fetch raises
        delay: Seconds each fetch sleeps before answering
    """

    def __init__(
        self,
        tables: dict[str, list[dict[str, Any]]],
        *,
        failures: dict[str, Exception] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.tables = tables
        self.failures = failures or {}
        self.delay = delay
        self.calls: Counter[str] = Counter()
        self.closed = False

    async def fetch_all(self, table_name: str) -> list[dict[str, Any]]:
        self.calls[table_name] += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if table_name in self.failures:
            raise self.failures[table_name]
        if table_name not in self.tables:
            raise LookupError(f"unknown table {table_name}")
        return [dict(item) for item in self.tables[table_name]]

    def close(self) -> None:
        self.closed = True


def make_record(record_id: str, **fields: Any) -> dict[str, Any]:
    """Raw Airtable-style record payload."""
    return {"id": record_id, "createdTime": "2024-01-01T00:00:00.000Z", "fields": fields}


@pytest.fixture
def lessons_base() -> dict[str, list[dict[str, Any]]]:
    """Small lessons base exercising every default relationship."""
    return {
        "courses": [
            make_record("recC1", name="Spanish 101", lessons=["recL1", "recL2"]),
        ],
        "lessons": [
            make_record(
                "recL1",
                name="Intro",
                courses=["recC1"],
                verbs=["recV1"],
                pronouns=["recP1"],
                tense_markers=["recT1"],
                sentence_structures=["recS1"],
            ),
            make_record(
                "recL2",
                name="Basics",
                courses=["recC1"],
                verbs=["recV1", "recV2"],
                pronouns=["recP2"],
            ),
        ],
        "verbs": [
            make_record("recV1", infinitive="ser"),
            make_record("recV2", infinitive="estar"),
        ],
        "pronouns": [
            make_record("recP1", text="yo"),
            make_record("recP2", text="tú"),
        ],
        "tense_markers": [make_record("recT1", text="ayer")],
        "sentence_structures": [make_record("recS1", pattern="S V O")],
        "constituents": [make_record("recK1", role="subject")],
    }


@pytest.fixture
def default_schema() -> TableSchema:
    return TableSchema.default()


@pytest.fixture
def fake_reader(lessons_base: dict[str, list[dict[str, Any]]]) -> FakeTableReader:
    return FakeTableReader(lessons_base)


@pytest.fixture
def memory_kv_store() -> Generator[SQLiteKeyValueStore, None, None]:
    store = SQLiteKeyValueStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def cache_db_path(tmp_path: Path) -> Path:
    return tmp_path / "cache" / "linkvault_cache.db"


@pytest.fixture
def cache_store(memory_kv_store: SQLiteKeyValueStore, default_schema: TableSchema) -> CacheStore:
    return CacheStore(memory_kv_store, default_schema)


@pytest.fixture
def service(
    fake_reader: FakeTableReader,
    cache_db_path: Path,
) -> Generator[TableCacheService, None, None]:
    cache = TableCacheService(fake_reader, SQLiteKeyValueStore(cache_db_path))
    yield cache
    cache.close()
