"""
Tests for the JSON-lines and SQL event stores.
"""

import json
import os
from datetime import datetime

import pytest
from sqlalchemy import select

from app.core.config import Settings
from app.db.event_store import create_event_store
from app.db.jsonl_store import JsonlEventStore
from app.db.sql import session_scope
from app.db.sql_store import SqlEventStore
from app.models.event import EVENT_TABLES
from app.schemas.event import EventType


def _rows(rows):
    return [(row.key, row.total, row.unique) for row in rows]


async def _seed_campaigns(store, make_event):
    """Three clicks on "a" from two leads, one click on "b"."""
    for lead in ("lead-1", "lead-1", "lead-2"):
        await store.append(make_event(EventType.CLICK, lead, "a"))
    await store.append(make_event(EventType.CLICK, "lead-3", "b"))


async def _stored_rows(store):
    """(event type, row) pairs for every table, in insertion order."""
    rows = []
    async with session_scope(store.session_maker) as session:
        for event_type, model in EVENT_TABLES.items():
            result = await session.execute(select(model).order_by(model.id))
            rows.extend((event_type, row) for row in result.scalars())
    return rows


class TestJsonlEventStore:
    """Test cases for JsonlEventStore."""

    @pytest.mark.asyncio
    async def test_missing_file_is_empty(self, jsonl_store):
        assert await jsonl_store.read_all() == []

    @pytest.mark.asyncio
    async def test_append_and_read_back(self, jsonl_store, make_event):
        event = make_event(EventType.OPEN, "lead-1", "restaurants_v1")

        await jsonl_store.append(event)
        await jsonl_store.append(make_event(EventType.CLICK, "lead-2", ""))

        events = await jsonl_store.read_all()
        assert [e.type for e in events] == [EventType.OPEN, EventType.CLICK]
        assert events[0] == event

    @pytest.mark.asyncio
    async def test_one_line_per_event(self, jsonl_store, make_event):
        await jsonl_store.append(make_event(campaign="line\nbreak"))

        with open(jsonl_store.path, encoding="utf-8") as fh:
            assert len(fh.read().splitlines()) == 1

    @pytest.mark.asyncio
    async def test_init_creates_data_dir(self, tmp_path):
        store = JsonlEventStore(os.path.join(str(tmp_path), "nested", "dir"))

        await store.init()

        assert os.path.isdir(store.data_dir)
        await store.ping()

    @pytest.mark.asyncio
    async def test_malformed_lines_are_skipped(self, jsonl_store, make_event):
        await jsonl_store.append(make_event(EventType.CLICK, "lead-1", "a"))
        with open(jsonl_store.path, "a", encoding="utf-8") as fh:
            fh.write("{not json\n")
            fh.write("[1, 2, 3]\n")
            fh.write(json.dumps({"type": "bounce", "lead_id": "x"}) + "\n")
            fh.write("\n")
            fh.write('{"type": "click", "lead_id": "lead-2", "campa\n')
        await jsonl_store.append(make_event(EventType.CLICK, "lead-3", "a"))

        events = await jsonl_store.read_all()

        assert [e.lead_id for e in events] == ["lead-1", "lead-3"]

    @pytest.mark.asyncio
    async def test_invalid_utf8_line_is_skipped(self, jsonl_store, make_event):
        await jsonl_store.append(make_event(EventType.CLICK, "lead-1", "a"))
        with open(jsonl_store.path, "ab") as fh:
            fh.write(b'{"type": "click", "lead_id": "\xff\xfe"}\n')
        await jsonl_store.append(make_event(EventType.CLICK, "lead-2", "a"))

        events = await jsonl_store.read_all()
        summary = await jsonl_store.summarize()

        assert [e.lead_id for e in events] == ["lead-1", "lead-2"]
        assert _rows(summary[EventType.CLICK].campaigns) == [("a", 2, 2)]

    @pytest.mark.asyncio
    async def test_legacy_records_are_read(self, jsonl_store):
        legacy = {
            "type": "conv",
            "lead_id": "lead-1",
            "campaign": "bars_v1",
            "industry": "bars",
            "ts": "2025-06-01T12:00:00.000Z",
            "user_agent": "",
            "ip_hash": "0011223344556677",
        }
        with open(jsonl_store.path, "w", encoding="utf-8") as fh:
            fh.write(json.dumps(legacy) + "\n")

        events = await jsonl_store.read_all()

        assert len(events) == 1
        assert events[0].type == EventType.CONVERSION
        assert events[0].timestamp == "2025-06-01T12:00:00.000Z"

    @pytest.mark.asyncio
    async def test_other_read_errors_propagate(self, tmp_path):
        store = JsonlEventStore(str(tmp_path))
        os.makedirs(store.path)  # a directory where the log should be

        with pytest.raises(OSError):
            await store.read_all()

    @pytest.mark.asyncio
    async def test_summarize_ranks_campaigns(self, jsonl_store, make_event):
        await _seed_campaigns(jsonl_store, make_event)

        summary = await jsonl_store.summarize()

        assert _rows(summary[EventType.CLICK].campaigns) == [("a", 3, 2), ("b", 1, 1)]
        assert summary[EventType.OPEN].campaigns == []
        assert summary[EventType.CONVERSION].campaigns == []

    @pytest.mark.asyncio
    async def test_summarize_groups_industries_and_none(self, jsonl_store, make_event):
        await jsonl_store.append(make_event(EventType.OPEN, "lead-1", "restaurants_v1"))
        await jsonl_store.append(make_event(EventType.OPEN, "lead-2", "restaurants_v2"))
        await jsonl_store.append(make_event(EventType.OPEN, "lead-3", ""))

        summary = await jsonl_store.summarize()
        opens = summary[EventType.OPEN]

        assert _rows(opens.industries) == [("restaurants", 2, 2), ("(none)", 1, 1)]
        assert ("(none)", 1, 1) in _rows(opens.campaigns)

    @pytest.mark.asyncio
    async def test_summarize_ties_keep_first_seen_order(self, jsonl_store, make_event):
        for campaign in ("z", "y", "x"):
            await jsonl_store.append(make_event(EventType.CLICK, "lead", campaign))

        summary = await jsonl_store.summarize()

        assert [row.key for row in summary[EventType.CLICK].campaigns] == ["z", "y", "x"]


class TestSqlEventStore:
    """Test cases for SqlEventStore on SQLite."""

    @pytest.mark.asyncio
    async def test_empty_tables(self, sql_store):
        assert await _stored_rows(sql_store) == []
        summary = await sql_store.summarize()
        assert all(not section.campaigns for section in summary.values())

    @pytest.mark.asyncio
    async def test_append_routes_to_type_table(self, sql_store, make_event):
        await sql_store.append(make_event(EventType.CLICK, "lead-1", "a"))
        await sql_store.append(make_event(EventType.OPEN, "lead-2", "b"))
        await sql_store.append(make_event(EventType.CONVERSION, "lead-3", "c"))

        rows = await _stored_rows(sql_store)

        assert [(event_type, row.lead_id) for event_type, row in rows] == [
            (EventType.CLICK, "lead-1"),
            (EventType.OPEN, "lead-2"),
            (EventType.CONVERSION, "lead-3"),
        ]
        assert rows[0][1].industry == ""
        assert rows[0][1].ip_hash == "abcdef0123456789"

    @pytest.mark.asyncio
    async def test_append_accepts_zulu_timestamp(self, sql_store, make_event):
        await sql_store.append(make_event(timestamp="2025-06-01T12:00:00.000Z"))

        rows = await _stored_rows(sql_store)

        stored = rows[0][1].timestamp
        assert stored.replace(tzinfo=None) == datetime(2025, 6, 1, 12, 0, 0)

    @pytest.mark.asyncio
    async def test_summarize_ranks_campaigns(self, sql_store, make_event):
        await _seed_campaigns(sql_store, make_event)

        summary = await sql_store.summarize()

        assert _rows(summary[EventType.CLICK].campaigns) == [("a", 3, 2), ("b", 1, 1)]

    @pytest.mark.asyncio
    async def test_summarize_substitutes_none(self, sql_store, make_event):
        await sql_store.append(make_event(EventType.CONVERSION, "lead-1", ""))
        await sql_store.append(make_event(EventType.CONVERSION, "lead-1", ""))

        summary = await sql_store.summarize()

        assert _rows(summary[EventType.CONVERSION].campaigns) == [("(none)", 2, 1)]
        assert _rows(summary[EventType.CONVERSION].industries) == [("(none)", 2, 1)]

    @pytest.mark.asyncio
    async def test_summarize_merges_empty_and_literal_none(self, sql_store, jsonl_store, make_event):
        for store in (sql_store, jsonl_store):
            await store.append(make_event(EventType.CLICK, "lead-1", ""))
            await store.append(make_event(EventType.CLICK, "lead-2", "(none)"))

        sql_summary = await sql_store.summarize()
        jsonl_summary = await jsonl_store.summarize()

        assert _rows(sql_summary[EventType.CLICK].campaigns) == [("(none)", 2, 2)]
        assert _rows(sql_summary[EventType.CLICK].campaigns) == _rows(
            jsonl_summary[EventType.CLICK].campaigns
        )

    @pytest.mark.asyncio
    async def test_init_creates_sqlite_directory(self, tmp_path):
        path = tmp_path / "nested" / "events.db"
        store = SqlEventStore(f"sqlite+aiosqlite:///{path}")
        try:
            await store.init()
            await store.ping()
            assert path.parent.is_dir()
        finally:
            await store.close()


class TestCreateEventStore:
    """Test cases for backend selection."""

    def test_jsonl_backend(self, tmp_path):
        store = create_event_store(Settings(storage_backend="jsonl", data_dir=str(tmp_path)))
        assert isinstance(store, JsonlEventStore)
        assert store.location == os.path.join(str(tmp_path), "events.jsonl")

    @pytest.mark.asyncio
    async def test_sql_backend_defaults_to_sqlite_in_data_dir(self, tmp_path):
        store = create_event_store(Settings(storage_backend="sql", data_dir=str(tmp_path)))
        try:
            assert isinstance(store, SqlEventStore)
            assert store.location.startswith("sqlite+aiosqlite:///")
            assert store.location.endswith("events.db")
        finally:
            await store.close()

    def test_unknown_backend(self, tmp_path):
        with pytest.raises(ValueError):
            create_event_store(Settings(storage_backend="redis", data_dir=str(tmp_path)))
