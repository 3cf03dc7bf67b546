"""
Relational event store: one table per event type.

Aggregation is a GROUP BY query per table, so the full log never has to be
loaded into memory.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, List

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import case, desc, distinct, func, select, text

from app.db.sql import create_engine_and_sessionmaker, init_db, session_scope
from app.models.event import EVENT_TABLES
from app.schemas.event import Event, EventType, EventTypeStats, StatsRow
from app.utils.stats import NONE_KEY

logger = logging.getLogger(__name__)


class SqlEventStore:
    """Event store backed by SQLAlchemy (SQLite by default)."""

    backend = "sql"

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine, self.session_maker = create_engine_and_sessionmaker(url, echo=echo)

    @property
    def location(self) -> str:
        return self.engine.url.render_as_string(hide_password=True)

    async def init(self) -> None:
        """Create the event tables if they do not exist."""
        database = self.engine.url.database
        if self.engine.url.get_backend_name() == "sqlite" and database and database != ":memory:":
            directory = os.path.dirname(os.path.abspath(database))
            await run_in_threadpool(os.makedirs, directory, exist_ok=True)
        await init_db(self.engine)

    async def close(self) -> None:
        await self.engine.dispose()

    async def append(self, event: Event) -> None:
        """Insert one row into the table for the event's type."""
        model = EVENT_TABLES[event.type]
        async with session_scope(self.session_maker) as session:
            session.add(model.from_event(event))

    async def _count_by(self, session, model, column) -> List[StatsRow]:
        # Empty values fold into the same "(none)" group as a literal "(none)"
        key = case((func.coalesce(column, "") == "", NONE_KEY), else_=column)
        total = func.count().label("total")
        stmt = (
            select(
                key.label("group_name"),
                total,
                func.count(distinct(model.lead_id)).label("unique_leads"),
            )
            .group_by("group_name")
            .order_by(desc(total))
        )
        result = await session.execute(stmt)
        return [
            StatsRow(key=row.group_name, total=row.total, unique=row.unique_leads)
            for row in result
        ]

    async def summarize(self) -> Dict[EventType, EventTypeStats]:
        """Group-by-count per table for campaigns and industries."""
        summaries: Dict[EventType, EventTypeStats] = {}
        async with session_scope(self.session_maker) as session:
            for event_type, model in EVENT_TABLES.items():
                summaries[event_type] = EventTypeStats(
                    type=event_type,
                    campaigns=await self._count_by(session, model, model.campaign),
                    industries=await self._count_by(session, model, model.industry),
                )
        return summaries

    async def ping(self) -> None:
        async with session_scope(self.session_maker) as session:
            await session.execute(text("SELECT 1"))
