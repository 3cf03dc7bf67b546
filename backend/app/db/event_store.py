"""
Event store selection.

Both stores expose the same async surface: init, close, append, summarize
and ping.
"""

from __future__ import annotations

from typing import Dict, Protocol, Union

from app.core.config import Settings
from app.db.jsonl_store import JsonlEventStore
from app.db.sql_store import SqlEventStore
from app.schemas.event import Event, EventType, EventTypeStats


class EventStore(Protocol):
    backend: str

    @property
    def location(self) -> str: ...

    async def init(self) -> None: ...

    async def close(self) -> None: ...

    async def append(self, event: Event) -> None: ...

    async def summarize(self) -> Dict[EventType, EventTypeStats]: ...

    async def ping(self) -> None: ...


def create_event_store(settings: Settings) -> Union[JsonlEventStore, SqlEventStore]:
    """Build the store named by STORAGE_BACKEND."""
    backend = (settings.storage_backend or "jsonl").lower()
    if backend == "jsonl":
        return JsonlEventStore(settings.data_dir)
    if backend == "sql":
        return SqlEventStore(settings.sql_url, echo=settings.debug)
    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.storage_backend!r}")
