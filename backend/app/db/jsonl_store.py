"""
Append-only JSON-lines event store.

One Event object per line in ``{DATA_DIR}/events.jsonl``. Appends are a
single write of one line; readers tolerate a partially written or corrupt
line by skipping it.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Dict, List

from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from app.schemas.event import Event, EventType, EventTypeStats
from app.utils.stats import tally_events

logger = logging.getLogger(__name__)


class JsonlEventStore:
    """Event store backed by a newline-delimited JSON file."""

    backend = "jsonl"

    def __init__(self, data_dir: str, filename: str = "events.jsonl"):
        self.data_dir = data_dir
        self.path = os.path.join(data_dir, filename)

    @property
    def location(self) -> str:
        return self.path

    async def init(self) -> None:
        """Create the data directory if it does not exist."""
        await run_in_threadpool(os.makedirs, self.data_dir, exist_ok=True)

    async def close(self) -> None:
        return None

    async def append(self, event: Event) -> None:
        """Append one event as a single line. Raises OSError on failure."""
        line = event.model_dump_json() + "\n"
        await run_in_threadpool(self._append_line, line)

    def _append_line(self, line: str) -> None:
        with open(self.path, "a", encoding="utf-8") as fh:
            fh.write(line)

    async def read_all(self) -> List[Event]:
        """Read every parseable event.

        A missing file is an empty store; other I/O errors propagate.
        """
        return await run_in_threadpool(self._read_events)

    def _read_events(self) -> List[Event]:
        try:
            with open(self.path, "rb") as fh:
                lines = fh.read().split(b"\n")
        except FileNotFoundError:
            return []

        events: List[Event] = []
        skipped = 0
        for raw in lines:
            if not raw.strip():
                continue
            try:
                # UnicodeDecodeError is a ValueError, so bad bytes skip the line
                data = json.loads(raw.decode("utf-8"))
                if not isinstance(data, dict):
                    raise ValueError("event line is not an object")
                events.append(Event.model_validate(data))
            except (ValueError, ValidationError):
                skipped += 1

        if skipped:
            logger.debug("Skipped %d malformed lines in %s", skipped, self.path)
        return events

    async def summarize(self) -> Dict[EventType, EventTypeStats]:
        """Tally every event type in memory over one read of the log."""
        events = await self.read_all()
        return {
            event_type: tally_events(event_type, [e for e in events if e.type == event_type])
            for event_type in EventType
        }

    async def ping(self) -> None:
        """Raise if the data directory is not usable."""
        if not os.path.isdir(self.data_dir):
            raise OSError(f"data directory missing: {self.data_dir}")
