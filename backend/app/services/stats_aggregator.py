"""
Stats Aggregator.

Builds per-campaign and per-industry counts for every event type from the
current contents of the store. Read failures other than a missing log
propagate to the caller.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from app.db.event_store import EventStore
from app.schemas.event import EventType, EventTypeStats, StatsReport

logger = logging.getLogger(__name__)


class StatsAggregator:
    """Read-only aggregation over one event store."""

    def __init__(self, store: EventStore):
        self.store = store

    async def build_report(self) -> StatsReport:
        summaries = await self.store.summarize()

        def _section(event_type: EventType) -> EventTypeStats:
            return summaries.get(event_type) or EventTypeStats(type=event_type)

        report = StatsReport(
            storage=self.store.location,
            clicks=_section(EventType.CLICK),
            opens=_section(EventType.OPEN),
            conversions=_section(EventType.CONVERSION),
            computed_at=datetime.now(timezone.utc).isoformat(),
        )
        logger.debug(
            "Stats computed: campaigns clicks=%d opens=%d conversions=%d",
            len(report.clicks.campaigns),
            len(report.opens.campaigns),
            len(report.conversions.campaigns),
        )
        return report
