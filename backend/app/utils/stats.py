"""
In-memory tallies for event stats.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Set

from app.schemas.event import Event, EventType, EventTypeStats, StatsRow

# Group label for events with no campaign or industry
NONE_KEY = "(none)"


def group_key(value: str | None) -> str:
    return value or NONE_KEY


def rank_rows(totals: Dict[str, int], leads: Dict[str, Set[str]]) -> List[StatsRow]:
    """Rows ordered by descending total; ties keep first-seen order."""
    rows = [
        StatsRow(key=key, total=total, unique=len(leads.get(key, ())))
        for key, total in totals.items()
    ]
    # sorted() is stable, so equal totals stay in insertion order
    return sorted(rows, key=lambda row: row.total, reverse=True)


def count_by(events: Iterable[Event], field: str) -> List[StatsRow]:
    totals: Dict[str, int] = {}
    leads: Dict[str, Set[str]] = {}
    for event in events:
        key = group_key(getattr(event, field))
        totals[key] = totals.get(key, 0) + 1
        leads.setdefault(key, set()).add(event.lead_id)
    return rank_rows(totals, leads)


def tally_events(event_type: EventType, events: List[Event]) -> EventTypeStats:
    """Campaign and industry rows for events of a single type."""
    return EventTypeStats(
        type=event_type,
        campaigns=count_by(events, "campaign"),
        industries=count_by(events, "industry"),
    )
