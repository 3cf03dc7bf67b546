"""
Tracking event tables, one per event type.

The event type is implied by the table; every table mirrors the Event
schema plus an auto-incrementing id.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from app.db.sql import Base
from app.schemas.event import Event, EventType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp, including the trailing "Z" form."""
    if not value:
        return _utcnow()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


class TrackingEventMixin:
    """Columns shared by all tracking event tables."""

    id = Column(Integer, primary_key=True, autoincrement=True)
    lead_id = Column(String(255), nullable=False, default="", index=True)
    campaign = Column(String(255), nullable=False, default="", index=True)
    industry = Column(String(255), nullable=False, default="")
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    user_agent = Column(Text, nullable=False, default="")
    ip_hash = Column(String(64), nullable=False, default="")

    @classmethod
    def from_event(cls, event: Event):
        return cls(
            lead_id=event.lead_id,
            campaign=event.campaign,
            industry=event.industry,
            timestamp=parse_timestamp(event.timestamp),
            user_agent=event.user_agent,
            ip_hash=event.ip_hash,
        )


class ClickEvent(TrackingEventMixin, Base):
    """Recorded redirect through /r/{lead_id}."""

    __tablename__ = "click_events"
    event_type = EventType.CLICK


class OpenEvent(TrackingEventMixin, Base):
    """Recorded tracking-pixel fetch."""

    __tablename__ = "open_events"
    event_type = EventType.OPEN


class ConversionEvent(TrackingEventMixin, Base):
    """Recorded conversion acknowledgement."""

    __tablename__ = "conversion_events"
    event_type = EventType.CONVERSION


EVENT_TABLES = {
    EventType.CLICK: ClickEvent,
    EventType.OPEN: OpenEvent,
    EventType.CONVERSION: ConversionEvent,
}
