"""
SQLAlchemy models for SQL persistence.
"""

from app.models.event import ClickEvent, ConversionEvent, EVENT_TABLES, OpenEvent, TrackingEventMixin

__all__ = [
    "ClickEvent",
    "OpenEvent",
    "ConversionEvent",
    "TrackingEventMixin",
    "EVENT_TABLES",
]
