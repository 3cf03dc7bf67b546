"""
Pydantic schemas for tracking events and aggregated stats.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class EventType(str, Enum):
    """Kinds of tracked interaction."""

    CLICK = "click"
    OPEN = "open"
    CONVERSION = "conversion"


# Older logs wrote conversions as "conv"
LEGACY_TYPE_ALIASES = {"conv": EventType.CONVERSION.value}


class Event(BaseModel):
    """One tracked interaction, as written to the event store."""

    model_config = ConfigDict(populate_by_name=True)

    type: EventType
    lead_id: str = ""
    campaign: str = ""
    industry: str = ""
    timestamp: str = Field(
        default="",
        validation_alias=AliasChoices("timestamp", "ts"),
    )
    user_agent: str = ""
    ip_hash: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def _accept_legacy_type(cls, value):
        if isinstance(value, str):
            return LEGACY_TYPE_ALIASES.get(value, value)
        return value

    @field_validator("lead_id", "campaign", "industry", "user_agent", "ip_hash", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        if value is None:
            return ""
        return str(value)


class RecordResult(BaseModel):
    """Best-effort outcome of recording an event.

    ``recorded`` is False when the store rejected the write; the HTTP
    response for the route is produced either way.
    """

    event: Event
    recorded: bool
    error: Optional[str] = None


class StatsRow(BaseModel):
    """Counts for one campaign or industry."""

    key: str
    total: int = 0
    unique: int = 0


class EventTypeStats(BaseModel):
    """Per-campaign and per-industry rows for one event type."""

    type: EventType
    campaigns: List[StatsRow] = []
    industries: List[StatsRow] = []


class StatsReport(BaseModel):
    """Aggregated report across all event types."""

    storage: str
    clicks: EventTypeStats
    opens: EventTypeStats
    conversions: EventTypeStats
    computed_at: str = ""

    def sections(self) -> List[EventTypeStats]:
        return [self.clicks, self.opens, self.conversions]
