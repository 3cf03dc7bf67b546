"""
Event Recorder.

Turns a tracking request into an Event and appends it to the configured
store. Recording is best effort: a store failure is logged and reported
through RecordResult, and never raised to the route.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request

from app.db.event_store import EventStore
from app.schemas.event import Event, EventType, RecordResult
from app.utils.tracking import DEFAULT_IP_HASH_LENGTH, client_ip, derive_industry, hash_ip

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class EventRecorder:
    """Build and persist tracking events for one store."""

    def __init__(self, store: EventStore, ip_hash_length: int = DEFAULT_IP_HASH_LENGTH):
        self.store = store
        self.ip_hash_length = ip_hash_length

    def build_event(
        self,
        event_type: EventType,
        lead_id: str,
        campaign: Optional[str] = None,
        user_agent: Optional[str] = None,
        ip: Optional[str] = None,
    ) -> Event:
        """Normalize request fields into an Event stamped with the current time."""
        campaign = campaign or ""
        return Event(
            type=event_type,
            lead_id=lead_id or "",
            campaign=campaign,
            industry=derive_industry(campaign),
            timestamp=utc_now_iso(),
            user_agent=user_agent or "",
            ip_hash=hash_ip(ip, self.ip_hash_length),
        )

    async def record(
        self,
        event_type: EventType,
        lead_id: str,
        campaign: Optional[str] = None,
        user_agent: Optional[str] = None,
        ip: Optional[str] = None,
    ) -> RecordResult:
        """Append an event; store errors are swallowed into the result.

        Parameters
        ----------
        event_type : EventType
            click, open or conversion.
        lead_id : str
            Opaque lead identifier from the path or query string.
        campaign : str or None
            Campaign tag from the ``c`` query parameter.
        user_agent : str or None
            Raw User-Agent header.
        ip : str or None
            Client address; only its truncated hash is stored.

        Returns
        -------
        RecordResult
            ``recorded`` is False when the append failed.
        """
        event = self.build_event(event_type, lead_id, campaign, user_agent, ip)
        try:
            await self.store.append(event)
        except Exception as exc:
            logger.warning(
                "Failed to record %s event: lead=%s campaign=%s error=%s",
                event.type.value,
                event.lead_id,
                event.campaign,
                exc,
            )
            return RecordResult(event=event, recorded=False, error=str(exc) or type(exc).__name__)

        logger.info(
            "%s recorded: lead=%s campaign=%s",
            event.type.value.capitalize(),
            event.lead_id,
            event.campaign,
        )
        return RecordResult(event=event, recorded=True)

    async def record_request(
        self,
        event_type: EventType,
        request: Request,
        lead_id: str,
        campaign: Optional[str] = None,
    ) -> RecordResult:
        """Record an event using the request's User-Agent and client address."""
        return await self.record(
            event_type,
            lead_id,
            campaign,
            user_agent=request.headers.get("user-agent", ""),
            ip=client_ip(request),
        )
