"""
Public email tracking endpoints.

These endpoints are unauthenticated because they are embedded in outgoing
emails as click-through links and pixel URLs. Every route records its event
first and then responds unconditionally; a failed write never changes the
response.

Routes:
    GET  /r/{lead_id}?c=          - Click redirect to the landing page
    GET  /o/{lead_id}.png?c=      - 1x1 transparent pixel (records open)
    GET  /conv?lid=&c=            - Conversion acknowledgement
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import RedirectResponse, Response

from app.api.deps import get_event_recorder
from app.core.config import settings
from app.schemas.event import EventType
from app.services.event_recorder import EventRecorder
from app.services.landing_url import LandingNotConfigured, build_landing_url

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Tracking"])

# Transparent 1x1 GIF pixel (34 bytes)
TRACKING_PIXEL = (
    b"\x47\x49\x46\x38\x39\x61\x01\x00\x01\x00\x80\x00\x00"
    b"\x00\x00\x00\xff\xff\xff\x2c\x00\x00\x00\x00\x01\x00"
    b"\x01\x00\x00\x02\x01\x4c\x00\x3b"
)

NO_CACHE_HEADERS = {"Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate"}


@router.get("/r/{lead_id}")
async def track_click(
    request: Request,
    lead_id: str,
    c: str = Query("", description="Campaign tag"),
    recorder: EventRecorder = Depends(get_event_recorder),
):
    """Record a click and redirect to the landing page with attribution params."""
    await recorder.record_request(EventType.CLICK, request, lead_id, c)

    try:
        url = build_landing_url(settings.landing_base_url, lead_id, c)
    except LandingNotConfigured as exc:
        logger.warning("Click for lead=%s with no landing base configured", lead_id)
        raise HTTPException(status_code=500, detail=str(exc))

    return RedirectResponse(url=url, status_code=302)


@router.get("/o/{lead_id}.png")
async def track_open(
    request: Request,
    lead_id: str,
    c: str = Query("", description="Campaign tag"),
    recorder: EventRecorder = Depends(get_event_recorder),
):
    """Record an email open and return a 1x1 transparent pixel.

    Embedded in emails as: <img src="/o/{lead_id}.png?c={campaign}" width="1" height="1" />
    """
    await recorder.record_request(EventType.OPEN, request, lead_id, c)

    return Response(
        content=TRACKING_PIXEL,
        media_type="image/gif",
        headers=NO_CACHE_HEADERS,
    )


@router.get("/conv", status_code=204)
async def track_conversion(
    request: Request,
    lid: str = Query("", description="Lead id"),
    c: str = Query("", description="Campaign tag"),
    recorder: EventRecorder = Depends(get_event_recorder),
):
    """Record a conversion for a lead; responds with an empty body."""
    await recorder.record_request(EventType.CONVERSION, request, lid, c)
    return Response(status_code=204)
