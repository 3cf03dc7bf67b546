"""
FastAPI dependencies resolving the per-app store and services.

The store is opened in the application lifespan and kept on ``app.state``.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from app.core.config import settings
from app.db.event_store import EventStore
from app.services.event_recorder import EventRecorder
from app.services.stats_aggregator import StatsAggregator


def get_event_store(request: Request) -> EventStore:
    store = getattr(request.app.state, "event_store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Event store not initialized")
    return store


def get_event_recorder(store: EventStore = Depends(get_event_store)) -> EventRecorder:
    return EventRecorder(store, ip_hash_length=settings.ip_hash_length)


def get_stats_aggregator(store: EventStore = Depends(get_event_store)) -> StatsAggregator:
    return StatsAggregator(store)
