"""
Health check endpoint for monitoring and load balancers.
Checks that the event store is reachable.
"""

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_event_store
from app.core.config import settings
from app.db.event_store import EventStore

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check(store: EventStore = Depends(get_event_store)):
    """
    Health check for the event store and landing configuration.

    Returns:
        - status: "healthy" if the store responds, "unhealthy" otherwise
        - checks: Dict of individual statuses
        - version: App version
        - environment: Current environment (development/production)

    HTTP Status Codes:
        - 200: Store healthy
        - 503: Store unhealthy
    """
    health_status = {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "checks": {}
    }

    try:
        await store.ping()
        health_status["checks"]["store"] = {
            "status": "healthy",
            "backend": store.backend,
            "location": store.location,
        }
    except Exception as e:
        health_status["checks"]["store"] = {
            "status": "unhealthy",
            "backend": store.backend,
            "error": str(e)
        }
        health_status["status"] = "unhealthy"

    # A missing landing base only breaks /r, so it is reported but not fatal
    health_status["checks"]["landing_base"] = {
        "status": "configured" if settings.landing_base_url else "missing",
    }

    if health_status["status"] == "unhealthy":
        raise HTTPException(status_code=503, detail=health_status)

    return health_status


@router.get("/live")
async def liveness_check():
    """
    Kubernetes-style liveness probe.
    Returns 200 if the service is alive.
    """
    return {"status": "alive", "version": settings.app_version}
