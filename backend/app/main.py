"""
Trippy Tracker - FastAPI Backend

Main application entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from app.core.config import settings
from app.core.logging import setup_logging
from app.db.event_store import create_event_store
from app.middleware.rate_limit import setup_rate_limiting

# Import routers
from app.api.v1 import health, stats, tracking

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    logger.info("Starting %s v%s", settings.app_name, settings.app_version)
    logger.info("Environment: %s", settings.environment)

    # Validate production settings
    try:
        settings.validate_production_settings()
    except ValueError as e:
        if settings.environment == "production":
            logger.error("CRITICAL: %s", e)
            raise  # Stop startup in production with invalid config
        else:
            logger.warning("Production settings validation: %s", e)

    if not settings.landing_base_url:
        logger.warning("LANDING_BASE not set - click redirects will return 500")

    store = create_event_store(settings)
    await store.init()
    app.state.event_store = store
    logger.info("Event store: %s (%s)", store.backend, store.location)

    yield

    # Shutdown
    await store.close()
    app.state.event_store = None
    logger.info("Shutdown complete")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Trippy Tracker API

    Click, open and conversion tracking for outbound email campaigns.

    ## Tracking

    - **/r/{lead_id}?c=**: record a click and redirect to the landing page
    - **/o/{lead_id}.png?c=**: record an open and return a tracking pixel
    - **/conv?lid=&c=**: record a conversion

    ## Stats

    - **/stats**: HTML report per campaign and industry
    - **/api/v1/stats**: the same report as JSON
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Rate limiting
setup_rate_limiting(app)


# Root endpoint
@app.get("/", tags=["Root"], include_in_schema=False)
async def root():
    """Convenience redirect to the stats page."""
    return RedirectResponse(url="/stats", status_code=302)


# Include routers
app.include_router(health.router)  # Health check at /health (no /api/v1 prefix)
app.include_router(tracking.router)
app.include_router(stats.page_router)
app.include_router(stats.api_router, prefix=settings.api_v1_prefix)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
    )
