"""
Stats endpoints.

Aggregated campaign and industry counts for every event type, as an HTML
page for people and as JSON for scripts.

Routes:
    GET  /stats            - HTML report
    GET  /api/v1/stats     - JSON report (mounted under the API prefix)
"""

from __future__ import annotations

import logging
from html import escape
from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from app.api.deps import get_stats_aggregator
from app.core.config import settings
from app.middleware.rate_limit import limiter
from app.schemas.event import EventTypeStats, StatsReport, StatsRow
from app.services.stats_aggregator import StatsAggregator

logger = logging.getLogger(__name__)

page_router = APIRouter(tags=["Stats"])
api_router = APIRouter(prefix="/stats", tags=["Stats"])

SECTION_TITLES = {
    "click": "Clicks",
    "open": "Opens (directional)",
    "conversion": "Conversions",
}


@page_router.get("/stats", response_class=HTMLResponse)
@limiter.limit(settings.stats_rate_limit)
async def stats_page(
    request: Request,
    aggregator: StatsAggregator = Depends(get_stats_aggregator),
):
    """Render the stats report as an HTML page."""
    report = await aggregator.build_report()
    return HTMLResponse(content=render_stats_html(report, settings.app_name))


@api_router.get("", response_model=StatsReport)
@limiter.limit(settings.stats_rate_limit)
async def stats_json(
    request: Request,
    aggregator: StatsAggregator = Depends(get_stats_aggregator),
):
    """Return the stats report as JSON."""
    return await aggregator.build_report()


def _rows_html(label: str, rows: List[StatsRow]) -> str:
    body = "".join(
        f"<tr><td>{escape(row.key)}</td><td>{row.total}</td><td>{row.unique}</td></tr>"
        for row in rows
    )
    return f"""
        <table>
          <tr><th>{label}</th><th>Total</th><th>Unique Leads</th></tr>
          {body}
        </table>"""


def _section_html(section: EventTypeStats) -> str:
    title = SECTION_TITLES.get(section.type.value, section.type.value.title())
    return f"""
        <h2>{title}</h2>
        {_rows_html("Campaign", section.campaigns)}
        <h3 class="muted">{title} by industry</h3>
        {_rows_html("Industry", section.industries)}"""


def render_stats_html(report: StatsReport, title: str) -> str:
    """Generate the stats HTML page. All stored strings are escaped."""
    title = escape(title)
    sections = "".join(_section_html(section) for section in report.sections())
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{title} Stats</title>
    <style>
        body {{ font-family: -apple-system, system-ui, Segoe UI, Roboto, Arial; padding: 24px; }}
        table {{ border-collapse: collapse; width: 100%; margin: 12px 0 28px; }}
        th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
        th {{ background: #f6f6f6; }}
        .muted {{ color: #666; }}
    </style>
</head>
<body>
    <h1>{title} Stats</h1>
    <p class="muted">Events stored at: {escape(report.storage)}</p>
    {sections}
</body>
</html>"""
