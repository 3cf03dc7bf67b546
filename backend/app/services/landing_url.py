"""
Landing URL construction for click redirects.
"""

from __future__ import annotations

from typing import Dict
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

UTM_SOURCE = "coldemail"
UTM_MEDIUM = "email"


class LandingNotConfigured(Exception):
    """Raised when a click needs a landing base and none is set."""


def attribution_params(lead_id: str, campaign: str) -> Dict[str, str]:
    """Query parameters attached to every click redirect."""
    params: Dict[str, str] = {"lid": lead_id}
    if campaign:
        params["utm_campaign"] = campaign
    params["utm_source"] = UTM_SOURCE
    params["utm_medium"] = UTM_MEDIUM
    params["c"] = campaign
    return params


def build_landing_url(landing_base: str, lead_id: str, campaign: str = "") -> str:
    """Decorate the landing base with lead and UTM attribution.

    Existing query parameters on the landing base are kept; ones with the
    same name as an attribution parameter are replaced.
    """
    landing_base = (landing_base or "").strip()
    if not landing_base:
        raise LandingNotConfigured("LANDING_BASE not configured")

    parsed = urlparse(landing_base)

    # Merge params into existing query string
    existing_qs = parse_qs(parsed.query, keep_blank_values=True)
    for key, value in attribution_params(lead_id or "", campaign or "").items():
        existing_qs[key] = [value]

    new_query = urlencode(existing_qs, doseq=True)
    return urlunparse((
        parsed.scheme,
        parsed.netloc,
        parsed.path or "/",
        parsed.params,
        new_query,
        parsed.fragment,
    ))
