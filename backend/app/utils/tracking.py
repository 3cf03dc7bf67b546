"""
Helpers for deriving event fields from a tracking request.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import Request

logger = logging.getLogger(__name__)

# Campaign tags look like "restaurants_v1"; the industry is the part before "_v"
VERSION_SEPARATOR = "_v"

DEFAULT_IP_HASH_LENGTH = 16


def derive_industry(campaign: str | None) -> str:
    """Extract the industry segment from a campaign tag.

    Returns the text before the first ``_v`` when that separator is not at
    the start of the tag, and an empty string otherwise.
    """
    campaign = campaign or ""
    idx = campaign.find(VERSION_SEPARATOR)
    if idx > 0:
        return campaign[:idx]
    return ""


def hash_ip(ip: str | None, length: int = DEFAULT_IP_HASH_LENGTH) -> str:
    """Return a truncated SHA-256 hex digest of the client IP.

    Never raises; an empty string is returned if hashing fails.
    """
    try:
        return hashlib.sha256(str(ip or "").encode("utf-8")).hexdigest()[:length]
    except Exception as exc:
        logger.warning("IP hashing failed: %s", exc)
        return ""


def client_ip(request: Request) -> str:
    """Client address, preferring the first X-Forwarded-For entry."""
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return ""
