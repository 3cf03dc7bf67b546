"""Utility modules for Trippy Tracker."""

from app.utils.tracking import client_ip, derive_industry, hash_ip

__all__ = [
    "client_ip",
    "derive_industry",
    "hash_ip",
]
