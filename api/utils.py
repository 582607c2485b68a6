"""
API Helpers
===========
Shared response helpers for the JSON endpoints: the error envelope, weak
ETags for conditional GETs, and request-text sanitising.
"""

from __future__ import annotations

import hashlib
import re

from flask import jsonify

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f<>]")


class ValidationError(ValueError):
    """Request payload rejected before it reaches the scoring engine."""

    def __init__(self, message: str, details: dict | list | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


def json_error(status: int, message: str, details: dict | list | None = None):
    """Return ``({"error": {status, message, details}}, status)`` for Flask."""
    return jsonify({
        "error": {
            "status": status,
            "message": message,
            "details": details,
        }
    }), status


def weak_etag(payload: str) -> str:
    """Deterministic weak ETag for a serialized response body."""
    digest = hashlib.sha1(payload.encode("utf-8")).hexdigest()[:20]
    return f'W/"{digest}"'


def etag_matches(if_none_match: str | None, etag: str) -> bool:
    """True when an ``If-None-Match`` header value covers ``etag``.

    Handles ``*``, comma-separated lists, and weak/strong prefixes (weak
    comparison, as conditional GETs require).
    """
    if not if_none_match:
        return False
    if if_none_match.strip() == "*":
        return True
    wanted = etag[2:] if etag.startswith("W/") else etag
    for candidate in if_none_match.split(","):
        candidate = candidate.strip()
        if candidate.startswith("W/"):
            candidate = candidate[2:]
        if candidate == wanted:
            return True
    return False


def sanitize_text(value: str) -> str:
    """Strip control characters and angle brackets from free text."""
    return _CONTROL_CHARS.sub("", value).strip()
