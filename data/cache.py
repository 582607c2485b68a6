"""
Simple File-Based Cache
========================
Keeps each user's computed dashboard payload on disk so repeated dashboard
requests don't re-score every survey.

Cached data is stored as JSON files in ``data/.cache/`` with a configurable
TTL (time-to-live). The cache directory is git-ignored. Dashboard keys carry
the repository's ``cache_namespace`` and the user's write generation, so
entries from another process or from before a write are never read back.

Usage
-----
>>> from data.cache import get_cached_dashboard, set_cached_dashboard
>>> key = {"namespace": repo.cache_namespace, "generation": repo.generation("brand-1")}
>>> payload = get_cached_dashboard("brand-1", **key)
>>> if payload is None:
...     payload = build_user_dashboard(repo, "brand-1")
...     set_cached_dashboard("brand-1", payload, **key)
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
import time
from pathlib import Path

from config import DASHBOARD_CACHE_TTL

logger = logging.getLogger(__name__)

# Use /tmp in serverless environments, otherwise local .cache
if os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME"):
    _CACHE_DIR = Path(tempfile.gettempdir()) / "green_fashion_score_cache"
else:
    _CACHE_DIR = Path(__file__).parent / ".cache"


def get_cached(key: str, ttl: int = DASHBOARD_CACHE_TTL) -> dict | list | None:
    """Return cached data if it exists and hasn't expired.

    Parameters
    ----------
    key : str
        Cache key (used as filename, so keep it filesystem-safe).
    ttl : int
        Maximum age in seconds before the cache is considered stale.

    Returns
    -------
    dict | list | None
        The cached data, or ``None`` if cache is missing, expired or unreadable.
    """
    path = _CACHE_DIR / f"{key}.json"
    if not path.exists():
        return None

    age_seconds = time.time() - path.stat().st_mtime
    if age_seconds > ttl:
        return None

    try:
        return json.loads(path.read_text())
    except (OSError, ValueError) as e:
        logger.warning("Cache miss (unreadable) for %s: %s", key, e)
        return None


def set_cached(key: str, data: dict | list) -> None:
    """Write data to the cache.

    Parameters
    ----------
    key : str
        Cache key.
    data : dict | list
        JSON-serializable data to store.
    """
    _CACHE_DIR.mkdir(parents=True, exist_ok=True)
    path = _CACHE_DIR / f"{key}.json"
    path.write_text(json.dumps(data, default=str))


def clear_cache() -> None:
    """Delete all cached files. Useful for forcing a full refresh."""
    if _CACHE_DIR.exists():
        for f in _CACHE_DIR.glob("*.json"):
            f.unlink()


# ── Per-User Dashboard Snapshots ──────────────────────────────────────────

def _dashboard_prefix(namespace: str, user_id: str) -> str:
    # User ids come from requests; hash them into a filesystem-safe key.
    digest = hashlib.sha1(f"{namespace}\x00{user_id}".encode("utf-8")).hexdigest()[:16]
    return f"dashboard_{digest}"


def _dashboard_key(namespace: str, user_id: str, generation: int) -> str:
    return f"{_dashboard_prefix(namespace, user_id)}_{generation}"


def get_cached_dashboard(
    user_id: str,
    *,
    namespace: str = "",
    generation: int = 0,
    ttl: int = DASHBOARD_CACHE_TTL,
) -> dict | None:
    """Return a user's cached dashboard for one repository and write generation.

    ``namespace`` identifies the repository the payload was built from, so
    a restarted process never serves a previous process's scores.
    ``generation`` changes with every write to the user's surveys, so a
    payload built before a write is never returned after it.
    """
    data = get_cached(_dashboard_key(namespace, user_id, generation), ttl=ttl)
    return data if isinstance(data, dict) else None


def set_cached_dashboard(user_id: str, data: dict, *, namespace: str = "", generation: int = 0) -> None:
    """Save a user's dashboard payload. Failures are logged, never raised."""
    try:
        set_cached(_dashboard_key(namespace, user_id, generation), data)
    except OSError as e:
        logger.warning("Failed to write dashboard cache for %s: %s", user_id, e)


def invalidate_dashboard(user_id: str, *, namespace: str = "") -> None:
    """Drop every cached generation of a user's dashboard."""
    if not _CACHE_DIR.exists():
        return
    try:
        for path in _CACHE_DIR.glob(f"{_dashboard_prefix(namespace, user_id)}_*.json"):
            path.unlink()
    except OSError as e:
        logger.warning("Failed to invalidate dashboard cache for %s: %s", user_id, e)
