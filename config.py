"""
Green Fashion Score — Sustainability Scoring
============================================
Central configuration for the scoring engine, the API and the dashboard.

All tunable parameters, scoring tables, grade thresholds and display settings
live here so you never have to hunt through component code to change behavior.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env before anything reads environment overrides
load_dotenv()

# ---------------------------------------------------------------------------
# Category Definitions
# ---------------------------------------------------------------------------
# Every survey answer contributes to exactly one of these four dimensions.
# Order here is the display order everywhere (cards, charts, certificate).
# ---------------------------------------------------------------------------

CATEGORY_LABELS: dict[str, str] = {
    "people":       "People",
    "planet":       "Planet",
    "materials":    "Materials",
    "circularity":  "Circularity",
}

# Question-code prefixes used when a response carries no explicit category.
# Both the survey seed format ("people_q1") and the catalog codes ("PEO-01")
# are recognised.
QUESTION_PREFIXES: dict[str, tuple[str, ...]] = {
    "people":       ("people_", "peo"),
    "planet":       ("planet_", "pla"),
    "materials":    ("materials_", "mat"),
    "circularity":  ("circularity_", "cir"),
}

# ---------------------------------------------------------------------------
# Scoring Profiles
# ---------------------------------------------------------------------------
# One entry per survey version. RAW_MAX is the highest attainable raw point
# sum for a category in a single survey; DISPLAY_MAX is the category's share
# of the 0–100 display scale. Display maxima MUST sum to total_max and the
# profile loader will refuse to build the profile if they don't.
#
# Grade thresholds are inclusive lower bounds, evaluated A → D; anything
# below D is E.
# ---------------------------------------------------------------------------

SCORING_PROFILES: dict[str, dict] = {
    "v1": {
        "raw_max": {
            "people":       44,
            "planet":       50,
            "materials":    65,
            "circularity":  225,
        },
        "display_max": {
            "people":       20,
            "planet":       20,
            "materials":    40,
            "circularity":  20,
        },
        "grade_thresholds": {
            "A": 75,
            "B": 50,
            "C": 25,
            "D": 1,
        },
        "total_max": 100,
        # Split used by the weighted general/specifics combination
        "weights": {
            "general":   0.6,
            "specifics": 0.4,
        },
    },
}

SCORING_VERSION = os.environ.get("SCORING_VERSION", "v1")

# ---------------------------------------------------------------------------
# Grade Presentation
# ---------------------------------------------------------------------------

GRADE_COLORS: dict[str, str] = {
    "A": "#00d97e",
    "B": "#8bd346",
    "C": "#f6c343",
    "D": "#fd7e14",
    "E": "#e63757",
}

GRADE_MESSAGES: dict[str, str] = {
    "A": "Leading sustainability practices across the value chain.",
    "B": "Solid practices with clear room to improve.",
    "C": "Initial sustainability efforts are in place.",
    "D": "Minimal sustainability practices detected.",
    "E": "No sustainability practices reported yet.",
}

# ---------------------------------------------------------------------------
# Runtime Settings (env overrides)
# ---------------------------------------------------------------------------

SEED_FILE = os.environ.get("SEED_FILE", "")
DASHBOARD_CACHE_TTL = int(os.environ.get("DASHBOARD_CACHE_TTL", "300"))
RATE_LIMITS: list[str] = [
    limit.strip()
    for limit in os.environ.get("RATE_LIMITS", "2000 per day;500 per hour").split(";")
    if limit.strip()
]

# ---------------------------------------------------------------------------
# Dashboard Chrome
# ---------------------------------------------------------------------------

APP_TITLE = "Green Fashion Score"
APP_SUBTITLE = "Sustainability assessment for fashion brands"

# ---------------------------------------------------------------------------
# Per-Category Colors (used in the breakdown chart and the cards)
# ---------------------------------------------------------------------------

CATEGORY_COLORS: dict[str, str] = {
    "people":       "#3b82f6",   # blue
    "planet":       "#10b981",   # emerald
    "materials":    "#f59e0b",   # amber
    "circularity":  "#8b5cf6",   # purple
}

# ---------------------------------------------------------------------------
# Color Palette (consistent across all charts)
# ---------------------------------------------------------------------------

COLORS = {
    "bg":           "#0f1117",
    "card":         "#1a1d26",
    "card_border":  "#2a2d3a",
    "text":         "#e1e4ea",
    "text_muted":   "#8a8f9e",
    "accent":       "#6366f1",   # indigo-500
    "green":        "#00d97e",
    "red":          "#e63757",
    "grid":         "#1e2130",
}


def hex_to_rgba(hex_color: str, alpha: float) -> str:
    """Convert a hex color string to an rgba() CSS string.

    Parameters
    ----------
    hex_color : str
        Hex color like ``"#6366f1"``.
    alpha : float
        Opacity between 0.0 and 1.0.

    Returns
    -------
    str
        CSS ``rgba(r, g, b, a)`` string.
    """
    h = hex_color.lstrip("#")
    r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    return f"rgba({r},{g},{b},{alpha})"
