"""
Total Score Gauge
=================
A semicircular gauge chart showing the aggregate Green Fashion Score.
Uses Plotly's ``go.Indicator`` in gauge mode with arcs for each grade band
taken from the active scoring profile.
"""

from __future__ import annotations

import plotly.graph_objects as go

from config import COLORS, GRADE_COLORS, hex_to_rgba
from scoring import get_profile
from scoring.models import Grade
from scoring.profiles import ScoringProfile


def grade_bands(profile: ScoringProfile | None = None) -> list[dict]:
    """Return ``[{"grade", "min", "max"}]`` from E (lowest) up to A."""
    profile = profile or get_profile()
    bands = []
    upper = profile.total_max
    for grade, lower in profile.grade_thresholds.items():
        bands.append({"grade": grade.value, "min": lower, "max": upper})
        upper = lower
    bands.append({"grade": Grade.E.value, "min": 0.0, "max": upper})
    return bands[::-1]


def build_gauge_figure(total: float, grade: str, profile: ScoringProfile | None = None) -> go.Figure:
    """Build the main gauge indicator for the aggregate score.

    Parameters
    ----------
    total : float
        Aggregate total (0–100).
    grade : str
        Letter grade for ``total``.

    Returns
    -------
    go.Figure
        Plotly figure containing a styled gauge indicator.
    """
    profile = profile or get_profile()
    color = GRADE_COLORS.get(grade, COLORS["accent"])

    fig = go.Figure(
        go.Indicator(
            mode="gauge+number",
            value=round(total, 1),
            number={
                "font": {"size": 48, "color": color, "family": "Inter"},
                "suffix": f" / {profile.total_max:g}",
            },
            title={
                "text": f"Green Fashion Score<br><span style='font-size:14px;color:{color}'>Grade {grade}</span>",
                "font": {"size": 16, "color": COLORS["text"], "family": "Inter"},
            },
            gauge={
                "axis": {
                    "range": [0, profile.total_max],
                    "tickwidth": 1,
                    "tickcolor": COLORS["text_muted"],
                    "tickfont": {"size": 11, "color": COLORS["text_muted"]},
                },
                "bar": {"color": color, "thickness": 0.3},
                "bgcolor": COLORS["card"],
                "borderwidth": 0,
                "steps": [
                    {"range": [b["min"], b["max"]], "color": hex_to_rgba(GRADE_COLORS[b["grade"]], 0.1)}
                    for b in grade_bands(profile)
                ],
            },
        )
    )

    fig.update_layout(
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font={"family": "Inter"},
        margin={"t": 60, "b": 20, "l": 30, "r": 30},
        height=300,
    )

    return fig
