"""
Category Score Cards
====================
Renders a row of cards, one per sustainability category, each showing:
    - Label & share of the 100-point scale
    - Aggregate value against the category maximum
    - Progress bar in the category color
    - How much each survey contributed before the cap
"""

from __future__ import annotations

from dash import html

from config import CATEGORY_COLORS, CATEGORY_LABELS, COLORS, hex_to_rgba
from scoring import get_profile
from scoring.models import Category
from scoring.profiles import ScoringProfile


def _progress_bar(value: float, maximum: float, color: str) -> html.Div:
    pct = 0.0 if maximum <= 0 else min(value / maximum, 1.0) * 100
    return html.Div(
        className="tech-progress",
        style={
            "height": "8px",
            "backgroundColor": hex_to_rgba(color, 0.15),
            "borderRadius": "4px",
            "overflow": "hidden",
        },
        children=html.Div(
            style={
                "width": f"{pct:.1f}%",
                "height": "100%",
                "backgroundColor": color,
                "borderRadius": "4px",
            }
        ),
    )


def build_category_cards(aggregate: dict, profile: ScoringProfile | None = None) -> list:
    """Build one card component per category.

    Parameters
    ----------
    aggregate : dict
        ``AggregatedScore.to_dict()`` payload.
    profile : ScoringProfile | None
        Supplies each category's display maximum.

    Returns
    -------
    list
        List of card components, in category display order.
    """
    profile = profile or get_profile()
    breakdown = aggregate.get("breakdown", [])

    cards = []
    for cat in Category:
        value = float(aggregate.get(cat.value, 0.0))
        maximum = profile.display_max[cat]
        color = CATEGORY_COLORS.get(cat.value, COLORS["accent"])
        share_pct = int(round(maximum / profile.total_max * 100)) if profile.total_max else 0

        # Sum before the aggregate cap, so a capped category is visible
        uncapped = sum(float(entry["scores"].get(cat.value, 0.0)) for entry in breakdown)

        card = html.Div(
            className="tech-card",
            id=f"card-{cat.value}",
            children=[
                html.Div(className="tech-card-bezel"),

                html.Div(
                    className="tech-card-header",
                    children=[
                        html.Span(CATEGORY_LABELS[cat.value], className="tech-label"),
                        html.Span(f"W:{share_pct:02d}%", className="tech-weight"),
                    ],
                ),

                html.Div(
                    className="tech-main-row",
                    children=[
                        html.Span(f"{value:.1f}", className="tech-score", style={"color": color}),
                        html.Span(f"/ {maximum:g}", className="tech-meta-label"),
                    ],
                ),

                _progress_bar(value, maximum, color),

                html.Div(
                    className="tech-stats-grid",
                    children=[
                        html.Div([
                            html.Span("SUM", className="tech-meta-label"),
                            html.Span(f"{uncapped:.1f}", className="tech-meta-value"),
                        ]),
                        html.Div(className="tech-grid-sep"),
                        html.Div([
                            html.Span("CAP", className="tech-meta-label"),
                            html.Span(
                                "reached" if uncapped >= maximum else "open",
                                className="tech-meta-value",
                            ),
                        ]),
                    ],
                ),
            ],
        )
        cards.append(card)

    return cards
