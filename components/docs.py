"""
Docs Component
==============
Contains the content for the "How scoring works" documentation modal.
The tables are generated from the active scoring profile, so they always
match the numbers the engine uses.
"""
from dash import html
import dash_bootstrap_components as dbc

from config import CATEGORY_LABELS
from scoring import get_profile
from scoring.models import Grade


def build_docs_modal(profile=None):
    """Build the scoring methodology modal."""
    profile = profile or get_profile()

    category_rows = [
        html.Tr([
            html.Td(CATEGORY_LABELS[cat.value]),
            html.Td(f"{profile.raw_max[cat]:g}"),
            html.Td(f"{profile.display_max[cat]:g}"),
        ])
        for cat in profile.display_max
    ]

    grade_rows = []
    upper = None
    for grade, lower in profile.grade_thresholds.items():
        band = f"{lower:g} – {profile.total_max:g}" if upper is None else f"{lower:g} – <{upper:g}"
        grade_rows.append(html.Tr([html.Td(grade.value), html.Td(band)]))
        upper = lower
    grade_rows.append(html.Tr([html.Td(Grade.E.value), html.Td(f"<{upper:g}")]))

    return dbc.Modal(
        [
            dbc.ModalHeader(dbc.ModalTitle("How the Green Fashion Score Works"), className="modal-header"),
            dbc.ModalBody(
                children=[
                    # ── Overview ─────────────────────────────────────────────
                    html.H4("Overview", className="text-white mb-3"),
                    html.P(
                        "Brands answer one general questionnaire about the company and one "
                        "questionnaire per product. Every answer is worth points in one of four "
                        "dimensions: People, Planet, Materials and Circularity.",
                        className="text-muted mb-4"
                    ),

                    # ── Per-Survey Scoring ───────────────────────────────────
                    html.H4("Scoring a Survey", className="text-white mb-3"),
                    html.P(
                        "Points are summed per dimension, capped at the dimension's raw maximum "
                        "and rescaled onto its share of the 100-point scale.",
                        className="text-muted mb-3"
                    ),
                    html.Table([
                        html.Thead(html.Tr([
                            html.Th("Dimension", style={"color": "#a5b4fc"}),
                            html.Th("Raw maximum", style={"color": "#a5b4fc"}),
                            html.Th("Points on scale", style={"color": "#a5b4fc"}),
                        ])),
                        html.Tbody(category_rows, style={"color": "#d1d5db", "fontSize": "0.9rem"}),
                    ], className="table table-dark table-sm mb-4"),

                    html.Div([
                        html.Strong("Calculation Logic: "),
                        html.Code("Dimension = min(max(points, 0), RawMax) / RawMax × ScaleMax"),
                        html.Br(),
                        html.Small("The total is the sum of the four dimensions, capped at 100."),
                    ], className="alert alert-dark", style={"borderColor": "#4338ca", "backgroundColor": "#1e1b4b", "color": "#e0e7ff"}),

                    # ── Aggregation ──────────────────────────────────────────
                    html.H4("Combining Surveys", className="text-white mb-3"),
                    html.P(
                        "The brand score adds each dimension across the general survey and every "
                        "product survey, then caps the sum at the dimension's scale maximum again.",
                        className="text-muted mb-3"
                    ),

                    # ── Grades ───────────────────────────────────────────────
                    html.H4("Grades", className="text-white mb-3"),
                    html.Table([
                        html.Thead(html.Tr([
                            html.Th("Grade", style={"color": "#a5b4fc"}),
                            html.Th("Total", style={"color": "#a5b4fc"}),
                        ])),
                        html.Tbody(grade_rows, style={"color": "#d1d5db", "fontSize": "0.9rem"}),
                    ], className="table table-dark table-sm mb-2"),
                    html.Small(f"Scoring version {profile.version}", className="text-muted"),
                ]
            ),
            dbc.ModalFooter(
                dbc.Button("Close", id="docs-modal-close", className="ms-auto", n_clicks=0)
            ),
        ],
        id="docs-modal",
        is_open=False,
        size="lg",
        centered=True,
        scrollable=True,
    )
