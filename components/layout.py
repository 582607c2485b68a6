"""
Dashboard Layout
================
Assembles all components into the final page layout for one user.

Layout structure:
    ┌─────────────────────────────────────────────┐
    │  Header (title + user + grade + buttons)     │
    ├───────────────┬─────────────────────────────┤
    │  Gauge        │  Score by Survey (stacked)   │
    ├──────────┬────┴─────┬──────────┬────────────┤
    │ People   │ Planet   │ Materials│ Circularity │
    ├──────────┴──────────┼──────────┴────────────┤
    │ Aggregation         │  Surveys Table         │
    │ Strategies          │                        │
    └─────────────────────┴───────────────────────┘
"""

from __future__ import annotations

from urllib.parse import quote

import dash_bootstrap_components as dbc
from dash import dcc, html

from components.cards import build_category_cards
from components.charts import breakdown_frame, build_breakdown_chart, build_strategy_panel
from components.docs import build_docs_modal
from components.gauge import build_gauge_figure
from config import APP_SUBTITLE, APP_TITLE, GRADE_COLORS
from scoring import get_profile


def _surveys_table(frame) -> html.Div:
    rows = [
        html.Tr([
            html.Td(label),
            html.Td(f"{row['total']:.1f}"),
            html.Td(row["grade"], style={"color": GRADE_COLORS.get(row["grade"]), "fontWeight": "700"}),
        ])
        for label, row in frame.iterrows()
    ]
    return html.Div(
        className="bottom-panel",
        children=[
            html.H3("Surveys", className="panel-title"),
            html.Table(
                [
                    html.Thead(html.Tr([
                        html.Th("Survey", style={"color": "#a5b4fc"}),
                        html.Th("Total", style={"color": "#a5b4fc"}),
                        html.Th("Grade", style={"color": "#a5b4fc"}),
                    ])),
                    html.Tbody(rows, style={"color": "#d1d5db", "fontSize": "0.9rem"}),
                ],
                className="table table-dark table-sm",
            ),
        ],
    )


def build_layout(data: dict) -> html.Div:
    """Construct the full dashboard layout from a user's dashboard payload.

    Parameters
    ----------
    data : dict
        Output of ``build_user_dashboard()`` for a user whose general
        survey is completed.

    Returns
    -------
    html.Div
        Root layout element for the Dash app.
    """
    profile = get_profile(data["scoring_version"])
    aggregate = data["aggregate"]
    frame = breakdown_frame(aggregate["breakdown"], data.get("products"))

    gauge_fig = build_gauge_figure(aggregate["total"], aggregate["grade"], profile)
    breakdown_fig = build_breakdown_chart(frame)
    category_cards = build_category_cards(aggregate, profile)
    strategy_panel = build_strategy_panel(aggregate, data.get("weighted"))
    grade_color = GRADE_COLORS.get(aggregate["grade"], "#ffffff")

    return html.Div(
        className="dashboard",
        children=[
            # ── Header ──────────────────────────────────────────────
            html.Header(
                className="dash-header",
                children=[
                    html.Div([
                        html.H1(APP_TITLE, className="app-title"),
                        html.P(APP_SUBTITLE, className="app-subtitle"),
                    ]),
                    html.Div(
                        className="header-meta",
                        children=[
                            html.Span(data["user_id"], className="last-updated"),
                            html.Span(
                                f"Grade {aggregate['grade']}",
                                className="live-dot",
                                style={"color": grade_color, "fontWeight": "700"},
                            ),
                            html.A(
                                "Certificate",
                                href=f"/certificate?user_id={quote(data['user_id'])}",
                                className="docs-btn-header",
                                style={"color": "#9ca3af", "fontWeight": "600", "fontSize": "14px", "textDecoration": "none", "marginLeft": "15px"},
                            ),

                            # Docs Button
                            dbc.Button(
                                "Docs",
                                id="docs-btn",
                                color="link",
                                className="docs-btn-header",
                                style={"color": "#9ca3af", "fontWeight": "600", "fontSize": "14px", "textDecoration": "none", "marginLeft": "15px"}
                            ),
                        ],
                    ),
                ],
            ),

            # ── Hero Row (gauge + breakdown side-by-side) ───────────
            html.Section(
                className="hero-row",
                children=[
                    html.Div(
                        className="chart-panel",
                        children=[
                            dcc.Graph(
                                id="gauge",
                                figure=gauge_fig,
                                config={"displayModeBar": False, "responsive": True},
                            ),
                        ],
                    ),
                    html.Div(
                        className="chart-panel",
                        children=[
                            dcc.Graph(
                                id="breakdown-chart",
                                figure=breakdown_fig,
                                config={"displayModeBar": False, "responsive": True},
                            ),
                        ],
                    ),
                ],
            ),

            # ── Category Cards ──────────────────────────────────────
            html.Section(
                className="cards-row",
                children=category_cards,
            ),

            # ── Bottom Panels (strategies + surveys) ────────────────
            html.Section(
                className="bottom-row",
                children=[
                    html.Div(className="bottom-panel", children=[strategy_panel]),
                    _surveys_table(frame),
                ],
            ),

            # ── Footer ──────────────────────────────────────────────
            html.Footer(
                className="dash-footer",
                children=[
                    html.P(
                        f"{APP_TITLE}  |  Scoring version {profile.version}  |  "
                        f"Updated {data.get('last_updated_utc', '')}",
                        className="footer-text",
                    ),
                ],
            ),

            # ── Docs Modal ──────────────────────────────────────────
            build_docs_modal(profile),
        ],
    )
