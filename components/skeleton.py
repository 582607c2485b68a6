from dash import html

from config import APP_SUBTITLE, APP_TITLE


def build_skeleton_layout(message: str = "Complete the general questionnaire to see your score."):
    """Returns a placeholder dashboard shown until a user has a score."""

    # ── Header ───────────────────────────────────────────────────────
    header = html.Header(
        className="dash-header",
        children=[
            html.Div([
                html.H1(APP_TITLE, className="app-title"),
                html.P(APP_SUBTITLE, className="app-subtitle"),
            ]),
        ],
    )

    # ── Gauge + Chart Placeholders ───────────────────────────────────
    hero_row = html.Section(
        className="hero-row",
        children=[
            html.Div(
                className="chart-panel",
                style={"height": "300px"},
                children=[
                    html.Div(className="skeleton-pulse", style={"height": "100%", "width": "100%", "borderRadius": "8px"})
                ]
            )
            for _ in range(2)
        ],
    )

    # ── Category Card Placeholders ──────────────────────────────────
    cards_row = html.Section(
        className="cards-row",
        children=[
            html.Div(
                className="metric-card",
                children=[
                    html.Div(className="skeleton-pulse", style={"height": "12px", "width": "60px", "borderRadius": "2px", "marginBottom": "10px"}),
                    html.Div(className="skeleton-pulse", style={"height": "32px", "width": "80px", "borderRadius": "4px"}),
                ]
            )
            for _ in range(4)
        ],
    )

    return html.Div(
        className="dashboard",
        children=[
            header,
            hero_row,
            cards_row,

            # ── Call to Action ──────────────────────────────────────────────
            html.Div(
                id="empty-state-message",
                children=[
                    html.P(message, style={"marginBottom": "16px"}),
                    html.Code("POST /api/v1/scoring", style={"color": "#a5b4fc", "fontSize": "14px"}),
                ],
                style={
                    "position": "fixed",
                    "top": "50%",
                    "left": "50%",
                    "transform": "translate(-50%, -50%)",
                    "backgroundColor": "rgba(15, 17, 23, 0.95)",
                    "border": "1px solid #374151",
                    "borderRadius": "8px",
                    "padding": "24px 40px",
                    "color": "#10b981",
                    "fontSize": "18px",
                    "fontWeight": "600",
                    "boxShadow": "0 10px 25px rgba(0,0,0,0.5)",
                    "zIndex": "9999",
                    "minWidth": "300px",
                    "textAlign": "center",
                }
            ),
        ]
    )
