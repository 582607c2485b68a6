"""
Dashboard Charts
================
Plotly figures and Dash panels that appear in the main dashboard body:

    - ``breakdown_frame``          — per-survey scores as a DataFrame
    - ``build_breakdown_chart``    — stacked bars, one per survey
    - ``build_strategy_panel``     — capped vs weighted aggregate, per category
"""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go
from dash import html

from config import CATEGORY_COLORS, CATEGORY_LABELS, COLORS, GRADE_COLORS
from scoring.models import Category


def breakdown_frame(breakdown: list[dict], products: list[dict] | None = None) -> pd.DataFrame:
    """Tabulate breakdown entries, one row per survey.

    Parameters
    ----------
    breakdown : list[dict]
        ``SurveyScore.to_dict()`` entries, general survey first.
    products : list[dict] | None
        Product score dicts carrying ``productName``, used for row labels.

    Returns
    -------
    pd.DataFrame
        Indexed by survey label with one column per category plus
        ``total`` and ``grade``.
    """
    names = {p["surveyId"]: p.get("productName") for p in (products or [])}
    rows = []
    for i, entry in enumerate(breakdown):
        if entry["scope"] == "general":
            label = "General"
        else:
            label = names.get(entry["surveyId"]) or entry.get("productType") or f"Product {i}"
        row = {"survey": label}
        row.update({cat.value: float(entry["scores"].get(cat.value, 0.0)) for cat in Category})
        row["total"] = float(entry["total"])
        row["grade"] = entry["grade"]
        rows.append(row)

    columns = ["survey", *[cat.value for cat in Category], "total", "grade"]
    return pd.DataFrame(rows, columns=columns).set_index("survey")


def build_breakdown_chart(frame: pd.DataFrame) -> go.Figure:
    """Build stacked bars showing each survey's category contributions."""
    fig = go.Figure()

    for cat in Category:
        fig.add_trace(
            go.Bar(
                x=frame.index,
                y=frame[cat.value],
                name=CATEGORY_LABELS[cat.value],
                marker={"color": CATEGORY_COLORS[cat.value]},
                hovertemplate=f"<b>{CATEGORY_LABELS[cat.value]}</b><br>"
                              "%{x}<br>"
                              "Score: %{y:.1f}<extra></extra>",
            )
        )

    fig.update_layout(
        barmode="stack",
        title={
            "text": "Score by Survey",
            "font": {"size": 14, "color": COLORS["text"], "family": "Inter"},
            "x": 0,
            "xanchor": "left",
        },
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font={"family": "Inter", "color": COLORS["text_muted"]},
        margin={"t": 40, "b": 40, "l": 45, "r": 16},
        height=300,
        yaxis={
            "range": [0, 100],
            "gridcolor": COLORS["grid"],
            "zeroline": False,
            "tickfont": {"size": 10},
            "title": None,
        },
        xaxis={"tickfont": {"size": 10}, "title": None},
        legend={
            "orientation": "h",
            "yanchor": "top",
            "y": -0.15,
            "xanchor": "center",
            "x": 0.5,
            "font": {"size": 10},
        },
    )

    return fig


def build_strategy_panel(aggregate: dict, weighted: dict | None) -> html.Div:
    """Compare the capped aggregate with the weighted combination."""
    rows = []
    for cat in Category:
        rows.append(
            html.Tr([
                html.Td(CATEGORY_LABELS[cat.value]),
                html.Td(f"{aggregate[cat.value]:.1f}"),
                html.Td(f"{weighted[cat.value]:.1f}" if weighted else "—"),
            ])
        )
    rows.append(
        html.Tr([
            html.Td(html.Strong("Total")),
            html.Td(html.Strong(f"{aggregate['total']:.1f}"),
                    style={"color": GRADE_COLORS.get(aggregate["grade"])}),
            html.Td(html.Strong(f"{weighted['total']:.1f}") if weighted else "—",
                    style={"color": GRADE_COLORS.get(weighted["grade"])} if weighted else {}),
        ])
    )

    return html.Div(
        className="health-panel",
        children=[
            html.H3("Aggregation Strategies", className="panel-title"),
            html.Table(
                [
                    html.Thead(html.Tr([
                        html.Th("Category", style={"color": "#a5b4fc"}),
                        html.Th("Capped sum", style={"color": "#a5b4fc"}),
                        html.Th("Weighted", style={"color": "#a5b4fc"}),
                    ])),
                    html.Tbody(rows, style={"color": "#d1d5db", "fontSize": "0.9rem"}),
                ],
                className="table table-dark table-sm",
            ),
        ],
    )
