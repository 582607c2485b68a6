"""
Green Fashion Score — Sustainability Scoring Dashboard
=====================================================
Entry point. Run with:

    python app.py

Then open http://127.0.0.1:8050/?user=<user id> in your browser.

The Flask server behind Dash also serves the scoring API under
``/api/v1`` and the printable certificate at ``/certificate``.
Set ``SEED_FILE`` to a JSON export of surveys to start with data.
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs

import dash
import dash_bootstrap_components as dbc
import flask
from dash import Input, Output, ctx, dcc, html
from dotenv import load_dotenv

from components.layout import build_layout
from components.skeleton import build_skeleton_layout
from config import APP_TITLE, SCORING_VERSION, SEED_FILE
from data import SurveyRepository, get_user_dashboard

# Load .env before anything reads configuration
load_dotenv()


# Logging so scoring activity is visible in the terminal
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger(__name__)


def _default_repository() -> SurveyRepository:
    repo = SurveyRepository()
    if SEED_FILE:
        try:
            repo.load_seed(SEED_FILE)
        except (OSError, KeyError, ValueError) as e:
            logger.warning("Seed file %s could not be loaded: %s", SEED_FILE, e)
    return repo


def render_page(repo: SurveyRepository, search: str | None):
    """Pick the page body for a ``?user=<id>`` query string."""
    user_id = parse_qs((search or "").lstrip("?")).get("user", [""])[0].strip()
    if not user_id:
        return build_skeleton_layout("Add ?user=<id> to the address to see a score.")

    data = get_user_dashboard(repo, user_id)
    if not data["has_general_survey"]:
        return build_skeleton_layout()
    return build_layout(data)


def create_app(repo: SurveyRepository | None = None) -> dash.Dash:
    """Factory function that creates and configures the Dash application."""
    repo = repo if repo is not None else _default_repository()

    app = dash.Dash(
        __name__,
        title=APP_TITLE,
        meta_tags=[
            {"name": "viewport", "content": "width=device-width, initial-scale=1"},
        ],
        external_stylesheets=[
            dbc.themes.DARKLY,
            "https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap",
            "https://fonts.googleapis.com/css2?family=JetBrains+Mono:wght@400;500;600;700&display=swap",
        ],
        suppress_callback_exceptions=True,
    )

    # ── Custom Index String (Prevents White Flash) ──────────────────────
    app.index_string = '''
    <!DOCTYPE html>
    <html>
        <head>
            {%metas%}
            <title>{%title%}</title>
            {%favicon%}
            {%css%}
            <style>
                body {
                    background-color: #0f1117;
                    color: #e1e4ea;
                    margin: 0;
                }
                ._dash-loading {
                    display: none;
                }
            </style>
        </head>
        <body>
            {%app_entry%}
            <footer>
                {%config%}
                {%scripts%}
                {%renderer%}
            </footer>
        </body>
    </html>
    '''

    app.server.config["SURVEY_REPOSITORY"] = repo

    # ── API & Rate Limiting ──────────────────────────────────────────────
    from api.certificate import certificate_bp
    from api.routes import api_bp, get_limiter

    limiter = get_limiter(app.server)

    app.server.register_blueprint(api_bp)
    app.server.register_blueprint(certificate_bp)

    # Exempt Dash's hot-reload endpoint from rate limiting
    @limiter.request_filter
    def ignore_dash_reload():
        return flask.request.path.startswith("/_reload-hash")

    @app.server.get("/health")
    @app.server.get("/healthz")
    def health():
        """Lightweight operational health endpoint."""
        return flask.jsonify({
            "state": "ok",
            "surveys": len(repo),
            "scoring_version": SCORING_VERSION,
        }), 200

    # ── Page shell: the dashboard is chosen by ?user= in the address bar ─
    app.layout = html.Div([
        dcc.Location(id="url", refresh=False),
        html.Div(id="page-content", children=build_skeleton_layout()),
    ])

    @app.callback(
        Output("page-content", "children"),
        Input("url", "search"),
    )
    def display_page(search):
        return render_page(repo, search)

    # ── Docs Modal Callback ─────────────────────────────────────────────
    @app.callback(
        Output("docs-modal", "is_open"),
        Input("docs-btn", "n_clicks"),
        Input("docs-modal-close", "n_clicks"),
        prevent_initial_call=True,
    )
    def toggle_docs_modal(open_click, close_click):
        return ctx.triggered_id == "docs-btn"

    return app


# ── Main ────────────────────────────────────────────────────────────────────

# Create the app globally so Gunicorn can find it
app = create_app()
server = app.server  # Expose the Flask server for Gunicorn

if __name__ == "__main__":
    app.run(debug=True, host="127.0.0.1", port=8050)
