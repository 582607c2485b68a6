"""
Score Certificate Page
======================
Serves a printable sustainability certificate for one user at
``/certificate?user_id=...``: the grade, the total out of 100 and each
category against its display maximum.

The certificate body is written as Markdown and rendered with the
``markdown`` library, so wording changes never touch the HTML template.
"""
from __future__ import annotations

from datetime import datetime, timezone

import markdown
from flask import Blueprint, current_app, render_template_string, request
from markupsafe import Markup

from api.utils import sanitize_text
from config import APP_TITLE, CATEGORY_LABELS, GRADE_COLORS, GRADE_MESSAGES
from data.aggregator import get_user_dashboard
from scoring import get_profile

certificate_bp = Blueprint("certificate", __name__)

_CERTIFICATE_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>{{ title }} — Certificate</title>
    <link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700;800&display=swap" rel="stylesheet" />
    <style>
        *, *::before, *::after { box-sizing: border-box; margin: 0; padding: 0; }

        body {
            font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif;
            background-color: #0a0b0f;
            color: #c8ccd4;
            line-height: 1.7;
        }

        /* ── Certificate Frame ─────────────────────────────────── */
        .certificate {
            max-width: 760px;
            margin: 48px auto;
            padding: 56px 48px;
            border: 2px solid {{ grade_color }};
            border-radius: 12px;
            background: #11131a;
            text-align: center;
        }
        .certificate-label {
            font-size: 11px;
            font-weight: 700;
            letter-spacing: 1.5px;
            text-transform: uppercase;
            color: #6366f1;
        }
        .certificate-grade {
            font-size: 120px;
            font-weight: 800;
            line-height: 1;
            margin: 24px 0 8px;
            color: {{ grade_color }};
        }
        .certificate-holder {
            font-size: 22px;
            font-weight: 700;
            color: #e5e7eb;
        }
        .certificate-date {
            font-size: 13px;
            color: #6b7280;
            margin-top: 32px;
        }

        /* ── Prose Content ─────────────────────────────────────── */
        .prose { text-align: left; margin-top: 32px; }
        .prose h2 { font-size: 20px; color: #e5e7eb; margin: 24px 0 12px; }
        .prose p { margin-bottom: 16px; color: #b0b5bf; }
        .prose table { width: 100%; border-collapse: collapse; margin-bottom: 16px; }
        .prose th, .prose td {
            padding: 8px 12px;
            border-bottom: 1px solid rgba(255,255,255,0.06);
            text-align: left;
        }
        .prose th { color: #a5b4fc; font-weight: 600; }

        @media print {
            body { background: #fff; color: #111; }
            .certificate { background: #fff; margin: 0 auto; }
        }
    </style>
</head>
<body>
    <section class="certificate">
        <span class="certificate-label">{{ title }} Certificate</span>
        <div class="certificate-grade">{{ grade }}</div>
        <h2 class="certificate-holder">{{ holder }}</h2>
        <div class="prose">
            {{ content }}
        </div>
        <p class="certificate-date">Issued {{ date }} &middot; Scoring version {{ version }}</p>
    </section>
</body>
</html>
"""


def build_certificate_markdown(aggregate: dict, version: str) -> str:
    """Compose the certificate body for an aggregate score payload.

    Only numbers and configured wording go into the Markdown; request text
    such as the user id is passed to the template, which escapes it.
    """
    profile = get_profile(version)
    lines = [
        f"**Total score: {aggregate['total']:.1f}/{profile.total_max:g}**",
        "",
        GRADE_MESSAGES.get(aggregate["grade"], ""),
        "",
        "| Dimension | Score | Maximum |",
        "|---|---|---|",
    ]
    for cat, max_value in profile.display_max.items():
        lines.append(
            f"| {CATEGORY_LABELS[cat.value]} | {aggregate[cat.value]:.1f} | {max_value:g} |"
        )
    surveys = len(aggregate.get("breakdown", []))
    lines += ["", f"Based on {surveys} survey{'s' if surveys != 1 else ''}."]
    return "\n".join(lines)


@certificate_bp.route("/certificate")
def serve_certificate():
    """Serve the certificate as a standalone printable page."""
    user_id = sanitize_text(request.args.get("user_id", ""))
    if not user_id:
        return "Missing user_id", 400

    data = get_user_dashboard(current_app.config["SURVEY_REPOSITORY"], user_id)
    aggregate = data.get("aggregate")
    if not data.get("has_general_survey") or not aggregate:
        return "No completed general survey for this user yet.", 404

    body_md = build_certificate_markdown(aggregate, data["scoring_version"])
    body_html = markdown.markdown(body_md, extensions=["extra", "smarty"])

    return render_template_string(
        _CERTIFICATE_TEMPLATE,
        title=APP_TITLE,
        grade=aggregate["grade"],
        holder=user_id,
        grade_color=GRADE_COLORS.get(aggregate["grade"], "#ffffff"),
        content=Markup(body_html),
        date=datetime.now(timezone.utc).strftime("%B %d, %Y"),
        version=data["scoring_version"],
    )
