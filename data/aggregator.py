"""
Dashboard Aggregator
====================
Assembles the single ``dict`` that the dashboard layout, the certificate page
and the ``/api/v1/dashboard`` endpoint consume for one user.

This is the main entry point for per-user scores. It:
    1. Looks up the user's general survey and product surveys
    2. Scores every survey independently (product surveys in parallel)
    3. Handles a product survey that fails to score gracefully (logs, skips)
    4. Combines them with both aggregation strategies
    5. Returns everything in the shape the consumers expect
"""

from __future__ import annotations

import concurrent.futures
import logging
from datetime import datetime, timezone

from data.cache import get_cached_dashboard, set_cached_dashboard
from data.repository import SurveyRecord, SurveyRepository
from scoring import (
    aggregate_scores,
    calculate_complete_survey_score,
    combine_general_and_specifics,
    get_profile,
    score_snapshot,
)
from scoring.models import SurveyScore
from scoring.profiles import ScoringProfile

logger = logging.getLogger(__name__)

_MAX_WORKERS = 8


def score_record(record: SurveyRecord, profile: ScoringProfile | None = None) -> SurveyScore:
    """Score a stored survey with its own scoring version unless overridden."""
    profile = profile or get_profile(record.scoring_version)
    return calculate_complete_survey_score(
        record.responses,
        record.scope,
        record.product_type,
        survey_id=record.survey_id,
        profile=profile,
    )


def build_user_dashboard(
    repo: SurveyRepository,
    user_id: str,
    profile: ScoringProfile | None = None,
) -> dict:
    """Score all of a user's surveys and assemble the dashboard payload.

    Each survey is scored with its own ``scoring_version`` unless ``profile``
    is given, in which case every survey uses ``profile``. The cross-survey
    aggregates use the general survey's profile.

    Returns
    -------
    dict with keys:
        ``"user_id"``            – str
        ``"has_general_survey"`` – bool, False until the general survey is completed
        ``"scoring_version"``    – str
        ``"aggregate"``          – capped aggregate (``AggregatedScore.to_dict()``) or None
        ``"weighted"``           – 60/40 weighted combination or None
        ``"snapshot"``           – ``score_snapshot`` of the aggregate or None
        ``"general"``            – general ``SurveyScore`` dict or None
        ``"products"``           – list of product score dicts (creation order)
        ``"summary"``            – counts and the average product total
        ``"last_updated_utc"``   – ISO timestamp of this computation
    """
    general_record = repo.general_survey_for(user_id)
    product_records = repo.product_surveys_for(user_id)
    aggregate_profile = profile or get_profile(general_record.scoring_version if general_record else None)

    product_scores: list[SurveyScore] = []
    products: list[dict] = []
    with concurrent.futures.ThreadPoolExecutor(max_workers=_MAX_WORKERS) as executor:
        futures = [(rec, executor.submit(score_record, rec, profile)) for rec in product_records]
        for rec, future in futures:
            try:
                score = future.result()
            except Exception as exc:
                logger.error("Scoring product survey %s failed: %s", rec.survey_id, exc)
                continue
            product_scores.append(score)
            products.append({
                **score.to_dict(),
                "productName": rec.product_name,
                "completed": rec.completed,
            })

    has_general = general_record is not None and general_record.completed
    result = {
        "user_id": user_id,
        "has_general_survey": has_general,
        "scoring_version": aggregate_profile.version,
        "aggregate": None,
        "weighted": None,
        "snapshot": None,
        "general": None,
        "products": products,
        "summary": {
            "has_general": has_general,
            "product_count": len(product_scores),
            "average_product_total": (
                round(sum(s.total for s in product_scores) / len(product_scores), 2)
                if product_scores else 0.0
            ),
        },
        "last_updated_utc": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }

    if has_general:
        general_score = score_record(general_record, profile)
        aggregate = aggregate_scores(general_score, product_scores, aggregate_profile)
        weighted = combine_general_and_specifics(general_score, product_scores, aggregate_profile)
        result["general"] = general_score.to_dict()
        result["aggregate"] = aggregate.to_dict()
        result["weighted"] = weighted.to_dict()
        result["snapshot"] = score_snapshot(aggregate)
        logger.info(
            "Dashboard for %s: total=%.2f grade=%s (%d product surveys)",
            user_id, aggregate.total, aggregate.grade.value, len(product_scores),
        )
    else:
        logger.info("Dashboard for %s: general survey not completed yet", user_id)

    return result


def get_user_dashboard(repo: SurveyRepository, user_id: str) -> dict:
    """Return the cached dashboard payload for ``user_id``, building it on a miss.

    The cache entry is keyed by the repository and by the user's write
    generation read *before* building, so a payload that raced with a write
    is stored under a generation nobody reads any more.
    """
    key = {"namespace": repo.cache_namespace, "generation": repo.generation(user_id)}
    cached = get_cached_dashboard(user_id, **key)
    if cached is not None:
        return cached
    data = build_user_dashboard(repo, user_id)
    set_cached_dashboard(user_id, data, **key)
    return data
