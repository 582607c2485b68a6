"""
Scoring Engine
==============
Turns survey answers into a Green Fashion Score.

The pipeline is a chain of pure functions:

    raw sum per category  →  capped, rescaled display value   (normalizer)
    display values        →  0–100 total                      (total)
    total                 →  letter grade A–E                 (grade)

and, across surveys,

    general + Σ products  →  per-category sum, capped again at DISPLAY_MAX

Every cap goes through ``cap_value`` so the per-survey normalizer and the
cross-survey aggregator can never disagree on what "capped" means.

Nothing here raises on numeric input. ``NaN`` and negative sums are floored
to 0 and a ``raw_max`` of 0 yields a zero contribution.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Mapping, Optional, Sequence

import numpy as np

from config import GRADE_MESSAGES, QUESTION_PREFIXES
from scoring.models import (
    AggregatedScore,
    Category,
    CategoryScores,
    Grade,
    Response,
    Scope,
    SurveyScore,
)
from scoring.profiles import ScoringProfile, get_profile

logger = logging.getLogger(__name__)


def cap_value(value: float, ceiling: float) -> float:
    """Clamp ``value`` into ``[0, ceiling]``; non-finite input becomes 0."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return float(np.clip(value, 0.0, max(float(ceiling), 0.0)))


def compute_raw_category_sum(
    values: Iterable[float],
    category: Category | str,
    profile: ScoringProfile | None = None,
) -> float:
    """Sum raw answer points for one category, clamped to ``[0, raw_max]``."""
    profile = profile or get_profile()
    return cap_value(_finite_sum(values), profile.raw_max[Category(category)])


def compute_category_percent(
    raw_sum: float,
    category: Category | str,
    profile: ScoringProfile | None = None,
) -> float:
    """Convert a raw category sum to its display-scale value.

    Parameters
    ----------
    raw_sum : float
        Sum of answer points for the category. May be negative or exceed
        the category's ``raw_max``.
    category : Category | str
        The dimension being scored.
    profile : ScoringProfile | None
        Scoring constants. Defaults to the configured scoring version.

    Returns
    -------
    float
        ``clamp(raw_sum, 0, raw_max) / raw_max * display_max``, which is
        linear below the cap and flat at ``display_max`` from there on.
    """
    profile = profile or get_profile()
    category = Category(category)
    raw_max = profile.raw_max[category]
    display_max = profile.display_max[category]
    if raw_max <= 0:
        return 0.0
    capped = cap_value(raw_sum, raw_max)
    return cap_value(capped / raw_max * display_max, display_max)


def compute_total_score(
    scores: CategoryScores | Mapping[str, float] | Sequence[float],
    profile: ScoringProfile | None = None,
) -> float:
    """Sum display values into a total capped at ``total_max`` (100).

    Non-finite category values count as 0. The cap also covers scores that
    were built by hand and already exceed the per-category maxima.
    """
    profile = profile or get_profile()
    if isinstance(scores, CategoryScores):
        values = scores.values()
    elif isinstance(scores, Mapping):
        values = [scores.get(cat.value, 0.0) for cat in Category]
    else:
        values = list(scores)
    return cap_value(_finite_sum(values), profile.total_max)


def grade_from_total(total: float, profile: ScoringProfile | None = None) -> Grade:
    """Map a total to a letter grade using inclusive lower bounds.

    With the v1 thresholds: ``>= 75`` A, ``>= 50`` B, ``>= 25`` C,
    ``>= 1`` D, anything else (0, negatives, NaN) E.
    """
    profile = profile or get_profile()
    for grade, lower_bound in profile.grade_thresholds.items():
        if total >= lower_bound:
            return grade
    return Grade.E


def resolve_category(
    response: Response,
    lookup: Mapping[str, Category | str] | None = None,
) -> Optional[Category]:
    """Find the dimension a response counts towards.

    An explicit ``response.category`` wins, then the caller's
    question → dimension ``lookup``, then the question code prefix.
    """
    if response.category is not None:
        return Category(response.category)
    if lookup and response.question_id in lookup:
        return Category(lookup[response.question_id])

    code = response.question_id.lower()
    for cat_key, prefixes in QUESTION_PREFIXES.items():
        if code.startswith(prefixes):
            return Category(cat_key)
    return None


def group_responses_by_category(
    responses: Iterable[Response | dict],
    lookup: Mapping[str, Category | str] | None = None,
) -> dict[Category, list[float]]:
    """Bucket answer points by category. All four categories are present."""
    grouped: dict[Category, list[float]] = {cat: [] for cat in Category}
    for response in responses:
        if isinstance(response, dict):
            response = Response.from_dict(response)
        category = resolve_category(response, lookup)
        if category is None:
            logger.debug("Skipping response to %r: no category", response.question_id)
            continue
        grouped[category].append(response.numeric_value)
    return grouped


def calculate_complete_survey_score(
    responses: Iterable[Response | dict],
    scope: Scope | str,
    product_type: str | None = None,
    *,
    survey_id: str = "",
    lookup: Mapping[str, Category | str] | None = None,
    profile: ScoringProfile | None = None,
) -> SurveyScore:
    """Score one survey: group, sum, normalize, total and grade.

    Pure: reads nothing and writes nothing. Callers must reject a product
    survey without ``product_type`` before getting here.
    """
    profile = profile or get_profile()
    scope = Scope(scope)
    grouped = group_responses_by_category(responses, lookup)

    scores = CategoryScores(**{
        cat.value: compute_category_percent(
            compute_raw_category_sum(values, cat, profile), cat, profile
        )
        for cat, values in grouped.items()
    })
    total = compute_total_score(scores, profile)
    grade = grade_from_total(total, profile)

    logger.debug("Scored %s survey %r: total=%.2f grade=%s", scope.value, survey_id, total, grade.value)
    return SurveyScore(
        survey_id=survey_id,
        scope=scope,
        scores=scores,
        total=total,
        grade=grade,
        product_type=product_type if scope is Scope.PRODUCT else None,
    )


def aggregate_scores(
    general: SurveyScore,
    product_scores: Sequence[SurveyScore],
    profile: ScoringProfile | None = None,
) -> AggregatedScore:
    """Combine the general survey with every product survey (cap strategy).

    ``aggregate[cat] = min(general[cat] + Σ product[cat], display_max[cat])``;
    a non-finite entry counts as 0 without voiding the rest of the sum.
    Breakdown entries are kept as given, grades included.
    """
    profile = profile or get_profile()
    product_scores = tuple(product_scores)

    combined = CategoryScores(**{
        cat.value: cap_value(
            _finite_sum([general.scores.get(cat), *(p.scores.get(cat) for p in product_scores)]),
            profile.display_max[cat],
        )
        for cat in Category
    })
    total = compute_total_score(combined, profile)
    return AggregatedScore(
        scores=combined,
        total=total,
        grade=grade_from_total(total, profile),
        breakdown=(general, *product_scores),
    )


def combine_general_and_specifics(
    general: SurveyScore | None,
    specifics: Sequence[SurveyScore],
    profile: ScoringProfile | None = None,
) -> AggregatedScore:
    """Combine surveys as a weighted average (weighted strategy).

    The general survey carries ``general_weight`` (0.6 in v1); the product
    surveys share ``specifics_weight`` (0.4) equally. This is a separate
    strategy from ``aggregate_scores`` and gives different numbers.
    """
    profile = profile or get_profile()
    specifics = tuple(specifics)
    if general is None:
        return AggregatedScore(
            scores=CategoryScores(),
            total=0.0,
            grade=Grade.E,
            breakdown=specifics,
        )

    per_specific = profile.specifics_weight / max(len(specifics), 1)
    combined = CategoryScores(**{
        cat.value: cap_value(
            _finite_sum([
                _finite(general.scores.get(cat)) * profile.general_weight,
                *(_finite(s.scores.get(cat)) * per_specific for s in specifics),
            ]),
            profile.display_max[cat],
        )
        for cat in Category
    })
    total = compute_total_score(combined, profile)
    return AggregatedScore(
        scores=combined,
        total=total,
        grade=grade_from_total(total, profile),
        breakdown=(general, *specifics),
    )


def score_snapshot(score: SurveyScore | AggregatedScore) -> dict:
    """Compact ``{total, perDimension, grade, message}`` view of a score."""
    grade = score.grade.value
    return {
        "total": round(score.total, 2),
        "perDimension": {k: round(v, 2) for k, v in score.scores.to_dict().items()},
        "grade": grade,
        "message": GRADE_MESSAGES.get(grade, ""),
    }


def _finite(value: float) -> float:
    """``value`` as a float, or 0 when it is missing, non-numeric or non-finite."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def _finite_sum(values: Iterable[float]) -> float:
    return sum((_finite(value) for value in values), 0.0)
