"""Green Fashion Score scoring engine."""

from scoring.engine import (
    aggregate_scores,
    calculate_complete_survey_score,
    cap_value,
    combine_general_and_specifics,
    compute_category_percent,
    compute_raw_category_sum,
    compute_total_score,
    grade_from_total,
    group_responses_by_category,
    resolve_category,
    score_snapshot,
)
from scoring.models import (
    AggregatedScore,
    Category,
    CategoryScores,
    Grade,
    Response,
    Scope,
    SurveyScore,
)
from scoring.profiles import ScoringProfile, available_versions, get_profile, register_profile
