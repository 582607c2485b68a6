"""Tests for scoring.engine — normalization, totals, grades and survey scoring."""

import math

import pytest

from scoring import (
    Category,
    CategoryScores,
    Grade,
    Response,
    Scope,
    calculate_complete_survey_score,
    cap_value,
    compute_category_percent,
    compute_raw_category_sum,
    compute_total_score,
    grade_from_total,
    group_responses_by_category,
    resolve_category,
    score_snapshot,
)
from scoring.profiles import ScoringProfile


# =============================================================================
# cap_value
# =============================================================================


def test_cap_value_clamps_into_range():
    assert cap_value(-3, 20) == 0.0
    assert cap_value(12.5, 20) == 12.5
    assert cap_value(23, 20) == 20.0


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), None, "abc"])
def test_cap_value_non_finite_is_zero(bad):
    assert cap_value(bad, 20) == 0.0


# =============================================================================
# compute_category_percent
# =============================================================================


def test_people_proportionality(profile):
    assert compute_category_percent(35, "people", profile) == pytest.approx(15.91, abs=0.1)


def test_percent_is_monotonic_then_flat(profile):
    raw_max = profile.raw_max[Category.MATERIALS]
    steps = [raw_max * i / 20 for i in range(21)]
    values = [compute_category_percent(x, Category.MATERIALS, profile) for x in steps]
    assert values == sorted(values)
    assert compute_category_percent(raw_max, Category.MATERIALS, profile) == 40.0
    assert compute_category_percent(raw_max * 3, Category.MATERIALS, profile) == 40.0


@pytest.mark.parametrize("raw", [-100, -0.5, 0, 1, 44, 1e9, float("nan")])
def test_percent_stays_within_display_max(profile, raw):
    for cat in Category:
        value = compute_category_percent(raw, cat, profile)
        assert 0.0 <= value <= profile.display_max[cat]


def test_percent_with_zero_raw_max_is_zero():
    table = {
        "raw_max": {"people": 0, "planet": 50, "materials": 65, "circularity": 225},
        "display_max": {"people": 20, "planet": 20, "materials": 40, "circularity": 20},
        "grade_thresholds": {"A": 75, "B": 50, "C": 25, "D": 1},
    }
    profile = ScoringProfile.from_dict("zero-people", table)
    assert compute_category_percent(10, "people", profile) == 0.0


def test_raw_category_sum_ignores_non_finite_and_caps(profile):
    assert compute_raw_category_sum([10, float("nan"), 5], "people", profile) == 15.0
    assert compute_raw_category_sum([40, 40], "people", profile) == 44.0
    assert compute_raw_category_sum([-10, 2], "people", profile) == 0.0


# =============================================================================
# compute_total_score / grade_from_total
# =============================================================================


def test_total_is_capped_at_100(profile):
    assert compute_total_score([50, 50, 50, 50], profile) == 100.0
    assert compute_total_score({"people": 20, "planet": 20}, profile) == 40.0
    assert compute_total_score(CategoryScores(), profile) == 0.0


def test_total_treats_nan_as_zero(profile):
    scores = CategoryScores(people=float("nan"), planet=10, materials=10, circularity=5)
    assert compute_total_score(scores, profile) == 25.0


@pytest.mark.parametrize(
    "total, expected",
    [
        (100, Grade.A),
        (75, Grade.A),
        (74.999, Grade.B),
        (50, Grade.B),
        (49.99, Grade.C),
        (25, Grade.C),
        (24.99, Grade.D),
        (1, Grade.D),
        (0.99, Grade.E),
        (0, Grade.E),
        (-5, Grade.E),
        (float("nan"), Grade.E),
    ],
)
def test_grade_boundaries(profile, total, expected):
    assert grade_from_total(total, profile) is expected


def test_grade_bands_have_no_gaps(profile):
    grades = [grade_from_total(t / 10, profile) for t in range(0, 1001)]
    # Each grade appears as one contiguous run, E up to A
    runs = [g for i, g in enumerate(grades) if i == 0 or grades[i - 1] is not g]
    assert runs == [Grade.E, Grade.D, Grade.C, Grade.B, Grade.A]


# =============================================================================
# Category resolution
# =============================================================================


def test_resolve_category_precedence():
    explicit = Response("people_q1", "a", 1.0, category=Category.PLANET)
    assert resolve_category(explicit) is Category.PLANET

    looked_up = Response("Q-17", "a", 1.0)
    assert resolve_category(looked_up, {"Q-17": "materials"}) is Category.MATERIALS

    assert resolve_category(Response("circularity_q4", "a", 1.0)) is Category.CIRCULARITY
    assert resolve_category(Response("PEO-03", "a", 1.0)) is Category.PEOPLE
    assert resolve_category(Response("misc_1", "a", 1.0)) is None


def test_group_responses_skips_unknown_questions():
    grouped = group_responses_by_category([
        {"question_id": "people_q1", "answer_id": "a", "numeric_value": 3},
        {"questionId": "planet_q1", "answerId": "b", "numericValue": 4},
        {"question_id": "unknown", "answer_id": "c", "numeric_value": 99},
    ])
    assert set(grouped) == set(Category)
    assert grouped[Category.PEOPLE] == [3.0]
    assert grouped[Category.PLANET] == [4.0]
    assert sum(len(v) for v in grouped.values()) == 2


# =============================================================================
# calculate_complete_survey_score
# =============================================================================


def test_empty_survey_scores_zero():
    score = calculate_complete_survey_score([], "general")
    assert score.scores == CategoryScores()
    assert score.total == 0.0
    assert score.grade is Grade.E


def test_full_survey(profile):
    responses = [
        Response("people_q1", "a", 44),
        Response("planet_q1", "a", 50),
        Response("materials_q1", "a", 65),
        Response("circularity_q1", "a", 225),
    ]
    score = calculate_complete_survey_score(responses, Scope.GENERAL, profile=profile)
    assert score.scores.to_dict() == {"people": 20.0, "planet": 20.0, "materials": 40.0, "circularity": 20.0}
    assert score.total == 100.0
    assert score.grade is Grade.A


def test_overflowing_answers_are_capped(profile):
    responses = [Response("people_q1", "a", 40), Response("people_q2", "a", 40)]
    score = calculate_complete_survey_score(responses, "general", profile=profile)
    assert score.scores.people == 20.0
    assert score.total == 20.0
    assert score.grade is Grade.D


def test_product_type_only_kept_for_product_scope():
    product = calculate_complete_survey_score([], "product", "shirt", survey_id="p-1")
    assert product.product_type == "shirt"
    assert product.survey_id == "p-1"

    general = calculate_complete_survey_score([], "general", "shirt")
    assert general.product_type is None


def test_survey_total_matches_category_sum(profile):
    responses = [
        Response("people_q1", "a", 35),
        Response("planet_q1", "a", 12),
        Response("materials_q1", "a", 20),
        Response("circularity_q1", "a", 90),
    ]
    score = calculate_complete_survey_score(responses, "general", profile=profile)
    assert math.isclose(score.total, sum(score.scores.values()))


def test_score_snapshot_rounds_and_adds_message(profile):
    score = calculate_complete_survey_score([Response("people_q1", "a", 35)], "general", profile=profile)
    snap = score_snapshot(score)
    assert snap["perDimension"]["people"] == 15.91
    assert snap["total"] == 15.91
    assert snap["grade"] == "D"
    assert snap["message"]
