"""Shared fixtures for the scoring, storage and API tests."""

from __future__ import annotations

import copy
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import flask  # noqa: E402

from data.repository import SurveyRepository  # noqa: E402
from scoring import CategoryScores, Scope, SurveyScore, get_profile  # noqa: E402


@pytest.fixture
def profile():
    return get_profile("v1")


@pytest.fixture
def short_people_profile():
    """A second registered version where People maxes out at 10 raw points."""
    from config import SCORING_PROFILES
    from scoring import register_profile
    from scoring.profiles import ScoringProfile

    table = copy.deepcopy(SCORING_PROFILES["v1"])
    table["raw_max"]["people"] = 10
    return register_profile(ScoringProfile.from_dict("v1-short-people", table))


@pytest.fixture(autouse=True)
def isolated_cache(tmp_path, monkeypatch):
    """Point the dashboard file cache at a per-test directory."""
    cache_dir = tmp_path / "cache"
    monkeypatch.setattr("data.cache._CACHE_DIR", cache_dir)
    return cache_dir


@pytest.fixture
def repo():
    return SurveyRepository()


@pytest.fixture
def make_score():
    """Build a ``SurveyScore`` straight from display values."""

    def _make(people=0.0, planet=0.0, materials=0.0, circularity=0.0,
              scope=Scope.GENERAL, survey_id="s", product_type=None):
        from scoring import compute_total_score, grade_from_total

        scores = CategoryScores(people=people, planet=planet, materials=materials, circularity=circularity)
        total = compute_total_score(scores)
        return SurveyScore(
            survey_id=survey_id,
            scope=scope,
            scores=scores,
            total=total,
            grade=grade_from_total(total),
            product_type=product_type,
        )

    return _make


@pytest.fixture
def flask_app(repo):
    from api.certificate import certificate_bp
    from api.routes import api_bp

    app = flask.Flask(__name__)
    app.config["TESTING"] = True
    app.config["SURVEY_REPOSITORY"] = repo
    app.register_blueprint(api_bp)
    app.register_blueprint(certificate_bp)
    return app


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture
def seeded_user(repo):
    """A user with a completed general survey and two product surveys."""
    general = repo.create_survey("brand-1", Scope.GENERAL, survey_id="g-1")
    repo.add_responses(general.survey_id, [
        {"question_id": "people_q1", "answer_id": "a", "numeric_value": 22},
        {"question_id": "planet_q1", "answer_id": "a", "numeric_value": 25},
        {"question_id": "materials_q1", "answer_id": "a", "numeric_value": 32.5},
        {"question_id": "circularity_q1", "answer_id": "a", "numeric_value": 45},
    ])
    repo.complete_survey(general.survey_id)

    shirt = repo.create_survey(
        "brand-1", Scope.PRODUCT, product_type="shirt", product_name="Linen Shirt", survey_id="p-1"
    )
    repo.add_responses(shirt.survey_id, [
        {"question_id": "people_q2", "answer_id": "b", "numeric_value": 11},
        {"question_id": "materials_q2", "answer_id": "b", "numeric_value": 13},
    ])
    jeans = repo.create_survey("brand-1", Scope.PRODUCT, product_type="jeans", survey_id="p-2")
    repo.add_responses(jeans.survey_id, [
        {"question_id": "planet_q2", "answer_id": "c", "numeric_value": 5},
    ])
    return "brand-1"


