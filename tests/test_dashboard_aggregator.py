"""Tests for data.aggregator and the per-user dashboard cache."""

import pytest

from data import aggregator
from data.aggregator import build_user_dashboard, get_user_dashboard, score_record
from data.cache import get_cached_dashboard, invalidate_dashboard
from data.repository import SurveyRepository
from scoring import Grade


def test_dashboard_for_seeded_user(repo, seeded_user):
    data = build_user_dashboard(repo, seeded_user)

    assert data["has_general_survey"] is True
    assert data["scoring_version"] == "v1"

    aggregate = data["aggregate"]
    assert aggregate["people"] == pytest.approx(15.0)
    assert aggregate["planet"] == pytest.approx(12.0)
    assert aggregate["materials"] == pytest.approx(28.0)
    assert aggregate["circularity"] == pytest.approx(4.0)
    assert aggregate["total"] == pytest.approx(59.0)
    assert aggregate["grade"] == "B"
    assert [entry["surveyId"] for entry in aggregate["breakdown"]] == ["g-1", "p-1", "p-2"]

    assert data["weighted"]["total"] == pytest.approx(29.4)
    assert data["weighted"]["grade"] == "C"
    assert data["snapshot"]["grade"] == "B"

    assert [p["productName"] for p in data["products"]] == ["Linen Shirt", None]
    assert data["summary"]["product_count"] == 2
    assert data["summary"]["average_product_total"] == pytest.approx(7.5)


def test_dashboard_without_completed_general(repo):
    repo.create_survey("brand-2", "general")
    repo.create_survey("brand-2", "product", product_type="shirt")

    data = build_user_dashboard(repo, "brand-2")
    assert data["has_general_survey"] is False
    assert data["aggregate"] is None
    assert data["weighted"] is None
    assert data["summary"]["product_count"] == 1


def test_dashboard_for_unknown_user(repo):
    data = build_user_dashboard(repo, "nobody")
    assert data["has_general_survey"] is False
    assert data["products"] == []
    assert data["summary"]["average_product_total"] == 0.0


def test_score_record_uses_stored_answers(repo, seeded_user):
    score = score_record(repo.get_survey("g-1"))
    assert score.total == pytest.approx(44.0)
    assert score.grade is Grade.C


def _cache_key(repo, user_id):
    return {"namespace": repo.cache_namespace, "generation": repo.generation(user_id)}


def test_get_user_dashboard_serves_cached_payload(repo, seeded_user):
    first = get_user_dashboard(repo, seeded_user)
    cached = get_cached_dashboard(seeded_user, **_cache_key(repo, seeded_user))
    assert cached["last_updated_utc"] == first["last_updated_utc"]
    assert get_user_dashboard(repo, seeded_user)["last_updated_utc"] == first["last_updated_utc"]


def test_write_is_visible_without_explicit_invalidation(repo, seeded_user):
    get_user_dashboard(repo, seeded_user)
    repo.add_responses("p-2", [{"question_id": "circularity_q9", "answer_id": "x", "numeric_value": 225}])
    assert get_user_dashboard(repo, seeded_user)["aggregate"]["circularity"] == pytest.approx(20.0)


def test_invalidate_drops_every_generation(repo, seeded_user, isolated_cache):
    get_user_dashboard(repo, seeded_user)
    repo.complete_survey("p-1")
    get_user_dashboard(repo, seeded_user)
    assert len(list(isolated_cache.glob("dashboard_*.json"))) == 2

    invalidate_dashboard(seeded_user, namespace=repo.cache_namespace)
    assert list(isolated_cache.glob("dashboard_*.json")) == []


def test_cache_is_not_shared_between_repositories(repo, seeded_user):
    assert get_user_dashboard(repo, seeded_user)["has_general_survey"] is True

    # Same user id, fresh store (e.g. after a restart)
    fresh = SurveyRepository()
    data = get_user_dashboard(fresh, seeded_user)
    assert data["has_general_survey"] is False
    assert data["aggregate"] is None


def test_write_during_build_is_not_served_afterwards(repo, seeded_user, monkeypatch):
    real_build = aggregator.build_user_dashboard

    def build_then_write(r, user_id, profile=None):
        data = real_build(r, user_id, profile)
        r.add_responses("p-2", [{"question_id": "circularity_q9", "answer_id": "x", "numeric_value": 225}])
        return data

    monkeypatch.setattr(aggregator, "build_user_dashboard", build_then_write)
    raced = aggregator.get_user_dashboard(repo, seeded_user)
    assert raced["aggregate"]["circularity"] == pytest.approx(4.0)

    monkeypatch.setattr(aggregator, "build_user_dashboard", real_build)
    assert aggregator.get_user_dashboard(repo, seeded_user)["aggregate"]["circularity"] == pytest.approx(20.0)


# =============================================================================
# Scoring versions
# =============================================================================


def test_each_survey_scored_with_its_own_version(repo, short_people_profile):
    general = repo.create_survey("brand-3", "general", scoring_version=short_people_profile.version)
    repo.add_responses(general.survey_id, [{"question_id": "people_q1", "answer_id": "a", "numeric_value": 10}])
    repo.complete_survey(general.survey_id)
    product = repo.create_survey("brand-3", "product", product_type="shirt")
    repo.add_responses(product.survey_id, [{"question_id": "people_q1", "answer_id": "a", "numeric_value": 11}])

    data = build_user_dashboard(repo, "brand-3")

    assert data["scoring_version"] == short_people_profile.version
    assert data["general"]["scores"]["people"] == pytest.approx(20.0)
    assert data["general"] == score_record(repo.get_survey(general.survey_id)).to_dict()
    # The product survey has no version of its own, so the default applies
    assert data["products"][0]["scores"]["people"] == pytest.approx(5.0)
