"""Tests for data.repository — survey storage rules."""

import json

import pytest

from scoring import Response, Scope


def test_create_general_and_product_surveys(repo):
    general = repo.create_survey("brand-1", "general")
    product = repo.create_survey("brand-1", Scope.PRODUCT, product_type="shirt", product_name="Tee")

    assert general.scope is Scope.GENERAL
    assert general.completed is False
    assert product.product_type == "shirt"
    assert len(repo) == 2
    assert repo.general_survey_for("brand-1") == general
    assert repo.product_surveys_for("brand-1") == [product]


def test_one_general_survey_per_user(repo):
    repo.create_survey("brand-1", "general")
    with pytest.raises(ValueError, match="already has a general survey"):
        repo.create_survey("brand-1", "general")
    # Another user is unaffected
    repo.create_survey("brand-2", "general")


def test_product_survey_requires_type(repo):
    with pytest.raises(ValueError, match="product_type"):
        repo.create_survey("brand-1", "product")


def test_duplicate_survey_id_rejected(repo):
    repo.create_survey("brand-1", "general", survey_id="s-1")
    with pytest.raises(ValueError, match="already exists"):
        repo.create_survey("brand-2", "general", survey_id="s-1")


def test_general_survey_drops_product_type(repo):
    record = repo.create_survey("brand-1", "general", product_type="shirt")
    assert record.product_type is None


def test_answers_replace_by_question(repo):
    record = repo.create_survey("brand-1", "general")
    repo.add_responses(record.survey_id, [
        Response("people_q1", "a", 1),
        Response("planet_q1", "a", 2),
    ])
    record = repo.add_responses(record.survey_id, [{"question_id": "people_q1", "answer_id": "b", "numeric_value": 5}])

    assert [(r.question_id, r.answer_id, r.numeric_value) for r in record.responses] == [
        ("people_q1", "b", 5.0),
        ("planet_q1", "a", 2.0),
    ]
    assert repo.get_survey(record.survey_id) == record


def test_complete_survey(repo):
    record = repo.create_survey("brand-1", "general")
    assert repo.complete_survey(record.survey_id).completed is True
    assert repo.get_survey(record.survey_id).completed is True


def test_unknown_survey_raises_key_error(repo):
    with pytest.raises(KeyError, match="Unknown survey"):
        repo.get_survey("nope")
    with pytest.raises(KeyError):
        repo.add_responses("nope", [])


def test_product_surveys_in_creation_order(repo):
    ids = [
        repo.create_survey("brand-1", "product", product_type=t).survey_id
        for t in ("shirt", "jeans", "jacket")
    ]
    repo.create_survey("brand-2", "product", product_type="hat")
    assert [r.survey_id for r in repo.product_surveys_for("brand-1")] == ids


def test_load_seed(repo, tmp_path):
    seed = tmp_path / "seed.json"
    seed.write_text(json.dumps({"surveys": [
        {"survey_id": "g-1", "user_id": "brand-1", "scope": "general", "completed": True,
         "responses": [{"question_id": "people_q1", "answer_id": "a", "numeric_value": 5}]},
        {"survey_id": "p-1", "user_id": "brand-1", "scope": "product", "product_type": "shirt",
         "responses": []},
    ]}))

    assert repo.load_seed(seed) == 2
    general = repo.get_survey("g-1")
    assert general.completed is True
    assert general.responses[0].numeric_value == 5.0
    assert repo.get_survey("p-1").completed is False


def test_record_to_dict(repo):
    record = repo.create_survey("brand-1", "product", product_type="shirt", survey_id="p-1")
    payload = record.to_dict()
    assert payload["survey_id"] == "p-1"
    assert payload["scope"] == "product"
    assert payload["created_at"].endswith("Z")
