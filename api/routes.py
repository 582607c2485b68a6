"""
Scoring API
===========
JSON endpoints under ``/api/v1``:

    POST /api/v1/scoring     store answers for a survey and score it
    GET  /api/v1/results     score of one survey
    GET  /api/v1/dashboard   aggregate score of a user (ETag / 304 aware)
    GET  /api/v1/profiles    registered scoring profiles

Authentication is handled upstream; the user id arrives as ``user_id`` (body
or query string) or the ``X-User-Id`` header. The survey repository lives in
``app.config["SURVEY_REPOSITORY"]``.
"""

from __future__ import annotations

import json
import logging
import math

from flask import Blueprint, Response as FlaskResponse, current_app, jsonify, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException

from api.utils import ValidationError, etag_matches, json_error, sanitize_text, weak_etag
from config import RATE_LIMITS
from data.aggregator import get_user_dashboard, score_record
from data.cache import invalidate_dashboard
from data.repository import SurveyRepository
from scoring import available_versions, get_profile, score_snapshot
from scoring.models import Category, Response, Scope

logger = logging.getLogger(__name__)

# Create Blueprint
api_bp = Blueprint('api', __name__, url_prefix='/api/v1')

_STRATEGIES = {"cap": "aggregate", "weighted": "weighted"}


def get_limiter(app):
    """Factory to create a limiter attached to the app."""
    return Limiter(
        get_remote_address,
        app=app,
        default_limits=RATE_LIMITS,
        storage_uri="memory://"
    )


def _repo() -> SurveyRepository:
    return current_app.config["SURVEY_REPOSITORY"]


def _user_id(body: dict | None = None) -> str:
    raw = (body or {}).get("user_id") or request.args.get("user_id") or request.headers.get("X-User-Id")
    if not raw or not isinstance(raw, str):
        raise ValidationError("user_id is required")
    return sanitize_text(raw)


# ── Validation ────────────────────────────────────────────────────────────

def parse_submission(body: object) -> dict:
    """Validate a scoring payload and return it in normalized form.

    Raises
    ------
    ValidationError
        With per-field ``details`` when the payload is malformed.
    """
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")

    errors: dict[str, str] = {}
    scope = body.get("scope")
    if scope not in {s.value for s in Scope}:
        errors["scope"] = "must be 'general' or 'product'"

    product_type = body.get("product_type")
    if product_type is not None and not isinstance(product_type, str):
        errors["product_type"] = "must be a string"
    elif scope == Scope.PRODUCT.value and not (product_type or "").strip():
        errors["product_type"] = "required for product scope"

    version = body.get("scoring_version")
    if version is not None and version not in available_versions():
        errors["scoring_version"] = f"unknown version; expected one of {available_versions()}"

    answers = body.get("answers")
    responses: list[Response] = []
    if not isinstance(answers, list):
        errors["answers"] = "must be a list"
    else:
        for i, answer in enumerate(answers):
            problem = _answer_problem(answer)
            if problem:
                errors[f"answers[{i}]"] = problem
                continue
            category = answer.get("category")
            responses.append(Response(
                question_id=sanitize_text(answer["question_id"]),
                answer_id=sanitize_text(answer["answer_id"]),
                numeric_value=float(answer["numeric_value"]),
                category=Category(category) if category else None,
            ))

    if errors:
        raise ValidationError("Bad Request", errors)

    return {
        "scope": Scope(scope),
        "product_type": sanitize_text(product_type) if product_type else None,
        "product_name": sanitize_text(str(body["product_name"])) if body.get("product_name") else None,
        "survey_id": sanitize_text(str(body["survey_id"])) if body.get("survey_id") else None,
        "scoring_version": version,
        "complete": bool(body.get("complete", False)),
        "responses": responses,
    }


def _answer_problem(answer: object) -> str | None:
    if not isinstance(answer, dict):
        return "must be an object"
    for key in ("question_id", "answer_id"):
        if not isinstance(answer.get(key), str) or not answer[key].strip():
            return f"{key} must be a non-empty string"
    value = answer.get("numeric_value")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return "numeric_value must be a finite number"
    category = answer.get("category")
    if category is not None and category not in {c.value for c in Category}:
        return f"category must be one of {[c.value for c in Category]}"
    return None


# ── Endpoints ─────────────────────────────────────────────────────────────

@api_bp.route('/scoring', methods=['POST'])
def submit_scoring():
    """Record answers for a survey (creating it if needed) and return its score."""
    body = request.get_json(silent=True)
    user_id = _user_id(body if isinstance(body, dict) else None)
    submission = parse_submission(body)
    repo = _repo()

    record = _resolve_survey(repo, user_id, submission)
    record = repo.add_responses(record.survey_id, submission["responses"])
    if submission["complete"]:
        record = repo.complete_survey(record.survey_id)
    invalidate_dashboard(user_id, namespace=repo.cache_namespace)

    score = score_record(record)
    return jsonify({
        "survey_id": record.survey_id,
        "completed": record.completed,
        "score": score.to_dict(),
        "snapshot": score_snapshot(score),
    }), 200


def _resolve_survey(repo: SurveyRepository, user_id: str, submission: dict):
    scope = submission["scope"]
    survey_id = submission["survey_id"]

    if survey_id:
        try:
            record = repo.get_survey(survey_id)
        except KeyError:
            record = None
        if record is not None:
            if record.user_id != user_id:
                # Don't reveal other users' surveys
                raise KeyError(f"Unknown survey {survey_id!r}")
            if record.scope is not scope:
                raise ValidationError("Bad Request", {"scope": f"survey {survey_id!r} is a {record.scope.value} survey"})
            return _check_version(record, submission["scoring_version"])

    if scope is Scope.GENERAL:
        existing = repo.general_survey_for(user_id)
        if existing is not None:
            return _check_version(existing, submission["scoring_version"])

    return repo.create_survey(
        user_id,
        scope,
        product_type=submission["product_type"],
        product_name=submission["product_name"],
        survey_id=survey_id,
        scoring_version=submission["scoring_version"],
    )


def _check_version(record, version: str | None):
    # A stored survey keeps the version it was created with
    stored = get_profile(record.scoring_version).version
    if version is not None and version != stored:
        raise ValidationError(
            "Bad Request",
            {"scoring_version": f"survey {record.survey_id!r} is scored with {stored!r}"},
        )
    return record


@api_bp.route('/results', methods=['GET'])
def get_results():
    """Return the score of a single survey."""
    survey_id = request.args.get("survey_id")
    if not survey_id:
        raise ValidationError("Missing survey_id parameter")
    record = _repo().get_survey(survey_id)
    score = score_record(record)
    return jsonify({**score.to_dict(), "completed": record.completed}), 200


@api_bp.route('/dashboard', methods=['GET'])
def get_dashboard():
    """Return the user's aggregate score with a weak ETag.

    ``If-None-Match`` matching the current ETag yields ``304`` with no body.
    ``?strategy=weighted`` switches to the 60/40 weighted combination.
    """
    user_id = _user_id()
    strategy = request.args.get("strategy", "cap")
    if strategy not in _STRATEGIES:
        raise ValidationError("Bad Request", {"strategy": f"must be one of {sorted(_STRATEGIES)}"})

    data = get_user_dashboard(_repo(), user_id)
    if not data["has_general_survey"]:
        return jsonify({"hasGeneralSurvey": False}), 200

    payload = data[_STRATEGIES[strategy]]
    body = json.dumps(payload, sort_keys=True)
    etag = weak_etag(body)

    if etag_matches(request.headers.get("If-None-Match"), etag):
        return FlaskResponse(status=304, headers={"ETag": etag})

    return FlaskResponse(body, status=200, mimetype="application/json", headers={"ETag": etag})


@api_bp.route('/profiles', methods=['GET'])
def list_profiles():
    """Return every registered scoring profile."""
    return jsonify({
        "default": get_profile().version,
        "profiles": [get_profile(v).to_dict() for v in available_versions()],
    }), 200


# ── Error Mapping ─────────────────────────────────────────────────────────

@api_bp.errorhandler(ValidationError)
def _handle_validation(e: ValidationError):
    logger.warning("Rejected %s %s: %s %s", request.method, request.path, e.message, e.details or "")
    return json_error(400, e.message, e.details)


@api_bp.errorhandler(ValueError)
def _handle_value_error(e: ValueError):
    return json_error(400, str(e))


@api_bp.errorhandler(KeyError)
def _handle_not_found(e: KeyError):
    message = e.args[0] if e.args else "Not Found"
    return json_error(404, str(message))


@api_bp.errorhandler(Exception)
def _handle_unexpected(e: Exception):
    if isinstance(e, HTTPException):
        return json_error(e.code or 500, e.description or e.name)
    logger.exception("Unhandled API error: %s", e)
    return json_error(500, "Internal Server Error")
