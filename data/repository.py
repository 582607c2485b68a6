"""
Survey Repository
=================
Thread-safe in-memory store for surveys and their answers.

Stands in for the relational persistence layer: one general survey per user,
any number of product surveys, and the answers recorded against each. A JSON
seed file can pre-populate the store at startup (see ``load_seed``).

Seed format
-----------
::

    {"surveys": [
        {"survey_id": "g-1", "user_id": "brand-1", "scope": "general",
         "completed": true,
         "responses": [{"question_id": "people_q1", "answer_id": "a1",
                        "numeric_value": 5}]}
    ]}
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from scoring.models import Response, Scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SurveyRecord:
    """One stored survey. Updates produce a new record."""

    survey_id: str
    user_id: str
    scope: Scope
    product_type: Optional[str] = None
    product_name: Optional[str] = None
    scoring_version: Optional[str] = None
    completed: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    responses: tuple[Response, ...] = ()

    def to_dict(self) -> dict:
        return {
            "survey_id": self.survey_id,
            "user_id": self.user_id,
            "scope": self.scope.value,
            "product_type": self.product_type,
            "product_name": self.product_name,
            "scoring_version": self.scoring_version,
            "completed": self.completed,
            "created_at": self.created_at.isoformat().replace("+00:00", "Z"),
            "responses": [r.to_dict() for r in self.responses],
        }


class SurveyRepository:
    """In-memory survey store guarded by a single lock."""

    def __init__(self) -> None:
        self._surveys: dict[str, SurveyRecord] = {}
        self._generations: dict[str, int] = {}
        self._lock = threading.Lock()
        # Identifies this store in shared caches; a new store never reuses entries
        self.cache_namespace = uuid.uuid4().hex

    def __len__(self) -> int:
        with self._lock:
            return len(self._surveys)

    # ── Writes ──────────────────────────────────────────────────────────

    def create_survey(
        self,
        user_id: str,
        scope: Scope | str,
        *,
        product_type: str | None = None,
        product_name: str | None = None,
        survey_id: str | None = None,
        scoring_version: str | None = None,
    ) -> SurveyRecord:
        """Create a survey for ``user_id``.

        Raises
        ------
        ValueError
            If the user already has a general survey, a product survey has
            no ``product_type``, or ``survey_id`` is already taken.
        """
        scope = Scope(scope)
        if not user_id:
            raise ValueError("user_id is required")
        if scope is Scope.PRODUCT and not product_type:
            raise ValueError("product_type is required for product surveys")

        record = SurveyRecord(
            survey_id=survey_id or uuid.uuid4().hex,
            user_id=user_id,
            scope=scope,
            product_type=product_type if scope is Scope.PRODUCT else None,
            product_name=product_name,
            scoring_version=scoring_version,
        )
        with self._lock:
            if record.survey_id in self._surveys:
                raise ValueError(f"Survey {record.survey_id!r} already exists")
            if scope is Scope.GENERAL and self._general_for(user_id) is not None:
                raise ValueError(f"User {user_id!r} already has a general survey")
            self._surveys[record.survey_id] = record
            self._bump(user_id)

        logger.info("Created %s survey %s for user %s", scope.value, record.survey_id, user_id)
        return record

    def add_responses(self, survey_id: str, responses: Iterable[Response | dict]) -> SurveyRecord:
        """Record answers; a new answer to the same question replaces the old one."""
        incoming = [r if isinstance(r, Response) else Response.from_dict(r) for r in responses]
        with self._lock:
            record = self._get(survey_id)
            by_question = {r.question_id: r for r in record.responses}
            for response in incoming:
                by_question[response.question_id] = response
            record = replace(record, responses=tuple(by_question.values()))
            self._surveys[survey_id] = record
            self._bump(record.user_id)

        logger.info("Stored %d answers for survey %s", len(incoming), survey_id)
        return record

    def complete_survey(self, survey_id: str) -> SurveyRecord:
        with self._lock:
            record = replace(self._get(survey_id), completed=True)
            self._surveys[survey_id] = record
            self._bump(record.user_id)
        logger.info("Survey %s marked completed", survey_id)
        return record

    def load_seed(self, path: str | Path) -> int:
        """Load surveys from a JSON seed file. Returns how many were loaded."""
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        loaded = 0
        for item in payload.get("surveys", []):
            record = self.create_survey(
                item["user_id"],
                item["scope"],
                product_type=item.get("product_type"),
                product_name=item.get("product_name"),
                survey_id=item.get("survey_id"),
                scoring_version=item.get("scoring_version"),
            )
            self.add_responses(record.survey_id, item.get("responses", []))
            if item.get("completed"):
                self.complete_survey(record.survey_id)
            loaded += 1
        logger.info("Loaded %d surveys from seed %s", loaded, path)
        return loaded

    # ── Reads ───────────────────────────────────────────────────────────

    def get_survey(self, survey_id: str) -> SurveyRecord:
        """Return a survey by id. Raises ``KeyError`` if unknown."""
        with self._lock:
            return self._get(survey_id)

    def general_survey_for(self, user_id: str) -> Optional[SurveyRecord]:
        with self._lock:
            return self._general_for(user_id)

    def product_surveys_for(self, user_id: str) -> list[SurveyRecord]:
        """Product surveys of ``user_id`` in creation order."""
        with self._lock:
            return [
                s for s in self._surveys.values()
                if s.user_id == user_id and s.scope is Scope.PRODUCT
            ]

    def generation(self, user_id: str) -> int:
        """Counter that increases with every write to ``user_id``'s surveys."""
        with self._lock:
            return self._generations.get(user_id, 0)

    # ── Internals (caller holds the lock) ───────────────────────────────

    def _get(self, survey_id: str) -> SurveyRecord:
        try:
            return self._surveys[survey_id]
        except KeyError:
            raise KeyError(f"Unknown survey {survey_id!r}") from None

    def _general_for(self, user_id: str) -> Optional[SurveyRecord]:
        return next(
            (s for s in self._surveys.values() if s.user_id == user_id and s.scope is Scope.GENERAL),
            None,
        )

    def _bump(self, user_id: str) -> None:
        self._generations[user_id] = self._generations.get(user_id, 0) + 1
