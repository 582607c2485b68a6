"""
Scoring Data Models
===================
Enums and immutable value types that cross module boundaries: the engine
produces them, the repository stores their inputs, the API serializes them.

JSON field names follow the public payload: ``people``, ``planet``,
``materials``, ``circularity``, ``total``, ``grade``, ``breakdown``, and for
a single survey ``surveyId``, ``scope``, ``productType``, ``scores``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# --- Enums ---


class Category(str, Enum):
    """Sustainability dimension. Order is the display order."""

    PEOPLE = "people"
    PLANET = "planet"
    MATERIALS = "materials"
    CIRCULARITY = "circularity"


class Grade(str, Enum):
    """Letter grade, A (best) to E (worst)."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"


class Scope(str, Enum):
    """Which questionnaire a survey belongs to."""

    GENERAL = "general"
    PRODUCT = "product"


# --- Dataclasses ---


@dataclass(frozen=True)
class CategoryScores:
    """Display-scale value per category."""

    people: float = 0.0
    planet: float = 0.0
    materials: float = 0.0
    circularity: float = 0.0

    def get(self, category: Category | str) -> float:
        return getattr(self, Category(category).value)

    def values(self) -> list[float]:
        return [self.get(cat) for cat in Category]

    def to_dict(self) -> dict[str, float]:
        return {cat.value: self.get(cat) for cat in Category}

    @classmethod
    def from_dict(cls, data: dict) -> "CategoryScores":
        return cls(**{cat.value: float(data.get(cat.value, 0.0) or 0.0) for cat in Category})


@dataclass(frozen=True)
class Response:
    """A single answered question.

    ``category`` is optional; when absent the engine resolves it from a
    question lookup or the question code prefix.
    """

    question_id: str
    answer_id: str
    numeric_value: float
    category: Optional[Category] = None

    def to_dict(self) -> dict:
        return {
            "question_id": self.question_id,
            "answer_id": self.answer_id,
            "numeric_value": self.numeric_value,
            "category": self.category.value if self.category else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Response":
        category = data.get("category")
        return cls(
            question_id=str(data.get("question_id") or data.get("questionId") or ""),
            answer_id=str(data.get("answer_id") or data.get("answerId") or ""),
            numeric_value=float(data.get("numeric_value", data.get("numericValue", 0.0))),
            category=Category(category) if category else None,
        )


@dataclass(frozen=True)
class SurveyScore:
    """The scored outcome of one survey. Re-scoring makes a new instance."""

    survey_id: str
    scope: Scope
    scores: CategoryScores
    total: float
    grade: Grade
    product_type: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "surveyId": self.survey_id,
            "scope": self.scope.value,
            "productType": self.product_type,
            "scores": self.scores.to_dict(),
            "total": self.total,
            "grade": self.grade.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SurveyScore":
        return cls(
            survey_id=str(data.get("surveyId", "")),
            scope=Scope(data["scope"]),
            scores=CategoryScores.from_dict(data.get("scores", {})),
            total=float(data.get("total", 0.0)),
            grade=Grade(data["grade"]),
            product_type=data.get("productType"),
        )


@dataclass(frozen=True)
class AggregatedScore:
    """Combined score across one general survey and its product surveys.

    ``breakdown[0]`` is the general survey whenever one exists; product
    surveys follow in the order they were supplied.
    """

    scores: CategoryScores
    total: float
    grade: Grade
    breakdown: tuple[SurveyScore, ...] = ()

    @property
    def people(self) -> float:
        return self.scores.people

    @property
    def planet(self) -> float:
        return self.scores.planet

    @property
    def materials(self) -> float:
        return self.scores.materials

    @property
    def circularity(self) -> float:
        return self.scores.circularity

    def to_dict(self) -> dict:
        return {
            **self.scores.to_dict(),
            "total": self.total,
            "grade": self.grade.value,
            "breakdown": [entry.to_dict() for entry in self.breakdown],
        }
