"""
Scoring Profiles
================
A profile is the immutable bundle of constants one survey version is scored
with: per-category ``raw_max`` and ``display_max``, the grade thresholds, the
overall total cap and the general/specifics weight split.

Profiles are built from the raw tables in ``config.SCORING_PROFILES`` and
registered by version name, so a new survey version only needs a new table:

>>> from scoring.models import Category
>>> from scoring.profiles import get_profile
>>> profile = get_profile("v1")
>>> profile.display_max[Category.MATERIALS]
40.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

import numpy as np

from config import SCORING_PROFILES, SCORING_VERSION
from scoring.models import Category, Grade

logger = logging.getLogger(__name__)

# Grades that carry an explicit lower bound; E is whatever falls below D.
_THRESHOLD_GRADES = (Grade.A, Grade.B, Grade.C, Grade.D)


@dataclass(frozen=True)
class ScoringProfile:
    """Immutable scoring constants for one survey version."""

    version: str
    raw_max: Mapping[Category, float]
    display_max: Mapping[Category, float]
    grade_thresholds: Mapping[Grade, float]
    total_max: float = 100.0
    general_weight: float = 0.6
    specifics_weight: float = 0.4
    description: str = field(default="", compare=False)

    @classmethod
    def from_dict(cls, version: str, table: dict) -> "ScoringProfile":
        """Build and validate a profile from a raw config table.

        Raises
        ------
        ValueError
            If a category or grade is missing, a maximum is negative, the
            display maxima don't add up to ``total_max``, the thresholds
            aren't strictly descending, or the weights don't sum to 1.0.
        """
        raw_max = _category_table(table.get("raw_max", {}), "raw_max", version)
        display_max = _category_table(table.get("display_max", {}), "display_max", version)
        total_max = float(table.get("total_max", 100))

        display_sum = sum(display_max.values())
        if not np.isclose(display_sum, total_max):
            raise ValueError(
                f"Profile {version!r}: display maxima must sum to {total_max:g}, "
                f"got {display_sum:g}."
            )

        for cat, value in raw_max.items():
            if value == 0:
                logger.warning(
                    "Profile %r: raw_max for %s is 0; that category will always score 0.",
                    version, cat.value,
                )

        raw_thresholds = table.get("grade_thresholds", {})
        missing = [g.value for g in _THRESHOLD_GRADES if g.value not in raw_thresholds]
        if missing:
            raise ValueError(f"Profile {version!r}: missing grade thresholds for {missing}.")
        thresholds = {g: float(raw_thresholds[g.value]) for g in _THRESHOLD_GRADES}
        bounds = [thresholds[g] for g in _THRESHOLD_GRADES]
        if any(hi <= lo for hi, lo in zip(bounds, bounds[1:])):
            raise ValueError(
                f"Profile {version!r}: grade thresholds must be strictly descending A > B > C > D, "
                f"got {bounds}."
            )

        weights = table.get("weights", {"general": 0.6, "specifics": 0.4})
        general_weight = float(weights.get("general", 0.0))
        specifics_weight = float(weights.get("specifics", 0.0))
        if not np.isclose(general_weight + specifics_weight, 1.0, atol=0.01):
            raise ValueError(
                f"Profile {version!r}: weights must sum to 1.0, "
                f"got {general_weight + specifics_weight:.4f}."
            )

        return cls(
            version=version,
            raw_max=MappingProxyType(raw_max),
            display_max=MappingProxyType(display_max),
            grade_thresholds=MappingProxyType(thresholds),
            total_max=total_max,
            general_weight=general_weight,
            specifics_weight=specifics_weight,
            description=str(table.get("description", "")),
        )

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "raw_max": {cat.value: v for cat, v in self.raw_max.items()},
            "display_max": {cat.value: v for cat, v in self.display_max.items()},
            "grade_thresholds": {g.value: v for g, v in self.grade_thresholds.items()},
            "total_max": self.total_max,
            "weights": {"general": self.general_weight, "specifics": self.specifics_weight},
        }


def _category_table(values: dict, name: str, version: str) -> dict[Category, float]:
    missing = [cat.value for cat in Category if cat.value not in values]
    if missing:
        raise ValueError(f"Profile {version!r}: {name} is missing categories {missing}.")
    table = {cat: float(values[cat.value]) for cat in Category}
    negative = [cat.value for cat, v in table.items() if v < 0]
    if negative:
        raise ValueError(f"Profile {version!r}: {name} must be >= 0 for {negative}.")
    return table


# ── Registry ────────────────────────────────────────────────────────────────

_REGISTRY: dict[str, ScoringProfile] = {}


def register_profile(profile: ScoringProfile) -> ScoringProfile:
    """Add (or replace) a profile under its version name."""
    if profile.version in _REGISTRY:
        logger.info("Replacing scoring profile %r", profile.version)
    _REGISTRY[profile.version] = profile
    return profile


def get_profile(version: str | None = None) -> ScoringProfile:
    """Return the registered profile for ``version`` (default: ``SCORING_VERSION``).

    Raises
    ------
    KeyError
        If no profile with that version is registered.
    """
    version = version or SCORING_VERSION
    try:
        return _REGISTRY[version]
    except KeyError:
        raise KeyError(
            f"Unknown scoring version {version!r}. Known versions: {available_versions()}"
        ) from None


def available_versions() -> list[str]:
    return sorted(_REGISTRY)


for _version, _table in SCORING_PROFILES.items():
    register_profile(ScoringProfile.from_dict(_version, _table))
