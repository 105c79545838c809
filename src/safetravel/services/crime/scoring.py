"""Tourist-friendly crime scoring."""

from __future__ import annotations

import math
from typing import Iterable

# Totals above this saturate the logarithmic band.
MAX_THRESHOLD = 5000
# Global damping applied to the banded score, in percent.
SCALING_FACTOR = 50
MIN_NONZERO_SCORE = 5
MAX_SCORE = 75

LOW_RISK = "Low Risk"
MEDIUM_RISK = "Medium Risk"
HIGH_RISK = "High Risk"

LOW_RISK_CATEGORIES = frozenset({"theft", "robbery", "other-crime"})
MEDIUM_RISK_CATEGORIES = frozenset({"shoplifting", "public-order", "burglary"})
HIGH_RISK_CATEGORIES = frozenset(
    {
        "vehicle-crime",
        "criminal-damage-arson",
        "anti-social-behaviour",
        "possession-of-weapons",
        "drugs",
        "violent-crime",
    }
)


def round_half_up(value: float) -> int:
    """Round .5 towards positive infinity (``round`` would give 12 for 12.5)."""
    return int(math.floor(value + 0.5))


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


def compute_crime_score(total: int) -> int:
    """Map an incident count onto a damped 0-75 score.

    The banded curve keeps large city-centre counts from reading as alarming:
    0-50 incidents map linearly onto 0-25, 50-200 onto 25-45, 200-1000 onto
    45-65, and anything above grows logarithmically up to a cap of 75. The
    result is halved and, for any non-zero count, kept within [5, 75].
    """
    if total < 0:
        raise ValueError("Incident total cannot be negative.")
    if total == 0:
        return 0

    if total <= 50:
        raw = round_half_up((total / 50) * 25)
    elif total <= 200:
        raw = round_half_up(25 + ((total - 50) / 150) * 20)
    elif total <= 1000:
        raw = round_half_up(45 + ((total - 200) / 800) * 20)
    else:
        excess = total - 1000
        logarithmic_increase = math.log10(excess + 1) / math.log10(MAX_THRESHOLD - 1000 + 1) * 10
        raw = min(MAX_SCORE, round_half_up(65 + logarithmic_increase))

    score = round_half_up(raw * (SCALING_FACTOR / 100))
    return clamp(score, MIN_NONZERO_SCORE, MAX_SCORE)


def normalize_category(category: str) -> str:
    return category.strip().lower().replace("_", "-").replace(" ", "-")


def category_risk_level(category: str) -> str:
    normalized = normalize_category(category)
    if normalized in LOW_RISK_CATEGORIES:
        return LOW_RISK
    if normalized in HIGH_RISK_CATEGORIES:
        return HIGH_RISK
    return MEDIUM_RISK


def count_by_category(categories: Iterable[str]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for category in categories:
        key = category or "unknown"
        counts[key] = counts.get(key, 0) + 1
    return counts
