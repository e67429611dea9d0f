"""
services/grading.py

Pure grading helpers shared by submissions and report generation.

- resolve_grade: percentage -> letter, using admin configured boundaries
- classify_achievement: percentage -> achievement label (remarks column)
- calculate_identifier / identifier_label: the 0-3 "Ident" column on printed cards
- aggregate_scores: A1/A2/A3 -> average
- validate_assessment_score / validate_weighted_percentage: input formatting rules

The two achievement schemes use different thresholds (90/75/60 vs 80/70/40)
and are kept as separate functions on purpose.
"""

import math
import re
from typing import Iterable, List, Optional, Tuple, Union

from config.settings import settings
from utils.exceptions import ValidationError

RawNumber = Union[int, float, str]

# (threshold, label), high to low
ACHIEVEMENT_LEVELS = [
    (90, "Outstanding"),
    (75, "Exceptional"),
    (60, "Satisfactory"),
]
ACHIEVEMENT_FLOOR = "Basic"

# (threshold, identifier), high to low
IDENTIFIER_BANDS = [
    (80, 3),
    (70, 2),
    (40, 1),
]
IDENTIFIER_LABELS = {3: "Outstanding", 2: "Moderate", 1: "Basic", 0: "Below Basic"}

# upper bound for each weighted percentage field
WEIGHTED_FIELDS = {"percentage_20": 20, "percentage_80": 80, "percentage_100": 100}

_INT_TEXT = re.compile(r"^[+-]?\d+$")
_DECIMAL_TEXT = re.compile(r"^[+-]?\d*\.\d+$")


# ==========================================================
# [1] Grade boundaries
# ==========================================================

def resolve_grade(percentage: float, boundaries: Iterable, fallback: Optional[str] = None) -> str:
    """
    Return the grade of the first boundary with min_score <= percentage <= max_score.

    `boundaries` is any iterable of objects (or dicts) with grade/min_score/max_score.
    Ties are prevented on write by the overlap check, not here.
    """
    for b in boundaries:
        grade, low, high = _boundary_fields(b)
        if low <= percentage <= high:
            return grade
    return fallback if fallback is not None else settings.FALLBACK_GRADE


def _boundary_fields(b) -> Tuple[str, float, float]:
    if isinstance(b, dict):
        return b["grade"], b["min_score"], b["max_score"]
    return b.grade, b.min_score, b.max_score


def ranges_overlap(min_a: float, max_a: float, min_b: float, max_b: float) -> bool:
    """Closed interval overlap, so a shared endpoint counts as overlapping."""
    return min_a <= max_b and min_b <= max_a


def find_overlapping_boundary(min_score: float, max_score: float, boundaries: Iterable, exclude_id=None):
    for b in boundaries:
        if exclude_id is not None and getattr(b, "id", None) == exclude_id:
            continue
        _, low, high = _boundary_fields(b)
        if ranges_overlap(min_score, max_score, low, high):
            return b
    return None


# ==========================================================
# [2] Achievement levels
# ==========================================================

def classify_achievement(percentage: float) -> str:
    """>=90 Outstanding, >=75 Exceptional, >=60 Satisfactory, else Basic."""
    for threshold, label in ACHIEVEMENT_LEVELS:
        if percentage >= threshold:
            return label
    return ACHIEVEMENT_FLOOR


def calculate_identifier(percentage: Optional[float]) -> int:
    """Printed "Ident" value: >=80 -> 3, >=70 -> 2, >=40 -> 1, else 0."""
    if percentage is None:
        return 0
    for threshold, identifier in IDENTIFIER_BANDS:
        if percentage >= threshold:
            return identifier
    return 0


def identifier_label(identifier: int) -> str:
    return IDENTIFIER_LABELS.get(identifier, IDENTIFIER_LABELS[0])


# ==========================================================
# [3] Score aggregation
# ==========================================================

def round2(value: float) -> float:
    return round(value, 2)


def aggregate_scores(a1: float, a2: float, a3: float) -> float:
    return round2((a1 + a2 + a3) / 3)


def validate_assessment_score(name: str, raw: RawNumber) -> float:
    """
    A1/A2/A3 must carry a decimal fraction (80.0, "80.5").
    A bare integer (80, "80") is rejected; 0 is the only exception.
    """
    if isinstance(raw, bool) or raw is None:
        raise ValidationError(f"{name} is required and must be a decimal number")

    if isinstance(raw, float):
        value = raw
    elif isinstance(raw, int):
        if raw != 0:
            raise ValidationError(f"{name} must include a decimal fraction (e.g. {raw}.0)")
        value = 0.0
    elif isinstance(raw, str):
        text = raw.strip()
        if _DECIMAL_TEXT.match(text):
            value = float(text)
        elif _INT_TEXT.match(text):
            if int(text) != 0:
                raise ValidationError(f"{name} must include a decimal fraction (e.g. {text}.0)")
            value = 0.0
        else:
            raise ValidationError(f"{name} is not a valid number: {raw!r}")
    else:
        raise ValidationError(f"{name} is not a valid number: {raw!r}")

    if not math.isfinite(value):
        raise ValidationError(f"{name} must be a finite number")
    if value < 0:
        raise ValidationError(f"{name} cannot be negative")
    return value


def validate_weighted_percentage(name: str, raw: RawNumber, upper: int) -> int:
    """Weighted percentages are whole numbers: any decimal point is rejected."""
    if isinstance(raw, bool) or raw is None:
        raise ValidationError(f"{name} is required and must be a whole number")

    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        raise ValidationError(f"{name} must be a whole number without a decimal point")
    elif isinstance(raw, str):
        text = raw.strip()
        if not _INT_TEXT.match(text):
            raise ValidationError(f"{name} must be a whole number without a decimal point")
        value = int(text)
    else:
        raise ValidationError(f"{name} is not a valid number: {raw!r}")

    if value < 0 or value > upper:
        raise ValidationError(f"{name} must be between 0 and {upper}")
    return value


def build_scores(a1: RawNumber, a2: RawNumber, a3: RawNumber,
                 percentage_20: RawNumber, percentage_80: RawNumber, percentage_100: RawNumber,
                 boundaries: List) -> dict:
    """Validate raw inputs and derive average, grade and remarks for one submission."""
    scores = {
        "a1_score": validate_assessment_score("a1_score", a1),
        "a2_score": validate_assessment_score("a2_score", a2),
        "a3_score": validate_assessment_score("a3_score", a3),
    }
    raw_weighted = {"percentage_20": percentage_20, "percentage_80": percentage_80, "percentage_100": percentage_100}
    for field, upper in WEIGHTED_FIELDS.items():
        scores[field] = validate_weighted_percentage(field, raw_weighted[field], upper)

    scores["average_score"] = aggregate_scores(scores["a1_score"], scores["a2_score"], scores["a3_score"])
    scores["grade"] = resolve_grade(scores["percentage_100"], boundaries)
    scores["remarks"] = classify_achievement(scores["percentage_100"])
    return scores
