from types import SimpleNamespace

import pytest

from services.comments import match_comment
from services.grading import (
    aggregate_scores,
    build_scores,
    calculate_identifier,
    classify_achievement,
    find_overlapping_boundary,
    identifier_label,
    resolve_grade,
    validate_assessment_score,
    validate_weighted_percentage,
)
from utils.exceptions import ValidationError

BOUNDARIES = [
    {"grade": "A", "min_score": 80, "max_score": 100},
    {"grade": "B", "min_score": 70, "max_score": 79.99},
    {"grade": "C", "min_score": 60, "max_score": 69.99},
    {"grade": "D", "min_score": 50, "max_score": 59.99},
]


# ---------------------------------------------------------------------------
# Grade boundaries
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("percentage,expected", [
    (100, "A"), (80, "A"), (79.99, "B"), (70, "B"), (65.5, "C"), (50, "D"),
])
def test_resolve_grade_covered(percentage, expected):
    assert resolve_grade(percentage, BOUNDARIES) == expected


def test_resolve_grade_falls_back_to_f_when_uncovered():
    assert resolve_grade(49.99, BOUNDARIES) == "F"
    assert resolve_grade(79.995, BOUNDARIES) == "F"


def test_resolve_grade_empty_configuration_is_f():
    assert resolve_grade(95, []) == "F"


def test_resolve_grade_accepts_row_objects():
    rows = [SimpleNamespace(grade="A", min_score=80.0, max_score=100.0)]
    assert resolve_grade(85, rows) == "A"


def test_overlap_detection_includes_shared_endpoint():
    existing = [SimpleNamespace(id=1, grade="B", min_score=70, max_score=79)]
    assert find_overlapping_boundary(79, 90, existing) is existing[0]
    assert find_overlapping_boundary(80, 100, existing) is None
    assert find_overlapping_boundary(60, 100, existing) is existing[0]


def test_overlap_detection_skips_row_being_edited():
    existing = [SimpleNamespace(id=1, grade="B", min_score=70, max_score=79)]
    assert find_overlapping_boundary(71, 78, existing, exclude_id=1) is None


# ---------------------------------------------------------------------------
# Achievement levels
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("percentage,expected", [
    (100, "Outstanding"), (90, "Outstanding"), (89.99, "Exceptional"), (75, "Exceptional"),
    (74, "Satisfactory"), (60, "Satisfactory"), (59.9, "Basic"), (0, "Basic"),
])
def test_classify_achievement_thresholds(percentage, expected):
    assert classify_achievement(percentage) == expected


def test_classify_achievement_is_monotonic():
    rank = {"Basic": 0, "Satisfactory": 1, "Exceptional": 2, "Outstanding": 3}
    levels = [rank[classify_achievement(p / 2)] for p in range(0, 201)]
    assert levels == sorted(levels)


@pytest.mark.parametrize("percentage,expected", [
    (80, 3), (79, 2), (70, 2), (69, 1), (40, 1), (39, 0), (None, 0),
])
def test_identifier_uses_its_own_thresholds(percentage, expected):
    assert calculate_identifier(percentage) == expected


def test_identifier_and_achievement_schemes_differ():
    # 85 is Exceptional on the remarks scale but top band on the identifier scale
    assert classify_achievement(85) == "Exceptional"
    assert identifier_label(calculate_identifier(85)) == "Outstanding"
    assert identifier_label(calculate_identifier(10)) == "Below Basic"


# ---------------------------------------------------------------------------
# Score aggregation and formatting rules
# ---------------------------------------------------------------------------

def test_aggregate_scores_rounds_to_two_places():
    assert aggregate_scores(80.0, 85.5, 90.0) == 85.17
    assert aggregate_scores(0.0, 0.0, 0.0) == 0.0
    assert aggregate_scores(1.0, 2.0, 2.0) == 1.67


@pytest.mark.parametrize("raw,expected", [(2.5, 2.5), (80.0, 80.0), ("2.75", 2.75), (0, 0.0), ("0", 0.0), (0.0, 0.0)])
def test_assessment_score_accepts_decimals_and_zero(raw, expected):
    assert validate_assessment_score("a1_score", raw) == expected


@pytest.mark.parametrize("raw", [3, "3", -1.5, True, None, "abc", "2.", float("inf"), float("nan"), "inf"])
def test_assessment_score_rejects_bare_integers_and_junk(raw):
    with pytest.raises(ValidationError):
        validate_assessment_score("a1_score", raw)


@pytest.mark.parametrize("raw,expected", [(15, 15), ("18", 18), (0, 0), (20, 20)])
def test_weighted_percentage_accepts_whole_numbers(raw, expected):
    assert validate_weighted_percentage("percentage_20", raw, 20) == expected


@pytest.mark.parametrize("raw", [15.5, 15.0, "15.0", "15.5", 21, -1, False])
def test_weighted_percentage_rejects_decimals_and_out_of_range(raw):
    with pytest.raises(ValidationError):
        validate_weighted_percentage("percentage_20", raw, 20)


def test_build_scores_derives_average_grade_and_remarks():
    scores = build_scores(2.5, 3.0, 2.0, 18, 70, 88, BOUNDARIES)
    assert scores["average_score"] == 2.5
    assert scores["percentage_100"] == 88
    assert scores["grade"] == "A"
    assert scores["remarks"] == "Exceptional"


# ---------------------------------------------------------------------------
# Comment templates
# ---------------------------------------------------------------------------

def _template(id_, low, high, text):
    return SimpleNamespace(id=id_, min_percentage=low, max_percentage=high,
                           class_teacher_comment=f"ct {text}", headteacher_comment=f"ht {text}")


def test_match_comment_inclusive_range():
    templates = [_template(1, 0, 49, "low"), _template(2, 50, 100, "high")]
    assert match_comment(50, templates)["class_teacher_comment"] == "ct high"
    assert match_comment(49, templates)["headteacher_comment"] == "ht low"


def test_match_comment_none_when_uncovered():
    assert match_comment(49.5, [_template(1, 0, 49, "low"), _template(2, 50, 100, "high")]) is None
    assert match_comment(70, []) is None


def test_match_comment_first_in_order_wins_on_overlap():
    templates = [_template(1, 40, 80, "wide"), _template(2, 60, 70, "narrow")]
    assert match_comment(65, templates)["template_id"] == 1
