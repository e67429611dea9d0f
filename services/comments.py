"""Overall average -> (class teacher comment, headteacher comment)."""

from typing import Iterable, Optional


def match_comment(overall_average: float, templates: Iterable) -> Optional[dict]:
    """
    First template (in the given order) with min_percentage <= average <= max_percentage.
    Callers pass templates ordered by (min_percentage, id), which settles overlapping ranges.
    None when nothing covers the average.
    """
    for t in templates:
        if t.min_percentage <= overall_average <= t.max_percentage:
            return {
                "template_id": t.id,
                "class_teacher_comment": t.class_teacher_comment,
                "headteacher_comment": t.headteacher_comment,
            }
    return None
