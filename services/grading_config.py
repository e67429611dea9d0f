"""
services/grading_config.py

Admin maintained grading configuration: grade boundaries and comment templates.
Reads return ordered snapshots; writes run the validation the admin screens enforce.
"""

import logging
import math
from types import SimpleNamespace
from typing import List

from sqlalchemy.orm import Session

from models.comment_templates import CommentTemplate as CommentTemplateModel
from models.grade_boundaries import GradeBoundary as GradeBoundaryModel
from services.grading import find_overlapping_boundary
from utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


BOUNDARY_FIELDS = ("id", "grade", "min_score", "max_score")
TEMPLATE_FIELDS = ("id", "min_percentage", "max_percentage", "class_teacher_comment", "headteacher_comment")


def _snapshot(rows, fields) -> List[SimpleNamespace]:
    # detached copies: unaffected by later commits or rollbacks on the session
    return [SimpleNamespace(**{f: getattr(r, f) for f in fields}) for r in rows]


# ==========================================================
# [1] Grade boundaries
# ==========================================================

def list_boundaries(db: Session) -> List[GradeBoundaryModel]:
    return (
        db.query(GradeBoundaryModel)
        .order_by(GradeBoundaryModel.min_score.desc(), GradeBoundaryModel.id.asc())
        .all()
    )


def boundary_snapshot(db: Session) -> List[SimpleNamespace]:
    return _snapshot(list_boundaries(db), BOUNDARY_FIELDS)


def _validate_boundary(db: Session, grade: str, min_score: float, max_score: float, exclude_id=None) -> str:
    grade = (grade or "").strip().upper()
    if not grade:
        raise ValidationError("Grade is required")
    if not (math.isfinite(min_score) and math.isfinite(max_score)):
        raise ValidationError("Min and max score must be finite numbers")
    if min_score < 0 or max_score > 100 or min_score >= max_score:
        raise ValidationError("Min score must be less than max score, and scores must be between 0 and 100")

    existing = list_boundaries(db)
    clash = find_overlapping_boundary(min_score, max_score, existing, exclude_id=exclude_id)
    if clash is not None:
        raise ValidationError(
            f"Range {min_score}-{max_score} overlaps grade {clash.grade} ({clash.min_score}-{clash.max_score})"
        )
    for b in existing:
        if b.id != exclude_id and b.grade.upper() == grade:
            raise ValidationError(f"Grade {grade} already exists. Edit the existing entry instead.")
    return grade


def create_boundary(db: Session, grade: str, min_score: float, max_score: float) -> GradeBoundaryModel:
    grade = _validate_boundary(db, grade, min_score, max_score)
    boundary = GradeBoundaryModel(grade=grade, min_score=min_score, max_score=max_score)
    db.add(boundary)
    db.commit()
    db.refresh(boundary)
    logger.info("Grade boundary %s created (%s-%s)", grade, min_score, max_score)
    return boundary


def update_boundary(db: Session, boundary_id: int, grade: str, min_score: float, max_score: float) -> GradeBoundaryModel:
    boundary = db.query(GradeBoundaryModel).filter(GradeBoundaryModel.id == boundary_id).first()
    if boundary is None:
        raise NotFoundError("Grade boundary not found")

    boundary.grade = _validate_boundary(db, grade, min_score, max_score, exclude_id=boundary_id)
    boundary.min_score = min_score
    boundary.max_score = max_score
    db.commit()
    db.refresh(boundary)
    logger.info("Grade boundary %s updated (%s-%s)", boundary.grade, min_score, max_score)
    return boundary


def delete_boundary(db: Session, boundary_id: int) -> None:
    boundary = db.query(GradeBoundaryModel).filter(GradeBoundaryModel.id == boundary_id).first()
    if boundary is None:
        raise NotFoundError("Grade boundary not found")
    db.delete(boundary)
    db.commit()
    logger.info("Grade boundary %s deleted", boundary.grade)


# ==========================================================
# [2] Comment templates
# ==========================================================

def list_templates(db: Session) -> List[CommentTemplateModel]:
    # same order match_comment relies on for overlapping ranges
    return (
        db.query(CommentTemplateModel)
        .order_by(CommentTemplateModel.min_percentage.asc(), CommentTemplateModel.id.asc())
        .all()
    )


def template_snapshot(db: Session) -> List[SimpleNamespace]:
    return _snapshot(list_templates(db), TEMPLATE_FIELDS)


def _validate_template(min_percentage: int, max_percentage: int,
                       class_teacher_comment: str, headteacher_comment: str) -> dict:
    if min_percentage < 0 or max_percentage > 100 or min_percentage >= max_percentage:
        raise ValidationError("Invalid percentage range (0-100, min must be less than max)")
    class_teacher_comment = (class_teacher_comment or "").strip()
    headteacher_comment = (headteacher_comment or "").strip()
    if not class_teacher_comment or not headteacher_comment:
        raise ValidationError("Both comments are required")
    return {
        "min_percentage": min_percentage,
        "max_percentage": max_percentage,
        "class_teacher_comment": class_teacher_comment,
        "headteacher_comment": headteacher_comment,
    }


def create_template(db: Session, min_percentage: int, max_percentage: int,
                    class_teacher_comment: str, headteacher_comment: str) -> CommentTemplateModel:
    data = _validate_template(min_percentage, max_percentage, class_teacher_comment, headteacher_comment)
    template = CommentTemplateModel(**data)
    db.add(template)
    db.commit()
    db.refresh(template)
    logger.info("Comment template %s created (%s-%s)", template.id, min_percentage, max_percentage)
    return template


def update_template(db: Session, template_id: int, min_percentage: int, max_percentage: int,
                    class_teacher_comment: str, headteacher_comment: str) -> CommentTemplateModel:
    template = db.query(CommentTemplateModel).filter(CommentTemplateModel.id == template_id).first()
    if template is None:
        raise NotFoundError("Comment template not found")

    data = _validate_template(min_percentage, max_percentage, class_teacher_comment, headteacher_comment)
    for key, value in data.items():
        setattr(template, key, value)
    db.commit()
    db.refresh(template)
    return template


def delete_template(db: Session, template_id: int) -> None:
    template = db.query(CommentTemplateModel).filter(CommentTemplateModel.id == template_id).first()
    if template is None:
        raise NotFoundError("Comment template not found")
    db.delete(template)
    db.commit()
