"""
services/report_generator.py

Report card aggregation.

For each requested student of a class:
  1) read the student's *approved* submissions for that class
  2) overall average = mean of percentage_100 (0 when there are none)
  3) overall grade from the grade boundaries, comments from the comment templates
  4) upsert the (student_id, class_id) report card

Regeneration only rewrites the generated fields; fees, requirements and term
dates entered by admins are left as they are.
Students are processed one at a time and every failure is recorded in the
results list instead of aborting the batch.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config.settings import settings
from models.classes import Class as ClassModel
from models.report_cards import ReportCard as ReportCardModel
from models.students import Student as StudentModel
from models.subject_submissions import SubjectSubmission as SubmissionModel
from services.comments import match_comment
from services.grading import resolve_grade
from services.grading_config import boundary_snapshot, template_snapshot
from services.submission_workflow import APPROVED
from utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

GENERATED = "generated"

# columns a regeneration is allowed to overwrite
GENERATED_FIELDS = (
    "overall_average",
    "overall_grade",
    "class_teacher_comment",
    "headteacher_comment",
    "template_id",
    "generated_at",
    "generated_by",
    "status",
    "updated_at",
)


def _now():
    return datetime.now(timezone.utc)


def approved_submissions(db: Session, student_id: int, class_id: int) -> List[SubmissionModel]:
    return (
        db.query(SubmissionModel)
        .filter(
            SubmissionModel.student_id == student_id,
            SubmissionModel.class_id == class_id,
            SubmissionModel.status == APPROVED,
        )
        .order_by(SubmissionModel.subject_id.asc())
        .all()
    )


def overall_average(submissions) -> float:
    """Mean percentage_100 over submissions that have one; 0 for an empty set."""
    values = [s.percentage_100 for s in submissions if s.percentage_100 is not None]
    if not values:
        return 0
    return sum(values) / len(values)


def compute_report_fields(submissions, boundaries, templates) -> dict:
    average = overall_average(submissions)
    comment = match_comment(average, templates)
    return {
        "overall_average": average,
        "overall_grade": resolve_grade(average, boundaries),
        "class_teacher_comment": comment["class_teacher_comment"] if comment else None,
        "headteacher_comment": comment["headteacher_comment"] if comment else None,
    }


def _apply_generated(card: ReportCardModel, fields: dict) -> None:
    for key in GENERATED_FIELDS:
        setattr(card, key, fields[key])


def generate_report_card(
    db: Session,
    student_id: int,
    class_id: int,
    template_id: Optional[int],
    generated_by: int,
    boundaries=None,
    templates=None,
) -> dict:
    """
    Generate (or regenerate) one student's report card and commit it.
    `boundaries` / `templates` are snapshots shared across a batch; loaded here when omitted.
    """
    student = db.query(StudentModel).filter(StudentModel.id == student_id).first()
    if student is None:
        raise NotFoundError("Student not found")

    if boundaries is None:
        boundaries = boundary_snapshot(db)
    if templates is None:
        templates = template_snapshot(db)

    submissions = approved_submissions(db, student_id, class_id)
    fields = compute_report_fields(submissions, boundaries, templates)
    now = _now()
    fields.update(
        template_id=template_id or settings.DEFAULT_TEMPLATE_ID,
        generated_at=now,
        generated_by=generated_by,
        status=GENERATED,
        updated_at=now,
    )

    card = _upsert_report_card(db, student_id, class_id, fields)
    logger.debug(
        "Report card %s: student %s average %.2f grade %s (%d approved subjects)",
        card.id, student_id, fields["overall_average"], fields["overall_grade"], len(submissions),
    )
    return {
        "student_id": student_id,
        "student_name": student.full_name,
        "report_card_id": card.id,
        "success": True,
        "overall_average": fields["overall_average"],
        "overall_grade": fields["overall_grade"],
    }


def _find_card(db: Session, student_id: int, class_id: int) -> Optional[ReportCardModel]:
    return (
        db.query(ReportCardModel)
        .filter(ReportCardModel.student_id == student_id, ReportCardModel.class_id == class_id)
        .first()
    )


def _upsert_report_card(db: Session, student_id: int, class_id: int, fields: dict) -> ReportCardModel:
    card = _find_card(db, student_id, class_id)
    if card is not None:
        _apply_generated(card, fields)
        db.commit()
        db.refresh(card)
        return card

    # financial fields and term dates start empty; only admins fill them in
    card = ReportCardModel(student_id=student_id, class_id=class_id, created_at=fields["generated_at"])
    _apply_generated(card, fields)
    db.add(card)
    try:
        db.commit()
    except IntegrityError:
        # another request inserted the same (student, class) first: update theirs
        db.rollback()
        card = _find_card(db, student_id, class_id)
        if card is None:
            raise
        _apply_generated(card, fields)
        db.commit()
    db.refresh(card)
    return card


def generate_report_cards(
    db: Session,
    class_id: int,
    student_ids: List[int],
    template_id: Optional[int],
    generated_by: int,
    generation_type: str = "individual",
) -> dict:
    """Batch entry point behind POST /report-cards/generate."""
    if not class_id or not student_ids:
        raise ValidationError("Missing required fields: class_id and student_ids are required")

    class_ = db.query(ClassModel).filter(ClassModel.id == class_id).first()
    if class_ is None:
        raise NotFoundError("Class not found")

    logger.info(
        "Starting report card generation: class %s, %d student(s), type %s, template %s",
        class_id, len(student_ids), generation_type, template_id,
    )

    # one configuration snapshot for the whole batch
    boundaries = boundary_snapshot(db)
    templates = template_snapshot(db)

    results = []
    for student_id in student_ids:
        try:
            results.append(
                generate_report_card(db, student_id, class_id, template_id, generated_by, boundaries, templates)
            )
        except NotFoundError as exc:
            db.rollback()
            logger.warning("Student %s skipped: %s", student_id, exc.message)
            results.append({"student_id": student_id, "success": False, "error": exc.message})
        except Exception as exc:
            db.rollback()
            logger.exception("Error processing student %s", student_id)
            results.append({"student_id": student_id, "success": False, "error": str(exc)})

    success_count = sum(1 for r in results if r["success"])
    failure_count = len(results) - success_count
    message = f"Generated {success_count} report card(s)."
    if failure_count:
        message += f" {failure_count} failed."
    logger.info("Report card generation finished for class %s: %s", class_id, message)

    return {
        "success": True,
        "message": message,
        "results": results,
        "class_info": {
            "name": class_.name,
            "stream": class_.stream,
            "academic_year": class_.academic_year,
            "term": class_.term,
        },
    }
