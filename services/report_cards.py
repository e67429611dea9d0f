"""
services/report_cards.py

Admin side of report cards: lookups, edits of admin-only fields, deletion,
class term settings and the data a printed card is rendered from.
"""

import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy.orm import Session

from models.classes import Class as ClassModel
from models.report_cards import ReportCard as ReportCardModel
from models.students import Student as StudentModel
from services.grading import calculate_identifier, identifier_label
from services.report_generator import approved_submissions
from utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def get_report_card(db: Session, report_card_id: int) -> ReportCardModel:
    card = db.query(ReportCardModel).filter(ReportCardModel.id == report_card_id).first()
    if card is None:
        raise NotFoundError("Report card not found")
    return card


def list_class_report_cards(db: Session, class_id: int) -> List[ReportCardModel]:
    return (
        db.query(ReportCardModel)
        .filter(ReportCardModel.class_id == class_id)
        .order_by(ReportCardModel.student_id.asc())
        .all()
    )


def update_report_card(db: Session, report_card_id: int, changes: dict) -> ReportCardModel:
    """Apply only the fields the admin actually sent (PATCH semantics)."""
    card = get_report_card(db, report_card_id)
    for key, value in changes.items():
        setattr(card, key, value)
    card.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(card)
    logger.info("Report card %s updated by admin: %s", report_card_id, ", ".join(sorted(changes)) or "-")
    return card


def delete_report_card(db: Session, report_card_id: int) -> None:
    card = get_report_card(db, report_card_id)
    db.delete(card)
    db.commit()
    logger.info("Report card %s deleted", report_card_id)


def update_class_term_settings(db: Session, class_id: int, settings: dict) -> ClassModel:
    class_ = db.query(ClassModel).filter(ClassModel.id == class_id).first()
    if class_ is None:
        raise NotFoundError("Class not found")
    for key, value in settings.items():
        setattr(class_, key, value)
    db.commit()
    db.refresh(class_)
    return class_


# ==========================================================
# [preview] data for the printed card
# ==========================================================

def build_preview(db: Session, report_card_id: int) -> dict:
    card = get_report_card(db, report_card_id)
    student = db.query(StudentModel).filter(StudentModel.id == card.student_id).first()
    class_ = db.query(ClassModel).filter(ClassModel.id == card.class_id).first()
    if student is None or class_ is None:
        raise NotFoundError("Student or class for this report card no longer exists")

    subjects = []
    for sub in approved_submissions(db, card.student_id, card.class_id):
        identifier = calculate_identifier(sub.percentage_100)
        subjects.append({
            "subject_name": sub.subject.name if sub.subject else None,
            "subject_code": sub.subject.code if sub.subject else None,
            "a1_score": sub.a1_score,
            "a2_score": sub.a2_score,
            "a3_score": sub.a3_score,
            "average_score": sub.average_score,
            "percentage_20": sub.percentage_20,
            "percentage_80": sub.percentage_80,
            "percentage_100": sub.percentage_100,
            "identifier": identifier,
            "achievement": identifier_label(identifier),
            "grade": sub.grade,
            "remarks": sub.remarks,
            "teacher_comment": sub.teacher_comment,
            "teacher_initials": (sub.teacher.initials if sub.teacher else None) or "N/A",
        })

    overall_identifier = calculate_identifier(card.overall_average)
    return {
        "report_card_id": card.id,
        "status": card.status,
        "student": {
            "id": student.id,
            "full_name": student.full_name,
            "student_number": student.student_number,
            "gender": student.gender,
        },
        "class_info": {
            "id": class_.id,
            "name": class_.name,
            "stream": class_.stream,
            "academic_year": class_.academic_year,
            "term": class_.term,
        },
        "subjects": subjects,
        "overall_average": card.overall_average,
        "overall_grade": card.overall_grade,
        "overall_identifier": overall_identifier,
        "overall_achievement": identifier_label(overall_identifier),
        "class_teacher_comment": card.class_teacher_comment,
        "headteacher_comment": card.headteacher_comment,
        "fees_balance": card.fees_balance,
        "fees_next_term": card.fees_next_term,
        # card values first, class term settings as the fallback
        "other_requirements": card.other_requirements or class_.general_requirements,
        "term_ended_on": card.term_ended_on or class_.term_ended_on,
        "next_term_begins": card.next_term_begins or class_.next_term_begins,
    }
