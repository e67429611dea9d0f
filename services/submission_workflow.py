"""
services/submission_workflow.py

Lifecycle of a subject submission:

    pending --approve--> approved
    pending --reject---> rejected

- Teachers create/resubmit (upsert on class_id + student_id + subject_id),
  edit and delete only their own rows, and only while pending.
  Ownership and status are part of the write filter; zero rows affected is
  reported as AuthorizationError, never as a silent success.
- Admins approve or reject pending rows. Only approved rows feed report cards.
- There is no transition back to pending.
"""

import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy.orm import Session

from models.classes import Class as ClassModel
from models.students import Student as StudentModel
from models.subject_submissions import SubjectSubmission as SubmissionModel
from models.subjects import Subject as SubjectModel
from services.grading import build_scores
from services.grading_config import list_boundaries
from utils.exceptions import AuthorizationError, InvalidTransitionError, NotFoundError

logger = logging.getLogger(__name__)

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"


def _now():
    return datetime.now(timezone.utc)


def _scores_from(payload, db: Session) -> dict:
    scores = build_scores(
        payload.a1_score, payload.a2_score, payload.a3_score,
        payload.percentage_20, payload.percentage_80, payload.percentage_100,
        list_boundaries(db),
    )
    scores["teacher_comment"] = payload.teacher_comment
    return scores


def _get_submission(db: Session, submission_id: int) -> SubmissionModel:
    submission = db.query(SubmissionModel).filter(SubmissionModel.id == submission_id).first()
    if submission is None:
        raise NotFoundError("Submission not found")
    return submission


# ==========================================================
# [teacher] create / resubmit
# ==========================================================

def submit(db: Session, teacher_id: int, payload) -> SubmissionModel:
    """Validate scores and upsert the (class, student, subject) row as pending."""
    scores = _scores_from(payload, db)

    if db.query(ClassModel.id).filter(ClassModel.id == payload.class_id).first() is None:
        raise NotFoundError("Class not found")
    if db.query(StudentModel.id).filter(StudentModel.id == payload.student_id).first() is None:
        raise NotFoundError("Student not found")
    if db.query(SubjectModel.id).filter(SubjectModel.id == payload.subject_id).first() is None:
        raise NotFoundError("Subject not found")

    existing = (
        db.query(SubmissionModel)
        .filter(
            SubmissionModel.class_id == payload.class_id,
            SubmissionModel.student_id == payload.student_id,
            SubmissionModel.subject_id == payload.subject_id,
        )
        .first()
    )

    if existing is not None:
        if existing.teacher_id != teacher_id:
            raise AuthorizationError("This score was submitted by another teacher")
        if existing.status != PENDING:
            raise AuthorizationError(f"Submission is already {existing.status} and can no longer be changed")
        for key, value in scores.items():
            setattr(existing, key, value)
        existing.submitted_at = _now()
        submission = existing
    else:
        submission = SubmissionModel(
            teacher_id=teacher_id,
            class_id=payload.class_id,
            student_id=payload.student_id,
            subject_id=payload.subject_id,
            status=PENDING,
            submitted_at=_now(),
            **scores,
        )
        db.add(submission)

    db.commit()
    db.refresh(submission)
    logger.info(
        "Submission %s %s by teacher %s (student %s, subject %s, grade %s)",
        submission.id, "resubmitted" if existing is not None else "submitted",
        teacher_id, submission.student_id, submission.subject_id, submission.grade,
    )
    return submission


# ==========================================================
# [teacher] edit / delete while pending
# ==========================================================

def _owned_pending(db: Session, teacher_id: int):
    return db.query(SubmissionModel).filter(
        SubmissionModel.teacher_id == teacher_id,
        SubmissionModel.status == PENDING,
    )


def update_submission(db: Session, teacher_id: int, submission_id: int, payload) -> SubmissionModel:
    _get_submission(db, submission_id)
    scores = _scores_from(payload, db)
    scores["submitted_at"] = _now()
    scores["updated_at"] = _now()

    affected = (
        _owned_pending(db, teacher_id)
        .filter(SubmissionModel.id == submission_id)
        .update(scores, synchronize_session=False)
    )
    if affected == 0:
        db.rollback()
        raise AuthorizationError("Only your own pending submissions can be edited")

    db.commit()
    submission = _get_submission(db, submission_id)
    db.refresh(submission)
    logger.info("Submission %s edited by teacher %s", submission_id, teacher_id)
    return submission


def delete_submission(db: Session, teacher_id: int, submission_id: int) -> None:
    _get_submission(db, submission_id)
    affected = (
        _owned_pending(db, teacher_id)
        .filter(SubmissionModel.id == submission_id)
        .delete(synchronize_session=False)
    )
    if affected == 0:
        db.rollback()
        raise AuthorizationError("Only your own pending submissions can be deleted")
    db.commit()
    logger.info("Submission %s deleted by teacher %s", submission_id, teacher_id)


def delete_submissions(db: Session, teacher_id: int, submission_ids: List[int]) -> int:
    """Bulk delete; rows that are not owned or not pending are left alone."""
    affected = (
        _owned_pending(db, teacher_id)
        .filter(SubmissionModel.id.in_(submission_ids))
        .delete(synchronize_session=False)
    )
    if affected == 0:
        db.rollback()
        raise AuthorizationError("None of the selected submissions could be deleted")
    db.commit()
    logger.info("Teacher %s deleted %d of %d submissions", teacher_id, affected, len(submission_ids))
    return affected


def list_teacher_submissions(db: Session, teacher_id: int) -> List[SubmissionModel]:
    return (
        db.query(SubmissionModel)
        .filter(SubmissionModel.teacher_id == teacher_id)
        .order_by(SubmissionModel.submitted_at.desc(), SubmissionModel.id.desc())
        .all()
    )


# ==========================================================
# [admin] review
# ==========================================================

def list_pending(db: Session) -> List[SubmissionModel]:
    return (
        db.query(SubmissionModel)
        .filter(SubmissionModel.status == PENDING)
        .order_by(SubmissionModel.submitted_at.desc(), SubmissionModel.id.desc())
        .all()
    )


def review(db: Session, admin_id: int, submission_id: int, approve: bool, reason=None) -> SubmissionModel:
    submission = _get_submission(db, submission_id)
    if submission.status != PENDING:
        raise InvalidTransitionError(f"Submission is already {submission.status}")

    submission.status = APPROVED if approve else REJECTED
    submission.reviewed_at = _now()
    submission.reviewed_by = admin_id
    if not approve:
        submission.rejection_reason = reason
    db.commit()
    db.refresh(submission)
    logger.info("Submission %s %s by admin %s", submission_id, submission.status, admin_id)
    return submission


def approve(db: Session, admin_id: int, submission_id: int) -> SubmissionModel:
    return review(db, admin_id, submission_id, approve=True)


def reject(db: Session, admin_id: int, submission_id: int, reason=None) -> SubmissionModel:
    return review(db, admin_id, submission_id, approve=False, reason=reason)


def approve_many(db: Session, admin_id: int, submission_ids: List[int]) -> List[dict]:
    """Approve each id independently; one bad id does not stop the rest."""
    results = []
    for submission_id in submission_ids:
        try:
            approve(db, admin_id, submission_id)
            results.append({"submission_id": submission_id, "success": True})
        except (NotFoundError, InvalidTransitionError) as exc:
            db.rollback()
            results.append({"submission_id": submission_id, "success": False, "error": exc.message})
    return results
