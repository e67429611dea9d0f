from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_admin, require_teacher
from schemas.submissions import (
    Submission, SubmissionCreate, SubmissionIds, SubmissionReject, SubmissionScores,
)
from services import submission_workflow as workflow

router = APIRouter(prefix="/submissions", tags=["subject submissions"])
approvals_router = APIRouter(prefix="/approvals", tags=["approvals"])


def _out(submission) -> dict:
    return Submission.model_validate(submission).model_dump()


# ==========================================================
# [teacher] own submissions
# ==========================================================

# ✅ [READ] newest first
@router.get("/mine")
def read_my_submissions(db: Session = Depends(get_db), teacher=Depends(require_teacher)):
    records = workflow.list_teacher_submissions(db, teacher.id)
    return {"success": True, "data": [_out(r) for r in records], "message": "Submissions loaded"}


# ✅ [CREATE] submit or resubmit (pending only)
@router.post("/")
def submit_scores(body: SubmissionCreate, db: Session = Depends(get_db), teacher=Depends(require_teacher)):
    submission = workflow.submit(db, teacher.id, body)
    return {"success": True, "data": _out(submission), "message": "Scores submitted for approval"}


# ✅ [BULK DELETE] must be declared before /{submission_id}
@router.post("/bulk-delete")
def bulk_delete_submissions(body: SubmissionIds, db: Session = Depends(get_db), teacher=Depends(require_teacher)):
    deleted = workflow.delete_submissions(db, teacher.id, body.ids)
    return {
        "success": True,
        "data": {"requested": len(body.ids), "deleted": deleted},
        "message": f"{deleted} submission(s) deleted",
    }


# ✅ [UPDATE] pending only
@router.put("/{submission_id}")
def update_submission(submission_id: int, body: SubmissionScores,
                      db: Session = Depends(get_db), teacher=Depends(require_teacher)):
    submission = workflow.update_submission(db, teacher.id, submission_id, body)
    return {"success": True, "data": _out(submission), "message": "Submission updated"}


# ✅ [DELETE] pending only
@router.delete("/{submission_id}")
def delete_submission(submission_id: int, db: Session = Depends(get_db), teacher=Depends(require_teacher)):
    workflow.delete_submission(db, teacher.id, submission_id)
    return {"success": True, "data": {"id": submission_id}, "message": "The submission has been deleted"}


# ==========================================================
# [admin] approvals
# ==========================================================

# ✅ [READ] pending queue
@approvals_router.get("/pending")
def read_pending(db: Session = Depends(get_db), _=Depends(require_admin)):
    records = workflow.list_pending(db)
    return {"success": True, "data": [_out(r) for r in records], "message": f"{len(records)} pending submission(s)"}


@approvals_router.post("/bulk-approve")
def bulk_approve(body: SubmissionIds, db: Session = Depends(get_db), admin=Depends(require_admin)):
    results = workflow.approve_many(db, admin.id, body.ids)
    approved = sum(1 for r in results if r["success"])
    return {"success": True, "data": results, "message": f"{approved} of {len(results)} submission(s) approved"}


@approvals_router.post("/{submission_id}/approve")
def approve_submission(submission_id: int, db: Session = Depends(get_db), admin=Depends(require_admin)):
    submission = workflow.approve(db, admin.id, submission_id)
    return {"success": True, "data": _out(submission), "message": "The submission has been approved"}


@approvals_router.post("/{submission_id}/reject")
def reject_submission(submission_id: int, body: Optional[SubmissionReject] = None,
                      db: Session = Depends(get_db), admin=Depends(require_admin)):
    submission = workflow.reject(db, admin.id, submission_id, body.reason if body else None)
    return {"success": True, "data": _out(submission), "message": "The submission has been rejected"}
