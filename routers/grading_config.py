from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import get_current_profile, require_admin
from schemas.grading_config import (
    CommentTemplate, CommentTemplateCreate, GradeBoundary, GradeBoundaryCreate,
)
from services import grading_config

router = APIRouter(tags=["grading settings"])


# ==========================================================
# [1] Grade boundaries
# ==========================================================

# ✅ [READ] boundaries, highest band first
@router.get("/grade-boundaries")
def read_grade_boundaries(db: Session = Depends(get_db), _=Depends(get_current_profile)):
    records = grading_config.list_boundaries(db)
    return {
        "success": True,
        "data": [GradeBoundary.model_validate(r).model_dump() for r in records],
        "message": "Grade boundaries loaded",
    }


# ✅ [CREATE]
@router.post("/grade-boundaries")
def create_grade_boundary(body: GradeBoundaryCreate, db: Session = Depends(get_db), _=Depends(require_admin)):
    boundary = grading_config.create_boundary(db, body.grade, body.min_score, body.max_score)
    return {
        "success": True,
        "data": GradeBoundary.model_validate(boundary).model_dump(),
        "message": f"Grading for Grade {boundary.grade} has been added",
    }


# ✅ [UPDATE]
@router.put("/grade-boundaries/{boundary_id}")
def update_grade_boundary(boundary_id: int, body: GradeBoundaryCreate,
                          db: Session = Depends(get_db), _=Depends(require_admin)):
    boundary = grading_config.update_boundary(db, boundary_id, body.grade, body.min_score, body.max_score)
    return {
        "success": True,
        "data": GradeBoundary.model_validate(boundary).model_dump(),
        "message": f"Grading for Grade {boundary.grade} has been updated",
    }


# ✅ [DELETE]
@router.delete("/grade-boundaries/{boundary_id}")
def delete_grade_boundary(boundary_id: int, db: Session = Depends(get_db), _=Depends(require_admin)):
    grading_config.delete_boundary(db, boundary_id)
    return {"success": True, "data": {"id": boundary_id}, "message": "Grade boundary deleted"}


# ==========================================================
# [2] Comment templates
# ==========================================================

# ✅ [READ] templates, lowest range first
@router.get("/comment-templates")
def read_comment_templates(db: Session = Depends(get_db), _=Depends(get_current_profile)):
    records = grading_config.list_templates(db)
    return {
        "success": True,
        "data": [CommentTemplate.model_validate(r).model_dump() for r in records],
        "message": "Comment templates loaded",
    }


# ✅ [CREATE]
@router.post("/comment-templates")
def create_comment_template(body: CommentTemplateCreate, db: Session = Depends(get_db), _=Depends(require_admin)):
    template = grading_config.create_template(db, **body.model_dump())
    return {
        "success": True,
        "data": CommentTemplate.model_validate(template).model_dump(),
        "message": "Comment template created",
    }


# ✅ [UPDATE]
@router.put("/comment-templates/{template_id}")
def update_comment_template(template_id: int, body: CommentTemplateCreate,
                            db: Session = Depends(get_db), _=Depends(require_admin)):
    template = grading_config.update_template(db, template_id, **body.model_dump())
    return {
        "success": True,
        "data": CommentTemplate.model_validate(template).model_dump(),
        "message": "Comment template updated",
    }


# ✅ [DELETE]
@router.delete("/comment-templates/{template_id}")
def delete_comment_template(template_id: int, db: Session = Depends(get_db), _=Depends(require_admin)):
    grading_config.delete_template(db, template_id)
    return {"success": True, "data": {"id": template_id}, "message": "Comment template deleted"}
