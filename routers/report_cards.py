from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_admin
from schemas.report_cards import (
    ClassTermSettings, GenerateReportRequest, GenerateReportResponse, ReportCard, ReportCardAdminUpdate,
)
from services import report_cards as report_card_service
from services.report_generator import generate_report_cards

router = APIRouter(prefix="/report-cards", tags=["report cards"])
classes_router = APIRouter(prefix="/classes", tags=["classes"])


def _out(card) -> dict:
    return ReportCard.model_validate(card).model_dump()


# ==========================================================
# [1] Generation
# ==========================================================

# ✅ 200 even when some students fail; see results[].error
@router.post("/generate", response_model=GenerateReportResponse)
def generate(body: GenerateReportRequest, db: Session = Depends(get_db), admin=Depends(require_admin)):
    return generate_report_cards(
        db,
        class_id=body.class_id,
        student_ids=body.student_ids,
        template_id=body.template_id,
        generated_by=admin.id,
        generation_type=body.generation_type,
    )


# ==========================================================
# [2] Admin management
# ==========================================================

@router.get("/class/{class_id}")
def read_class_report_cards(class_id: int, db: Session = Depends(get_db), _=Depends(require_admin)):
    records = report_card_service.list_class_report_cards(db, class_id)
    return {"success": True, "data": [_out(r) for r in records], "message": f"{len(records)} report card(s)"}


@router.get("/{report_card_id}")
def read_report_card(report_card_id: int, db: Session = Depends(get_db), _=Depends(require_admin)):
    card = report_card_service.get_report_card(db, report_card_id)
    return {"success": True, "data": _out(card), "message": "Report card loaded"}


@router.get("/{report_card_id}/preview")
def preview_report_card(report_card_id: int, db: Session = Depends(get_db), _=Depends(require_admin)):
    return {
        "success": True,
        "data": report_card_service.build_preview(db, report_card_id),
        "message": "Report card preview data",
    }


# ✅ [PATCH] only the fields present in the body are written
@router.patch("/{report_card_id}")
def update_report_card(report_card_id: int, body: ReportCardAdminUpdate,
                       db: Session = Depends(get_db), _=Depends(require_admin)):
    card = report_card_service.update_report_card(db, report_card_id, body.model_dump(exclude_unset=True))
    return {"success": True, "data": _out(card), "message": "Report card updated"}


@router.delete("/{report_card_id}")
def delete_report_card(report_card_id: int, db: Session = Depends(get_db), _=Depends(require_admin)):
    report_card_service.delete_report_card(db, report_card_id)
    return {"success": True, "data": {"id": report_card_id}, "message": "The report card has been deleted"}


# ==========================================================
# [3] Class term settings
# ==========================================================

@classes_router.put("/{class_id}/term-settings")
def update_term_settings(class_id: int, body: ClassTermSettings,
                         db: Session = Depends(get_db), _=Depends(require_admin)):
    class_ = report_card_service.update_class_term_settings(db, class_id, body.model_dump())
    return {
        "success": True,
        "data": {
            "id": class_.id,
            "term_ended_on": class_.term_ended_on,
            "next_term_begins": class_.next_term_begins,
            "general_requirements": class_.general_requirements,
        },
        "message": "Term settings saved",
    }
