from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


# ==========================================================
# [generation request / response]
# ==========================================================
class GenerateReportRequest(BaseModel):
    class_id: int
    student_ids: List[int] = Field(..., min_length=1)
    template_id: Optional[int] = None        # defaults to settings.DEFAULT_TEMPLATE_ID
    generation_type: Literal["individual", "class", "stream"] = "individual"

class StudentResult(BaseModel):
    student_id: int
    success: bool
    student_name: Optional[str] = None
    report_card_id: Optional[int] = None
    overall_average: Optional[float] = None
    overall_grade: Optional[str] = None
    error: Optional[str] = None

class ClassInfo(BaseModel):
    name: str
    stream: Optional[str] = None
    academic_year: Optional[str] = None
    term: Optional[str] = None

class GenerateReportResponse(BaseModel):
    success: bool
    message: str
    results: List[StudentResult]
    class_info: ClassInfo


# ==========================================================
# [admin edits]
# ==========================================================
class ReportCardAdminUpdate(BaseModel):
    fees_balance: Optional[float] = None
    fees_next_term: Optional[float] = None
    other_requirements: Optional[str] = None
    term_ended_on: Optional[date] = None
    next_term_begins: Optional[date] = None
    class_teacher_comment: Optional[str] = None
    headteacher_comment: Optional[str] = None
    status: Optional[Literal["draft", "generated", "published"]] = None

class ClassTermSettings(BaseModel):
    term_ended_on: Optional[date] = None
    next_term_begins: Optional[date] = None
    general_requirements: Optional[str] = None


# ==========================================================
# [output schema]
# ==========================================================
class ReportCard(BaseModel):
    id: int
    student_id: int
    class_id: int
    overall_average: Optional[float] = None
    overall_grade: Optional[str] = None
    class_teacher_comment: Optional[str] = None
    headteacher_comment: Optional[str] = None
    template_id: Optional[int] = None
    status: Optional[str] = None
    generated_at: Optional[datetime] = None
    generated_by: Optional[int] = None
    fees_balance: Optional[float] = None
    fees_next_term: Optional[float] = None
    other_requirements: Optional[str] = None
    term_ended_on: Optional[date] = None
    next_term_begins: Optional[date] = None

    class Config:
        from_attributes = True
