from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr

# raw numbers keep their JSON type so formatting rules can be checked
# (80.0 vs 80, "80.5" vs "80")
RawScore = Union[StrictInt, StrictFloat, StrictStr]


# ==========================================================
# [input schemas]
# ==========================================================
class SubmissionScores(BaseModel):
    a1_score: RawScore                       # decimal required, except 0
    a2_score: RawScore
    a3_score: RawScore
    percentage_20: RawScore                  # whole numbers only
    percentage_80: RawScore
    percentage_100: RawScore
    teacher_comment: Optional[str] = None

    class Config:
        allow_inf_nan = False                # JSON Infinity / NaN -> 400

class SubmissionCreate(SubmissionScores):
    class_id: int
    student_id: int
    subject_id: int

class SubmissionReject(BaseModel):
    reason: Optional[str] = None

class SubmissionIds(BaseModel):
    ids: List[int] = Field(..., min_length=1)


# ==========================================================
# [output schema]
# ==========================================================
class Submission(BaseModel):
    id: int
    teacher_id: int
    class_id: int
    subject_id: int
    student_id: int
    a1_score: Optional[float] = None
    a2_score: Optional[float] = None
    a3_score: Optional[float] = None
    average_score: Optional[float] = None
    percentage_20: Optional[int] = None
    percentage_80: Optional[int] = None
    percentage_100: Optional[int] = None
    grade: Optional[str] = None
    remarks: Optional[str] = None
    teacher_comment: Optional[str] = None
    status: str
    rejection_reason: Optional[str] = None
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None

    class Config:
        from_attributes = True
