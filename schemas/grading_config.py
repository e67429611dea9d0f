from pydantic import BaseModel

# ==========================================================
# [grade boundaries]
# ==========================================================
class GradeBoundaryCreate(BaseModel):
    grade: str                               # letter, upper-cased on save
    min_score: float                         # inclusive
    max_score: float                         # inclusive

    class Config:
        allow_inf_nan = False                # JSON Infinity / NaN -> 400

class GradeBoundary(GradeBoundaryCreate):
    id: int

    class Config:
        from_attributes = True


# ==========================================================
# [comment templates]
# ==========================================================
class CommentTemplateCreate(BaseModel):
    min_percentage: int                      # 0-100, inclusive
    max_percentage: int                      # 0-100, inclusive
    class_teacher_comment: str
    headteacher_comment: str

class CommentTemplate(CommentTemplateCreate):
    id: int

    class Config:
        from_attributes = True

