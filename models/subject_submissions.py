from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Float, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database.db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class SubjectSubmission(Base):
    __tablename__ = "subject_submissions"  # one teacher-entered score row per student/subject/class

    id = Column(Integer, primary_key=True, index=True)      # submission ID (PK)
    teacher_id = Column(Integer, ForeignKey("profiles.id"), nullable=False)   # owning teacher
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)     # class the score belongs to
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)   # subject
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)   # student

    a1_score = Column(Float)                                # raw assessment scores
    a2_score = Column(Float)
    a3_score = Column(Float)
    average_score = Column(Float)                           # round((a1+a2+a3)/3, 2)
    percentage_20 = Column(Integer)                         # weighted inputs, whole numbers
    percentage_80 = Column(Integer)
    percentage_100 = Column(Integer)                        # composite used for grading
    grade = Column(String(5))                               # letter from grade boundaries
    remarks = Column(String(20))                            # achievement level label
    teacher_comment = Column(Text)                                  # free text from the teacher

    status = Column(String(20), nullable=False, default="pending")   # pending / approved / rejected
    rejection_reason = Column(Text)                                 # set when an admin rejects
    submitted_at = Column(DateTime, default=_utcnow)                # last (re)submission
    reviewed_at = Column(DateTime)                                  # approve / reject time
    reviewed_by = Column(Integer, ForeignKey("profiles.id"))      # reviewing admin
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)   # last edit

    # ✅ resubmission of the same key upserts in place
    __table_args__ = (
        UniqueConstraint("class_id", "student_id", "subject_id", name="uq_submission_class_student_subject"),
    )

    subject = relationship("Subject")
    teacher = relationship("Profile", foreign_keys=[teacher_id])
