from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Float, String, Text, Date, DateTime, ForeignKey, UniqueConstraint
from database.db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class ReportCard(Base):
    __tablename__ = "report_cards"  # one aggregated card per student per class

    id = Column(Integer, primary_key=True, index=True)      # report card ID (PK)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)   # student
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)     # class / term

    # ==========================================================
    # [generated] rewritten on every regeneration
    # ==========================================================
    overall_average = Column(Float)                          # mean percentage_100 of approved rows
    overall_grade = Column(String(5))                      # letter from grade boundaries
    class_teacher_comment = Column(Text)                     # from the matching template
    headteacher_comment = Column(Text)                       # from the matching template
    template_id = Column(Integer)                            # print layout, informational
    status = Column(String(20), default="draft")            # draft / generated / published
    generated_at = Column(DateTime)                          # last generation time
    generated_by = Column(Integer, ForeignKey("profiles.id"))   # admin who generated

    # ==========================================================
    # [admin only] never touched by generation
    # ==========================================================
    fees_balance = Column(Float)                             # outstanding fees
    fees_next_term = Column(Float)                           # fees due next term
    other_requirements = Column(Text)                        # overrides the class default
    term_ended_on = Column(Date)                             # overrides the class term setting
    next_term_begins = Column(Date)                          # overrides the class term setting

    created_at = Column(DateTime, default=_utcnow)           # first generation
    updated_at = Column(DateTime, default=_utcnow)           # last generation or admin edit

    __table_args__ = (
        UniqueConstraint("student_id", "class_id", name="uq_report_card_student_class"),
    )
