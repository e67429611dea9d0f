from sqlalchemy import Column, Integer, String, Date, Text
from database.db import Base

class Class(Base):
    __tablename__ = "classes"  # classes (one per stream per term)

    id = Column(Integer, primary_key=True, index=True)      # class ID (PK)
    name = Column(String(100), nullable=False)              # e.g. "P.5"
    stream = Column(String(50))                             # e.g. "East"
    academic_year = Column(String(20))                      # e.g. "2025"
    term = Column(String(20))                               # e.g. "Term 2"

    # ==========================================================
    # [term settings] edited by admins, shown on printed cards
    # ==========================================================
    term_ended_on = Column(Date)                             # last day of the term
    next_term_begins = Column(Date)                          # first day of next term
    general_requirements = Column(Text)                      # default "other requirements" on cards
