from sqlalchemy import Column, Integer, Float, String
from database.db import Base

class GradeBoundary(Base):
    __tablename__ = "grade_boundaries"  # admin configured letter grade ranges

    id = Column(Integer, primary_key=True, index=True)      # boundary ID (PK)
    grade = Column(String(5), nullable=False)               # single letter, e.g. "A"
    min_score = Column(Float, nullable=False)               # inclusive lower bound
    max_score = Column(Float, nullable=False)               # inclusive upper bound
