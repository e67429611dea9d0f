from sqlalchemy import Column, Integer, String
from database.db import Base

class Subject(Base):
    __tablename__ = "subjects"  # taught subjects

    id = Column(Integer, primary_key=True, index=True)         # subject ID (PK)
    name = Column(String(100), nullable=False)                # e.g. Mathematics
    code = Column(String(20), nullable=False)                 # e.g. MTC
