from sqlalchemy import Column, Integer, String, ForeignKey
from database.db import Base

class Student(Base):
    __tablename__ = "students"  # enrolled students

    id = Column(Integer, primary_key=True, index=True)               # student ID (PK)
    full_name = Column(String(100), nullable=False)                  # student name
    student_number = Column(String(50))                              # school admission number
    class_id = Column(Integer, ForeignKey("classes.id"))             # current class
    gender = Column(String(10))                                  # e.g. M, F
