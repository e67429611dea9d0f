from sqlalchemy import Column, Integer, Text
from database.db import Base

class CommentTemplate(Base):
    __tablename__ = "comment_templates"  # overall-average -> comment pair

    id = Column(Integer, primary_key=True, index=True)      # template ID (PK)
    min_percentage = Column(Integer, nullable=False)        # inclusive, 0-100
    max_percentage = Column(Integer, nullable=False)        # inclusive, 0-100
    class_teacher_comment = Column(Text, nullable=False)    # class teacher remark
    headteacher_comment = Column(Text, nullable=False)      # headteacher remark
