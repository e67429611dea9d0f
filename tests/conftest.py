from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.db import Base, get_db
from main import app
from models.classes import Class
from models.comment_templates import CommentTemplate
from models.grade_boundaries import GradeBoundary
from models.profiles import Profile
from models.students import Student
from models.subject_submissions import SubjectSubmission
from models.subjects import Subject

ADMIN_TOKEN = "admin-token"
TEACHER_TOKEN = "teacher-token"
OTHER_TEACHER_TOKEN = "other-teacher-token"


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def seeded(db):
    """Profiles, one class with three students, three subjects and grading configuration."""
    admin = Profile(full_name="Head Admin", initials="HA", role="admin", access_token=ADMIN_TOKEN)
    teacher = Profile(full_name="Grace Teacher", initials="GT", role="teacher", access_token=TEACHER_TOKEN)
    other = Profile(full_name="Other Teacher", initials="OT", role="teacher", access_token=OTHER_TEACHER_TOKEN)
    class_ = Class(name="P.5", stream="East", academic_year="2025", term="Term 2")
    db.add_all([admin, teacher, other, class_])
    db.flush()

    students = [
        Student(full_name="Amina K", student_number="S001", class_id=class_.id),
        Student(full_name="Brian O", student_number="S002", class_id=class_.id),
        Student(full_name="Cate N", student_number="S003", class_id=class_.id),
    ]
    subjects = [
        Subject(name="Mathematics", code="MTC"),
        Subject(name="English", code="ENG"),
        Subject(name="Science", code="SCI"),
    ]
    db.add_all(students + subjects)

    db.add_all([
        GradeBoundary(grade="A", min_score=80, max_score=100),
        GradeBoundary(grade="B", min_score=70, max_score=79.99),
        GradeBoundary(grade="C", min_score=60, max_score=69.99),
        GradeBoundary(grade="D", min_score=50, max_score=59.99),
        GradeBoundary(grade="E", min_score=1, max_score=49.99),
    ])
    db.add_all([
        CommentTemplate(min_percentage=0, max_percentage=49,
                        class_teacher_comment="Work harder.", headteacher_comment="More effort needed."),
        CommentTemplate(min_percentage=50, max_percentage=74,
                        class_teacher_comment="Fair work.", headteacher_comment="Keep improving."),
        CommentTemplate(min_percentage=75, max_percentage=100,
                        class_teacher_comment="Very good.", headteacher_comment="Well done."),
    ])
    db.commit()

    return {
        "admin": admin,
        "teacher": teacher,
        "other": other,
        "class": class_,
        "students": students,
        "subjects": subjects,
    }


@pytest.fixture
def make_submission(db):
    def _make(teacher_id, class_id, student_id, subject_id, percentage_100, status="pending"):
        submission = SubjectSubmission(
            teacher_id=teacher_id,
            class_id=class_id,
            student_id=student_id,
            subject_id=subject_id,
            a1_score=2.5, a2_score=2.5, a3_score=2.5, average_score=2.5,
            percentage_20=15, percentage_80=60, percentage_100=percentage_100,
            grade="B", remarks="Exceptional",
            status=status,
            submitted_at=datetime.now(timezone.utc),
        )
        db.add(submission)
        db.commit()
        db.refresh(submission)
        return submission
    return _make


@pytest.fixture
def client(db):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth(token):
    return {"Authorization": f"Bearer {token}"}
