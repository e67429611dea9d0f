from datetime import date

import pytest

from models.report_cards import ReportCard
from services import report_generator
from services.report_cards import build_preview, update_report_card
from services.report_generator import (
    generate_report_card, generate_report_cards, overall_average,
)
from utils.exceptions import NotFoundError, ValidationError


def _ids(seeded):
    return (
        seeded["teacher"].id,
        seeded["class"].id,
        [s.id for s in seeded["students"]],
        [s.id for s in seeded["subjects"]],
    )


def test_only_approved_submissions_are_averaged(db, seeded, make_submission):
    teacher, class_id, students, subjects = _ids(seeded)
    make_submission(teacher, class_id, students[0], subjects[0], 90, status="approved")
    make_submission(teacher, class_id, students[0], subjects[1], 71, status="approved")
    make_submission(teacher, class_id, students[0], subjects[2], 10, status="rejected")

    result = generate_report_card(db, students[0], class_id, None, seeded["admin"].id)

    assert result["success"] is True
    assert result["overall_average"] == pytest.approx(80.5)
    assert result["overall_grade"] == "A"
    card = db.query(ReportCard).filter(ReportCard.id == result["report_card_id"]).one()
    assert card.class_teacher_comment == "Very good."
    assert card.headteacher_comment == "Well done."
    assert card.status == "generated"
    assert card.generated_by == seeded["admin"].id
    assert card.template_id == 1


def test_pending_submissions_are_ignored(db, seeded, make_submission):
    teacher, class_id, students, subjects = _ids(seeded)
    make_submission(teacher, class_id, students[0], subjects[0], 60, status="approved")
    make_submission(teacher, class_id, students[0], subjects[1], 100, status="pending")

    result = generate_report_card(db, students[0], class_id, 2, seeded["admin"].id)
    assert result["overall_average"] == 60
    assert result["overall_grade"] == "C"


def test_zero_approved_submissions_gives_zero_average(db, seeded):
    _, class_id, students, _ = _ids(seeded)
    result = generate_report_card(db, students[0], class_id, None, seeded["admin"].id)

    assert result["success"] is True
    assert result["overall_average"] == 0
    # 0 is below every configured boundary, so the fallback applies
    assert result["overall_grade"] == "F"
    card = db.query(ReportCard).one()
    assert card.class_teacher_comment == "Work harder."


def test_no_matching_template_leaves_comments_empty(db, seeded, make_submission):
    teacher, class_id, students, subjects = _ids(seeded)
    make_submission(teacher, class_id, students[0], subjects[0], 49, status="approved")
    make_submission(teacher, class_id, students[0], subjects[1], 50, status="approved")

    generate_report_card(db, students[0], class_id, None, seeded["admin"].id)

    card = db.query(ReportCard).one()
    assert card.overall_average == pytest.approx(49.5)
    assert card.class_teacher_comment is None
    assert card.headteacher_comment is None


def test_regeneration_is_idempotent_and_keeps_admin_fields(db, seeded, make_submission):
    teacher, class_id, students, subjects = _ids(seeded)
    make_submission(teacher, class_id, students[0], subjects[0], 66, status="approved")
    make_submission(teacher, class_id, students[0], subjects[1], 77, status="approved")

    first = generate_report_card(db, students[0], class_id, None, seeded["admin"].id)
    update_report_card(db, first["report_card_id"], {
        "fees_balance": 5000,
        "fees_next_term": 120000,
        "other_requirements": "2 reams of paper",
        "term_ended_on": date(2025, 8, 1),
    })
    second = generate_report_card(db, students[0], class_id, None, seeded["admin"].id)

    assert second["report_card_id"] == first["report_card_id"]
    assert second["overall_average"] == first["overall_average"]
    assert second["overall_grade"] == first["overall_grade"]
    card = db.query(ReportCard).one()
    assert card.fees_balance == 5000
    assert card.fees_next_term == 120000
    assert card.other_requirements == "2 reams of paper"
    assert card.term_ended_on == date(2025, 8, 1)
    assert card.class_teacher_comment == "Fair work."


def test_regeneration_picks_up_newly_approved_subjects(db, seeded, make_submission):
    teacher, class_id, students, subjects = _ids(seeded)
    make_submission(teacher, class_id, students[0], subjects[0], 50, status="approved")
    generate_report_card(db, students[0], class_id, None, seeded["admin"].id)

    make_submission(teacher, class_id, students[0], subjects[1], 90, status="approved")
    result = generate_report_card(db, students[0], class_id, None, seeded["admin"].id)

    assert result["overall_average"] == 70
    assert db.query(ReportCard).count() == 1


def test_batch_continues_past_missing_student(db, seeded, make_submission):
    teacher, class_id, students, subjects = _ids(seeded)
    make_submission(teacher, class_id, students[0], subjects[0], 85, status="approved")
    make_submission(teacher, class_id, students[2], subjects[0], 55, status="approved")

    response = generate_report_cards(
        db, class_id, [students[0], 9999, students[2]], None, seeded["admin"].id, "class",
    )

    assert response["success"] is True
    results = response["results"]
    assert len(results) == 3
    assert results[0]["success"] is True
    assert results[1] == {"student_id": 9999, "success": False, "error": "Student not found"}
    assert results[2]["success"] is True
    assert results[2]["overall_grade"] == "D"
    assert "1 failed" in response["message"]
    assert response["class_info"] == {
        "name": "P.5", "stream": "East", "academic_year": "2025", "term": "Term 2",
    }


def test_batch_requires_class_and_students(db, seeded):
    with pytest.raises(ValidationError):
        generate_report_cards(db, seeded["class"].id, [], None, seeded["admin"].id)


def test_batch_unknown_class_is_not_found(db, seeded):
    with pytest.raises(NotFoundError):
        generate_report_cards(db, 404, [seeded["students"][0].id], None, seeded["admin"].id)


def test_overall_average_counts_zero_scores():
    class Row:
        def __init__(self, p):
            self.percentage_100 = p

    assert overall_average([Row(0), Row(80)]) == 40
    assert overall_average([Row(None), Row(80)]) == 80
    assert overall_average([]) == 0


def test_preview_lists_approved_subjects_with_identifier(db, seeded, make_submission):
    teacher, class_id, students, subjects = _ids(seeded)
    make_submission(teacher, class_id, students[0], subjects[0], 82, status="approved")
    make_submission(teacher, class_id, students[0], subjects[1], 45, status="approved")
    make_submission(teacher, class_id, students[0], subjects[2], 99, status="pending")
    seeded["class"].general_requirements = "Broom and hoe"
    db.commit()

    result = generate_report_card(db, students[0], class_id, None, seeded["admin"].id)
    preview = build_preview(db, result["report_card_id"])

    assert [s["subject_code"] for s in preview["subjects"]] == ["MTC", "ENG"]
    assert preview["subjects"][0]["identifier"] == 3
    assert preview["subjects"][0]["achievement"] == "Outstanding"
    assert preview["subjects"][1]["identifier"] == 1
    assert preview["subjects"][0]["teacher_initials"] == "GT"
    assert preview["overall_identifier"] == 1
    assert preview["other_requirements"] == "Broom and hoe"
    assert preview["student"]["full_name"] == "Amina K"


def test_batch_records_unexpected_errors_and_continues(db, seeded, make_submission, monkeypatch):
    teacher, class_id, students, subjects = _ids(seeded)
    make_submission(teacher, class_id, students[1], subjects[0], 72, status="approved")

    real_approved = report_generator.approved_submissions

    def flaky(db_, student_id, class_id_):
        if student_id == students[0]:
            raise RuntimeError("disk on fire")
        return real_approved(db_, student_id, class_id_)

    monkeypatch.setattr(report_generator, "approved_submissions", flaky)
    response = generate_report_cards(db, class_id, [students[0], students[1]], None, seeded["admin"].id)

    assert response["results"][0] == {"student_id": students[0], "success": False, "error": "disk on fire"}
    assert response["results"][1]["success"] is True
    assert response["results"][1]["overall_grade"] == "B"
    assert db.query(ReportCard).count() == 1
