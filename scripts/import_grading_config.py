import csv
import sys
from sqlalchemy.orm import Session
from database.db import Base, SessionLocal, engine
from models import comment_templates, grade_boundaries  # noqa: F401  (register tables)
from services.grading_config import create_boundary, create_template
from utils.exceptions import ValidationError

BOUNDARIES_CSV = "data/grade_boundaries.csv"      # grade,min_score,max_score
TEMPLATES_CSV = "data/comment_templates.csv"      # min_percentage,max_percentage,class_teacher_comment,headteacher_comment


def import_boundaries(db: Session, path: str = BOUNDARIES_CSV) -> int:
    count = 0
    with open(path, newline="", encoding="utf-8-sig") as csvfile:
        for row in csv.DictReader(csvfile):
            try:
                create_boundary(db, row["grade"], float(row["min_score"]), float(row["max_score"]))
                count += 1
            except ValidationError as exc:
                print(f"⚠️ skipped grade {row.get('grade')}: {exc.message}")
    return count


def import_templates(db: Session, path: str = TEMPLATES_CSV) -> int:
    count = 0
    with open(path, newline="", encoding="utf-8-sig") as csvfile:
        for row in csv.DictReader(csvfile):
            try:
                create_template(
                    db,
                    int(row["min_percentage"]),
                    int(row["max_percentage"]),
                    row["class_teacher_comment"],
                    row["headteacher_comment"],
                )
                count += 1
            except ValidationError as exc:
                print(f"⚠️ skipped template {row.get('min_percentage')}-{row.get('max_percentage')}: {exc.message}")
    return count


def main(boundaries_path: str = BOUNDARIES_CSV, templates_path: str = TEMPLATES_CSV):
    Base.metadata.create_all(bind=engine)
    db: Session = SessionLocal()
    try:
        boundaries = import_boundaries(db, boundaries_path)
        templates = import_templates(db, templates_path)
    finally:
        db.close()
    print(f"✅ imported {boundaries} grade boundaries and {templates} comment templates")


if __name__ == "__main__":
    main(*sys.argv[1:3])
