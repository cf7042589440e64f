"""
Проставляет public_id занятиям, созданным до появления колонки.
Запуск:
  python scripts/backfill_public_ids.py [--dry-run]
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir)))

from sqlalchemy import or_  # noqa: E402

from app import create_app  # noqa: E402
from extensions import db  # noqa: E402
from models import Lesson  # noqa: E402
from blueprints.lessons.public_ids import generate_public_id  # noqa: E402

def backfill(prefix: str, dry_run: bool = False) -> int:
    lessons = Lesson.query.filter(or_(Lesson.public_id.is_(None), Lesson.public_id == "")).all()
    for les in lessons:
        les.public_id = generate_public_id(prefix)
    if dry_run:
        db.session.rollback()
    else:
        db.session.commit()
    return len(lessons)

if __name__ == "__main__":
    p = argparse.ArgumentParser()
    p.add_argument("--dry-run", action="store_true")
    args = p.parse_args()
    app = create_app(os.getenv("FLASK_CONFIG", "default"))
    with app.app_context():
        n = backfill(app.config.get("LESSONS_PUBLIC_ID_PREFIX", "LSN"), dry_run=args.dry_run)
        print(f"{'would update' if args.dry_run else 'updated'}: {n}")
