# scripts/dev_db_init.py
from datetime import date
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir)))

from app import create_app  # noqa: E402
from extensions import db  # noqa: E402
from models import Group, User, Role  # noqa: E402

def seed_minimal():
    admin = User.query.filter_by(email="admin@example.com").first()
    if not admin:
        admin = User(email="admin@example.com", name="Admin", role=Role.ADMIN.value)
        admin.set_password("pass")
        db.session.add(admin)

    teacher = User.query.filter_by(email="t1@example.com").first()
    if not teacher:
        teacher = User(email="t1@example.com", name="Олена Коваль", role=Role.TEACHER.value)
        teacher.set_password("pass")
        db.session.add(teacher)

    db.session.flush()

    if not Group.query.filter_by(title="Python Junior (пт)").first():
        db.session.add(Group(
            title="Python Junior (пт)",
            teacher_id=teacher.id,
            weekly_day=5,          # пятница
            start_time="11:30",
            duration_minutes=90,
            timezone="Europe/Kyiv",
            start_date=date.today(),
            is_active=True,
        ))

    db.session.commit()

if __name__ == "__main__":
    app = create_app("dev")
    with app.app_context():
        db.create_all()
        seed_minimal()
        print("DB initialized and seeded ✅")
