from __future__ import annotations
from datetime import date, datetime

import pytest
from sqlalchemy.exc import IntegrityError

from app import create_app
from extensions import db
from models import Group, Lesson, User
from blueprints.lessons.services import LessonGenerator, NewLesson
from blueprints.lessons.store import SqlLessonStore, make_generator

@pytest.fixture()
def app_ctx():
    app = create_app("dev")
    app.config.update(TESTING=True, SQLALCHEMY_DATABASE_URI="sqlite:///:memory:")
    with app.app_context():
        db.create_all()
        u = User(email="t1@example.com", role="TEACHER")
        u.set_password("pass")
        db.session.add(u)
        db.session.flush()
        db.session.add_all([
            Group(title="Пт 11:30", teacher_id=u.id, weekly_day=5, start_time="11:30",
                  duration_minutes=90, timezone="Europe/Kyiv", start_date=date(2024, 1, 12),
                  is_active=True),
            # старая схема: активность только через status
            Group(title="Legacy", weekly_day=7, start_time="10:00", duration_minutes=60,
                  is_active=False, status="active"),
            Group(title="Архив", weekly_day=1, start_time="10:00", duration_minutes=60,
                  is_active=False, status="archived"),
        ])
        db.session.commit()
        yield app
        db.session.remove()
        db.drop_all()

def _row(group_id: int, d: date, public_id: str) -> NewLesson:
    return NewLesson(
        public_id=public_id, group_id=group_id, lesson_date=d,
        start_datetime=datetime(d.year, d.month, d.day, 9, 30),
        end_datetime=datetime(d.year, d.month, d.day, 11, 0),
        status="scheduled", created_by=None,
    )

def test_rule_mapping(app_ctx):
    store = SqlLessonStore()
    rule = store.get_group_recurrence_rule(1)
    assert rule.group_id == 1
    assert rule.weekly_day == 5
    assert rule.start_time == "11:30"
    assert rule.duration_minutes == 90
    assert rule.start_date == date(2024, 1, 12)
    assert rule.end_date is None
    assert store.get_group_recurrence_rule(999) is None

def test_active_groups_honour_legacy_status(app_ctx):
    assert SqlLessonStore().list_active_group_ids() == [1, 2]

def test_insert_and_lookup(app_ctx):
    store = SqlLessonStore()
    assert store.group_has_any_lesson(1) is False
    store.insert_lessons_transactionally([
        _row(1, date(2024, 1, 12), "LSN-AAAAAAAA"),
        _row(1, date(2024, 1, 19), "LSN-BBBBBBBB"),
    ])
    assert store.group_has_any_lesson(1) is True
    assert store.group_has_any_lesson(2) is False
    assert sorted(store.list_lesson_dates(1)) == [date(2024, 1, 12), date(2024, 1, 19)]

def test_insert_is_all_or_nothing(app_ctx):
    store = SqlLessonStore()
    store.insert_lessons_transactionally([_row(1, date(2024, 1, 12), "LSN-AAAAAAAA")])
    # вторая строка нарушает (group_id, lesson_date) — первая тоже не должна остаться
    with pytest.raises(IntegrityError):
        store.insert_lessons_transactionally([
            _row(1, date(2024, 1, 19), "LSN-BBBBBBBB"),
            _row(1, date(2024, 1, 12), "LSN-CCCCCCCC"),
        ])
    assert Lesson.query.filter_by(group_id=1).count() == 1
    assert Lesson.query.filter_by(public_id="LSN-BBBBBBBB").first() is None

def test_generator_against_database(app_ctx):
    gen = LessonGenerator(SqlLessonStore(), today=lambda: date(2024, 1, 3))
    first = gen.generate_for_group(1, months_ahead=0, created_by=1)
    second = gen.generate_for_group(1, months_ahead=0, created_by=1)

    assert (first.generated, first.skipped) == (3, 0)
    assert (second.generated, second.skipped) == (0, 3)
    lessons = Lesson.query.filter_by(group_id=1).order_by(Lesson.lesson_date).all()
    assert [l.lesson_date for l in lessons] == [date(2024, 1, 12), date(2024, 1, 19), date(2024, 1, 26)]
    assert lessons[0].start_datetime == datetime(2024, 1, 12, 9, 30)
    assert all(l.status == "scheduled" and l.created_by == 1 for l in lessons)

def test_generate_all_against_database(app_ctx):
    store = SqlLessonStore()
    store.insert_lessons_transactionally([_row(1, date(2023, 12, 1), "LSN-OLDOLDOL")])
    gen = LessonGenerator(store, today=lambda: date(2024, 1, 3))
    results = gen.generate_for_all_groups(months_ahead=0)

    assert [r.to_dict() for r in results] == [
        {"group_id": 1, "generated": 0, "skipped": 0},
        {"group_id": 2, "generated": 4, "skipped": 0},  # воскресенья 7..28 января
    ]

def test_make_generator_reads_config(app_ctx):
    app_ctx.config["LESSONS_PUBLIC_ID_PREFIX"] = "LES"
    gen = make_generator(app_ctx.config, today=lambda: date(2024, 1, 3))
    gen.generate_for_group(1, months_ahead=0)
    assert all(l.public_id.startswith("LES-") for l in Lesson.query.all())
