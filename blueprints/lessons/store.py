# blueprints/lessons/store.py
from __future__ import annotations
from typing import Any, List, Optional, Sequence

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import Group, Lesson, GroupStatus
from .services import LessonGenerator, NewLesson, RecurrenceRule

class SqlLessonStore:
    """LessonStore поверх db.session."""

    def __init__(self, session=None):
        self.session = session or db.session

    def get_group_recurrence_rule(self, group_id: int) -> Optional[RecurrenceRule]:
        g: Group | None = self.session.get(Group, group_id)
        if not g:
            return None
        return RecurrenceRule(
            group_id=g.id,
            weekly_day=g.weekly_day,
            start_time=g.start_time,
            duration_minutes=g.duration_minutes,
            timezone=g.timezone,
            start_date=g.start_date,
            end_date=g.end_date,
        )

    def list_lesson_dates(self, group_id: int) -> List[Any]:
        rows = self.session.query(Lesson.lesson_date).filter(Lesson.group_id == group_id).all()
        return [d for (d,) in rows]

    def list_active_group_ids(self) -> List[int]:
        # status='active' — наследие старой схемы, основной признак is_active
        rows = (self.session.query(Group.id)
                .filter(or_(Group.is_active.is_(True), Group.status == GroupStatus.ACTIVE.value))
                .order_by(Group.id.asc())
                .all())
        return [gid for (gid,) in rows]

    def group_has_any_lesson(self, group_id: int) -> bool:
        return self.session.query(Lesson.id).filter(Lesson.group_id == group_id).first() is not None

    def insert_lessons_transactionally(self, rows: Sequence[NewLesson]) -> None:
        try:
            for r in rows:
                self.session.add(Lesson(
                    public_id=r.public_id,
                    group_id=r.group_id,
                    lesson_date=r.lesson_date,
                    start_datetime=r.start_datetime,
                    end_datetime=r.end_datetime,
                    status=r.status,
                    created_by=r.created_by,
                ))
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

def make_generator(config, **kwargs) -> LessonGenerator:
    return LessonGenerator(
        SqlLessonStore(),
        default_timezone=config.get("LESSONS_DEFAULT_TIMEZONE", "Europe/Kyiv"),
        id_prefix=config.get("LESSONS_PUBLIC_ID_PREFIX", "LSN"),
        **kwargs,
    )
