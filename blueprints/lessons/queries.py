# blueprints/lessons/queries.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from datetime import date
from typing import Dict, List, Optional

from extensions import db
from models import Group, Lesson, LessonStatus, User
from .services import format_utc

@dataclass
class LessonOut:
    id: int
    public_id: Optional[str]
    group_id: int
    lesson_date: str
    start_datetime: str
    end_datetime: str
    status: str
    topic: Optional[str]
    group_title: Optional[str] = None
    teacher_name: Optional[str] = None

def _out(les: Lesson, grp: Group | None = None, teacher: User | None = None) -> LessonOut:
    return LessonOut(
        id=les.id,
        public_id=les.public_id,
        group_id=les.group_id,
        lesson_date=les.lesson_date.isoformat(),
        start_datetime=format_utc(les.start_datetime),
        end_datetime=format_utc(les.end_datetime),
        status=les.status,
        topic=les.topic,
        group_title=(grp.title if grp else None),
        teacher_name=((teacher.name or teacher.email) if teacher else None),
    )

def lessons_for_group(group_id: int, date_from: date | None = None, date_to: date | None = None) -> List[Dict]:
    q = Lesson.query.filter(Lesson.group_id == group_id)
    if date_from:
        q = q.filter(Lesson.lesson_date >= date_from)
    if date_to:
        q = q.filter(Lesson.lesson_date <= date_to)
    return [asdict(_out(les)) for les in q.order_by(Lesson.lesson_date.asc()).all()]

def upcoming_lessons(today: date, limit: int = 10, teacher_id: int | None = None) -> List[Dict]:
    """Ближайшие неотменённые занятия; для преподавателя — только его группы."""
    q = (db.session.query(Lesson, Group, User)
         .join(Group, Group.id == Lesson.group_id)
         .outerjoin(User, User.id == Group.teacher_id)
         .filter(Lesson.lesson_date >= today,
                 Lesson.status != LessonStatus.CANCELED.value))
    if teacher_id is not None:
        q = q.filter(Group.teacher_id == teacher_id)
    rows = q.order_by(Lesson.lesson_date.asc(), Lesson.start_datetime.asc()).limit(limit).all()
    return [asdict(_out(les, grp, tch)) for les, grp, tch in rows]

def today_lessons(today: date) -> List[Dict]:
    """Все неотменённые занятия на день (админский обзор)."""
    rows = (db.session.query(Lesson, Group, User)
            .join(Group, Group.id == Lesson.group_id)
            .outerjoin(User, User.id == Group.teacher_id)
            .filter(Lesson.lesson_date == today,
                    Lesson.status != LessonStatus.CANCELED.value)
            .order_by(Lesson.start_datetime.asc())
            .all())
    return [asdict(_out(les, grp, tch)) for les, grp, tch in rows]
