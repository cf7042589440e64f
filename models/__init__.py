from extensions import db
from .user import Role, User
from .group import Group, GroupStatus
from .lesson import Lesson, LessonStatus

__all__ = [
    "db",
    "Role", "User",
    "Group", "GroupStatus",
    "Lesson", "LessonStatus",
]
