from datetime import datetime
import enum
from extensions import db

class GroupStatus(str, enum.Enum):
    ACTIVE = "active"
    GRADUATED = "graduated"
    ARCHIVED = "archived"

class Group(db.Model):
    __tablename__ = "groups"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    teacher_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # недельное расписание
    weekly_day = db.Column(db.Integer, nullable=True)  # 0=Sun..6=Sat, 7=Sun в старых данных
    start_time = db.Column(db.String(8), nullable=True)  # "HH:MM" по местному времени группы
    duration_minutes = db.Column(db.Integer, nullable=False, default=60)
    timezone = db.Column(db.String(64), nullable=True)
    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)

    # is_active — основной признак, status остался от старой схемы
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    status = db.Column(db.String(16), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    teacher = db.relationship("User")

    def __repr__(self):
        return f"<Group {self.title}>"
