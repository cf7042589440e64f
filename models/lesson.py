from datetime import datetime
import enum
from extensions import db

class LessonStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    DONE = "done"
    CANCELED = "canceled"

class Lesson(db.Model):
    __tablename__ = "lessons"

    id = db.Column(db.Integer, primary_key=True)
    public_id = db.Column(db.String(32), unique=True, nullable=True)
    group_id = db.Column(db.Integer, db.ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    lesson_date = db.Column(db.Date, nullable=False, index=True)
    # UTC без tzinfo
    start_datetime = db.Column(db.DateTime, nullable=False)
    end_datetime = db.Column(db.DateTime, nullable=False)
    status = db.Column(db.String(16), nullable=False, default=LessonStatus.SCHEDULED.value)
    topic = db.Column(db.String(255), nullable=True)
    created_by = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    group = db.relationship("Group")

    __table_args__ = (
        db.UniqueConstraint("group_id", "lesson_date", name="uq_lessons_group_date"),
    )

    def __repr__(self):
        return f"<Lesson {self.public_id} {self.lesson_date}>"
