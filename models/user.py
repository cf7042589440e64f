from datetime import datetime
from enum import Enum
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from extensions import db

class Role(str, Enum):
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"

class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, index=True, nullable=False)
    name = db.Column(db.String(255), nullable=True)
    password_hash = db.Column(db.String(255), nullable=False)
    # строковое поле, чтобы не зависеть от конкретного типа БД
    role = db.Column(db.String(16), index=True, nullable=False, default=Role.TEACHER.value)
    is_active_flag = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # helpers
    def set_password(self, raw: str):
        self.password_hash = generate_password_hash(raw)

    def check_password(self, raw: str) -> bool:
        return check_password_hash(self.password_hash, raw)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    # Flask-Login ожидает .is_active
    @property
    def is_active(self):
        return bool(self.is_active_flag)

    def __repr__(self):
        return f"<User {self.email}>"
