# blueprints/auth/routes.py
from __future__ import annotations
from functools import wraps
from typing import Callable, Optional

from flask import Blueprint, request, jsonify, abort
from flask_login import login_user, logout_user, login_required, current_user

from extensions import db, login_manager
from models import User, Role

bp = Blueprint("auth", __name__)

@login_manager.user_loader
def load_user(uid: str) -> Optional[User]:
    try:
        return db.session.get(User, int(uid))
    except (TypeError, ValueError):
        return None

# ---------- декораторы ролей ----------
def admin_required(fn: Callable):
    @wraps(fn)
    @login_required
    def wrapper(*args, **kwargs):
        if getattr(current_user, "role", None) != Role.ADMIN.value:
            abort(403)
        return fn(*args, **kwargs)
    return wrapper

def teacher_required(fn: Callable):
    @wraps(fn)
    @login_required
    def wrapper(*args, **kwargs):
        # пускаем TEACHER и ADMIN
        if getattr(current_user, "role", None) not in (Role.TEACHER.value, Role.ADMIN.value):
            abort(403)
        return fn(*args, **kwargs)
    return wrapper

# ---------- обработчики 401/403 ----------
@login_manager.unauthorized_handler
def _unauth():
    return jsonify({"error": "unauthorized"}), 401

@bp.app_errorhandler(403)
def _forbidden(e):
    return jsonify({"error": "forbidden"}), 403

# ---------- API ----------
@bp.post("/login")
def api_login():
    payload = request.get_json(silent=True) or request.form or {}
    email = (payload.get("email") or "").strip().lower()
    password = payload.get("password") or ""

    if not email or not password:
        return jsonify({"error": "missing_credentials"}), 400

    user: Optional[User] = User.query.filter_by(email=email).first()
    if not user or not user.password_hash or not user.check_password(password):
        return jsonify({"error": "invalid_credentials"}), 401

    if not user.is_active:
        return jsonify({"error": "inactive"}), 403

    login_user(user, remember=True)
    return jsonify({"ok": True, "user": {"id": user.id, "email": user.email, "role": user.role}})

@bp.post("/logout")
@login_required
def api_logout():
    logout_user()
    return jsonify({"ok": True})
