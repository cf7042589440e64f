# blueprints/lessons/routes.py
from __future__ import annotations
import logging
from datetime import date

from flask import Blueprint, abort, current_app, jsonify, request
from flask_login import current_user
from pydantic import ValidationError

from extensions import db
from models import Group, Role
from blueprints.auth.routes import admin_required, teacher_required
from .schemas import GenerateIn, LessonsRangeIn, UpcomingIn
from .services import GenerationError, GroupNotFound, InvalidSchedule, horizon_end
from .store import make_generator
from . import queries

log = logging.getLogger(__name__)

api_bp = Blueprint("lessons_api", __name__)

def _json_err(code: str, http: int = 400, detail=None):
    body = {"error": code}
    if detail:
        body["detail"] = detail
    return jsonify(body), http

def _pydantic_errors_safe(ve: ValidationError):
    errs = ve.errors()
    for e in errs:
        if "ctx" in e and isinstance(e["ctx"], dict):
            e["ctx"] = {k: str(v) for k, v in e["ctx"].items()}
    return errs

def _check_group_access(g: Group) -> None:
    # преподаватель работает только со своими группами
    if current_user.role != Role.ADMIN.value and g.teacher_id != current_user.id:
        abort(403)

def _months_ahead(data: GenerateIn) -> int:
    if data.months_ahead is not None:
        return data.months_ahead
    return int(current_app.config.get("LESSONS_MONTHS_AHEAD", 1))

@api_bp.post("/groups/<int:group_id>/generate-lessons")
@teacher_required
def generate_for_group(group_id: int):
    try:
        data = GenerateIn.model_validate(request.get_json(silent=True) or {})
    except ValidationError as ve:
        return _json_err("validation_error", 422, _pydantic_errors_safe(ve))

    g = db.session.get(Group, group_id)
    if not g:
        return _json_err("group_not_found", 404)
    _check_group_access(g)

    gen = make_generator(current_app.config)
    try:
        res = gen.generate_for_group(
            group_id,
            months_ahead=_months_ahead(data),
            created_by=current_user.id,
            weeks_ahead=data.weeks_ahead,
        )
    except GroupNotFound:
        return _json_err("group_not_found", 404)
    except InvalidSchedule as e:
        return _json_err("invalid_schedule", 422, str(e))
    except GenerationError as e:
        return _json_err("generate_failed", 500, str(e))
    except Exception:
        log.exception("lesson generation failed", extra={"event": "lessons_generate_failed", "group_id": group_id})
        return _json_err("generate_failed", 500)

    return jsonify({
        "message": "Lessons generated",
        "generated": res.generated,
        "skipped": res.skipped,
    })

@api_bp.post("/schedule/generate-all")
@admin_required
def generate_all():
    try:
        data = GenerateIn.model_validate(request.get_json(silent=True) or {})
    except ValidationError as ve:
        return _json_err("validation_error", 422, _pydantic_errors_safe(ve))

    months_ahead = _months_ahead(data)
    gen = make_generator(current_app.config)
    results = gen.generate_for_all_groups(
        months_ahead=months_ahead,
        created_by=current_user.id,
        weeks_ahead=data.weeks_ahead,
    )
    today = gen.today()
    return jsonify({
        "message": "Lessons generated",
        "total_generated": sum(r.generated for r in results),
        "total_skipped": sum(r.skipped for r in results),
        "period": {
            "start": today.replace(day=1).isoformat(),
            "end": horizon_end(today, months_ahead).isoformat(),
        },
        "results": [r.to_dict() for r in results],
    })

@api_bp.get("/groups/<int:group_id>/lessons")
@teacher_required
def group_lessons(group_id: int):
    try:
        rng = LessonsRangeIn.model_validate(request.args.to_dict())
    except ValidationError as ve:
        return _json_err("validation_error", 422, _pydantic_errors_safe(ve))

    g = db.session.get(Group, group_id)
    if not g:
        return _json_err("group_not_found", 404)
    _check_group_access(g)
    return jsonify({
        "group_id": group_id,
        "lessons": queries.lessons_for_group(group_id, rng.date_from, rng.date_to),
    })

@api_bp.get("/lessons/upcoming")
@teacher_required
def upcoming():
    try:
        args = UpcomingIn.model_validate(request.args.to_dict())
    except ValidationError as ve:
        return _json_err("validation_error", 422, _pydantic_errors_safe(ve))

    teacher_id = None if current_user.role == Role.ADMIN.value else current_user.id
    return jsonify({
        "lessons": queries.upcoming_lessons(date.today(), limit=args.limit, teacher_id=teacher_id),
    })

@api_bp.get("/lessons/today")
@admin_required
def lessons_today():
    return jsonify({"lessons": queries.today_lessons(date.today())})
