from __future__ import annotations
import json, logging
from datetime import datetime

from flask import g, jsonify, request
from flask_wtf.csrf import CSRFError, generate_csrf
from werkzeug.wrappers.response import Response

from . import bp, api_bp

# поля из extra=..., которые выводим в JSON-лог
LOG_FIELDS = (
    "event", "path", "method", "status", "duration_ms",
    "group_id", "date_from", "date_to", "generated", "skipped", "error",
)

class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.utcnow().isoformat(timespec="milliseconds") + "Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in LOG_FIELDS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

def _setup_structured_logging(app):
    # app.logger + логгеры модулей blueprints.* пишут в один JSON-поток
    for logger in (app.logger, logging.getLogger("blueprints")):
        has_json = any(
            isinstance(h, logging.StreamHandler)
            and isinstance(getattr(h, "formatter", None), JSONFormatter)
            for h in logger.handlers
        )
        if not has_json:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            logger.addHandler(handler)
            logger.setLevel(logging.INFO)

@api_bp.get("/csrf")
def get_csrf():
    token = generate_csrf()
    resp = jsonify({"csrf": token})
    resp.set_cookie("csrf_token", token, samesite="Lax")
    return resp

@bp.app_errorhandler(CSRFError)
def _csrf_error(e: CSRFError):
    return jsonify({"error": "csrf_failed", "detail": e.description}), 400

@bp.before_app_request
def _start_timer():
    g._req_start = datetime.utcnow()

@bp.after_app_request
def _log_request(response: Response):
    try:
        duration_ms = int((datetime.utcnow() - g._req_start).total_seconds() * 1000)
    except AttributeError:
        duration_ms = None
    extra = {
        "event": "http_request",
        "path": request.path,
        "method": request.method,
        "status": response.status_code,
        "duration_ms": duration_ms,
    }
    # логгер уже настроен в _on_register
    logging.getLogger("blueprints.core").info("request handled", extra=extra)
    return response

@bp.record_once
def _on_register(state):
    _setup_structured_logging(state.app)

@bp.get("/health")
def health():
    return jsonify({
        "status": "ok",
        "ts": datetime.utcnow().isoformat(timespec="seconds") + "Z",
    })
