"""Health check endpoints."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from marketplace.api.deps import json_response, timing
from marketplace.core.extensions import db

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application and database health information."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"
    version = current_app.config.get("APP_VERSION", "dev")
    healthy = db_status == "ok"
    payload = {"status": "ok" if healthy else "degraded", "db": db_status, "version": version}
    return json_response(payload, status=200 if healthy else 503)


def ping():
    """Liveness probe mounted at ``/ping`` outside the versioned prefix."""

    return "pong", 200, {"Content-Type": "text/plain; charset=utf-8"}
