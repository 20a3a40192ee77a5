from flask import Blueprint, current_app
from sqlalchemy import text

from portal_api.extensions import db
from portal_api.common.http import ok, fail

bp = Blueprint("health", __name__, url_prefix="/api/v1")


@bp.get("/health")
def health():
    try:
        db.session.execute(text("SELECT 1"))
    except Exception as e:
        current_app.logger.warning("health check: database unreachable: %s", e)
        return fail("Database unreachable", status=503, code="STORAGE_ERROR")
    return ok({"status": "ok", "database": "ok"})
