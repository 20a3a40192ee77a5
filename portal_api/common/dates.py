# portal_api/common/dates.py
from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from flask import current_app, has_app_context


def parse_date_any(s) -> date | None:
    """
    Accepts:
      - date / datetime objects (returned as date)
      - 'YYYY-MM-DD'  (canonical)
      - 'DD-MM-YYYY'  (legacy support)
    """
    if not s:
        return None
    if isinstance(s, datetime):
        return s.date()
    if isinstance(s, date):
        return s
    for f in ("%Y-%m-%d", "%d-%m-%Y"):
        try:
            return datetime.strptime(str(s).strip(), f).date()
        except ValueError:
            pass
    return None


def parse_datetime_any(s) -> datetime | None:
    """ISO-8601 timestamp -> naive UTC datetime (columns store naive UTC)."""
    if not s:
        return None
    if isinstance(s, datetime):
        dt = s
    else:
        try:
            dt = datetime.fromisoformat(str(s).strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def local_today() -> date:
    """Portal's notion of 'today' (APP_TIMEZONE, default UTC)."""
    tz_name = "UTC"
    if has_app_context():
        tz_name = current_app.config.get("APP_TIMEZONE") or "UTC"
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        tz = timezone.utc
    return datetime.now(tz).date()
