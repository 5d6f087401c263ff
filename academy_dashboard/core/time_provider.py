from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from academy_dashboard.config import settings


APP_TIMEZONE = settings.app_timezone or "Asia/Kolkata"
APP_ZONEINFO = ZoneInfo(APP_TIMEZONE)


class TimeProvider:
    def now(self) -> datetime:
        return datetime.now(APP_ZONEINFO)

    def today(self) -> date:
        return self.now().date()

    def utc_now_iso(self) -> str:
        return self.now().astimezone(timezone.utc).isoformat()

    def current_week_start(self) -> date:
        return week_start(self.today())


def week_start(value: date) -> date:
    """Monday of the ISO week containing ``value``."""
    return value - timedelta(days=value.weekday())


def to_date_string(value: date | datetime | str) -> str:
    """Normalize a date-like value to ``YYYY-MM-DD``, dropping any time of day."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    raw = str(value or '').strip()
    if not raw:
        raise ValueError('Empty date value')
    if raw.endswith('Z'):
        raw = raw[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(raw).date().isoformat()
    except ValueError:
        return date.fromisoformat(raw[:10]).isoformat()


default_time_provider = TimeProvider()
