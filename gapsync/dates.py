# gapsync/dates.py

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Optional

DISPLAY_FORMAT = "%d-%m-%Y"

TodayProvider = Callable[[], date]


def parse_date(value: Any) -> Optional[date]:
    """Normalizes a sheet value to a calendar date.

    Strings are read as day/month/year with `-`, `.` or `/` separators.
    Anything unparseable, including impossible dates like 31/02, gives None.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None:
        return None

    s = str(value).strip()
    if not s:
        return None

    parts = s.replace("-", "/").replace(".", "/").split("/")
    if len(parts) != 3:
        return None

    try:
        day, month, year = (int(p) for p in parts)
        return date(year, month, day)
    except (ValueError, OverflowError):
        return None


def format_display(d: date) -> str:
    return d.strftime(DISPLAY_FORMAT)


def as_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def make_today_provider(tz_name: str = "") -> TodayProvider:
    """Returns a callable giving today's date, in `tz_name` when set."""
    tz_name = (tz_name or "").strip()
    if not tz_name:
        return date.today

    from zoneinfo import ZoneInfo

    tz = ZoneInfo(tz_name)

    def _today() -> date:
        return datetime.now(tz).date()

    return _today
