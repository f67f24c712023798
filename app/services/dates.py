"""
Calendar helpers shared by the watering evaluator and the forecast.

All values are plain calendar dates. Month arithmetic clamps to the end of
the month (Jan 31 + 1 month = Feb 28/29) via dateutil's relativedelta.
"""
import calendar
import re
from datetime import date, datetime, timedelta
from typing import Any, Optional

from dateutil.relativedelta import relativedelta

_LOOSE_YMD = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


def parse_date(value: Any) -> Optional[date]:
    """
    Coerce a stored date into a calendar date.

    Accepts date, datetime, "YYYY-MM-DD" (zero-padding optional, so "2025-6-5"
    works) and full ISO datetime strings.
    Anything else (None, blanks, garbage, impossible dates) comes back as None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    loose = _LOOSE_YMD.match(text)
    if loose is None:
        return None
    try:
        return date(*(int(part) for part in loose.groups()))
    except ValueError:
        return None


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def end_of_month(d: date) -> date:
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def add_months(d: date, months: int) -> date:
    return d + relativedelta(months=months)


def months_between(earlier: date, later: date) -> int:
    """Whole calendar months from earlier's month to later's month (day ignored)."""
    return (later.year - earlier.year) * 12 + (later.month - earlier.month)


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"
