"""Calendar helpers; "today" is always the business's local date"""

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

from ..config import APP_TIMEZONE


def local_now() -> datetime:
    return datetime.now(ZoneInfo(APP_TIMEZONE))


def local_today() -> date:
    return local_now().date()


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First day of the month and first day of the following month"""
    start = date(year, month, 1)
    return start, start + relativedelta(months=1)


def year_bounds(year: int) -> tuple[date, date]:
    return date(year, 1, 1), date(year + 1, 1, 1)


def months_ago(today: date, months: int) -> date:
    return today - relativedelta(months=months)


def days_until(target: date, today: date) -> int:
    """Whole days from today to target; negative once target has passed"""
    return (target - today).days


def day_after(value: date) -> date:
    return value + timedelta(days=1)
