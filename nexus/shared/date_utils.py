"""
Calendar date helpers.

Every date that crosses the API is a UTC calendar day in ``YYYY-MM-DD`` form.
Internally days are compared as integer day numbers (proleptic Gregorian
ordinals), so no iteration ever touches a local timezone or DST boundary.
"""
import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, List, Optional, Tuple, Union

from nexus.constants import (
    TIMELINE_PAST_DAYS, TIMELINE_FUTURE_DAYS, YEAR_PAST_DAYS, YEAR_FUTURE_DAYS
)

DateLike = Union[date, datetime, str]


def to_date(value: DateLike) -> date:
    """
    Reduce a date, datetime or ISO string to its UTC calendar day.

    Aware datetimes are converted to UTC first; naive datetimes are taken
    to already be UTC. Strings may be plain dates or full ISO timestamps.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if len(text) > 10:
        return to_date(datetime.fromisoformat(text.replace("Z", "+00:00")))
    return date.fromisoformat(text)


def to_iso(value: DateLike) -> str:
    return to_date(value).isoformat()


def day_number(value: DateLike) -> int:
    return to_date(value).toordinal()


def from_day_number(number: int) -> date:
    return date.fromordinal(number)


def today_utc() -> date:
    """Current UTC calendar day"""
    return datetime.now(timezone.utc).date()


def date_range(start: date, end: date) -> Iterator[date]:
    """Iterate days from start to end, inclusive"""
    for number in range(start.toordinal(), end.toordinal() + 1):
        yield date.fromordinal(number)


def last_n_days(n: int, today: Optional[date] = None) -> List[str]:
    """The last n days ending today, oldest first"""
    today = today or today_utc()
    return [(today - timedelta(days=offset)).isoformat() for offset in range(n - 1, -1, -1)]


def timeline_range(
    past_days: int = TIMELINE_PAST_DAYS,
    future_days: int = TIMELINE_FUTURE_DAYS,
    today: Optional[date] = None
) -> List[Tuple[str, date]]:
    """Window of (iso, date) pairs around today"""
    today = today or today_utc()
    start = today - timedelta(days=past_days)
    end = today + timedelta(days=future_days)
    return [(day.isoformat(), day) for day in date_range(start, end)]


def year_range(today: Optional[date] = None) -> List[Tuple[str, date]]:
    """Roughly eleven months back and one forward, for heatmaps"""
    return timeline_range(YEAR_PAST_DAYS, YEAR_FUTURE_DAYS, today)


def format_date(value: DateLike) -> str:
    """Short label such as 'Mon, Jan 5'"""
    day = to_date(value)
    return f"{day.strftime('%a')}, {day.strftime('%b')} {day.day}"


def format_month_day(value: DateLike) -> str:
    day = to_date(value)
    return f"{day.strftime('%b')} {day.day}"


def month_layout(year: int, month: int) -> Tuple[int, int]:
    """
    Days in the month and the weekday of its first day.

    Weekdays count from Sunday = 0, which is how calendar grids are laid out.
    """
    first_weekday, days = calendar.monthrange(year, month)
    return days, (first_weekday + 1) % 7


def as_utc(value: datetime) -> datetime:
    """Aware datetime in UTC; naive values are taken to already be UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
