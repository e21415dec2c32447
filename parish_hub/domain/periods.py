"""Analytics period computation for week/month/quarter/year timeframes"""

import calendar
from datetime import datetime, timedelta, timezone
from typing import Union

from parish_hub.domain.enums import Timeframe
from parish_hub.domain.exceptions import InvalidRequestError
from parish_hub.domain.models import Period

PERIOD_LABELS = {
    Timeframe.WEEK: "WEEKLY",
    Timeframe.MONTH: "MONTHLY",
    Timeframe.QUARTER: "QUARTERLY",
    Timeframe.YEAR: "YEARLY",
}

_END_OF_DAY = {"hour": 23, "minute": 59, "second": 59, "microsecond": 999_000}


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC, convert aware ones to UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def compute_period(timeframe: Union[Timeframe, str], now: datetime | None = None) -> Period:
    """
    Compute the inclusive [start, end] UTC range for an analytics timeframe.

    Rules:
    - week: previous Sunday 00:00:00.000 through the following Saturday 23:59:59.999
    - month: first through last calendar day of the current month
    - quarter: first day of the block starting at floor(month/3)*3 through its last day
    - year: Jan 1 through Dec 31

    Args:
        timeframe: week | month | quarter | year
        now: Reference instant (default: current UTC time)

    Returns:
        Period with start, end and the backend period label

    Example:
        week, 2025-06-08T16:39:28Z (Sunday)
        → 2025-06-08T00:00:00.000Z .. 2025-06-14T23:59:59.999Z
    """
    try:
        timeframe = Timeframe(timeframe)
    except ValueError:
        raise InvalidRequestError(f"Unsupported timeframe: {timeframe}")

    now = as_utc(now or datetime.now(timezone.utc))
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if timeframe == Timeframe.WEEK:
        # Python weekday(): Monday=0 .. Sunday=6
        days_since_sunday = (now.weekday() + 1) % 7
        start = midnight - timedelta(days=days_since_sunday)
        end = (start + timedelta(days=6)).replace(**_END_OF_DAY)
    elif timeframe == Timeframe.MONTH:
        start = midnight.replace(day=1)
        last_day = calendar.monthrange(now.year, now.month)[1]
        end = midnight.replace(day=last_day, **_END_OF_DAY)
    elif timeframe == Timeframe.QUARTER:
        first_month = (now.month - 1) // 3 * 3 + 1
        last_month = first_month + 2
        start = midnight.replace(month=first_month, day=1)
        last_day = calendar.monthrange(now.year, last_month)[1]
        end = midnight.replace(month=last_month, day=last_day, **_END_OF_DAY)
    else:
        start = midnight.replace(month=1, day=1)
        end = midnight.replace(month=12, day=31, **_END_OF_DAY)

    return Period(start=start, end=end, label=PERIOD_LABELS[timeframe])


def contains(period: Period, moment: datetime) -> bool:
    """Check whether an instant falls inside the period (inclusive)"""
    return period.start <= as_utc(moment) <= period.end
