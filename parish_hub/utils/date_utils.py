"""Date manipulation utilities"""

from datetime import date, datetime, timedelta


def week_starting(day: date) -> date:
    """Sunday that opens the week containing the given day"""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def month_key(day: date) -> str:
    """Month bucket label, e.g. 2025-06"""
    return day.strftime("%Y-%m")


def days_between(earlier: datetime, later: datetime) -> int:
    """Whole days elapsed between two instants"""
    return int((later - earlier).total_seconds() // 86400)
