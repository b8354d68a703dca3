"""Calendar helpers for business-week scheduling."""

from __future__ import annotations

from datetime import date, timedelta

FRIDAY = 4


def get_week_range(today: date) -> tuple[date, date]:
    """Monday through Sunday (inclusive) of the week containing ``today``."""

    start = today - timedelta(days=today.weekday())
    return start, start + timedelta(days=6)


def get_start_of_business_week(today: date) -> date:
    return get_week_range(today)[0]


def is_business_day(day: date) -> bool:
    return day.weekday() < 5


def add_business_days(start: date, days: int) -> date:
    result = start
    added = 0
    while added < days:
        result += timedelta(days=1)
        if is_business_day(result):
            added += 1
    return result


def get_business_days_diff(start: date, end: date) -> int:
    """Business days in the half-open interval (start, end]."""

    if start > end:
        return 0
    count = 0
    current = start
    while current < end:
        current += timedelta(days=1)
        if is_business_day(current):
            count += 1
    return count


def get_business_days_remaining_in_month(today: date) -> int:
    count = 0
    current = today + timedelta(days=1)
    while current.month == today.month:
        if is_business_day(current):
            count += 1
        current += timedelta(days=1)
    return count


def most_recent_friday(today: date) -> date:
    """The latest Friday on or before ``today``."""

    return today - timedelta(days=(today.weekday() - FRIDAY) % 7)
