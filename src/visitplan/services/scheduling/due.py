"""Visit cadence rules: when a site is due and when management should be alerted."""

from __future__ import annotations

from datetime import date
from typing import Optional

from ...models.domain import Site
from .dates import (
    get_business_days_diff,
    get_business_days_remaining_in_month,
    get_start_of_business_week,
)

BI_WEEKLY_BUSINESS_DAYS = 10
MONTHLY_ALERT_REMAINING_BUSINESS_DAYS = 7
MONTHLY_ALERT_DAYS_SINCE = 35


def _same_month(first: date, second: date) -> bool:
    return first.year == second.year and first.month == second.month


def _within_hold(site: Site, today: date) -> bool:
    if site.on_hold_start is None or site.on_hold_end is None:
        return False
    return site.on_hold_start <= today <= site.on_hold_end


def is_site_due(site: Site, today: date) -> bool:
    """Return True when ``site`` needs a visit as of ``today``.

    Weekly sites are due when not yet visited this business week, Bi-Weekly after
    ten business days, Monthly and Shop Audit sites when not visited in the
    current calendar month. Inactive and completed sites are never due, and an
    On Hold site is not due while today falls inside its hold window.
    """

    if site.status in ("Not Active", "Completed"):
        return False
    if site.status == "On Hold" and _within_hold(site, today):
        return False
    if site.last_visited is None:
        return True

    last_visit = site.last_visited
    if site.frequency == "Weekly":
        return last_visit < get_start_of_business_week(today)
    if site.frequency == "Bi-Weekly":
        return get_business_days_diff(last_visit, today) >= BI_WEEKLY_BUSINESS_DAYS
    if site.frequency in ("Monthly", "Shop Audit"):
        return not _same_month(last_visit, today)
    return False


def get_management_alert(site: Site, today: date) -> Optional[str]:
    if site.status != "Active":
        return None
    if site.last_visited is None:
        return f"{site.frequency} site due: This site has never been visited."

    last_visit = site.last_visited
    if site.frequency == "Weekly":
        if last_visit < get_start_of_business_week(today):
            return (
                f"Weekly site due: {site.client_name} has not been visited during this week's "
                "business-day window and requires a visit soon."
            )
        return None
    if site.frequency == "Bi-Weekly":
        if get_business_days_diff(last_visit, today) >= BI_WEEKLY_BUSINESS_DAYS:
            return (
                f"Bi-weekly site due: {site.client_name} has not been visited within its bi-weekly "
                "business-day window and requires a visit soon."
            )
        return None
    if site.frequency in ("Monthly", "Shop Audit"):
        if _same_month(last_visit, today):
            return None
        remaining = get_business_days_remaining_in_month(today)
        days_since = (today - last_visit).days
        if remaining > MONTHLY_ALERT_REMAINING_BUSINESS_DAYS and days_since <= MONTHLY_ALERT_DAYS_SINCE:
            return None
        if site.frequency == "Monthly":
            return (
                f"Monthly site due: {site.client_name} is approaching or has exceeded its monthly "
                "business-day visit window."
            )
        return (
            f"Shop Audit due: {site.client_name} is approaching or has exceeded its monthly "
            "business-day audit window."
        )
    return None
