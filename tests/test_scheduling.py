from datetime import date

import pytest

from visitplan.models.domain import Site
from visitplan.services.scheduling.dates import (
    add_business_days,
    get_business_days_diff,
    get_business_days_remaining_in_month,
    get_week_range,
    most_recent_friday,
)
from visitplan.services.scheduling.due import get_management_alert, is_site_due

WEDNESDAY = date(2026, 10, 21)


def _site(**kwargs) -> Site:
    return Site(id=1, client_name="Harbour Plaza", latitude=43.6, longitude=-79.4, **kwargs)


def test_week_range_runs_monday_to_sunday():
    assert get_week_range(WEDNESDAY) == (date(2026, 10, 19), date(2026, 10, 25))
    assert get_week_range(date(2026, 10, 25)) == (date(2026, 10, 19), date(2026, 10, 25))


@pytest.mark.parametrize(
    "today, expected",
    [
        (date(2026, 10, 16), date(2026, 10, 16)),
        (date(2026, 10, 17), date(2026, 10, 16)),
        (date(2026, 10, 19), date(2026, 10, 16)),
        (date(2026, 10, 22), date(2026, 10, 16)),
        (date(2026, 10, 23), date(2026, 10, 23)),
    ],
)
def test_most_recent_friday(today: date, expected: date):
    assert most_recent_friday(today) == expected


def test_business_day_arithmetic_skips_weekends():
    friday = date(2026, 10, 16)

    assert add_business_days(friday, 1) == date(2026, 10, 19)
    assert get_business_days_diff(friday, date(2026, 10, 19)) == 1
    assert get_business_days_diff(date(2026, 10, 19), friday) == 0
    assert get_business_days_remaining_in_month(date(2026, 10, 27)) == 3


def test_inactive_and_completed_sites_are_never_due():
    assert not is_site_due(_site(status="Not Active"), WEDNESDAY)
    assert not is_site_due(_site(status="Completed"), WEDNESDAY)


def test_on_hold_site_is_not_due_inside_its_window():
    held = _site(status="On Hold", on_hold_start=date(2026, 10, 19), on_hold_end=date(2026, 10, 23))

    assert not is_site_due(held, WEDNESDAY)
    assert is_site_due(held, date(2026, 10, 26))


def test_never_visited_site_is_due():
    assert is_site_due(_site(), WEDNESDAY)


def test_weekly_due_when_not_visited_this_week():
    assert is_site_due(_site(last_visited=date(2026, 10, 16)), WEDNESDAY)
    assert not is_site_due(_site(last_visited=date(2026, 10, 19)), WEDNESDAY)


def test_bi_weekly_due_after_ten_business_days():
    assert not is_site_due(_site(frequency="Bi-Weekly", last_visited=date(2026, 10, 12)), WEDNESDAY)
    assert is_site_due(_site(frequency="Bi-Weekly", last_visited=date(2026, 10, 7)), WEDNESDAY)


@pytest.mark.parametrize("frequency", ["Monthly", "Shop Audit"])
def test_monthly_cadences_due_once_per_calendar_month(frequency: str):
    assert not is_site_due(_site(frequency=frequency, last_visited=date(2026, 10, 1)), WEDNESDAY)
    assert is_site_due(_site(frequency=frequency, last_visited=date(2026, 9, 30)), WEDNESDAY)


def test_management_alerts():
    assert get_management_alert(_site(status="On Hold"), WEDNESDAY) is None
    assert "never been visited" in get_management_alert(_site(), WEDNESDAY)
    assert "Weekly site due" in get_management_alert(_site(last_visited=date(2026, 10, 16)), WEDNESDAY)
    assert get_management_alert(_site(last_visited=date(2026, 10, 20)), WEDNESDAY) is None


def test_monthly_alert_waits_for_month_end():
    site = _site(frequency="Monthly", last_visited=date(2026, 9, 28))

    # Plenty of business days left and fewer than 35 days since the last visit.
    assert get_management_alert(site, date(2026, 10, 5)) is None
    assert "Monthly site due" in get_management_alert(site, date(2026, 10, 26))
    audit = _site(frequency="Shop Audit", last_visited=date(2026, 8, 1))
    assert "Shop Audit due" in get_management_alert(audit, WEDNESDAY)
