"""Effective weekly state derived from a raw plan and this week's reports.

A weekly plan only records scheduling intent. What a consultant actually sees
is recomputed on every read from the live site list and the reports filed in
the current Monday-Sunday window, so a report filed moments ago moves a site
into ``completed`` or ``revisits`` without any plan edit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Sequence

from ...models.domain import (
    COMPLETING_REPORT_STATUSES,
    TODO_BUCKET,
    WEEKDAYS,
    Report,
    Site,
    WeeklyPlan,
)
from ..scheduling.dates import get_week_range

FREQUENCY_WEIGHT: dict[str, int] = {
    "Weekly": 1,
    "Bi-Weekly": 2,
    "Monthly": 3,
    "Shop Audit": 4,
}
UNKNOWN_FREQUENCY_WEIGHT = 99


def _empty_week() -> dict[str, list[Site]]:
    return {day: [] for day in WEEKDAYS}


@dataclass(slots=True)
class PlanView:
    todo: list[Site] = field(default_factory=list)
    planned: dict[str, list[Site]] = field(default_factory=_empty_week)
    on_hold: list[Site] = field(default_factory=list)
    completed: list[Site] = field(default_factory=list)
    revisits: list[Site] = field(default_factory=list)
    revisits_set: frozenset[int] = frozenset()


def frequency_sort_key(site: Site) -> tuple[int, str]:
    return FREQUENCY_WEIGHT.get(site.frequency, UNKNOWN_FREQUENCY_WEIGHT), site.client_name


def reports_for_week(
    reports: Iterable[Report],
    consultant_id: int,
    today: date,
) -> list[Report]:
    start, end = get_week_range(today)
    week_reports: list[Report] = []
    for report in reports:
        visit_date = getattr(report, "visit_date", None)
        if not isinstance(visit_date, date):
            continue
        if report.consultant_id == consultant_id and start <= visit_date <= end:
            week_reports.append(report)
    return week_reports


def is_site_completed_this_week(
    site: Site,
    reports: Iterable[Report],
    consultant_id: int,
    today: date,
) -> bool:
    """True when the site is done for the week and should not be seeded into a new plan.

    A ``Site Not Active`` report leaves the site open for a revisit.
    """

    if site.status == "Completed":
        return True
    for report in reports_for_week(reports, consultant_id, today):
        if report.site_id == site.id and report.status != "Site Not Active":
            return True
    return False


def derive_plan_view(
    plan: Optional[WeeklyPlan],
    sites: Sequence[Site],
    reports: Iterable[Report],
    consultant_id: int,
    today: date,
) -> PlanView:
    view = PlanView()
    if plan is None:
        return view

    sites_by_id = {site.id: site for site in sites}
    completed_ids: set[int] = set()
    not_active_ids: set[int] = set()
    for report in reports_for_week(reports, consultant_id, today):
        if report.status in COMPLETING_REPORT_STATUSES:
            completed_ids.add(report.site_id)
        elif report.status == "Site Not Active":
            not_active_ids.add(report.site_id)

    seen: set[int] = set()
    for bucket, stub in plan.iter_entries():
        site_id = getattr(stub, "id", None)
        if site_id is None or site_id in seen:
            continue
        seen.add(site_id)
        site = sites_by_id.get(site_id)
        if site is None:
            continue

        if site.id in completed_ids:
            view.completed.append(site)
        elif site.status == "Completed":
            continue
        elif site.id in not_active_ids:
            view.revisits.append(site)
        elif site.status == "On Hold":
            view.on_hold.append(site)
        elif bucket == TODO_BUCKET:
            view.todo.append(site)
        else:
            view.planned[bucket].append(site)

    view.todo.sort(key=frequency_sort_key)
    view.revisits.sort(key=frequency_sort_key)
    view.revisits_set = frozenset(site.id for site in view.revisits)
    return view
