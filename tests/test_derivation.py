from dataclasses import replace
from datetime import date

from visitplan.models.domain import Report, Site, WeeklyPlan
from visitplan.services.planning.derivation import derive_plan_view, is_site_completed_this_week

TODAY = date(2026, 10, 21)
LAST_WEEK = date(2026, 10, 14)


def _site(sid: int, name: str | None = None, **kwargs) -> Site:
    kwargs.setdefault("assigned_consultant_id", 1)
    return Site(id=sid, client_name=name or f"Site {sid}", latitude=43.6, longitude=-79.4, **kwargs)


def _report(site_id: int, status: str, visit_date: date = TODAY, consultant_id: int = 1) -> Report:
    return Report(
        id=f"r-{site_id}-{status}",
        site_id=site_id,
        consultant_id=consultant_id,
        visit_date=visit_date,
        status=status,
    )


def _ids(sites: list[Site]) -> list[int]:
    return [site.id for site in sites]


def test_visit_complete_moves_todo_site_to_completed():
    sites = [_site(1), _site(2)]
    plan = WeeklyPlan(todo=list(sites))

    view = derive_plan_view(plan, sites, [_report(1, "Visit Complete")], 1, TODAY)

    assert _ids(view.completed) == [1]
    assert _ids(view.todo) == [2]


def test_site_not_active_report_only_appears_in_revisits():
    sites = [_site(1, status="On Hold"), _site(2)]
    plan = WeeklyPlan(todo=[sites[1]], planned={"Monday": [sites[0]]})
    reports = [_report(1, "Site Not Active"), _report(2, "Site Not Active")]

    view = derive_plan_view(plan, sites, reports, 1, TODAY)

    assert sorted(_ids(view.revisits)) == [1, 2]
    assert view.revisits_set == frozenset({1, 2})
    assert view.todo == []
    assert view.on_hold == []
    assert all(day_sites == [] for day_sites in view.planned.values())


def test_completing_report_wins_over_site_not_active():
    sites = [_site(1)]
    reports = [_report(1, "Site Not Active"), _report(1, "Revisit Waived")]

    view = derive_plan_view(WeeklyPlan(todo=sites), sites, reports, 1, TODAY)

    assert _ids(view.completed) == [1]
    assert view.revisits == []


def test_reports_outside_the_week_or_by_others_are_ignored():
    sites = [_site(1), _site(2)]
    reports = [_report(1, "Visit Complete", visit_date=LAST_WEEK), _report(2, "Visit Complete", consultant_id=9)]

    view = derive_plan_view(WeeklyPlan(todo=sites), sites, reports, 1, TODAY)

    assert _ids(view.todo) == [1, 2]
    assert view.completed == []


def test_on_hold_and_completed_sites_leave_working_buckets():
    sites = [_site(1, status="On Hold"), _site(2, status="Completed"), _site(3)]
    plan = WeeklyPlan(planned={"Wednesday": list(sites)})

    view = derive_plan_view(plan, sites, [], 1, TODAY)

    assert _ids(view.on_hold) == [1]
    assert _ids(view.planned["Wednesday"]) == [3]
    assert view.completed == []


def test_todo_is_sorted_by_frequency_then_name():
    sites = [
        _site(1, "Zeta", frequency="Monthly"),
        _site(2, "Beta", frequency="Weekly"),
        _site(3, "Alpha", frequency="Weekly"),
        _site(4, "Gamma", frequency="Bi-Weekly"),
    ]

    view = derive_plan_view(WeeklyPlan(todo=sites), sites, [], 1, TODAY)

    assert _ids(view.todo) == [3, 2, 4, 1]


def test_stale_and_duplicate_entries_are_dropped():
    live = _site(1, "Fresh name")
    plan = WeeklyPlan(todo=[replace(live, client_name="Old name"), _site(77)], planned={"Friday": [live]})

    view = derive_plan_view(plan, [live], [], 1, TODAY)

    assert _ids(view.todo) == [1]
    assert view.todo[0].client_name == "Fresh name"
    assert view.planned["Friday"] == []


def test_derivation_is_idempotent_and_handles_missing_plan():
    sites = [_site(1), _site(2)]
    plan = WeeklyPlan(todo=sites)
    reports = [_report(2, "Site Not Active")]

    assert derive_plan_view(plan, sites, reports, 1, TODAY) == derive_plan_view(plan, sites, reports, 1, TODAY)
    assert derive_plan_view(None, sites, reports, 1, TODAY).todo == []


def test_completed_this_week_ignores_site_not_active_reports():
    site = _site(1)

    assert not is_site_completed_this_week(site, [_report(1, "Site Not Active")], 1, TODAY)
    assert is_site_completed_this_week(site, [_report(1, "On Hold")], 1, TODAY)
    assert is_site_completed_this_week(replace(site, status="Completed"), [], 1, TODAY)
