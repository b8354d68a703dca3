from datetime import date

import pytest

from visitplan.models.domain import Report, Site, User, WeeklyPlan
from visitplan.services.planning.drafts import PlanGenerationOptions
from visitplan.services.workspace import PlanningWorkspace

TODAY = date(2026, 10, 21)


def _site(sid: int, owner: int = 1, **kwargs) -> Site:
    return Site(
        id=sid,
        client_name=f"Site {sid}",
        latitude=43.65 + sid * 0.01,
        longitude=-79.38,
        assigned_consultant_id=owner,
        **kwargs,
    )


def _workspace(**kwargs) -> PlanningWorkspace:
    kwargs.setdefault(
        "users",
        [User(id=1, name="Casey"), User(id=2, name="Jordan"), User(id=10, name="Morgan", role="management")],
    )
    return PlanningWorkspace(today=lambda: TODAY, **kwargs)


def test_ensure_plan_seeds_open_active_sites_once():
    sites = [_site(1), _site(2, status="On Hold"), _site(3), _site(4, owner=2)]
    reports = [Report(id="r1", site_id=3, consultant_id=1, visit_date=TODAY, status="Visit Complete")]
    workspace = _workspace(sites=sites, reports=reports)

    plan = workspace.ensure_plan(1)

    assert plan.site_ids() == [1]
    workspace.replace_plan(1, WeeklyPlan())
    assert workspace.ensure_plan(1).site_ids() == []


def test_ensure_plan_needs_owned_sites():
    workspace = _workspace(sites=[_site(1)])

    assert workspace.ensure_plan(2) is None
    assert 2 not in workspace.plans()


def test_filed_report_updates_site_and_view():
    workspace = _workspace(sites=[_site(1), _site(2)])
    workspace.ensure_plan(1)

    workspace.file_report(Report(id="r1", site_id=1, consultant_id=1, visit_date=TODAY, status="Visit Complete"))
    view = workspace.plan_view(1)

    assert [site.id for site in view.completed] == [1]
    assert [site.id for site in view.todo] == [2]
    assert workspace.get_site(1).last_visited == TODAY
    assert workspace.reports[0].id == "r1"
    with pytest.raises(LookupError):
        workspace.file_report(Report(id="r2", site_id=99, consultant_id=1, visit_date=TODAY, status="Visit Complete"))


def test_attempt_move_requires_plan():
    workspace = _workspace(sites=[_site(1)])

    with pytest.raises(LookupError):
        workspace.attempt_move(1, 1, "todo", "Monday")

    workspace.ensure_plan(1)
    assert workspace.attempt_move(1, 1, "todo", "Monday").status == "applied"
    assert workspace.attempt_move(1, 42, "todo", "Monday").status == "not_found"


def test_draft_lifecycle():
    workspace = _workspace(sites=[_site(1), _site(2, owner=0)])
    workspace.ensure_plan(1)
    workspace.drain_notifications()

    first = workspace.generate_draft(PlanGenerationOptions(target_user_ids=[1]))
    second = workspace.generate_draft(PlanGenerationOptions(target_user_ids=[1, 2], include_unassigned=True))

    assert workspace.draft is second
    assert first is not second
    assert len(workspace.drain_notifications()) == 2

    changed = workspace.confirm_draft()

    assert changed == [2]
    assert workspace.draft is None
    assert workspace.get_site(2).assigned_consultant_id == 2
    assert workspace.get_plan(2).site_ids() == [2]
    messages = workspace.drain_notifications()
    assert {notification.recipient_id for notification in messages} == {None, 1, 2}

    with pytest.raises(LookupError):
        workspace.confirm_draft()


def test_discard_draft_leaves_live_plans_alone():
    workspace = _workspace(sites=[_site(1)])
    workspace.ensure_plan(1)
    workspace.generate_draft(PlanGenerationOptions(target_user_ids=[1], max_sites_per_user=0))

    workspace.discard_draft()

    assert workspace.draft is None
    assert workspace.get_plan(1).site_ids() == [1]


def test_suggest_route_for_planned_day():
    workspace = _workspace(sites=[_site(1), _site(2)])
    workspace.ensure_plan(1)
    workspace.attempt_move(1, 2, "todo", "Thursday")
    workspace.attempt_move(1, 1, "todo", "Thursday")

    suggestion = workspace.suggest_route(1, "Thursday", "fastest")

    assert [site.id for site in suggestion.ordered_sites] == [1, 2]
    assert workspace.last_route_suggestion is suggestion
    assert workspace.suggest_route(1, "Friday", "balanced") is None
    assert workspace.last_route_suggestion is None
    assert workspace.drain_notifications()[-1].level == "info"


def test_route_config_updates_are_validated():
    workspace = _workspace()

    assert workspace.update_route_config(per_site_rate=45).per_site_rate == 45
    with pytest.raises(ValueError):
        workspace.update_route_config(avg_speed_kmh=0)
    assert workspace.route_config.avg_speed_kmh == 60


def test_reassign_and_holds_through_workspace():
    workspace = _workspace(sites=[_site(1), _site(2, owner=2)])
    workspace.ensure_plan(2)

    assert workspace.reassign_sites([1], 2) == [1]
    assert workspace.get_plan(2).todo[0].id == 1

    held = workspace.request_hold(1, "Renovation", date(2026, 10, 22), date(2026, 10, 28), requested_by=2)
    assert held.on_hold_approval_status == "Pending"
    assert workspace.resolve_hold(1, approved=False).status == "Active"
    with pytest.raises(LookupError):
        workspace.request_hold(1, "Renovation", date(2026, 10, 22), date(2026, 10, 28), requested_by=77)


def test_management_alerts_cover_active_sites():
    workspace = _workspace(sites=[_site(1), _site(2, status="Not Active"), _site(3, last_visited=TODAY)])

    alerts = workspace.management_alerts()

    assert [site.id for site, _ in alerts] == [1]


def test_discard_without_draft_raises():
    workspace = _workspace()

    with pytest.raises(LookupError):
        workspace.discard_draft()
    assert workspace.drain_notifications() == []


def test_notification_outbox_keeps_only_the_newest(monkeypatch):
    from visitplan.services import workspace as workspace_module

    monkeypatch.setattr(workspace_module.settings, "max_pending_notifications", 3)
    workspace = _workspace()

    for rate in range(10, 15):
        workspace.update_route_config(per_site_rate=rate)
    workspace.clear_route_suggestion()
    workspace.suggest_route(1, "Monday", "fastest")

    pending = workspace.drain_notifications()

    assert len(pending) == 3
    assert [item.message for item in pending[:2]] == ["Routing settings updated."] * 2
    assert pending[-1].message == "No sites planned for this day."
    assert workspace.drain_notifications() == []


def test_drain_for_one_recipient_leaves_the_rest_queued():
    workspace = _workspace(sites=[_site(1), _site(2, owner=2)])
    workspace.generate_draft(PlanGenerationOptions(target_user_ids=[1, 2]))
    workspace.confirm_draft()

    mine = workspace.drain_notifications(recipient_id=1)

    assert [item.recipient_id for item in mine] == [1]
    assert [item.recipient_id for item in workspace.drain_notifications()] == [None, None, 2]
