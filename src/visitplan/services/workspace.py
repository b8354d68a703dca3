"""Single-writer state container tying the planning services together.

The workspace owns the live sites, reports, users, weekly plans, the pending
draft and the route configuration. Every mutation runs under one lock so the
single-bucket membership of a site survives concurrent API requests.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from datetime import date
from pathlib import Path
from typing import Callable, Iterable, Optional

from ..config import settings
from ..models.domain import Report, Site, User, WeeklyPlan, WeeklyPlanState
from ..persistence.filesystem import FileStorage
from ..schemas.planning import WorkspaceSnapshot
from .notifications import NavigationTarget, Notification
from .outputs.formatter import (
    model_to_plan,
    model_to_report,
    model_to_site,
    model_to_user,
    plan_state_to_models,
    report_to_model,
    route_config_to_model,
    site_to_model,
    user_to_model,
)
from .planning.derivation import PlanView, derive_plan_view, is_site_completed_this_week
from .planning.drafts import DraftPlanResult, PlanGenerationOptions, confirm_draft_plans, generate_draft_plans
from .planning.store import MoveOutcome, WeeklyPlanStore
from .routing.models import RouteOptimizationConfig, RouteSuggestion
from .routing.service import suggest_route
from .scheduling.due import get_management_alert
from .sites import service as site_service


class PlanningWorkspace:
    def __init__(
        self,
        *,
        sites: Iterable[Site] = (),
        reports: Iterable[Report] = (),
        users: Iterable[User] = (),
        plans: WeeklyPlanState | None = None,
        route_config: RouteOptimizationConfig | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._lock = threading.RLock()
        self._sites: list[Site] = list(sites)
        self._reports: list[Report] = list(reports)
        self._users: list[User] = list(users)
        self._store = WeeklyPlanStore(plans)
        self._route_config = route_config or RouteOptimizationConfig.from_settings()
        self._today = today
        self._draft: Optional[DraftPlanResult] = None
        self._last_suggestion: Optional[RouteSuggestion] = None
        self._outbox: deque[Notification] = deque(maxlen=settings.max_pending_notifications)

    def today(self) -> date:
        return self._today()

    @property
    def sites(self) -> list[Site]:
        with self._lock:
            return list(self._sites)

    @property
    def reports(self) -> list[Report]:
        with self._lock:
            return list(self._reports)

    @property
    def users(self) -> list[User]:
        with self._lock:
            return list(self._users)

    @property
    def route_config(self) -> RouteOptimizationConfig:
        return self._route_config

    @property
    def draft(self) -> Optional[DraftPlanResult]:
        return self._draft

    @property
    def last_route_suggestion(self) -> Optional[RouteSuggestion]:
        return self._last_suggestion

    def plans(self) -> WeeklyPlanState:
        with self._lock:
            return self._store.snapshot()

    def get_site(self, site_id: int) -> Optional[Site]:
        with self._lock:
            return next((site for site in self._sites if site.id == site_id), None)

    def get_user(self, user_id: int) -> Optional[User]:
        with self._lock:
            return next((user for user in self._users if user.id == user_id), None)

    def sites_for_consultant(self, consultant_id: int) -> list[Site]:
        with self._lock:
            return [site for site in self._sites if site.assigned_consultant_id == consultant_id]

    def management_alerts(self) -> list[tuple[Site, str]]:
        """Alerts for Active sites that are overdue for their visit cadence."""

        with self._lock:
            today = self.today()
            alerts = []
            for site in self._sites:
                message = get_management_alert(site, today)
                if message:
                    alerts.append((site, message))
            return alerts

    def drain_notifications(self, recipient_id: int | None = None) -> list[Notification]:
        """Hand over pending notifications, oldest first.

        With ``recipient_id`` only that consultant's notifications are taken;
        the rest stay queued.
        """

        with self._lock:
            if recipient_id is None:
                pending = list(self._outbox)
                self._outbox.clear()
                return pending
            pending = [item for item in self._outbox if item.recipient_id == recipient_id]
            kept = [item for item in self._outbox if item.recipient_id != recipient_id]
            self._outbox.clear()
            self._outbox.extend(kept)
            return pending

    def _notify(self, notification: Notification) -> None:
        self._outbox.append(notification)

    def get_plan(self, consultant_id: int) -> Optional[WeeklyPlan]:
        with self._lock:
            return self._store.get(consultant_id)

    def ensure_plan(self, consultant_id: int) -> Optional[WeeklyPlan]:
        """Return the consultant's plan, seeding one from their open Active sites on first access."""

        with self._lock:
            if consultant_id not in self._store:
                owned = [site for site in self._sites if site.assigned_consultant_id == consultant_id]
                if owned:
                    today = self.today()
                    seed = [
                        site
                        for site in owned
                        if site.status == "Active"
                        and not is_site_completed_this_week(site, self._reports, consultant_id, today)
                    ]
                    self._store.initialize_plan(consultant_id, seed)
            return self._store.get(consultant_id)

    def plan_view(self, consultant_id: int) -> PlanView:
        with self._lock:
            return derive_plan_view(
                self._store.get(consultant_id),
                self._sites,
                self._reports,
                consultant_id,
                self.today(),
            )

    def replace_plan(self, consultant_id: int, plan: WeeklyPlan) -> WeeklyPlan:
        with self._lock:
            self._store.replace_plan(consultant_id, plan)
            logging.info(f"Weekly plan replaced for consultant {consultant_id}")
            return self._store.get(consultant_id)

    def attempt_move(
        self,
        consultant_id: int,
        site_id: int,
        source: str,
        target: str,
        *,
        confirmed: bool = False,
    ) -> MoveOutcome:
        with self._lock:
            plan = self._store.get(consultant_id)
            if plan is None:
                raise LookupError(f"No weekly plan for consultant {consultant_id}.")
            site = self.get_site(site_id)
            if site is None:
                site = next((item for _, item in plan.iter_entries() if item.id == site_id), None)
            if site is None:
                return MoveOutcome("not_found", site_id, source, target, reason=f"Unknown site {site_id}.", plan=plan)
            return self._store.attempt_move(consultant_id, site, source, target, self.today(), confirmed=confirmed)

    def generate_draft(self, options: PlanGenerationOptions) -> DraftPlanResult:
        """Build a new pending draft, replacing any draft still awaiting review."""

        with self._lock:
            if self._draft is not None:
                logging.info("Discarding pending draft in favour of a newly generated one")
            self._draft = generate_draft_plans(options, self._sites, self.today())
            level = "info" if self._draft.eligible_count == 0 or self._draft.dropped_site_ids else "success"
            self._notify(Notification(message=self._draft.summary(), level=level))
            return self._draft

    def confirm_draft(self, edited_plans: WeeklyPlanState | None = None) -> list[int]:
        """Commit the reviewed draft. Returns ids of sites whose owner changed."""

        with self._lock:
            if edited_plans is None:
                if self._draft is None:
                    raise LookupError("There is no pending draft to confirm.")
                edited_plans = self._draft.plans
            self._sites, changed = confirm_draft_plans(self._store, edited_plans, self._sites)
            self._draft = None
            self._notify(Notification(message="Next week's plans have been confirmed and distributed!"))
            for consultant_id in edited_plans:
                self._notify(
                    Notification(
                        message="Your new weekly plan has been generated and distributed.",
                        recipient_id=consultant_id,
                        nav_target=NavigationTarget(view="consultant"),
                    )
                )
            return changed

    def discard_draft(self) -> None:
        with self._lock:
            if self._draft is None:
                raise LookupError("There is no pending draft to discard.")
            self._draft = None
            self._notify(Notification(message="Draft plan discarded.", level="info"))

    def update_route_config(self, **changes: float) -> RouteOptimizationConfig:
        with self._lock:
            self._route_config = self._route_config.updated(**changes)
            self._notify(Notification(message="Routing settings updated."))
            return self._route_config

    def suggest_route(self, consultant_id: int, day: str, mode: str) -> Optional[RouteSuggestion]:
        with self._lock:
            suggestion = suggest_route(
                self._store.get(consultant_id),
                self._sites,
                day,
                mode,
                self._route_config,
            )
            self._last_suggestion = suggestion
            if suggestion is None:
                self._notify(Notification(message="No sites planned for this day.", level="info"))
            else:
                self._notify(Notification(message=f'Generated "{mode}" route for {day}.'))
            return suggestion

    def clear_route_suggestion(self) -> None:
        with self._lock:
            self._last_suggestion = None

    def file_report(self, report: Report) -> Report:
        with self._lock:
            if self.get_site(report.site_id) is None:
                raise LookupError(f"Unknown site {report.site_id}.")
            self._sites, filed = site_service.apply_report(self._sites, report)
            self._reports.insert(0, filed)
            message = "Report submitted for review." if filed.review_status == "pending" else "Report submitted successfully!"
            self._notify(Notification(message=message))
            return filed

    def reassign_sites(self, site_ids: Iterable[int], new_consultant_id: int) -> list[int]:
        with self._lock:
            change = site_service.reassign_sites(self._sites, self._store, site_ids, new_consultant_id)
            self._sites = change.sites
            for notification in change.notifications:
                self._notify(notification)
            return change.changed_ids

    def link_sites(self, site_id: int, target_site_id: int) -> None:
        with self._lock:
            self._sites = site_service.link_sites(self._sites, site_id, target_site_id)

    def unlink_site(self, site_id: int) -> None:
        with self._lock:
            self._sites = site_service.unlink_site(self._sites, site_id)

    def request_hold(self, site_id: int, reason: str, start: date, end: date, requested_by: int) -> Site:
        with self._lock:
            user = self.get_user(requested_by)
            if user is None:
                raise LookupError(f"Unknown user {requested_by}.")
            self._sites = site_service.request_hold(self._sites, site_id, reason, start, end, user)
            message = "Site put on hold successfully." if user.role == "management" else "Hold request submitted for approval."
            self._notify(Notification(message=message))
            return self.get_site(site_id)

    def resolve_hold(self, site_id: int, approved: bool) -> Site:
        with self._lock:
            self._sites = site_service.resolve_hold(self._sites, site_id, approved)
            message = "Hold request approved." if approved else "Hold request rejected, site active."
            self._notify(Notification(message=message))
            return self.get_site(site_id)

    def clear_hold(self, site_id: int) -> Site:
        with self._lock:
            self._sites = site_service.clear_hold(self._sites, site_id)
            self._notify(Notification(message="Hold cleared. Site is active."))
            return self.get_site(site_id)

    def to_snapshot(self) -> WorkspaceSnapshot:
        with self._lock:
            return WorkspaceSnapshot(
                sites=[site_to_model(site) for site in self._sites],
                reports=[report_to_model(report) for report in self._reports],
                users=[user_to_model(user) for user in self._users],
                weekly_plans=plan_state_to_models(self._store.snapshot()),
                route_config=route_config_to_model(self._route_config),
            )

    def save(self, storage: FileStorage) -> Path:
        """Write a snapshot, holding the lock until the file is in place so saves never interleave."""

        with self._lock:
            return storage.save_snapshot(self.to_snapshot())

    @classmethod
    def from_snapshot(
        cls,
        snapshot: WorkspaceSnapshot,
        *,
        today: Callable[[], date] = date.today,
    ) -> "PlanningWorkspace":
        route_config = (
            RouteOptimizationConfig(**snapshot.route_config.model_dump()) if snapshot.route_config else None
        )
        return cls(
            sites=[model_to_site(model) for model in snapshot.sites],
            reports=[model_to_report(model) for model in snapshot.reports],
            users=[model_to_user(model) for model in snapshot.users],
            plans={cid: model_to_plan(model) for cid, model in snapshot.weekly_plans.items()},
            route_config=route_config,
            today=today,
        )
