"""Conversions between domain objects and their serialized schema models."""

from __future__ import annotations

from dataclasses import asdict
from typing import Mapping

from ...models.domain import WEEKDAYS, Report, Site, User, WeeklyPlan, WeeklyPlanState
from ...schemas.notifications import NavigationTargetModel, NotificationModel
from ...schemas.planning import (
    PlanViewModel,
    ReportModel,
    SiteModel,
    UserModel,
    WeeklyPlanModel,
)
from ...schemas.routing import (
    EstimatedPayModel,
    RouteConfigModel,
    RouteStopModel,
    RouteSuggestionModel,
)
from ..notifications import Notification
from ..planning.derivation import PlanView
from ..routing.models import RouteOptimizationConfig, RouteSuggestion


def site_to_model(site: Site) -> SiteModel:
    return SiteModel(**asdict(site))


def model_to_site(model: SiteModel) -> Site:
    return Site(**model.model_dump())


def report_to_model(report: Report) -> ReportModel:
    return ReportModel(**asdict(report))


def model_to_report(model: ReportModel) -> Report:
    return Report(**model.model_dump())


def user_to_model(user: User) -> UserModel:
    return UserModel(**asdict(user))


def model_to_user(model: UserModel) -> User:
    return User(**model.model_dump())


def plan_to_model(plan: WeeklyPlan) -> WeeklyPlanModel:
    return WeeklyPlanModel(
        todo=[site_to_model(site) for site in plan.todo],
        planned={day: [site_to_model(site) for site in plan.planned.get(day, [])] for day in WEEKDAYS},
    )


def model_to_plan(model: WeeklyPlanModel) -> WeeklyPlan:
    return WeeklyPlan(
        todo=[model_to_site(site) for site in model.todo],
        planned={day: [model_to_site(site) for site in model.planned.get(day, [])] for day in WEEKDAYS},
    )


def plan_state_to_models(plans: WeeklyPlanState) -> dict[int, WeeklyPlanModel]:
    return {consultant_id: plan_to_model(plan) for consultant_id, plan in plans.items()}


def models_to_plan_state(models: Mapping[int, WeeklyPlanModel]) -> WeeklyPlanState:
    return {int(consultant_id): model_to_plan(model) for consultant_id, model in models.items()}


def plan_view_to_model(consultant_id: int, view: PlanView) -> PlanViewModel:
    return PlanViewModel(
        consultant_id=consultant_id,
        todo=[site_to_model(site) for site in view.todo],
        planned={day: [site_to_model(site) for site in view.planned.get(day, [])] for day in WEEKDAYS},
        on_hold=[site_to_model(site) for site in view.on_hold],
        completed=[site_to_model(site) for site in view.completed],
        revisits=[site_to_model(site) for site in view.revisits],
        revisit_ids=sorted(view.revisits_set),
    )


def route_config_to_model(config: RouteOptimizationConfig) -> RouteConfigModel:
    return RouteConfigModel(**asdict(config))


def route_suggestion_to_model(suggestion: RouteSuggestion) -> RouteSuggestionModel:
    return RouteSuggestionModel(
        mode=suggestion.mode,
        stops=[
            RouteStopModel(
                sequence=index,
                site_id=site.id,
                client_name=site.client_name,
                latitude=site.latitude,
                longitude=site.longitude,
            )
            for index, site in enumerate(suggestion.ordered_sites, start=1)
        ],
        total_distance=suggestion.total_distance,
        total_time=suggestion.total_time,
        estimated_pay=EstimatedPayModel(**asdict(suggestion.estimated_pay)),
        cost_per_site=suggestion.cost_per_site,
        warnings=list(suggestion.warnings),
    )


def route_suggestion_to_json(suggestion: RouteSuggestion) -> dict:
    return route_suggestion_to_model(suggestion).model_dump(mode="json")


def notification_to_model(notification: Notification) -> NotificationModel:
    nav_target = notification.nav_target
    return NotificationModel(
        message=notification.message,
        level=notification.level,
        recipient_id=notification.recipient_id,
        nav_target=NavigationTargetModel(**asdict(nav_target)) if nav_target is not None else None,
        created_at=notification.created_at,
    )
