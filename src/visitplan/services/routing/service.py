"""Route suggestion for one consultant's planned day."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import WEEKDAYS, Site, WeeklyPlan
from ..geospatial import HasCoordinates
from .models import Point, RouteOptimizationConfig, RouteSuggestion
from .solver import get_route_strategy


def home_base() -> Point:
    return Point(latitude=settings.home_base_latitude, longitude=settings.home_base_longitude)


def _refresh_sites(planned: Sequence[Site], sites: Sequence[Site]) -> list[Site]:
    """Use the live record for each planned site, keeping the plan's copy when no live one exists."""

    by_id = {site.id: site for site in sites}
    return [by_id.get(site.id, site) for site in planned]


def suggest_route(
    plan: Optional[WeeklyPlan],
    sites: Sequence[Site],
    day: str,
    mode: str,
    config: RouteOptimizationConfig,
    start_point: HasCoordinates | None = None,
) -> Optional[RouteSuggestion]:
    """Order the sites planned for ``day``. Returns None when nothing is planned."""

    if day not in WEEKDAYS:
        raise ValueError(f"Unknown weekday '{day}'. Expected one of: {', '.join(WEEKDAYS)}.")
    strategy = get_route_strategy(mode)

    if plan is None or not plan.planned.get(day):
        return None

    day_sites = _refresh_sites(plan.planned[day], sites)
    suggestion = strategy.plan(day_sites, start_point or home_base(), config)
    if suggestion.warnings:
        logging.warning(f"Route for {day} ({mode}) raised warnings: {'; '.join(suggestion.warnings)}")
    return suggestion
