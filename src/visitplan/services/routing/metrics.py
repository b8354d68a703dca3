"""Distance, time and pay estimates for an ordered route."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import Site
from ..geospatial import HasCoordinates, distance_between
from .models import EstimatedPay, RouteMetrics, RouteOptimizationConfig


def route_distance_km(ordered_sites: Sequence[Site], start_point: HasCoordinates) -> float:
    """Closed-loop distance: home base, every site in order, then back to home base."""

    if not ordered_sites:
        return 0.0
    total = distance_between(start_point, ordered_sites[0])
    for current, following in zip(ordered_sites, ordered_sites[1:]):
        total += distance_between(current, following)
    total += distance_between(ordered_sites[-1], start_point)
    return total


def calculate_route_metrics(
    ordered_sites: Sequence[Site],
    start_point: HasCoordinates,
    config: RouteOptimizationConfig,
) -> RouteMetrics:
    site_count = len(ordered_sites)
    total_distance = round(route_distance_km(ordered_sites, start_point), 1)
    total_time = round(total_distance / config.avg_speed_kmh, 2)

    time_pay = round(total_time * config.travel_time_rate, 2)
    distance_pay = round(total_distance * config.distance_rate, 2)
    site_pay = round(site_count * config.per_site_rate, 2)
    total_pay = round(time_pay + distance_pay + site_pay, 2)
    cost_per_site = round(total_pay / site_count, 2) if site_count else 0.0

    warnings: list[str] = []
    if total_time > config.max_daily_drive_time:
        warnings.append(f"Exceeds max drive time of {config.max_daily_drive_time:g} hrs.")
    if total_distance > config.max_daily_distance:
        warnings.append(f"Exceeds max distance of {config.max_daily_distance:g} km.")

    return RouteMetrics(
        total_distance=total_distance,
        total_time=total_time,
        estimated_pay=EstimatedPay(
            time_pay=time_pay,
            distance_pay=distance_pay,
            site_pay=site_pay,
            total=total_pay,
        ),
        cost_per_site=cost_per_site,
        warnings=warnings,
    )
