"""Greedy route ordering strategies for a consultant's day."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...models.domain import Site
from ..geospatial import HasCoordinates, distance_between
from .metrics import calculate_route_metrics
from .models import ROUTE_MODES, RouteOptimizationConfig, RouteSuggestion

SHORT_ROUTE_MAX_SITES = 3
SHORT_ROUTE_MAX_HOURS = 2.0
SHORT_ROUTE_WARNING = "Route is very short; consider adding more sites for efficiency."


def nearest_neighbor_order(sites: Sequence[Site], start_point: HasCoordinates) -> list[Site]:
    """Order sites by repeatedly visiting the closest unvisited one.

    Ties keep the earlier site in input order. The input sequence is not modified.
    """

    unvisited = list(sites)
    ordered: list[Site] = []
    current: HasCoordinates = start_point

    while unvisited:
        nearest_index = min(range(len(unvisited)), key=lambda idx: distance_between(current, unvisited[idx]))
        nearest = unvisited.pop(nearest_index)
        ordered.append(nearest)
        current = nearest
    return ordered


class RouteStrategy(ABC):
    """Contract for route ordering strategies."""

    mode: str

    @abstractmethod
    def plan(
        self,
        sites: Sequence[Site],
        start_point: HasCoordinates,
        config: RouteOptimizationConfig,
    ) -> RouteSuggestion:
        raise NotImplementedError


class FastestRouteStrategy(RouteStrategy):
    mode = "fastest"

    def plan(self, sites, start_point, config):
        ordered = nearest_neighbor_order(sites, start_point)
        metrics = calculate_route_metrics(ordered, start_point, config)
        return RouteSuggestion.from_metrics(self.mode, ordered, metrics)


class BalancedRouteStrategy(RouteStrategy):
    """Same ordering as the fastest strategy, flagging days too light to be worth the trip."""

    mode = "balanced"

    def plan(self, sites, start_point, config):
        fastest = FastestRouteStrategy().plan(sites, start_point, config)
        ordered = fastest.ordered_sites
        metrics = calculate_route_metrics(ordered, start_point, config)
        if ordered and len(ordered) < SHORT_ROUTE_MAX_SITES and metrics.total_time < SHORT_ROUTE_MAX_HOURS:
            metrics.warnings.append(SHORT_ROUTE_WARNING)
        return RouteSuggestion.from_metrics(self.mode, ordered, metrics)


_STRATEGIES: dict[str, type[RouteStrategy]] = {
    "fastest": FastestRouteStrategy,
    "balanced": BalancedRouteStrategy,
}


def get_route_strategy(mode: str) -> RouteStrategy:
    try:
        return _STRATEGIES[mode]()
    except KeyError as exc:
        raise ValueError(f"Unknown route mode '{mode}'. Expected one of: {', '.join(ROUTE_MODES)}.") from exc


def find_fastest_route(
    sites: Sequence[Site],
    start_point: HasCoordinates,
    config: RouteOptimizationConfig,
) -> RouteSuggestion:
    return FastestRouteStrategy().plan(sites, start_point, config)


def find_balanced_route(
    sites: Sequence[Site],
    start_point: HasCoordinates,
    config: RouteOptimizationConfig,
) -> RouteSuggestion:
    return BalancedRouteStrategy().plan(sites, start_point, config)
