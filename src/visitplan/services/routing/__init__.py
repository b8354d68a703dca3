"""Route ordering, cost metrics and per-day suggestions."""

from .metrics import calculate_route_metrics
from .models import RouteOptimizationConfig, RouteSuggestion
from .solver import find_balanced_route, find_fastest_route

__all__ = [
    "RouteOptimizationConfig",
    "RouteSuggestion",
    "calculate_route_metrics",
    "find_fastest_route",
    "find_balanced_route",
]
