"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import List, Literal

from ...config import Settings, settings
from ...models.domain import Site

RouteMode = Literal["fastest", "balanced"]
ROUTE_MODES: tuple[str, ...] = ("fastest", "balanced")


@dataclass(slots=True, frozen=True)
class Point:
    latitude: float
    longitude: float


@dataclass(slots=True)
class RouteOptimizationConfig:
    """Pay and limit rates applied to every route estimate."""

    travel_time_rate: float = 25.0
    distance_rate: float = 0.55
    per_site_rate: float = 50.0
    avg_speed_kmh: float = 60.0
    max_daily_drive_time: float = 8.0
    max_daily_distance: float = 500.0

    def __post_init__(self) -> None:
        for item in fields(self):
            if getattr(self, item.name) < 0:
                raise ValueError(f"{item.name} must be >= 0")
        if self.avg_speed_kmh <= 0:
            raise ValueError("avg_speed_kmh must be > 0")

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "RouteOptimizationConfig":
        source = source or settings
        return cls(
            travel_time_rate=source.travel_time_rate,
            distance_rate=source.distance_rate,
            per_site_rate=source.per_site_rate,
            avg_speed_kmh=source.avg_speed_kmh,
            max_daily_drive_time=source.max_daily_drive_time,
            max_daily_distance=source.max_daily_distance,
        )

    def updated(self, **changes: float) -> "RouteOptimizationConfig":
        known = {item.name for item in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown route config fields: {', '.join(sorted(unknown))}")
        return replace(self, **changes)


@dataclass(slots=True)
class EstimatedPay:
    time_pay: float = 0.0
    distance_pay: float = 0.0
    site_pay: float = 0.0
    total: float = 0.0


@dataclass(slots=True)
class RouteMetrics:
    total_distance: float
    total_time: float
    estimated_pay: EstimatedPay
    cost_per_site: float
    warnings: List[str] = field(default_factory=list)


@dataclass(slots=True)
class RouteSuggestion:
    mode: str
    ordered_sites: List[Site]
    total_distance: float
    total_time: float
    estimated_pay: EstimatedPay
    cost_per_site: float
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def from_metrics(cls, mode: str, ordered_sites: List[Site], metrics: RouteMetrics) -> "RouteSuggestion":
        return cls(
            mode=mode,
            ordered_sites=ordered_sites,
            total_distance=metrics.total_distance,
            total_time=metrics.total_time,
            estimated_pay=metrics.estimated_pay,
            cost_per_site=metrics.cost_per_site,
            warnings=list(metrics.warnings),
        )
