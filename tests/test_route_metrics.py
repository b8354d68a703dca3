import pytest

from visitplan.models.domain import Site
from visitplan.services.routing import metrics as metrics_module
from visitplan.services.routing.metrics import calculate_route_metrics, route_distance_km
from visitplan.services.routing.models import Point, RouteOptimizationConfig

ORIGIN = Point(latitude=0.0, longitude=0.0)


def _site(sid: int, lat: float, lon: float) -> Site:
    return Site(id=sid, client_name=f"Site {sid}", latitude=lat, longitude=lon)


def test_pay_breakdown_for_sixty_kilometres(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(metrics_module, "route_distance_km", lambda sites, start: 60.0)
    config = RouteOptimizationConfig(travel_time_rate=25, distance_rate=0.55, per_site_rate=50, avg_speed_kmh=60)
    sites = [_site(1, 0.0, 0.1), _site(2, 0.0, 0.2)]

    result = calculate_route_metrics(sites, ORIGIN, config)

    assert result.total_distance == 60.0
    assert result.total_time == 1.0
    assert result.estimated_pay.time_pay == 25.0
    assert result.estimated_pay.distance_pay == 33.0
    assert result.estimated_pay.site_pay == 100.0
    assert result.estimated_pay.total == 158.0
    assert result.cost_per_site == 79.0
    assert result.warnings == []


def test_route_distance_is_a_closed_loop():
    one_degree = route_distance_km([_site(1, 0.0, 1.0)], ORIGIN) / 2

    assert route_distance_km([], ORIGIN) == 0.0
    assert one_degree == pytest.approx(111.19, abs=0.01)


def test_empty_route_has_zero_cost_per_site():
    result = calculate_route_metrics([], ORIGIN, RouteOptimizationConfig())

    assert result.total_distance == 0.0
    assert result.estimated_pay.total == 0.0
    assert result.cost_per_site == 0.0


def test_limits_raise_warnings():
    config = RouteOptimizationConfig(max_daily_drive_time=1, max_daily_distance=100)

    result = calculate_route_metrics([_site(1, 0.0, 1.0)], ORIGIN, config)

    assert result.total_distance > 100
    assert result.warnings == [
        "Exceeds max drive time of 1 hrs.",
        "Exceeds max distance of 100 km.",
    ]


def test_config_rejects_invalid_values():
    with pytest.raises(ValueError):
        RouteOptimizationConfig(distance_rate=-1)
    with pytest.raises(ValueError):
        RouteOptimizationConfig(avg_speed_kmh=0)


def test_config_updated_validates_field_names():
    config = RouteOptimizationConfig()

    assert config.updated(per_site_rate=40).per_site_rate == 40
    assert config.per_site_rate == 50
    with pytest.raises(ValueError):
        config.updated(fuel_rate=1.0)
