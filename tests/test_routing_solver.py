import pytest

from visitplan.models.domain import Site
from visitplan.services.routing.models import Point, RouteOptimizationConfig
from visitplan.services.routing.solver import (
    SHORT_ROUTE_WARNING,
    find_balanced_route,
    find_fastest_route,
    get_route_strategy,
    nearest_neighbor_order,
)

ORIGIN = Point(latitude=0.0, longitude=0.0)


def _site(sid: int, lat: float, lon: float) -> Site:
    return Site(id=sid, client_name=f"Site {sid}", latitude=lat, longitude=lon)


def test_fastest_route_visits_nearest_site_first():
    sites = [_site(3, 0.0, 5.0), _site(2, 0.0, 1.0), _site(1, 0.0, 0.0)]

    result = find_fastest_route(sites, ORIGIN, RouteOptimizationConfig())

    assert [site.id for site in result.ordered_sites] == [1, 2, 3]
    assert result.mode == "fastest"


def test_fastest_route_is_a_permutation_of_its_input():
    sites = [_site(i, 43.6 + (i % 4) * 0.05, -79.4 + (i // 4) * 0.07) for i in range(1, 12)]

    result = find_fastest_route(sites, Point(43.65, -79.38), RouteOptimizationConfig())

    ids = [site.id for site in result.ordered_sites]
    assert len(ids) == len(sites)
    assert sorted(ids) == sorted(site.id for site in sites)


def test_route_does_not_mutate_input_and_is_deterministic():
    sites = [_site(3, 0.0, 5.0), _site(2, 0.0, 1.0)]
    before = list(sites)

    first = find_fastest_route(sites, ORIGIN, RouteOptimizationConfig())
    second = find_fastest_route(sites, ORIGIN, RouteOptimizationConfig())

    assert sites == before
    assert first == second


def test_ties_keep_input_order():
    sites = [_site(1, 0.0, 1.0), _site(2, 0.0, -1.0)]

    assert [site.id for site in nearest_neighbor_order(sites, ORIGIN)] == [1, 2]


def test_empty_route_returns_zero_metrics():
    result = find_fastest_route([], ORIGIN, RouteOptimizationConfig())

    assert result.ordered_sites == []
    assert result.total_distance == 0.0
    assert result.cost_per_site == 0.0


def test_balanced_route_flags_short_days():
    sites = [_site(1, 0.0, 0.1), _site(2, 0.0, 0.2)]

    result = find_balanced_route(sites, ORIGIN, RouteOptimizationConfig())

    assert result.mode == "balanced"
    assert [site.id for site in result.ordered_sites] == [1, 2]
    assert SHORT_ROUTE_WARNING in result.warnings


def test_balanced_route_without_sites_has_no_warning():
    result = find_balanced_route([], ORIGIN, RouteOptimizationConfig())

    assert result.warnings == []


def test_balanced_route_with_three_sites_is_not_short():
    sites = [_site(1, 0.0, 0.1), _site(2, 0.0, 0.2), _site(3, 0.0, 0.3)]

    result = find_balanced_route(sites, ORIGIN, RouteOptimizationConfig())

    assert SHORT_ROUTE_WARNING not in result.warnings


def test_unknown_route_mode_is_rejected():
    with pytest.raises(ValueError):
        get_route_strategy("scenic")
