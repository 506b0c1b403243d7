import pytest

from app.services.routing_engine.nearest_neighbor import NearestNeighborSolver
from app.services.routing_engine.types import GeoPoint
from app.utils.geo import haversine_miles
from tests.conftest import make_waypoint


def test_visits_closer_candidate_first(start, two_candidates):
    a, b = two_candidates
    solution = NearestNeighborSolver().solve(start, [b, a])

    assert [w.id for w in solution.route] == ["A", "B"]
    expected = haversine_miles(start, a.point) + haversine_miles(a.point, b.point)
    assert solution.distance_miles == pytest.approx(expected)


def test_empty_candidates_give_empty_route(start):
    solution = NearestNeighborSolver().solve(start, [])
    assert solution.route == ()
    assert solution.distance_miles == 0


def test_every_candidate_visited_exactly_once(start):
    candidates = [
        make_waypoint(i, 30.0 + (i % 5) * 0.07, -88.0 - (i // 5) * 0.05)
        for i in range(1, 18)
    ]
    solution = NearestNeighborSolver().solve(start, candidates)

    ids = [w.id for w in solution.route]
    assert len(ids) == len(candidates)
    assert len(set(ids)) == len(ids)
    assert set(ids) == {w.id for w in candidates}


def test_ties_go_to_first_candidate(start):
    # Same coordinates, different identities
    first = make_waypoint("first", 30.1, -88.0)
    second = make_waypoint("second", 30.1, -88.0)
    solution = NearestNeighborSolver().solve(start, [first, second])
    assert [w.id for w in solution.route] == ["first", "second"]


def test_greedy_follows_current_position():
    start = GeoPoint(0, 0)
    near = make_waypoint("near", 0, 1)
    far_east = make_waypoint("far_east", 0, 3)
    west = make_waypoint("west", 0, -1.5)

    solution = NearestNeighborSolver().solve(start, [west, far_east, near])
    # From "near" (0, 1) the eastern stop is closer than the western one
    assert [w.id for w in solution.route] == ["near", "far_east", "west"]


def test_extend_continues_from_position():
    remaining = [make_waypoint("x", 0, 5), make_waypoint("y", 0, 2)]
    ordered = NearestNeighborSolver().extend(GeoPoint(0, 1), remaining)
    assert [w.id for w in ordered] == ["y", "x"]
    # Input list is left untouched
    assert [w.id for w in remaining] == ["x", "y"]
