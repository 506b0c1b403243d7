"""
Greedy nearest-neighbor solver.

Always available and bounded in time (O(n²)); used when the remote optimizer
cannot be reached and to place stops the optimizer left out.
"""

from typing import Iterable, List, Sequence, Tuple
from app.core.logging_config import logger
from app.services.routing_engine.types import GeoPoint, OrderedRoute, Waypoint
from app.utils.geo import haversine_miles


class NearestNeighborSolution:
    """Container for a nearest-neighbor ordering."""

    def __init__(self, route: OrderedRoute, distance_miles: float):
        self.route = route
        self.distance_miles = distance_miles


class NearestNeighborSolver:
    """Builds a visit order by always driving to the closest unvisited stop."""

    def solve(self, start: GeoPoint, candidates: Iterable[Waypoint]) -> NearestNeighborSolution:
        """
        Order candidates starting from `start`.

        Args:
            start: Starting position
            candidates: Waypoints to visit; iteration order breaks ties

        Returns:
            NearestNeighborSolution with the ordered route and total great-circle
            distance in miles (0 for no candidates)
        """
        route, distance = self._greedy(start, list(candidates))

        logger.info(
            f"Nearest-neighbor route built: {len(route)} stops, "
            f"distance={distance:.2f}mi"
        )
        return NearestNeighborSolution(route=tuple(route), distance_miles=distance)

    def extend(
        self,
        position: GeoPoint,
        remaining: Sequence[Waypoint]
    ) -> List[Waypoint]:
        """Greedily order `remaining` continuing from `position`."""
        route, _ = self._greedy(position, list(remaining))
        return route

    def _greedy(
        self,
        start: GeoPoint,
        remaining: List[Waypoint]
    ) -> Tuple[List[Waypoint], float]:
        route = []
        total = 0.0
        current = start

        while remaining:
            best_index = 0
            best_distance = haversine_miles(current, remaining[0].point)
            for index in range(1, len(remaining)):
                distance = haversine_miles(current, remaining[index].point)
                # Strict comparison keeps the first candidate on ties
                if distance < best_distance:
                    best_index = index
                    best_distance = distance

            nearest = remaining.pop(best_index)
            route.append(nearest)
            total += best_distance
            current = nearest.point

        return route, total
