"""
Route planner.

Reconciles the remote optimizer, the remote directions service and the local
nearest-neighbor solver into a single RouteArtifact per request:

    ORDERING -> GEOMETRY -> DONE

Each remote call is made at most once per request and remote failures never
escape `plan`; they become fallbacks plus diagnostic notes.
"""

from typing import Iterable, List, Optional, Protocol, Sequence, Tuple
from app.core.logging_config import logger
from app.services.routing_engine.directions_client import PathResult
from app.services.routing_engine.exceptions import OptimizationUnavailable, PathUnavailable
from app.services.routing_engine.nearest_neighbor import NearestNeighborSolver
from app.services.routing_engine.optimization_client import OptimizationResult
from app.services.routing_engine.types import (
    DiagnosticNote,
    GeometrySource,
    GeoPoint,
    NoteCode,
    OrderedRoute,
    OrderSource,
    RouteArtifact,
    RouteStatistics,
    Waypoint,
)
from app.utils.geo import path_length_miles


class Optimizer(Protocol):
    """Protocol for remote visit-order optimizers."""

    def optimize(self, start: GeoPoint, candidates: Sequence[Waypoint]) -> OptimizationResult:
        ...


class PathService(Protocol):
    """Protocol for remote path/directions services."""

    def path(self, points: Sequence[GeoPoint]) -> PathResult:
        ...


class RoutePlanner:
    """Plans a visit order and path geometry for one start point and candidate set."""

    # Remote distances below this share of the great-circle lower bound are rejected
    MIN_DISTANCE_RATIO = 0.99

    def __init__(
        self,
        optimizer: Optimizer,
        directions: PathService,
        solver: Optional[NearestNeighborSolver] = None
    ):
        self.optimizer = optimizer
        self.directions = directions
        self.solver = solver or NearestNeighborSolver()

    def plan(self, start: GeoPoint, candidates: Iterable[Waypoint]) -> RouteArtifact:
        """
        Plan a route from `start` through every candidate.

        Args:
            start: Starting position
            candidates: Waypoints to visit, in a stable order

        Returns:
            A new RouteArtifact; geometry is empty when the caller must draw
            straight lines
        """
        candidates = self._unique(candidates)

        if not candidates:
            logger.info("No candidates to plan, returning empty route")
            return RouteArtifact(start=start)

        notes: List[DiagnosticNote] = []

        # Step 1: ordering
        logger.info(f"Step 1: Ordering {len(candidates)} candidates")
        try:
            result = self.optimizer.optimize(start, candidates)
        except OptimizationUnavailable as e:
            logger.warning(f"Optimizer unavailable, using nearest-neighbor order: {str(e)}")
            notes.append(DiagnosticNote(
                code=NoteCode.OPTIMIZATION_UNAVAILABLE,
                message=f"Route optimization unavailable ({str(e)}); stops are ordered by nearest neighbor.",
            ))
            solution = self.solver.solve(start, candidates)
            route = solution.route
            statistics = RouteStatistics(distance_miles=solution.distance_miles)
            geometry = ()
            stops = ()
            order_source = OrderSource.NEAREST_NEIGHBOR
        else:
            route = result.route
            statistics = result.statistics
            geometry = result.geometry
            stops = result.stops
            order_source = OrderSource.OPTIMIZER

            for job_id in result.unknown_job_ids:
                notes.append(DiagnosticNote(
                    code=NoteCode.UNKNOWN_WAYPOINT_DROPPED,
                    message=f"Optimizer referenced unknown stop {job_id!r}; it was dropped.",
                ))
            if result.geometry_discarded:
                notes.append(DiagnosticNote(
                    code=NoteCode.GEOMETRY_DISCARDED,
                    message="Optimizer geometry was malformed and was discarded.",
                ))

            route, appended = self._complete(start, route, candidates)
            if appended:
                notes.append(DiagnosticNote(
                    code=NoteCode.MISSING_WAYPOINT_APPENDED,
                    message=(
                        f"Optimizer left out {len(appended)} stop(s); they were appended "
                        f"in nearest-neighbor order."
                    ),
                ))
                # Optimizer geometry does not reach the appended stops
                geometry = ()

        route = self._validate(route, candidates, notes)
        geometry_source = GeometrySource.OPTIMIZER if geometry else GeometrySource.NONE

        # Step 2: geometry
        if not geometry:
            logger.info(f"Step 2: Fetching path geometry for {len(route)} stops")
            try:
                path = self.directions.path([start] + [waypoint.point for waypoint in route])
            except PathUnavailable as e:
                logger.warning(f"Directions unavailable, falling back to straight lines: {str(e)}")
                notes.append(DiagnosticNote(
                    code=NoteCode.PATH_UNAVAILABLE,
                    message=f"Directions unavailable ({str(e)}).",
                ))
                notes.append(DiagnosticNote(
                    code=NoteCode.STRAIGHT_LINE_FALLBACK,
                    message="Path drawn as straight lines between stops.",
                ))
            else:
                geometry = path.geometry
                statistics = statistics.merged_with(path.statistics)
                geometry_source = GeometrySource.DIRECTIONS
        else:
            logger.info("Step 2: Using optimizer geometry")

        statistics = self._check_distance(start, route, statistics, notes)

        logger.info(
            f"Route planned: {len(route)} stops, order={order_source.value}, "
            f"geometry={geometry_source.value}, notes={[note.code.value for note in notes]}"
        )

        return RouteArtifact(
            start=start,
            route=route,
            geometry=tuple(geometry),
            statistics=statistics,
            notes=tuple(notes),
            order_source=order_source,
            geometry_source=geometry_source,
            stops=tuple(stops),
        )

    def _unique(self, candidates: Iterable[Waypoint]) -> List[Waypoint]:
        unique = []
        seen = set()
        for waypoint in candidates:
            if waypoint.id in seen:
                logger.warning(f"Ignoring duplicate candidate id {waypoint.id!r}")
                continue
            seen.add(waypoint.id)
            unique.append(waypoint)
        return unique

    def _complete(
        self,
        start: GeoPoint,
        route: OrderedRoute,
        candidates: Sequence[Waypoint]
    ) -> Tuple[OrderedRoute, List[Waypoint]]:
        """Append candidates missing from `route`, continuing from its last stop."""
        visited = {waypoint.id for waypoint in route}
        missing = [waypoint for waypoint in candidates if waypoint.id not in visited]
        if not missing:
            return route, []

        position = route[-1].point if route else start
        appended = self.solver.extend(position, missing)
        logger.warning(f"Appending {len(appended)} stop(s) missing from optimizer route")
        return tuple(route) + tuple(appended), appended

    def _validate(
        self,
        route: OrderedRoute,
        candidates: Sequence[Waypoint],
        notes: List[DiagnosticNote]
    ) -> OrderedRoute:
        """Drop stops that are not in the candidate set, and repeats."""
        known = {waypoint.id for waypoint in candidates}
        seen = set()
        validated = []
        for waypoint in route:
            if waypoint.id not in known:
                logger.warning(f"Dropping unknown stop {waypoint.id!r} from route")
                notes.append(DiagnosticNote(
                    code=NoteCode.UNKNOWN_WAYPOINT_DROPPED,
                    message=f"Stop {waypoint.id!r} is not among the candidates; it was dropped.",
                ))
                continue
            if waypoint.id in seen:
                continue
            seen.add(waypoint.id)
            validated.append(waypoint)
        return tuple(validated)

    def _check_distance(
        self,
        start: GeoPoint,
        route: OrderedRoute,
        statistics: RouteStatistics,
        notes: List[DiagnosticNote]
    ) -> RouteStatistics:
        """Replace a reported distance shorter than the straight-line lower bound."""
        if statistics.distance_miles is None or not route:
            return statistics

        lower_bound = path_length_miles([start] + [waypoint.point for waypoint in route])
        if statistics.distance_miles >= lower_bound * self.MIN_DISTANCE_RATIO:
            return statistics

        logger.warning(
            f"Reported distance {statistics.distance_miles:.2f}mi is below the "
            f"straight-line bound {lower_bound:.2f}mi"
        )
        notes.append(DiagnosticNote(
            code=NoteCode.DISTANCE_IMPLAUSIBLE,
            message=(
                f"Reported distance {statistics.distance_miles:.1f} mi is shorter than the "
                f"straight-line distance; using {lower_bound:.1f} mi instead."
            ),
        ))
        return RouteStatistics(
            distance_miles=lower_bound,
            duration_minutes=statistics.duration_minutes,
        )
